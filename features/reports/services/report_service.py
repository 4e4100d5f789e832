import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, Any, Optional

from features.reports.models.report_types import SurfReport
from features.reports.services.report_text import (
    ReportTextInput,
    generate_report_text,
    generate_no_wave_data_text,
    tide_summary
)
from features.rating.models.rating_types import RatingInput
from features.rating.services.rating_strategies import RatingStrategy
from features.surf.models.surf_types import SurfConditions
from features.weather.models.weather_types import CurrentWeather, PredictionSource
from features.common.models.location_types import SurfLocation
from features.common.exceptions.pipeline_exceptions import (
    DependencyUnmetError,
    ReportNotFoundError
)
from features.common.utils.dates import est_date, est_time, days_since_epoch, Clock, utc_now
from repositories.surf_repository import SurfRepository
from core.config import settings

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

def narrative_seed(date: str, location: SurfLocation) -> int:
    return days_since_epoch(date) + location.seed_offset

def rating_input(surf: SurfConditions) -> RatingInput:
    return RatingInput(
        surf_height_ft=surf.face_height_ft,
        wind_speed_mph=surf.wind_speed_mph,
        wind_direction=surf.wind_direction,
        period_s=surf.period_s
    )

def physical_fields(surf: SurfConditions) -> Dict[str, Any]:
    # Everything an intraday refresh may overwrite; never the narrative
    return {
        "wave_height": surf.surf_height if surf.surf_height != "N/A" else surf.wave_height,
        "wave_period": surf.wave_period,
        "swell_direction": surf.swell_direction,
        "wind_speed": surf.wind_speed,
        "wind_direction": surf.wind_direction,
        "water_temp": surf.water_temp,
        "surf_height_min_ft": surf.surf_height_min_ft,
        "surf_height_max_ft": surf.surf_height_max_ft,
        "wave_height_ft": surf.wave_height_ft,
        "period_s": surf.period_s,
        "wind_speed_mph": surf.wind_speed_mph,
        "water_temp_f": surf.water_temp_f
    }

def present_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    # Missing readings keep the last good value
    return {k: v for k, v in fields.items() if v is not None and v != "N/A"}

class ReportService:
    """Generates, refreshes and edits the daily surf report."""

    def __init__(
        self,
        repository: SurfRepository,
        generation_strategy: RatingStrategy,
        refresh_strategy: RatingStrategy,
        clock: Clock = utc_now,
        sleep: Sleep = asyncio.sleep
    ):
        self.repository = repository
        self.generation_strategy = generation_strategy
        self.refresh_strategy = refresh_strategy
        self._clock = clock
        self._sleep = sleep

    async def _forecast_source(self, location: SurfLocation, today: str, historical: bool):
        if not historical:
            return PredictionSource.ACTUAL.value, None
        for day in await self.repository.get_forecast(location.location_id):
            if day.date == today:
                return day.prediction_source.value, day.prediction_confidence
        return PredictionSource.BUOY_ESTIMATION.value, None

    async def generate_daily_report(self, location: SurfLocation) -> SurfReport:
        """Build and store today's report, replacing any existing one."""
        now = self._clock()
        today = est_date(now)
        location_id = location.location_id

        surf = await self.repository.get_surf_conditions(location_id, today)
        historical_date = None
        if surf is None:
            surf = await self.repository.get_latest_surf_conditions(location_id)
            if surf is not None:
                historical_date = surf.date
                logger.info(f"Using historical surf data from {historical_date}")

        weather = await self.repository.get_weather(location_id, today)
        if weather is None:
            weather = await self.repository.get_latest_weather(location_id)

        if surf is None or weather is None:
            raise DependencyUnmetError(
                "Missing required data for report generation. Run the full data update first."
            )

        tides = await self.repository.get_tides(location_id, today)
        summary = tide_summary(tides)
        seed = narrative_seed(today, location)

        if not surf.has_wave_data:
            report = self._no_wave_data_report(location, today, surf, weather, summary, seed)
            stored = await self.repository.save_report(report)
            logger.warning(f"⚠️ {location.name}: report generated without wave data")
            return stored

        rating = self.generation_strategy.rate(rating_input(surf))
        source, confidence = await self._forecast_source(location, today, historical_date is not None)
        conditions = generate_report_text(ReportTextInput(
            surf_display=surf.surf_height if surf.surf_height != "N/A" else surf.wave_height,
            face_height_ft=surf.face_height_ft or 0.0,
            period_s=surf.period_s or 0.0,
            wind_speed_mph=surf.wind_speed_mph or 0.0,
            wind_direction=surf.wind_direction if surf.wind_direction != "N/A" else "Variable",
            swell_direction=surf.swell_direction if surf.swell_direction != "N/A" else "Variable",
            water_temp_f=surf.water_temp_f or 0.0,
            water_temp=surf.water_temp,
            wind_speed=surf.wind_speed,
            weather_conditions=weather.conditions or None,
            air_temp_f=weather.temperature,
            rating=rating,
            historical_date=historical_date,
            forecast_source=source,
            forecast_confidence=confidence,
            tides=tides,
            now_time=est_time(now),
            seed=seed
        ))

        report = SurfReport(
            date=today,
            location=location_id,
            tide=summary,
            conditions=conditions,
            rating=rating,
            **physical_fields(surf)
        )
        stored = await self.repository.save_report(report)
        logger.info(f"✅ {location.name}: daily report generated for {today} (rating {rating})")
        return stored

    def _no_wave_data_report(
        self,
        location: SurfLocation,
        today: str,
        surf: SurfConditions,
        weather: CurrentWeather,
        summary: str,
        seed: int
    ) -> SurfReport:
        return SurfReport(
            date=today,
            location=location.location_id,
            wind_speed=surf.wind_speed,
            wind_direction=surf.wind_direction,
            water_temp=surf.water_temp,
            wind_speed_mph=surf.wind_speed_mph,
            water_temp_f=surf.water_temp_f,
            tide=summary,
            conditions=generate_no_wave_data_text(
                surf.wind_speed, surf.wind_direction, surf.water_temp, weather.conditions or None, seed
            ),
            rating=1
        )

    async def generate_first_daily_report(self, location: SurfLocation) -> Optional[SurfReport]:
        """Generate today's report unless one with a real narrative already exists.

        Returns None when the existing report was kept.
        """
        today = est_date(self._clock())
        existing = await self.repository.get_report(location.location_id, today)
        if existing and len(existing.conditions or "") > settings.first_report_min_length:
            logger.info(f"Report already exists for {location.name} on {today}; skipping")
            return None
        return await self.generate_daily_report(location)

    async def generate_with_retry(
        self,
        location: SurfLocation,
        refresh_surf: Optional[Callable[[SurfLocation], Awaitable[Any]]] = None,
        max_attempts: Optional[int] = None,
        interval: Optional[float] = None
    ) -> Dict[str, Any]:
        """Keep trying to produce the first report of the day.

        Before every retry the surf data is re-fetched so a late buoy
        reading can still make it into the morning report.
        """
        max_attempts = max_attempts or settings.first_report_max_attempts
        interval = interval if interval is not None else settings.first_report_retry_interval
        last_error = None

        for attempt in range(1, max_attempts + 1):
            try:
                if attempt > 1 and refresh_surf is not None:
                    await refresh_surf(location)
                report = await self.generate_first_daily_report(location)
                return {"attempts": attempt, "skipped": report is None, "report": report}
            except Exception as e:
                last_error = e
                logger.warning(f"⚠️ {location.name}: report attempt {attempt}/{max_attempts} failed: {str(e)}")
                if attempt < max_attempts:
                    await self._sleep(interval)

        logger.error(f"❌ {location.name}: report generation failed after {max_attempts} attempts")
        raise last_error

    async def refresh_buoy_fields(self, location: SurfLocation) -> SurfReport:
        """Intraday refresh: update physical fields and rating, never the narrative."""
        today = est_date(self._clock())
        location_id = location.location_id
        surf = await self.repository.get_surf_conditions(location_id, today)
        existing = await self.repository.get_report(location_id, today)

        if surf is not None and surf.has_wave_data:
            if existing is None:
                raise ReportNotFoundError("No existing report found for today")
            weather = await self.repository.get_weather(location_id, today)
            rating = self.refresh_strategy.rate(rating_input(surf)) if weather else existing.rating
            updated = await self.repository.update_report(
                location_id,
                today,
                {**present_fields(physical_fields(surf)), "rating": rating},
                expected_updated_at=existing.updated_at
            )
            logger.info(f"✅ {location.name}: buoy fields refreshed (rating {existing.rating} -> {rating})")
            return updated

        logger.warning(f"⚠️ {location.name}: no valid wave data, keeping most recent successful data")

        if existing is None:
            raise ReportNotFoundError("No existing report found for today")

        fields: Dict[str, Any] = {}
        if surf is not None:
            if surf.wind_speed != "N/A":
                fields.update(wind_speed=surf.wind_speed, wind_speed_mph=surf.wind_speed_mph)
            if surf.wind_direction != "N/A":
                fields.update(wind_direction=surf.wind_direction)
            if surf.water_temp != "N/A":
                fields.update(water_temp=surf.water_temp, water_temp_f=surf.water_temp_f)
        if not fields:
            return existing
        return await self.repository.update_report(
            location_id, today, fields, expected_updated_at=existing.updated_at
        )

    async def get_report(self, location: SurfLocation, date: Optional[str] = None) -> SurfReport:
        date = date or est_date(self._clock())
        report = await self.repository.get_report(location.location_id, date)
        if report is None:
            raise ReportNotFoundError(f"No report found for {location.location_id} on {date}")
        return report

    async def set_override(self, location: SurfLocation, date: str, report_text: str, edited_by: str) -> SurfReport:
        updated = await self.repository.update_report(location.location_id, date, {
            "report_text": report_text,
            "edited_by": edited_by,
            "edited_at": datetime.now(timezone.utc)
        })
        if updated is None:
            raise ReportNotFoundError(f"No report found for {location.location_id} on {date}")
        logger.info(f"Report override set for {location.location_id} {date} by {edited_by}")
        return updated

    async def clear_override(self, location: SurfLocation, date: str) -> SurfReport:
        updated = await self.repository.update_report(location.location_id, date, {
            "report_text": None,
            "edited_by": None,
            "edited_at": None
        })
        if updated is None:
            raise ReportNotFoundError(f"No report found for {location.location_id} on {date}")
        return updated
