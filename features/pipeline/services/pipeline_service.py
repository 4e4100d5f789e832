import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

from features.pipeline.models.pipeline_types import (
    Stage,
    StageStatus,
    StageResult,
    PipelineResult,
    LocationRunResult,
    AggregateResult
)
from features.surf.services.surf_conditions_service import SurfConditionsService
from features.tides.services.tide_service import TideService
from features.trends.services.trend_service import TrendAnalysisService
from features.weather.services.forecast_service import WeatherForecastService
from features.reports.services.report_service import ReportService
from features.common.models.location_types import SurfLocation
from features.common.services.location_service import LocationService
from features.common.exceptions.pipeline_exceptions import (
    PipelineError,
    ParseError,
    DependencyUnmetError,
    FetchTimeoutError
)
from core.config import settings

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

# Failures that a retry cannot fix
NON_RETRYABLE = (ParseError, DependencyUnmetError)

class PipelineService:
    """Runs the surf data pipeline stage by stage and aggregates partial failures."""

    def __init__(
        self,
        locations: LocationService,
        surf_service: SurfConditionsService,
        tide_service: TideService,
        trend_service: TrendAnalysisService,
        weather_service: WeatherForecastService,
        report_service: ReportService,
        sleep: Sleep = asyncio.sleep
    ):
        self.locations = locations
        self.surf_service = surf_service
        self.tide_service = tide_service
        self.trend_service = trend_service
        self.weather_service = weather_service
        self.report_service = report_service
        self._sleep = sleep

        self.stage_timeout = settings.stage_timeout
        self.stage_timeouts = dict(settings.stage_timeouts)
        self.stage_retries = settings.stage_retries
        self.stage_backoff = settings.stage_backoff
        self.aggregate_timeout = settings.aggregate_timeout

    # Stage bodies return JSON-ready payloads

    async def _fetch_surf(self, location: SurfLocation) -> Dict[str, Any]:
        conditions = await self.surf_service.fetch_and_store(location)
        return conditions.model_dump(mode="json")

    async def _fetch_tide(self, location: SurfLocation) -> Dict[str, Any]:
        result = await self.tide_service.refresh(location)
        return {
            "tides_count": len(result.tides),
            "begin_date": result.begin_date,
            "end_date": result.end_date,
            "tides": [t.model_dump() for t in result.tides]
        }

    async def _analyze_trends(self, location: SurfLocation) -> Dict[str, Any]:
        predictions, statistics = await self.trend_service.analyze(location)
        return {
            "predictions": [p.model_dump(mode="json") for p in predictions],
            "statistics": statistics.model_dump()
        }

    async def _fetch_weather(self, location: SurfLocation) -> Dict[str, Any]:
        current, days = await self.weather_service.refresh(location)
        return {
            "current": current.model_dump(mode="json"),
            "forecast_days": len(days),
            "forecast": [d.model_dump(mode="json") for d in days]
        }

    async def _generate_report(self, location: SurfLocation) -> Dict[str, Any]:
        report = await self.report_service.generate_daily_report(location)
        return report.model_dump(mode="json")

    def _stage_body(self, stage: Stage) -> Callable[[SurfLocation], Awaitable[Dict[str, Any]]]:
        return {
            Stage.FETCH_SURF: self._fetch_surf,
            Stage.FETCH_TIDE: self._fetch_tide,
            Stage.ANALYZE_TRENDS: self._analyze_trends,
            Stage.FETCH_WEATHER_AND_FORECAST: self._fetch_weather,
            Stage.GENERATE_REPORT: self._generate_report
        }[stage]

    def timeout_for(self, stage: Stage) -> float:
        return self.stage_timeouts.get(stage.key, self.stage_timeout)

    async def run_stage(
        self,
        stage: Stage,
        location: SurfLocation,
        retries: Optional[int] = None
    ) -> StageResult:
        """Run one stage with a timeout and retries; never raises."""
        body = self._stage_body(stage)
        attempts = max(1, retries if retries is not None else self.stage_retries)
        timeout = self.timeout_for(stage)
        started = time.perf_counter()
        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                logger.info(f"🚀 {location.name}: {stage.label} stage (attempt {attempt}/{attempts})")
                data = await asyncio.wait_for(body(location), timeout=timeout)
                logger.info(f"✅ {location.name}: {stage.label} stage succeeded")
                return StageResult(
                    stage=stage.key,
                    status=StageStatus.SUCCESS,
                    attempts=attempt,
                    duration_ms=round((time.perf_counter() - started) * 1000, 1),
                    data=data
                )
            except asyncio.TimeoutError:
                last_error = FetchTimeoutError(stage.label, timeout)
            except NON_RETRYABLE as e:
                last_error = e
                break
            except Exception as e:
                last_error = e

            logger.warning(f"⚠️ {location.name}: {stage.label} attempt {attempt} failed: {str(last_error)}")
            if attempt < attempts:
                await self._sleep(self.stage_backoff * attempt)

        logger.error(f"❌ {location.name}: {stage.label} stage failed: {str(last_error)}")
        return StageResult(
            stage=stage.key,
            status=StageStatus.FAILED,
            attempts=attempt,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
            error=str(last_error),
            error_type=type(last_error).__name__
        )

    async def run_single(self, stage: Stage, location_id: Optional[str] = None) -> StageResult:
        location = self.locations.get_location(location_id)
        return await self.run_stage(stage, location, retries=1)

    async def run_full(self, location_id: Optional[str] = None) -> PipelineResult:
        """FETCH_SURF -> FETCH_TIDE -> ANALYZE_TRENDS -> FETCH_WEATHER_AND_FORECAST -> GENERATE_REPORT.

        Surf and tide are independent and fetched concurrently. The report
        needs both surf and weather; without them it is skipped, not failed.
        """
        location = self.locations.get_location(location_id)
        logger.info(f"🚀 Full pipeline for {location.name}")
        results: Dict[str, StageResult] = {}

        surf, tide = await asyncio.gather(
            self.run_stage(Stage.FETCH_SURF, location),
            self.run_stage(Stage.FETCH_TIDE, location)
        )
        results[Stage.FETCH_SURF.key] = surf
        results[Stage.FETCH_TIDE.key] = tide
        results[Stage.ANALYZE_TRENDS.key] = await self.run_stage(Stage.ANALYZE_TRENDS, location)
        weather = await self.run_stage(Stage.FETCH_WEATHER_AND_FORECAST, location)
        results[Stage.FETCH_WEATHER_AND_FORECAST.key] = weather

        if surf.ok and weather.ok:
            results[Stage.GENERATE_REPORT.key] = await self.run_stage(Stage.GENERATE_REPORT, location)
        else:
            skipped = DependencyUnmetError("Skipping report generation - missing required data")
            logger.warning(f"⚠️ {location.name}: {str(skipped)}")
            results[Stage.GENERATE_REPORT.key] = StageResult(
                stage=Stage.GENERATE_REPORT.key,
                status=StageStatus.SKIPPED,
                error=str(skipped),
                error_type=type(skipped).__name__
            )

        errors = [
            f"{stage.label}: {results[stage.key].error}"
            for stage in Stage
            if results[stage.key].status == StageStatus.FAILED
        ]
        success = not errors
        message = (
            f"All surf data updated successfully for {location.name}"
            if success
            else f"Surf data update completed with {len(errors)} error(s) for {location.name}"
        )
        logger.info(f"{'✅' if success else '⚠️'} {message}")
        return PipelineResult(
            success=success,
            location=location.location_id,
            message=message,
            results=results,
            errors=errors
        )

    async def run_all_locations(self) -> AggregateResult:
        """Top-level daily run over every location, bounded by the aggregate timeout."""
        locations = self.locations.all_locations()
        try:
            runs: List[PipelineResult] = await asyncio.wait_for(
                asyncio.gather(*(self.run_full(loc.location_id) for loc in locations)),
                timeout=self.aggregate_timeout
            )
        except asyncio.TimeoutError:
            error = str(FetchTimeoutError("Daily update", self.aggregate_timeout))
            logger.error(f"❌ {error}")
            return AggregateResult(success=False, message="Daily update timed out", errors=[error])

        errors = [f"{run.location} - {e}" for run in runs for e in run.errors]
        success = all(run.success for run in runs)
        return AggregateResult(
            success=success,
            message="Daily update completed" if success else "Daily update completed with errors",
            results=[run.model_dump(mode="json") for run in runs],
            errors=errors
        )

    async def run_intraday_refresh(self, location: SurfLocation) -> LocationRunResult:
        """Fetch fresh buoy data, then patch today's report without touching its narrative."""
        surf = await self.run_stage(Stage.FETCH_SURF, location, retries=1)
        if not surf.ok:
            logger.warning(f"⚠️ {location.name}: surf fetch failed: {surf.error}")

        try:
            await asyncio.wait_for(
                self.report_service.refresh_buoy_fields(location),
                timeout=self.stage_timeout
            )
            return LocationRunResult(
                location=location.name,
                location_id=location.location_id,
                success=True,
                message="Buoy data updated successfully (narrative preserved)"
            )
        except (PipelineError, asyncio.TimeoutError) as e:
            logger.warning(f"⚠️ {location.name}: update failed, keeping most recent successful data")
            return LocationRunResult(
                location=location.name,
                location_id=location.location_id,
                success=True,
                message="Buoy data unavailable, keeping most recent successful data from today",
                warning=str(e) or type(e).__name__
            )
        except Exception as e:
            logger.error(f"❌ {location.name}: error during update: {str(e)}")
            return LocationRunResult(
                location=location.name,
                location_id=location.location_id,
                success=False,
                error=str(e)
            )

    async def run_intraday_all(self) -> AggregateResult:
        results = []
        for location in self.locations.all_locations():
            results.append(await self.run_intraday_refresh(location))
        success = all(r.success for r in results)
        return AggregateResult(
            success=success,
            message=(
                "Buoy data updated for all locations (narratives preserved)"
                if success else "Some locations failed to update"
            ),
            results=[r.model_dump() for r in results],
            errors=[f"{r.location}: {r.error}" for r in results if r.error]
        )

    async def run_first_report_with_retry(self, location_id: Optional[str] = None) -> Dict[str, Any]:
        """Morning run: refresh inputs, then retry the first report until it lands."""
        location = self.locations.get_location(location_id)
        for stage in (Stage.FETCH_SURF, Stage.FETCH_TIDE, Stage.ANALYZE_TRENDS, Stage.FETCH_WEATHER_AND_FORECAST):
            await self.run_stage(stage, location)

        outcome = await self.report_service.generate_with_retry(
            location,
            refresh_surf=self.surf_service.fetch_and_store
        )
        report = outcome["report"]
        return {
            "attempts": outcome["attempts"],
            "skipped": outcome["skipped"],
            "report": report.model_dump(mode="json") if report else None
        }
