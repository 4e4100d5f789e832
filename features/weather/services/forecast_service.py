import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple
import pandas as pd

from features.weather.models.weather_types import (
    ForecastPeriod,
    CurrentWeather,
    ForecastDay,
    PredictionSource
)
from features.weather.services.nws_client import NWSWeatherClient
from features.surf.models.surf_types import SurfConditions
from features.surf.services.surf_height import estimate_from_feet, FORECAST_CAP
from features.trends.models.trend_types import SurfPrediction
from features.common.models.location_types import SurfLocation
from features.common.utils.dates import est_date, est_date_from_iso, to_local, Clock, utc_now
from repositories.surf_repository import SurfRepository
from core.config import settings

logger = logging.getLogger(__name__)

BASELINE_RANGE = ("1-2 ft", 1.0, 2.0)
DEFAULT_HIGH_TEMP = 65
DEFAULT_LOW_TEMP = 55
TEMP_SPREAD = 10

def parse_wind_speed(value: str) -> int:
    """First number of an NWS wind string ('10 to 15 mph' -> 10)."""
    token = (value or "").split(" ")[0]
    try:
        return int(float(token))
    except ValueError:
        return 0

def current_weather_from_period(period: ForecastPeriod, location_id: str, date: str) -> CurrentWeather:
    return CurrentWeather(
        date=date,
        location=location_id,
        temperature=period.temperature,
        wind_speed=parse_wind_speed(period.wind_speed),
        wind_direction=period.wind_direction,
        conditions=period.short_forecast,
        forecast=period.detailed_forecast
    )

def select_swell(
    date: str,
    today: str,
    surf_today: Optional[SurfConditions],
    predictions: Dict[str, SurfPrediction],
    latest: Optional[SurfConditions]
) -> Tuple[str, float, float, PredictionSource, Optional[float]]:
    """Pick the strongest available swell source for a forecast date."""
    if date == today and surf_today and surf_today.surf_height_min_ft is not None:
        return (
            surf_today.surf_height,
            surf_today.surf_height_min_ft,
            surf_today.surf_height_max_ft,
            PredictionSource.ACTUAL,
            None
        )

    prediction = predictions.get(date)
    if prediction:
        return (
            prediction.display,
            prediction.predicted_surf_min,
            prediction.predicted_surf_max,
            PredictionSource.AI_PREDICTION,
            prediction.confidence
        )

    if latest:
        estimate = estimate_from_feet(latest.wave_height_ft, latest.period_s, FORECAST_CAP)
        if estimate:
            return (
                estimate.display,
                estimate.min_feet,
                estimate.max_feet,
                PredictionSource.BUOY_ESTIMATION,
                None
            )

    display, low, high = BASELINE_RANGE
    return display, low, high, PredictionSource.BASELINE, None

def build_forecast_days(
    periods: List[ForecastPeriod],
    location_id: str,
    today: str,
    surf_today: Optional[SurfConditions],
    predictions: Dict[str, SurfPrediction],
    latest: Optional[SurfConditions],
    max_periods: int = 14,
    max_days: int = 7
) -> List[ForecastDay]:
    """Group NWS periods by EST day and merge each day with a swell range."""
    if not periods:
        return []

    frame = pd.DataFrame([
        {
            "date": est_date_from_iso(p.start_time),
            "day_name": to_local(datetime.fromisoformat(p.start_time)).strftime("%A"),
            "temperature": p.temperature,
            "is_daytime": p.is_daytime,
            "short_forecast": p.short_forecast,
            "wind_speed": parse_wind_speed(p.wind_speed),
            "wind_direction": p.wind_direction,
            "precipitation": p.precipitation_chance
        }
        for p in periods[:max_periods]
    ])
    frame["temperature"] = pd.to_numeric(frame["temperature"], errors="coerce")

    days = []
    for date, group in frame.groupby("date", sort=False):
        daytime = group[group["is_daytime"]]
        night = group[~group["is_daytime"]]
        high = daytime["temperature"].max()
        low = night["temperature"].min()

        if pd.isna(high) and pd.isna(low):
            high, low = DEFAULT_HIGH_TEMP, DEFAULT_LOW_TEMP
        elif pd.isna(low):
            low = high - TEMP_SPREAD
        elif pd.isna(high):
            high = low + TEMP_SPREAD

        first = group.iloc[0]
        conditions = daytime["short_forecast"].iloc[-1] if not daytime.empty else first["short_forecast"]
        precipitation = first["precipitation"]

        display, swell_min, swell_max, source, confidence = select_swell(
            date, today, surf_today, predictions, latest
        )
        days.append(ForecastDay(
            date=date,
            location=location_id,
            day_name=first["day_name"],
            high_temp=float(high),
            low_temp=float(low),
            conditions=conditions,
            precipitation_chance=0 if pd.isna(precipitation) else float(precipitation),
            wind_speed=int(first["wind_speed"]),
            wind_direction=first["wind_direction"],
            swell_height_min=swell_min,
            swell_height_max=swell_max,
            swell_height_range=display,
            prediction_source=source,
            prediction_confidence=confidence
        ))

    return days[:max_days]

class WeatherForecastService:
    """Refreshes current weather and the merged daily forecast for a location."""

    def __init__(
        self,
        nws_client: NWSWeatherClient,
        repository: SurfRepository,
        clock: Clock = utc_now
    ):
        self.nws_client = nws_client
        self.repository = repository
        self._clock = clock

    async def refresh(self, location: SurfLocation) -> Tuple[CurrentWeather, List[ForecastDay]]:
        today = est_date(self._clock())
        periods = await self.nws_client.get_forecast_periods(location)

        current = await self.repository.upsert_weather(
            current_weather_from_period(periods[0], location.location_id, today)
        )
        logger.info(f"✅ {location.name}: current weather {current.temperature}°F, {current.conditions}")

        surf_today = await self.repository.get_surf_conditions(location.location_id, today)
        latest = await self.repository.get_latest_surf_conditions(location.location_id)
        predictions = {
            p.date: p for p in await self.repository.get_predictions(location.location_id, since=today)
        }

        days = build_forecast_days(
            periods,
            location.location_id,
            today,
            surf_today,
            predictions,
            latest,
            max_periods=settings.forecast_periods,
            max_days=settings.forecast_days
        )
        await self.repository.replace_forecast(location.location_id, days)

        sources = ", ".join(f"{d.date}={d.prediction_source.value}" for d in days)
        logger.info(f"✅ {location.name}: replaced forecast with {len(days)} days ({sources})")
        return current, days
