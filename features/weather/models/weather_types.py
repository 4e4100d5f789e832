from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any
from pydantic import BaseModel

class PredictionSource(str, Enum):
    """Provenance of a forecast day's swell range, strongest first."""
    ACTUAL = "actual"
    AI_PREDICTION = "ai_prediction"
    BUOY_ESTIMATION = "buoy_estimation"
    BASELINE = "baseline"

class ForecastPeriod(BaseModel):
    """One NWS gridpoint forecast period."""
    start_time: str
    temperature: Optional[float] = None  # °F
    is_daytime: bool = True
    short_forecast: str = ""
    detailed_forecast: str = ""
    wind_speed: str = ""  # e.g. "10 to 15 mph"
    wind_direction: str = ""
    precipitation_chance: Optional[float] = None  # percent

    @classmethod
    def from_nws(cls, period: Dict[str, Any]) -> 'ForecastPeriod':
        precipitation = period.get("probabilityOfPrecipitation") or {}
        return cls(
            start_time=period["startTime"],
            temperature=period.get("temperature"),
            is_daytime=bool(period.get("isDaytime", True)),
            short_forecast=period.get("shortForecast") or "",
            detailed_forecast=period.get("detailedForecast") or "",
            wind_speed=period.get("windSpeed") or "",
            wind_direction=period.get("windDirection") or "",
            precipitation_chance=precipitation.get("value")
        )

class CurrentWeather(BaseModel):
    """Today's weather row, one per (location, date)."""
    date: str
    location: str
    temperature: Optional[float] = None  # °F
    wind_speed: int = 0  # mph
    wind_direction: str = ""
    conditions: str = ""
    forecast: str = ""
    updated_at: Optional[datetime] = None

class ForecastDay(BaseModel):
    """Daily forecast row merged with a swell range and its provenance."""
    date: str
    location: str
    day_name: str
    high_temp: float
    low_temp: float
    conditions: str
    precipitation_chance: float = 0
    wind_speed: int = 0
    wind_direction: str = ""
    swell_height_min: float
    swell_height_max: float
    swell_height_range: str
    prediction_source: PredictionSource
    prediction_confidence: Optional[float] = None
    updated_at: Optional[datetime] = None
