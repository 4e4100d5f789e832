from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, Any, Optional

class Settings(BaseSettings):
    """Application settings."""

    # Upstream data sources
    ndbc_base_url: str = "https://www.ndbc.noaa.gov/data/realtime2/"
    coops_base_url: str = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"
    coops_params: Dict = {
        "product": "predictions",
        "interval": "hilo",
        "datum": "MLLW",
        "units": "english",
        "time_zone": "lst_ldt",
        "format": "json"
    }
    nws_base_url: str = "https://api.weather.gov"
    user_agent: str = "SurfReportPipeline/1.0 (surf-report@example.com)"

    # Timezone used for calendar-day keys and log timestamps
    timezone: str = "America/New_York"

    # Outbound request policy
    fetch_timeout: float = 30.0      # seconds per request
    fetch_retries: int = 3
    fetch_backoff: float = 1.0       # seconds, multiplied by attempt number

    # Stage policy for the orchestrator
    stage_timeout: float = 45.0      # fallback for stages without an entry below
    stage_timeouts: Dict[str, float] = {
        "fetch_surf": 30.0,
        "fetch_tide": 30.0,
        "analyze_trends": 60.0,
        "fetch_weather_and_forecast": 45.0,
        "generate_report": 120.0
    }
    stage_retries: int = 2
    stage_backoff: float = 2.0
    aggregate_timeout: float = 120.0

    # Model windows
    history_days: int = 30
    prediction_days: int = 7
    forecast_periods: int = 14
    forecast_days: int = 7
    tide_days: int = 7
    retention_days: int = 7

    # First report of the day
    first_report_max_attempts: int = 60
    first_report_retry_interval: float = 60.0
    first_report_min_length: int = 50

    # Rating strategies: full generation vs intraday refresh
    report_rating_strategy: str = "additive"
    refresh_rating_strategy: str = "banded"

    # Scheduler
    scheduler_enabled: bool = True
    daily_report_hour: int = 5
    cleanup_hour: int = 3
    intraday_interval_minutes: int = 15

    default_location: str = "folly-beach"
    locations: Dict[str, Dict[str, Any]] = {
        "folly-beach": {
            "name": "Folly Beach, SC",
            "buoy_id": "41004",
            "tide_station_id": "8665530",
            "lat": 32.6552,
            "lon": -79.9403,
            "seed_offset": 0
        },
        "pawleys-island": {
            "name": "Pawleys Island, SC",
            "buoy_id": "41013",
            "tide_station_id": "8661070",
            "lat": 33.4318,
            "lon": -79.1192,
            "seed_offset": 100
        }
    }

    def get_cache_ttl(self) -> Dict[str, Optional[int]]:
        """Get cache TTL values in seconds."""
        return {
            "nws_points": 86400,        # Grid point lookups are static per location
        }

    model_config = SettingsConfigDict(
        env_prefix="surf_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
