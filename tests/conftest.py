import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from core.config import settings
from features.common.services.location_service import LocationService
from features.surf.services.ndbc_buoy_client import NDBCBuoyClient
from features.surf.services.surf_conditions_service import SurfConditionsService
from features.tides.services.tide_service import TideService
from features.trends.services.surf_predictor import SurfHeightPredictor
from features.trends.services.trend_service import TrendAnalysisService
from features.weather.services.nws_client import NWSWeatherClient
from features.weather.services.forecast_service import WeatherForecastService
from features.rating.services.rating_strategies import AdditiveRatingStrategy, BandedRatingStrategy
from features.reports.services.report_service import ReportService
from features.reports.services.cleanup_service import CleanupService
from features.pipeline.services.pipeline_service import PipelineService
from repositories.surf_repository import SurfRepository

# 10:00 EDT on 2026-07-15
FIXED_NOW = datetime(2026, 7, 15, 14, 0, tzinfo=timezone.utc)
TODAY = "2026-07-15"

NDBC_URL = f"{settings.ndbc_base_url}41004.txt"
COOPS_URL = settings.coops_base_url
NWS_POINTS_URL = f"{settings.nws_base_url}/points/32.6552,-79.9403"
NWS_FORECAST_URL = "https://api.weather.gov/gridpoints/CHS/48,53/forecast"

BUOY_HEADER = (
    "#YY  MM DD hh mm WDIR WSPD GST  WVHT   DPD   APD MWD   PRES  ATMP  WTMP  DEWP  VIS PTDY  TIDE\n"
    "#yr  mo dy hr mn degT m/s  m/s     m   sec   sec degT   hPa  degC  degC  degC  nmi  hPa    ft\n"
)

def buoy_text(wdir="200", wspd="5.0", wvht="1.5", dpd="10.0", mwd="135", wtmp="24.0") -> str:
    row = f"2026 07 15 13 50 {wdir} {wspd} 6.0 {wvht} {dpd} 6.5 {mwd} 1015.0 22.0 {wtmp} 18.0 MM MM MM\n"
    return BUOY_HEADER + row

def tide_payload(heights=(5.1, 0.4, 5.3, 0.2)) -> Dict[str, Any]:
    times = ["2026-07-15 04:12", "2026-07-15 10:30", "2026-07-15 16:45", "2026-07-15 22:58"]
    kinds = ["H", "L", "H", "L"]
    return {
        "predictions": [
            {"t": t, "v": f"{h:.3f}", "type": k} for t, h, k in zip(times, heights, kinds)
        ]
    }

def nws_period(start: str, temperature: float, is_daytime: bool, short: str = "Sunny") -> Dict[str, Any]:
    return {
        "startTime": start,
        "temperature": temperature,
        "isDaytime": is_daytime,
        "shortForecast": short,
        "detailedForecast": f"{short}, with a high near {temperature}.",
        "windSpeed": "10 to 15 mph",
        "windDirection": "SW",
        "probabilityOfPrecipitation": {"value": None}
    }

def nws_forecast_payload() -> Dict[str, Any]:
    return {
        "properties": {
            "periods": [
                nws_period("2026-07-15T06:00:00-04:00", 88, True),
                nws_period("2026-07-15T18:00:00-04:00", 76, False, "Mostly Clear"),
                nws_period("2026-07-16T06:00:00-04:00", 90, True, "Chance Showers"),
                nws_period("2026-07-16T18:00:00-04:00", 75, False),
                nws_period("2026-07-17T06:00:00-04:00", 87, True)
            ]
        }
    }

class FakeHttp:
    """Stands in for HttpClient: canned payloads by exact URL.

    A value may be an exception instance (raised) or an async callable
    (awaited, for slow upstreams).
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        self.responses = dict(responses or {})
        self.calls: List[Dict[str, Any]] = []

    async def _respond(self, url, source, params, headers):
        self.calls.append({"url": url, "source": source, "params": params, "headers": headers})
        value = self.responses[url]
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return await value()
        return value

    async def get_text(self, url, source, params=None, headers=None):
        return await self._respond(url, source, params, headers)

    async def get_json(self, url, source, params=None, headers=None):
        return await self._respond(url, source, params, headers)

    async def close(self):
        pass

class RecordingSleep:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)

@pytest.fixture
def clock():
    return lambda: FIXED_NOW

@pytest.fixture
def repository():
    return SurfRepository()

@pytest.fixture
def location_service():
    return LocationService({"folly-beach": settings.locations["folly-beach"]})

@pytest.fixture
def location(location_service):
    return location_service.get_location("folly-beach")

@pytest.fixture
def sleep():
    return RecordingSleep()

@pytest.fixture
def fake_http():
    return FakeHttp({
        NDBC_URL: buoy_text(),
        COOPS_URL: tide_payload(),
        NWS_POINTS_URL: {"properties": {"forecast": NWS_FORECAST_URL}},
        NWS_FORECAST_URL: nws_forecast_payload()
    })

@pytest.fixture
def surf_service(fake_http, repository, clock):
    return SurfConditionsService(NDBCBuoyClient(fake_http), repository, clock)

@pytest.fixture
def tide_service(fake_http, repository, clock):
    return TideService(fake_http, repository, clock)

@pytest.fixture
def trend_service(repository, clock):
    return TrendAnalysisService(repository, SurfHeightPredictor(), clock)

@pytest.fixture
def weather_service(fake_http, repository, clock):
    return WeatherForecastService(NWSWeatherClient(fake_http), repository, clock)

@pytest.fixture
def report_service(repository, clock, sleep):
    return ReportService(
        repository,
        generation_strategy=AdditiveRatingStrategy(),
        refresh_strategy=BandedRatingStrategy(),
        clock=clock,
        sleep=sleep
    )

@pytest.fixture
def cleanup_service(repository, clock):
    return CleanupService(repository, clock)

@pytest.fixture
def pipeline(location_service, surf_service, tide_service, trend_service, weather_service, report_service, sleep):
    return PipelineService(
        location_service,
        surf_service,
        tide_service,
        trend_service,
        weather_service,
        report_service,
        sleep=sleep
    )

async def slow_response():
    await asyncio.sleep(1)
