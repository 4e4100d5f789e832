import logging
from typing import List, Optional

from features.weather.models.weather_types import ForecastPeriod
from features.common.models.location_types import SurfLocation
from features.common.services.http_client import HttpClient
from features.common.services.ttl_cache import TTLCache
from features.common.exceptions.pipeline_exceptions import ParseError
from core.config import settings

logger = logging.getLogger(__name__)

class NWSWeatherClient:
    """api.weather.gov client: gridpoint lookup then forecast periods."""

    def __init__(self, http: HttpClient, points_cache: Optional[TTLCache] = None):
        self.http = http
        self.base_url = settings.nws_base_url.rstrip("/")
        self._points_cache = points_cache or TTLCache(
            ttl=settings.get_cache_ttl()["nws_points"],
            namespace="nws_points"
        )
        self._headers = {
            "User-Agent": settings.user_agent,
            "Accept": "application/geo+json"
        }

    async def get_forecast_url(self, location: SurfLocation) -> str:
        key = f"{location.coordinates.lat},{location.coordinates.lon}"
        cached = await self._points_cache.get(key)
        if cached:
            return cached

        data = await self.http.get_json(
            f"{self.base_url}/points/{key}",
            source="NWS points",
            headers=self._headers
        )
        try:
            forecast_url = data["properties"]["forecast"]
        except (KeyError, TypeError):
            raise ParseError("NWS points response has no forecast URL")

        await self._points_cache.set(key, forecast_url)
        logger.info(f"Resolved NWS forecast URL for {location.name}: {forecast_url}")
        return forecast_url

    async def get_forecast_periods(self, location: SurfLocation) -> List[ForecastPeriod]:
        forecast_url = await self.get_forecast_url(location)
        data = await self.http.get_json(forecast_url, source="NWS forecast", headers=self._headers)
        try:
            periods = data["properties"]["periods"]
            parsed = [ForecastPeriod.from_nws(p) for p in periods]
        except (KeyError, TypeError, ValueError) as e:
            raise ParseError(f"Malformed NWS forecast response: {str(e)}")
        if not parsed:
            raise ParseError("NWS forecast has no periods")
        return parsed
