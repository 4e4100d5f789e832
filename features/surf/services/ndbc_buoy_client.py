import logging

from features.surf.models.surf_types import BuoyObservation
from features.surf.utils.buoy_parser import parse_buoy_text
from features.common.services.http_client import HttpClient
from core.config import settings

logger = logging.getLogger(__name__)

class NDBCBuoyClient:
    """Fetches the realtime2 standard meteorological file for a buoy."""

    def __init__(self, http: HttpClient):
        self.http = http

    def observation_url(self, buoy_id: str) -> str:
        return f"{settings.ndbc_base_url}{buoy_id}.txt"

    async def fetch_raw(self, buoy_id: str) -> str:
        return await self.http.get_text(self.observation_url(buoy_id), source=f"NDBC {buoy_id}")

    async def get_latest_observation(self, buoy_id: str) -> BuoyObservation:
        text = await self.fetch_raw(buoy_id)
        observation = parse_buoy_text(text)
        logger.info(
            f"Buoy {buoy_id}: WVHT={observation.wave_height_m} DPD={observation.period_s} "
            f"WSPD={observation.wind_speed_ms} WTMP={observation.water_temp_c}"
        )
        return observation
