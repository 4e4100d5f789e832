import logging
from typing import Dict, List, Optional, Any

from features.common.models.location_types import SurfLocation, Coordinates
from features.common.exceptions.pipeline_exceptions import InvalidLocationError
from core.config import settings

logger = logging.getLogger(__name__)

class LocationService:
    """Resolves configured surf locations by id."""

    def __init__(self, locations: Optional[Dict[str, Dict[str, Any]]] = None):
        raw = locations if locations is not None else settings.locations
        self._locations = {
            location_id: SurfLocation(
                location_id=location_id,
                name=info["name"],
                buoy_id=info["buoy_id"],
                tide_station_id=info["tide_station_id"],
                coordinates=Coordinates(lat=info["lat"], lon=info["lon"]),
                seed_offset=info.get("seed_offset", 0)
            )
            for location_id, info in raw.items()
        }

    def get_location(self, location_id: Optional[str] = None) -> SurfLocation:
        location_id = location_id or settings.default_location
        location = self._locations.get(location_id)
        if not location:
            logger.error(f"Invalid location: {location_id}")
            raise InvalidLocationError(location_id)
        return location

    def all_locations(self) -> List[SurfLocation]:
        return list(self._locations.values())
