from typing import Optional
from pydantic import BaseModel

class Coordinates(BaseModel):
    lat: float
    lon: float

class SurfLocation(BaseModel):
    """A surf break with its observing buoy and tide station."""
    location_id: str
    name: str
    buoy_id: str
    tide_station_id: str
    coordinates: Coordinates
    seed_offset: int = 0  # shifts narrative variants between locations

class LocationRequest(BaseModel):
    """Optional body accepted by every pipeline function."""
    location: Optional[str] = None
