from datetime import datetime
from typing import Optional
from pydantic import BaseModel

class BuoyObservation(BaseModel):
    """Latest standard meteorological record from an NDBC buoy.

    Sentinel/missing readings are None, never zero.
    """
    observed_at: Optional[datetime] = None
    wave_height_m: Optional[float] = None  # WVHT, significant wave height
    period_s: Optional[float] = None  # DPD, dominant period
    wind_speed_ms: Optional[float] = None  # WSPD
    wind_direction_deg: Optional[float] = None  # WDIR, degrees true
    water_temp_c: Optional[float] = None  # WTMP
    swell_direction_deg: Optional[float] = None  # MWD

    @property
    def has_wave_data(self) -> bool:
        return self.wave_height_m is not None and self.period_s is not None

class SurfHeightEstimate(BaseModel):
    """Rideable face height range derived from one wave reading."""
    min_feet: float
    max_feet: float
    display: str

class SurfConditions(BaseModel):
    """Daily surf observation row, one per (location, date)."""
    date: str  # YYYY-MM-DD, EST calendar day
    location: str
    buoy_id: str

    # Structured values (None when the buoy did not report them)
    wave_height_ft: Optional[float] = None
    surf_height_min_ft: Optional[float] = None
    surf_height_max_ft: Optional[float] = None
    period_s: Optional[float] = None
    swell_direction_deg: Optional[float] = None
    wind_speed_mph: Optional[float] = None
    wind_direction_deg: Optional[float] = None
    water_temp_f: Optional[float] = None

    # Display projections
    wave_height: str = "N/A"
    surf_height: str = "N/A"
    wave_period: str = "N/A"
    swell_direction: str = "N/A"
    wind_speed: str = "N/A"
    wind_direction: str = "N/A"
    water_temp: str = "N/A"

    updated_at: Optional[datetime] = None

    @property
    def has_wave_data(self) -> bool:
        return self.wave_height_ft is not None or self.surf_height_max_ft is not None

    @property
    def face_height_ft(self) -> Optional[float]:
        """Face height used for rating and narrative: low end of the surf range, else wave height."""
        if self.surf_height_min_ft is not None:
            return self.surf_height_min_ft
        return self.wave_height_ft
