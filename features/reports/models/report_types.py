from datetime import datetime
from typing import Optional
from pydantic import BaseModel, computed_field

class SurfReport(BaseModel):
    """Published daily report, one per (location, date)."""
    date: str
    location: str
    wave_height: str = "N/A"
    wave_period: str = "N/A"
    swell_direction: str = "N/A"
    wind_speed: str = "N/A"
    wind_direction: str = "N/A"
    water_temp: str = "N/A"
    tide: str = "Tide data unavailable"
    conditions: str = ""  # generated narrative
    rating: int = 1

    # Structured values behind the display strings
    surf_height_min_ft: Optional[float] = None
    surf_height_max_ft: Optional[float] = None
    wave_height_ft: Optional[float] = None
    period_s: Optional[float] = None
    wind_speed_mph: Optional[float] = None
    water_temp_f: Optional[float] = None

    # Manual editorial override
    report_text: Optional[str] = None
    edited_by: Optional[str] = None
    edited_at: Optional[datetime] = None

    updated_at: Optional[datetime] = None

    @property
    def has_wave_data(self) -> bool:
        return self.wave_height != "N/A"

    @computed_field
    @property
    def display_text(self) -> str:
        if self.report_text and self.report_text.strip():
            return self.report_text
        return self.conditions

class ReportOverride(BaseModel):
    report_text: str
    edited_by: str
