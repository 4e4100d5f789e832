from typing import List
from pydantic import BaseModel

class TideEvent(BaseModel):
    """One high or low water prediction."""
    date: str  # YYYY-MM-DD, station local time
    time: str  # HH:MM
    type: str  # "High" or "Low"
    height: float
    height_unit: str = "ft"

    def summary(self) -> str:
        return f"{self.type} at {self.time} ({self.height}{self.height_unit})"

class TideRefreshResult(BaseModel):
    location: str
    station_id: str
    begin_date: str
    end_date: str
    tides: List[TideEvent]
