from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel

class Stage(Enum):
    FETCH_SURF = ("fetch_surf", "Surf")
    FETCH_TIDE = ("fetch_tide", "Tide")
    ANALYZE_TRENDS = ("analyze_trends", "Trends")
    FETCH_WEATHER_AND_FORECAST = ("fetch_weather_and_forecast", "Weather")
    GENERATE_REPORT = ("generate_report", "Report")

    def __init__(self, key: str, label: str):
        self.key = key
        self.label = label

class StageStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"

class StageResult(BaseModel):
    stage: str
    status: StageStatus
    attempts: int = 0
    duration_ms: float = 0
    data: Optional[Any] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == StageStatus.SUCCESS

class PipelineResult(BaseModel):
    success: bool
    location: str
    message: str
    results: Dict[str, StageResult]
    errors: List[str] = []

    @property
    def status_code(self) -> int:
        return 200 if self.success else 207

class LocationRunResult(BaseModel):
    location: str
    location_id: str
    success: bool
    message: Optional[str] = None
    warning: Optional[str] = None
    error: Optional[str] = None

class AggregateResult(BaseModel):
    success: bool
    message: str
    results: List[Any] = []
    errors: List[str] = []
