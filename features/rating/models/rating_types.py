import math
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, field_validator

COMPASS_LETTERS = set("nsew")

class WindExposure(Enum):
    OFFSHORE = "offshore"  # W or N component, grooms the faces
    ONSHORE = "onshore"  # E or S component, adds chop

    @classmethod
    def from_direction(cls, direction: Optional[str]) -> Optional['WindExposure']:
        """Classify a compass label such as 'WSW' or 'SW (225°)'.

        Anything that is not a compass token ('N/A', 'Variable') is None.
        """
        if not direction:
            return None
        token = direction.strip().split()[0].lower() if direction.strip() else ""
        if not token or not set(token) <= COMPASS_LETTERS:
            return None
        if "w" in token or "n" in token:
            return cls.OFFSHORE
        return cls.ONSHORE

class WindCondition(Enum):
    """Qualitative surface condition, best first."""
    CLEAN = (0, "clean")
    MODERATE = (1, "moderate")
    MODERATELY_POOR = (2, "moderately poor")
    POOR = (3, "poor")
    VERY_POOR = (4, "very poor")

    def __init__(self, severity: int, label: str):
        self.severity = severity
        self.label = label

    def downgrade(self) -> 'WindCondition':
        """Short-period adjustment: clean -> moderate, moderate -> poor."""
        if self is WindCondition.CLEAN:
            return WindCondition.MODERATE
        if self is WindCondition.MODERATE:
            return WindCondition.POOR
        return self

class RatingInput(BaseModel):
    """Scorer inputs; missing or unparseable numbers become 0."""
    surf_height_ft: float = 0.0
    wind_speed_mph: float = 0.0
    wind_direction: Optional[str] = None
    period_s: float = 0.0

    @field_validator("surf_height_ft", "wind_speed_mph", "period_s", mode="before")
    @classmethod
    def _default_missing(cls, value: Any) -> float:
        if value is None:
            return 0.0
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0
        return 0.0 if math.isnan(number) or math.isinf(number) else number

    @property
    def exposure(self) -> Optional[WindExposure]:
        return WindExposure.from_direction(self.wind_direction)
