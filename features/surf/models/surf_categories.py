from enum import Enum

class PeriodTier(Enum):
    """Face-height multipliers by dominant period; longer periods break bigger."""
    SHORT = (0, 0.4, 0.5, "Short period")
    MID = (8, 0.5, 0.6, "Mid period")
    LONG = (12, 0.6, 0.7, "Long period")

    def __init__(self, min_period: float, multiplier_min: float, multiplier_max: float, description: str):
        self.min_period = min_period
        self.multiplier_min = multiplier_min
        self.multiplier_max = multiplier_max
        self.description = description

    @classmethod
    def from_period(cls, period: float) -> 'PeriodTier':
        if period >= cls.LONG.min_period:
            return cls.LONG
        if period >= cls.MID.min_period:
            return cls.MID
        return cls.SHORT
