import math
from typing import Optional

FEET_PER_METER = 3.28084
MPH_PER_MS = 2.23694

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW"
]

class UnitConversions:
    """Centralized utility for unit conversions across the application."""

    @staticmethod
    def meters_to_feet(meters: Optional[float]) -> Optional[float]:
        """Convert meters to feet."""
        if meters is None:
            return None
        return meters * FEET_PER_METER

    @staticmethod
    def ms_to_mph(ms: Optional[float]) -> Optional[float]:
        """Convert meters per second to miles per hour."""
        if ms is None:
            return None
        return ms * MPH_PER_MS

    @staticmethod
    def celsius_to_fahrenheit(celsius: Optional[float]) -> Optional[float]:
        if celsius is None:
            return None
        return celsius * 9 / 5 + 32

    @staticmethod
    def degrees_to_compass(degrees: Optional[float]) -> Optional[str]:
        """16-point compass label for a bearing, e.g. 135 -> 'SE'."""
        if degrees is None:
            return None
        index = int(_round_half_up(degrees / 22.5)) % 16
        return COMPASS_POINTS[index]

    @staticmethod
    def format_direction(degrees: Optional[float]) -> str:
        """Display form used on reports: 'SE (135°)' or 'N/A'."""
        if degrees is None:
            return "N/A"
        return f"{UnitConversions.degrees_to_compass(degrees)} ({degrees:.0f}°)"

def _round_half_up(value: float) -> float:
    # round() is banker's rounding; report math rounds halves up
    return float(math.floor(value + 0.5))

def round_to_half(value: float) -> float:
    """Round to the nearest 0.5 ft, halves going up."""
    return _round_half_up(value * 2) / 2
