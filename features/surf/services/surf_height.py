from typing import Optional

from features.surf.models.surf_types import SurfHeightEstimate
from features.surf.models.surf_categories import PeriodTier
from features.common.utils.conversions import UnitConversions, round_to_half

# Share of the raw wave height a face may reach
OBSERVATION_CAP = 1.0
FORECAST_CAP = 0.95

def format_surf_range(min_feet: float, max_feet: float) -> str:
    if min_feet == max_feet:
        return f"{min_feet:.1f} ft"
    return f"{min_feet:.1f}-{max_feet:.1f} ft"

def estimate_from_feet(
    wave_height_ft: Optional[float],
    period_s: Optional[float],
    cap: float = OBSERVATION_CAP
) -> Optional[SurfHeightEstimate]:
    """Rideable face range for a wave height already in feet.

    Returns None when either input is missing so callers show "N/A".
    """
    if wave_height_ft is None or period_s is None:
        return None

    wave_height_ft = max(wave_height_ft, 0.0)
    tier = PeriodTier.from_period(period_s)
    ceiling = wave_height_ft * min(cap, 1.0)

    min_feet = min(round_to_half(wave_height_ft * tier.multiplier_min), ceiling)
    max_feet = min(round_to_half(wave_height_ft * tier.multiplier_max), ceiling)
    min_feet = min(min_feet, max_feet)

    return SurfHeightEstimate(
        min_feet=min_feet,
        max_feet=max_feet,
        display=format_surf_range(min_feet, max_feet)
    )

def estimate_surf_height(
    wave_height_m: Optional[float],
    period_s: Optional[float],
    cap: float = OBSERVATION_CAP
) -> Optional[SurfHeightEstimate]:
    """Rideable face range from significant wave height (meters) and dominant period."""
    return estimate_from_feet(UnitConversions.meters_to_feet(wave_height_m), period_s, cap)
