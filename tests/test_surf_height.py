import pytest

from features.surf.models.surf_categories import PeriodTier
from features.surf.services.surf_height import (
    estimate_surf_height,
    estimate_from_feet,
    format_surf_range,
    OBSERVATION_CAP,
    FORECAST_CAP
)

def test_known_reading():
    estimate = estimate_surf_height(1.5, 10)
    assert estimate.display == "2.5-3.0 ft"
    assert estimate.min_feet == 2.5
    assert estimate.max_feet == 3.0

def test_missing_inputs_give_no_estimate():
    assert estimate_surf_height(None, 10) is None
    assert estimate_surf_height(1.5, None) is None

@pytest.mark.parametrize("period,tier", [
    (5, PeriodTier.SHORT),
    (8, PeriodTier.MID),
    (11.9, PeriodTier.MID),
    (12, PeriodTier.LONG),
    (18, PeriodTier.LONG),
])
def test_period_tiers(period, tier):
    assert PeriodTier.from_period(period) is tier

@pytest.mark.parametrize("cap", [OBSERVATION_CAP, FORECAST_CAP])
def test_range_is_ordered_and_capped(cap):
    for tenths in range(1, 80):
        wave_ft = tenths / 4
        for period in (4, 7, 9, 11, 13, 16):
            estimate = estimate_from_feet(wave_ft, period, cap)
            assert 0 <= estimate.min_feet <= estimate.max_feet
            assert estimate.max_feet <= wave_ft * cap + 1e-9

def test_equal_bounds_display_single_value():
    assert format_surf_range(1.0, 1.0) == "1.0 ft"
    assert format_surf_range(1.0, 1.5) == "1.0-1.5 ft"
