from datetime import date

import pytest

from features.trends.services.surf_predictor import (
    SurfHeightPredictor,
    HistoricalSeries,
    prediction_confidence,
    seasonal_factor
)
from features.surf.models.surf_types import SurfConditions

SUMMER = date(2026, 7, 15)

def _series(heights, period=9.0):
    return HistoricalSeries(heights=list(heights), periods=[period] * len(heights))

def test_seasonal_factor_months():
    assert seasonal_factor(5) == 1.1
    assert seasonal_factor(9) == 1.1
    assert seasonal_factor(4) == 0.9
    assert seasonal_factor(10) == 0.9

def test_confidence_example():
    # volatility of [2.0, 2.8] is 0.4
    forecast = SurfHeightPredictor().predict(_series([2.0, 2.8]), None, None, 1, SUMMER)
    assert forecast.factors.volatility == pytest.approx(0.4)
    assert forecast.confidence == 0.78

def test_confidence_bounded_and_non_increasing():
    for volatility in (0.0, 0.5, 3.0, 10.0):
        values = [prediction_confidence(d, volatility) for d in range(1, 8)]
        assert all(0.3 <= v <= 0.95 for v in values)
        assert values == sorted(values, reverse=True)

def test_rising_history_predicts_higher_than_flat():
    predictor = SurfHeightPredictor()
    rising = predictor.predict(_series([1, 2, 3, 4, 5]), 3.0, 9.0, 2, SUMMER)
    flat = predictor.predict(_series([3, 3, 3, 3, 3]), 3.0, 9.0, 2, SUMMER)
    assert rising.factors.predicted_wave_height > flat.factors.predicted_wave_height

def test_empty_history_uses_defaults():
    forecast = SurfHeightPredictor().predict(HistoricalSeries(), None, None, 3, SUMMER)
    assert forecast.factors.avg_wave_height == 2.0
    assert forecast.factors.avg_period == 8.0
    assert forecast.wave_min_ft >= 0.5
    assert forecast.surf_min_ft <= forecast.surf_max_ft
    assert forecast.confidence == pytest.approx(0.66)

def test_history_drops_missing_and_non_positive_values():
    rows = [
        SurfConditions(date="2026-07-03", location="folly-beach", buoy_id="41004", wave_height_ft=3.0, period_s=9),
        SurfConditions(date="2026-07-01", location="folly-beach", buoy_id="41004", wave_height_ft=2.0, period_s=8),
        SurfConditions(date="2026-07-02", location="folly-beach", buoy_id="41004", wave_height_ft=None, period_s=0),
    ]
    series = HistoricalSeries.from_conditions(rows)
    assert series.heights == [2.0, 3.0]
    assert series.periods == [8.0, 9.0]

def test_steadily_rising_week_biases_next_day_upward():
    predictor = SurfHeightPredictor()
    rising = predictor.predict(_series([2.0, 2.2, 2.4, 2.6, 2.8, 3.0, 3.2]), 3.2, 9.0, 1, SUMMER)
    flat = predictor.predict(_series([3.2] * 7), 3.2, 9.0, 1, SUMMER)

    assert rising.factors.trend == pytest.approx(0.2)
    assert rising.factors.volatility == pytest.approx(0.4)
    assert rising.display == "1.5-2.5 ft"
    assert rising.confidence == 0.78

    assert flat.display == "1.5-2.0 ft"
    assert flat.confidence == 0.82

    assert rising.factors.predicted_wave_height > flat.factors.predicted_wave_height
    assert rising.surf_max_ft > flat.surf_max_ft
