import pytest

from features.trends.utils.statistics import moving_average, trend_slope, standard_deviation

def test_empty_and_single_series():
    assert moving_average([], 3) == 0
    assert trend_slope([]) == 0
    assert trend_slope([4.2]) == 0
    assert standard_deviation([]) == 0

def test_linear_series_slope():
    assert trend_slope([1, 2, 3, 4, 5]) == pytest.approx(1.0)
    assert trend_slope([5, 4, 3, 2, 1]) == pytest.approx(-1.0)
    assert trend_slope([3, 3, 3]) == 0

def test_moving_average_uses_tail():
    assert moving_average([1, 2, 3, 4, 5], 3) == pytest.approx(4.0)
    assert moving_average([2, 4], 7) == pytest.approx(3.0)

def test_population_standard_deviation():
    assert standard_deviation([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)
