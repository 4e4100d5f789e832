import pytest

from features.common.utils.conversions import UnitConversions, round_to_half

def test_meters_to_feet():
    assert UnitConversions.meters_to_feet(1.0) == pytest.approx(3.28084)
    assert UnitConversions.meters_to_feet(None) is None

def test_ms_to_mph_and_celsius():
    assert UnitConversions.ms_to_mph(5.0) == pytest.approx(11.1847)
    assert UnitConversions.celsius_to_fahrenheit(24.0) == pytest.approx(75.2)
    assert UnitConversions.celsius_to_fahrenheit(None) is None

@pytest.mark.parametrize("degrees,expected", [
    (0, "N"),
    (135, "SE"),
    (200, "SSW"),
    (270, "W"),
    (348.75, "N"),  # exactly between NNW and N rounds up
    (359, "N"),
])
def test_degrees_to_compass(degrees, expected):
    assert UnitConversions.degrees_to_compass(degrees) == expected

def test_format_direction():
    assert UnitConversions.format_direction(135) == "SE (135°)"
    assert UnitConversions.format_direction(None) == "N/A"

def test_round_to_half_rounds_halves_up():
    assert round_to_half(2.25) == 2.5
    assert round_to_half(2.2) == 2.0
    assert round_to_half(2.95) == 3.0
