import pytest
from datetime import datetime, timezone

from features.surf.utils.buoy_parser import parse_buoy_text, parse_value
from features.common.exceptions.pipeline_exceptions import ParseError
from conftest import buoy_text, BUOY_HEADER

def test_parses_latest_row():
    observation = parse_buoy_text(buoy_text())
    assert observation.observed_at == datetime(2026, 7, 15, 13, 50, tzinfo=timezone.utc)
    assert observation.wave_height_m == 1.5
    assert observation.period_s == 10.0
    assert observation.wind_speed_ms == 5.0
    assert observation.wind_direction_deg == 200
    assert observation.swell_direction_deg == 135
    assert observation.water_temp_c == 24.0
    assert observation.has_wave_data

def test_only_first_data_row_is_used():
    older = "2026 07 15 13 20 90 2.0 3.0 0.5 6.0 5.0 90 1015.0 22.0 23.0 18.0 MM MM MM\n"
    observation = parse_buoy_text(buoy_text(wvht="2.0") + older)
    assert observation.wave_height_m == 2.0

@pytest.mark.parametrize("token", ["MM", "99", "99.0", "999", "999.0", "9999.0", "abc"])
def test_missing_markers_are_none(token):
    assert parse_value(token) is None

def test_sentinel_waves_mean_no_wave_data():
    observation = parse_buoy_text(buoy_text(wvht="99.00", dpd="99.00"))
    assert observation.wave_height_m is None
    assert observation.period_s is None
    assert not observation.has_wave_data
    assert observation.wind_speed_ms == 5.0

def test_insufficient_lines():
    with pytest.raises(ParseError, match="Insufficient buoy data"):
        parse_buoy_text(BUOY_HEADER)

def test_truncated_row():
    with pytest.raises(ParseError):
        parse_buoy_text(BUOY_HEADER + "2026 07 15 13 50 200\n")
