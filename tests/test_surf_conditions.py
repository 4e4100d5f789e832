from features.surf.services.surf_conditions_service import build_surf_conditions
from features.surf.utils.buoy_parser import parse_buoy_text
from conftest import TODAY, buoy_text

def test_golden_reading(location):
    row = build_surf_conditions(parse_buoy_text(buoy_text()), location, TODAY)

    assert row.wave_height_ft == 4.9
    assert row.wave_height == "4.9 ft"
    assert (row.surf_height_min_ft, row.surf_height_max_ft) == (2.5, 3.0)
    assert row.surf_height == "2.5-3.0 ft"

def test_tiny_wave_is_capped_at_stored_height(location):
    # 0.13 m is 0.43 ft, stored as 0.4
    row = build_surf_conditions(parse_buoy_text(buoy_text(wvht="0.13", dpd="13.0")), location, TODAY)

    assert row.wave_height_ft == 0.4
    assert row.surf_height_max_ft == 0.4
    assert row.surf_height_min_ft <= row.surf_height_max_ft <= row.wave_height_ft

def test_missing_waves_have_no_surf_range(location):
    row = build_surf_conditions(parse_buoy_text(buoy_text(wvht="MM", dpd="MM")), location, TODAY)

    assert row.wave_height_ft is None
    assert row.surf_height_min_ft is None
    assert row.surf_height == "N/A"
    assert row.wave_height == "N/A"
