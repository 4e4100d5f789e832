import pytest

from features.weather.models.weather_types import ForecastPeriod, PredictionSource
from features.weather.services.forecast_service import (
    build_forecast_days,
    select_swell,
    parse_wind_speed
)
from features.surf.services.surf_conditions_service import build_surf_conditions
from features.surf.utils.buoy_parser import parse_buoy_text
from features.common.exceptions.pipeline_exceptions import ParseError
from conftest import TODAY, NWS_POINTS_URL, NWS_FORECAST_URL, buoy_text, nws_forecast_payload

@pytest.fixture
def surf_today(location):
    return build_surf_conditions(parse_buoy_text(buoy_text()), location, TODAY)

def test_parse_wind_speed():
    assert parse_wind_speed("10 to 15 mph") == 10
    assert parse_wind_speed("5 mph") == 5
    assert parse_wind_speed("") == 0
    assert parse_wind_speed("Calm") == 0

def test_swell_source_precedence(surf_today):
    assert select_swell(TODAY, TODAY, surf_today, {}, surf_today)[3] is PredictionSource.ACTUAL

    display, low, high, source, confidence = select_swell("2026-07-16", TODAY, surf_today, {}, surf_today)
    assert source is PredictionSource.BUOY_ESTIMATION
    assert display == "2.5-3.0 ft"
    assert confidence is None

    display, low, high, source, _ = select_swell("2026-07-16", TODAY, None, {}, None)
    assert source is PredictionSource.BASELINE
    assert (display, low, high) == ("1-2 ft", 1.0, 2.0)

def test_days_grouped_by_local_date():
    periods = [ForecastPeriod.from_nws(p) for p in nws_forecast_payload()["properties"]["periods"]]
    days = build_forecast_days(periods, "folly-beach", TODAY, None, {}, None)

    assert [d.date for d in days] == ["2026-07-15", "2026-07-16", "2026-07-17"]
    assert days[0].day_name == "Wednesday"
    assert (days[0].high_temp, days[0].low_temp) == (88, 76)
    assert days[1].conditions == "Chance Showers"
    # no night period: low is filled from the high
    assert (days[2].high_temp, days[2].low_temp) == (87, 77)
    assert days[0].precipitation_chance == 0
    assert days[0].wind_speed == 10
    assert all(d.prediction_source is PredictionSource.BASELINE for d in days)

def test_at_most_seven_days():
    periods = [
        ForecastPeriod(start_time=f"2026-07-{day:02d}T12:00:00-04:00", temperature=80)
        for day in range(15, 30)
    ]
    days = build_forecast_days(periods, "folly-beach", TODAY, None, {}, None, max_periods=14, max_days=7)
    assert len(days) == 7

async def test_refresh_merges_predictions(weather_service, surf_service, trend_service, repository, location):
    await surf_service.fetch_and_store(location)
    await trend_service.analyze(location)
    current, days = await weather_service.refresh(location)

    assert current.temperature == 88
    assert current.wind_speed == 10
    assert current.conditions == "Sunny"
    assert days[0].prediction_source is PredictionSource.ACTUAL
    assert days[0].swell_height_range == "2.5-3.0 ft"
    assert days[1].prediction_source is PredictionSource.AI_PREDICTION
    assert days[1].prediction_confidence is not None
    assert [d.date for d in await repository.get_forecast("folly-beach")] == [d.date for d in days]
    assert (await repository.get_weather("folly-beach", TODAY)).conditions == "Sunny"

async def test_points_lookup_is_cached(weather_service, fake_http, location):
    await weather_service.refresh(location)
    await weather_service.refresh(location)

    point_calls = [c for c in fake_http.calls if c["url"] == NWS_POINTS_URL]
    assert len(point_calls) == 1
    assert "User-Agent" in point_calls[0]["headers"]

async def test_empty_forecast_is_a_parse_error(weather_service, fake_http, location):
    fake_http.responses[NWS_FORECAST_URL] = {"properties": {"periods": []}}
    with pytest.raises(ParseError):
        await weather_service.refresh(location)
