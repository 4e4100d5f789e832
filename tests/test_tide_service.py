import pytest

from features.tides.services.tide_service import parse_predictions
from features.common.exceptions.pipeline_exceptions import ParseError, UpstreamFetchError
from conftest import COOPS_URL, TODAY, tide_payload

async def test_refresh_requests_seven_days(tide_service, fake_http, location):
    result = await tide_service.refresh(location)

    params = fake_http.calls[-1]["params"]
    assert params["station"] == "8665530"
    assert params["begin_date"] == "20260715"
    assert params["end_date"] == "20260721"
    assert params["interval"] == "hilo"
    assert result.begin_date == TODAY
    assert len(result.tides) == 4

async def test_refresh_replaces_wholesale(tide_service, repository, fake_http, location):
    await tide_service.refresh(location)
    fake_http.responses[COOPS_URL] = {"predictions": tide_payload()["predictions"][:2]}
    await tide_service.refresh(location)

    tides = await repository.get_tides("folly-beach")
    assert [(t.time, t.type) for t in tides] == [("04:12", "High"), ("10:30", "Low")]

async def test_no_predictions_is_empty_not_an_error(tide_service, repository, fake_http, location):
    fake_http.responses[COOPS_URL] = {"error": {"message": "No Predictions data was found. Please make sure..."}}
    result = await tide_service.refresh(location)
    assert result.tides == []
    assert await repository.get_tides("folly-beach") == []

async def test_upstream_error_message(tide_service, fake_http, location):
    fake_http.responses[COOPS_URL] = {"error": {"message": "Station ID is invalid"}}
    with pytest.raises(UpstreamFetchError, match="Station ID is invalid"):
        await tide_service.refresh(location)

def test_parse_predictions():
    events = parse_predictions([{"t": "2026-07-15 04:12", "v": "5.104", "type": "H"}])
    assert events[0].date == TODAY
    assert events[0].time == "04:12"
    assert events[0].type == "High"
    assert events[0].height == pytest.approx(5.104)

def test_malformed_prediction():
    with pytest.raises(ParseError):
        parse_predictions([{"t": "2026-07-15", "v": "x"}])
