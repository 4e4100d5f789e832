import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from features.pipeline.routes.pipeline_routes import router as pipeline_router
from features.reports.routes.report_routes import router as report_router
from features.common.exceptions.pipeline_exceptions import UpstreamFetchError
from conftest import NDBC_URL, TODAY

@pytest.fixture
def client(pipeline, report_service, cleanup_service, repository, location_service):
    app = FastAPI()
    app.include_router(pipeline_router)
    app.include_router(report_router)
    app.state.pipeline_service = pipeline
    app.state.report_service = report_service
    app.state.cleanup_service = cleanup_service
    app.state.repository = repository
    app.state.location_service = location_service
    with TestClient(app) as test_client:
        yield test_client

def test_full_update_then_read_report(client):
    response = client.post("/functions/update-all-surf-data", json={"location": "folly-beach"})
    assert response.status_code == 200
    assert response.json()["success"] is True

    report = client.get("/reports/folly-beach/today")
    assert report.status_code == 200
    body = report.json()
    assert body["date"] == TODAY
    assert body["display_text"] == body["conditions"]

    forecast = client.get("/reports/folly-beach/forecast")
    assert forecast.status_code == 200
    assert forecast.json()[0]["prediction_source"] == "actual"

def test_partial_update_is_207(client, fake_http):
    fake_http.responses[NDBC_URL] = UpstreamFetchError("NDBC 41004", "HTTP 503", status=503)
    response = client.post("/functions/update-all-surf-data")
    assert response.status_code == 207
    body = response.json()
    assert body["success"] is False
    assert body["results"]["generate_report"]["status"] == "skipped"

def test_single_stage_without_body(client):
    response = client.post("/functions/fetch-surf-reports")
    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"]["surf_height"] == "2.5-3.0 ft"
    assert "timestamp" in body

def test_invalid_location(client):
    response = client.post("/functions/fetch-tide-data", json={"location": "nowhere"})
    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "error": "Invalid location: nowhere",
        "timestamp": response.json()["timestamp"]
    }

def test_update_buoy_data_only_requires_report(client):
    client.post("/functions/fetch-surf-reports")
    response = client.post("/functions/update-buoy-data-only")
    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["error"] == "No existing report found for today"

def test_daily_cron_always_200(client, fake_http):
    fake_http.responses[NDBC_URL] = UpstreamFetchError("NDBC 41004", "HTTP 503", status=503)
    response = client.post("/functions/daily-update-cron")
    assert response.status_code == 200
    assert response.json()["success"] is False

def test_override_round_trip(client):
    client.post("/functions/update-all-surf-data")

    edited = client.put(
        f"/reports/folly-beach/{TODAY}/override",
        json={"report_text": "Fun peaks at the washout.", "edited_by": "editor"}
    )
    assert edited.status_code == 200
    assert edited.json()["display_text"] == "Fun peaks at the washout."

    cleared = client.delete(f"/reports/folly-beach/{TODAY}/override")
    assert cleared.json()["display_text"] == cleared.json()["conditions"]

def test_unknown_location_report_is_404(client):
    assert client.get("/reports/nowhere/today").status_code == 404
    assert client.get("/reports/folly-beach/today").status_code == 404

def test_cleanup(client):
    response = client.post("/functions/cleanup-old-reports")
    body = response.json()
    assert body["success"] is True
    assert body["totalDeleted"] == 0
