from typing import Optional
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from features.pipeline.models.pipeline_types import Stage, StageResult
from features.pipeline.services.pipeline_service import PipelineService
from features.reports.services.report_service import ReportService
from features.reports.services.cleanup_service import CleanupService
from features.common.models.location_types import LocationRequest
from features.common.utils.responses import success_response, error_response, handle_function

router = APIRouter(
    prefix="/functions",
    tags=["Pipeline"],
    responses={
        500: {"description": "Unexpected server error"}
    }
)

def get_pipeline_service(request: Request) -> PipelineService:
    """Get PipelineService instance from app state."""
    return request.app.state.pipeline_service

def get_report_service(request: Request) -> ReportService:
    return request.app.state.report_service

def get_cleanup_service(request: Request) -> CleanupService:
    return request.app.state.cleanup_service

def _location_id(body: Optional[LocationRequest]) -> Optional[str]:
    return body.location if body else None

def _stage_response(result: StageResult, message: str) -> JSONResponse:
    if not result.ok:
        return error_response(result.error or "Stage failed")
    return success_response(message, data=result.data)

async def _run_stage(pipeline: PipelineService, stage: Stage, body: Optional[LocationRequest], message: str):
    async def call():
        result = await pipeline.run_single(stage, _location_id(body))
        return _stage_response(result, message)
    return await handle_function(stage.key, call)

@router.post(
    "/fetch-surf-reports",
    summary="Fetch latest buoy observation",
    description="Fetches and parses the latest NDBC reading and stores today's surf conditions"
)
async def fetch_surf_reports(
    body: Optional[LocationRequest] = None,
    pipeline: PipelineService = Depends(get_pipeline_service)
) -> JSONResponse:
    return await _run_stage(pipeline, Stage.FETCH_SURF, body, "Surf data updated successfully")

@router.post(
    "/fetch-tide-data",
    summary="Fetch tide predictions",
    description="Replaces the stored hi/lo tide predictions for the next 7 days"
)
async def fetch_tide_data(
    body: Optional[LocationRequest] = None,
    pipeline: PipelineService = Depends(get_pipeline_service)
) -> JSONResponse:
    return await _run_stage(pipeline, Stage.FETCH_TIDE, body, "Tide data updated successfully")

@router.post(
    "/analyze-surf-trends",
    summary="Predict surf for the coming week",
    description="Analyzes the trailing 30 days of observations and stores 1-7 day predictions"
)
async def analyze_surf_trends(
    body: Optional[LocationRequest] = None,
    pipeline: PipelineService = Depends(get_pipeline_service)
) -> JSONResponse:
    return await _run_stage(pipeline, Stage.ANALYZE_TRENDS, body, "Surf trends analyzed successfully")

@router.post(
    "/fetch-weather-data",
    summary="Fetch weather and build forecast",
    description="Stores current NWS weather and the merged 7-day forecast"
)
async def fetch_weather_data(
    body: Optional[LocationRequest] = None,
    pipeline: PipelineService = Depends(get_pipeline_service)
) -> JSONResponse:
    return await _run_stage(
        pipeline, Stage.FETCH_WEATHER_AND_FORECAST, body, "Weather data updated successfully"
    )

@router.post(
    "/generate-daily-report",
    summary="Generate today's report",
    description="Builds today's report with rating and narrative, replacing any existing one"
)
async def generate_daily_report(
    body: Optional[LocationRequest] = None,
    pipeline: PipelineService = Depends(get_pipeline_service)
) -> JSONResponse:
    return await _run_stage(pipeline, Stage.GENERATE_REPORT, body, "Surf report generated successfully")

@router.post(
    "/generate-first-daily-report",
    summary="Generate today's first report",
    description="Generates today's report unless one with a narrative already exists"
)
async def generate_first_daily_report(
    body: Optional[LocationRequest] = None,
    pipeline: PipelineService = Depends(get_pipeline_service),
    reports: ReportService = Depends(get_report_service)
) -> JSONResponse:
    async def call():
        location = pipeline.locations.get_location(_location_id(body))
        report = await reports.generate_first_daily_report(location)
        if report is None:
            return success_response("Report already exists for today", skipped=True)
        return success_response(
            "First daily report generated successfully",
            data=report.model_dump(mode="json"),
            skipped=False
        )
    return await handle_function("generate-first-daily-report", call)

@router.post(
    "/update-buoy-data-only",
    summary="Refresh buoy fields of today's report",
    description="Updates wave, wind and water fields and the rating; the narrative is never touched"
)
async def update_buoy_data_only(
    body: Optional[LocationRequest] = None,
    pipeline: PipelineService = Depends(get_pipeline_service),
    reports: ReportService = Depends(get_report_service)
) -> JSONResponse:
    async def call():
        location = pipeline.locations.get_location(_location_id(body))
        report = await reports.refresh_buoy_fields(location)
        return success_response(
            "Buoy data updated successfully (narrative preserved)",
            data=report.model_dump(mode="json")
        )
    return await handle_function("update-buoy-data-only", call)

@router.post(
    "/update-buoy-data-15min",
    summary="Intraday refresh for all locations",
    description="Fetches fresh buoy data and refreshes today's report for every location"
)
async def update_buoy_data_15min(
    pipeline: PipelineService = Depends(get_pipeline_service)
) -> JSONResponse:
    async def call():
        result = await pipeline.run_intraday_all()
        return JSONResponse(status_code=200, content=result.model_dump(mode="json"))
    return await handle_function("update-buoy-data-15min", call)

@router.post(
    "/update-all-surf-data",
    summary="Run the full pipeline",
    description="Surf, tide, trends, weather and report for one location; 207 on partial failure"
)
async def update_all_surf_data(
    body: Optional[LocationRequest] = None,
    pipeline: PipelineService = Depends(get_pipeline_service)
) -> JSONResponse:
    async def call():
        result = await pipeline.run_full(_location_id(body))
        return JSONResponse(status_code=result.status_code, content=result.model_dump(mode="json"))
    return await handle_function("update-all-surf-data", call)

@router.post(
    "/daily-update-cron",
    summary="Daily update for all locations",
    description="Runs the full pipeline for every location within the aggregate timeout"
)
async def daily_update_cron(
    pipeline: PipelineService = Depends(get_pipeline_service)
) -> JSONResponse:
    async def call():
        result = await pipeline.run_all_locations()
        return JSONResponse(status_code=200, content=result.model_dump(mode="json"))
    return await handle_function("daily-update-cron", call)

@router.post(
    "/daily-5am-report-with-retry",
    summary="Morning report with retries",
    description="Refreshes inputs then retries first-report generation until it succeeds"
)
async def daily_5am_report_with_retry(
    body: Optional[LocationRequest] = None,
    pipeline: PipelineService = Depends(get_pipeline_service)
) -> JSONResponse:
    async def call():
        outcome = await pipeline.run_first_report_with_retry(_location_id(body))
        message = (
            "Report already exists for today"
            if outcome["skipped"]
            else f"Report generated after {outcome['attempts']} attempt(s)"
        )
        return success_response(message, data=outcome)
    return await handle_function("daily-5am-report-with-retry", call)

@router.post(
    "/cleanup-old-reports",
    summary="Delete expired rows",
    description="Removes history older than the retention window and forecasts before today"
)
async def cleanup_old_reports(
    cleanup: CleanupService = Depends(get_cleanup_service)
) -> JSONResponse:
    async def call():
        result = await cleanup.cleanup()
        return success_response(
            f"Cleaned up {result['total_deleted']} old records",
            data=result,
            totalDeleted=result["total_deleted"]
        )
    return await handle_function("cleanup-old-reports", call)
