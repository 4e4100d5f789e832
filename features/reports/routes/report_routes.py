from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from features.reports.models.report_types import SurfReport, ReportOverride
from features.reports.services.report_service import ReportService
from features.weather.models.weather_types import ForecastDay
from features.common.models.location_types import SurfLocation
from features.common.services.location_service import LocationService
from features.common.exceptions.pipeline_exceptions import InvalidLocationError, ReportNotFoundError
from repositories.surf_repository import SurfRepository

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
    responses={
        404: {"description": "Location or report not found"}
    }
)

def get_report_service(request: Request) -> ReportService:
    """Get ReportService instance from app state."""
    return request.app.state.report_service

def get_repository(request: Request) -> SurfRepository:
    return request.app.state.repository

def get_location(location_id: str, request: Request) -> SurfLocation:
    locations: LocationService = request.app.state.location_service
    try:
        return locations.get_location(location_id)
    except InvalidLocationError as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.get(
    "/{location_id}/today",
    response_model=SurfReport,
    summary="Get today's report",
    description="Returns today's report; a manual override takes precedence over the generated narrative"
)
async def get_today_report(
    location: SurfLocation = Depends(get_location),
    service: ReportService = Depends(get_report_service)
) -> SurfReport:
    try:
        return await service.get_report(location)
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.get(
    "/{location_id}/forecast",
    response_model=List[ForecastDay],
    summary="Get the daily forecast",
    description="Returns the stored daily forecast rows ordered by date"
)
async def get_forecast(
    location: SurfLocation = Depends(get_location),
    repository: SurfRepository = Depends(get_repository)
) -> List[ForecastDay]:
    return await repository.get_forecast(location.location_id)

@router.put(
    "/{location_id}/{date}/override",
    response_model=SurfReport,
    summary="Set a manual report override"
)
async def set_override(
    date: str,
    override: ReportOverride,
    location: SurfLocation = Depends(get_location),
    service: ReportService = Depends(get_report_service)
) -> SurfReport:
    try:
        report = await service.set_override(location, date, override.report_text, override.edited_by)
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return report

@router.delete(
    "/{location_id}/{date}/override",
    response_model=SurfReport,
    summary="Clear a manual report override"
)
async def clear_override(
    date: str,
    location: SurfLocation = Depends(get_location),
    service: ReportService = Depends(get_report_service)
) -> SurfReport:
    try:
        report = await service.clear_override(location, date)
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return report
