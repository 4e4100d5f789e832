from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime

from core.config import settings
from core.logging_config import setup_logging
from core.scheduler import Scheduler

# Feature routes
from features.pipeline.routes.pipeline_routes import router as pipeline_router
from features.reports.routes.report_routes import router as report_router

# Services and clients
from features.common.services.http_client import HttpClient
from features.common.services.location_service import LocationService
from features.surf.services.ndbc_buoy_client import NDBCBuoyClient
from features.surf.services.surf_conditions_service import SurfConditionsService
from features.tides.services.tide_service import TideService
from features.trends.services.surf_predictor import SurfHeightPredictor
from features.trends.services.trend_service import TrendAnalysisService
from features.weather.services.nws_client import NWSWeatherClient
from features.weather.services.forecast_service import WeatherForecastService
from features.rating.services.rating_strategies import get_rating_strategy
from features.reports.services.report_service import ReportService
from features.reports.services.cleanup_service import CleanupService
from features.pipeline.services.pipeline_service import PipelineService
from repositories.surf_repository import SurfRepository

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    http = HttpClient()
    scheduler = None
    try:
        logger.info("🚀 Starting Surf Report API...")

        repository = SurfRepository()
        location_service = LocationService()

        surf_service = SurfConditionsService(NDBCBuoyClient(http), repository)
        tide_service = TideService(http, repository)
        trend_service = TrendAnalysisService(repository, SurfHeightPredictor())
        weather_service = WeatherForecastService(NWSWeatherClient(http), repository)
        report_service = ReportService(
            repository,
            generation_strategy=get_rating_strategy(settings.report_rating_strategy),
            refresh_strategy=get_rating_strategy(settings.refresh_rating_strategy)
        )
        cleanup_service = CleanupService(repository)
        pipeline_service = PipelineService(
            location_service,
            surf_service,
            tide_service,
            trend_service,
            weather_service,
            report_service
        )

        # Store services in app state
        app.state.http_client = http
        app.state.repository = repository
        app.state.location_service = location_service
        app.state.report_service = report_service
        app.state.cleanup_service = cleanup_service
        app.state.pipeline_service = pipeline_service

        if settings.scheduler_enabled:
            scheduler = Scheduler(pipeline_service, cleanup_service)
            scheduler.start()
            logger.info(f"📅 Next daily report: {scheduler.get_next_run_time('daily_report')}")
        app.state.scheduler = scheduler

        logger.info("✨ API startup complete - ready to serve requests")
        yield

    except Exception as e:
        logger.error(f"❌ Startup error: {str(e)}")
        raise
    finally:
        logger.info("🔄 Shutting down API...")
        if scheduler:
            scheduler.shutdown()
        await http.close()
        logger.info("👋 API shutdown complete")

app = FastAPI(
    title="Surf Report API",
    description="Buoy, tide and weather pipeline producing daily surf reports",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include feature routers
app.include_router(pipeline_router)
app.include_router(report_router)

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "time": datetime.now().isoformat()
    }

if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 5010))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level="info",
        workers=1
    )
