import asyncio
import json
import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent.parent))

from core.config import settings
from core.logging_config import setup_logging
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
from features.pipeline.services.pipeline_service import PipelineService
from repositories.surf_repository import SurfRepository

async def main():
    """Run the full pipeline once against live sources and print the report."""
    setup_logging()
    location_id = sys.argv[1] if len(sys.argv) > 1 else None

    http = HttpClient()
    repository = SurfRepository()
    pipeline = PipelineService(
        LocationService(),
        SurfConditionsService(NDBCBuoyClient(http), repository),
        TideService(http, repository),
        TrendAnalysisService(repository, SurfHeightPredictor()),
        WeatherForecastService(NWSWeatherClient(http), repository),
        ReportService(
            repository,
            generation_strategy=get_rating_strategy(settings.report_rating_strategy),
            refresh_strategy=get_rating_strategy(settings.refresh_rating_strategy)
        )
    )

    try:
        result = await pipeline.run_full(location_id)
        print(json.dumps({"success": result.success, "errors": result.errors}, indent=2))

        report = result.results["generate_report"]
        if report.ok:
            print(f"\nRating: {report.data['rating']}/10\n")
            print(report.data["display_text"])
    finally:
        await http.close()

if __name__ == "__main__":
    asyncio.run(main())
