import logging
from typing import List, Dict, Any

from features.tides.models.tide_types import TideEvent, TideRefreshResult
from features.common.models.location_types import SurfLocation
from features.common.services.http_client import HttpClient
from features.common.exceptions.pipeline_exceptions import ParseError, UpstreamFetchError
from features.common.utils.dates import est_date, Clock, utc_now
from repositories.surf_repository import SurfRepository
from core.config import settings

logger = logging.getLogger(__name__)

TIDE_TYPES = {"H": "High", "L": "Low"}

def parse_predictions(predictions: List[Dict[str, Any]]) -> List[TideEvent]:
    """Convert CO-OPS hi/lo predictions ({t, type, v}) into tide events."""
    events = []
    for prediction in predictions:
        try:
            day, clock_time = prediction["t"].split(" ")
            events.append(TideEvent(
                date=day,
                time=clock_time,
                type=TIDE_TYPES.get(prediction.get("type", ""), "Low"),
                height=float(prediction["v"])
            ))
        except (KeyError, ValueError, AttributeError) as e:
            raise ParseError(f"Malformed tide prediction {prediction}: {str(e)}")
    return events

class TideService:
    """Service for NOAA CO-OPS hi/lo tide predictions."""

    def __init__(
        self,
        http: HttpClient,
        repository: SurfRepository,
        clock: Clock = utc_now
    ) -> None:
        self.http = http
        self.repository = repository
        self.data_url = settings.coops_base_url
        self._clock = clock

    async def _get_predictions(self, station_id: str, begin_date: str, end_date: str) -> List[Dict[str, Any]]:
        params = {
            **settings.coops_params,
            "begin_date": begin_date.replace("-", ""),
            "end_date": end_date.replace("-", ""),
            "station": station_id
        }
        data = await self.http.get_json(self.data_url, source=f"CO-OPS {station_id}", params=params)

        if "error" in data:
            message = data["error"].get("message", "Unknown error from NOAA API")
            if "No Predictions data was found" in message:
                return []
            raise UpstreamFetchError(f"CO-OPS {station_id}", message)

        return data.get("predictions", [])

    async def refresh(self, location: SurfLocation) -> TideRefreshResult:
        """Fetch the next week of tides and replace the stored set wholesale."""
        now = self._clock()
        begin_date = est_date(now)
        end_date = est_date(now, days_offset=settings.tide_days - 1)

        predictions = await self._get_predictions(location.tide_station_id, begin_date, end_date)
        events = parse_predictions(predictions)

        stored = await self.repository.replace_tides(location.location_id, events)
        if stored == 0:
            logger.warning(f"⚠️ {location.name}: no tide predictions for {begin_date}..{end_date}")
        else:
            logger.info(f"✅ {location.name}: replaced tide data with {stored} events")

        return TideRefreshResult(
            location=location.location_id,
            station_id=location.tide_station_id,
            begin_date=begin_date,
            end_date=end_date,
            tides=events
        )
