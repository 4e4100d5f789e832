import logging
from typing import List, Tuple

from features.trends.models.trend_types import SurfPrediction, TrendStatistics
from features.trends.services.surf_predictor import SurfHeightPredictor, HistoricalSeries
from features.common.models.location_types import SurfLocation
from features.common.utils.dates import est_date, to_local, Clock, utc_now
from repositories.surf_repository import SurfRepository
from core.config import settings

logger = logging.getLogger(__name__)

class TrendAnalysisService:
    """Builds 1..N day surf predictions from the trailing observation history."""

    def __init__(
        self,
        repository: SurfRepository,
        predictor: SurfHeightPredictor,
        clock: Clock = utc_now
    ):
        self.repository = repository
        self.predictor = predictor
        self._clock = clock
        self.history_days = settings.history_days
        self.prediction_days = settings.prediction_days

    async def analyze(self, location: SurfLocation) -> Tuple[List[SurfPrediction], TrendStatistics]:
        now = self._clock()
        today = est_date(now)
        since = est_date(now, days_offset=-self.history_days)

        history = await self.repository.get_surf_history(location.location_id, since)
        current = await self.repository.get_surf_conditions(location.location_id, today)
        series = HistoricalSeries.from_conditions(history)
        logger.info(
            f"🔄 {location.name}: analyzing {len(series.heights)} historical heights since {since}"
        )

        predictions = []
        for days_ahead in range(1, self.prediction_days + 1):
            forecast = self.predictor.predict(
                series,
                current.wave_height_ft if current else None,
                current.period_s if current else None,
                days_ahead,
                to_local(now).date()
            )
            predictions.append(SurfPrediction(
                date=est_date(now, days_offset=days_ahead),
                location=location.location_id,
                days_ahead=days_ahead,
                predicted_wave_min_ft=round(forecast.wave_min_ft, 2),
                predicted_wave_max_ft=round(forecast.wave_max_ft, 2),
                predicted_surf_min=forecast.surf_min_ft,
                predicted_surf_max=forecast.surf_max_ft,
                display=forecast.display,
                confidence=forecast.confidence,
                factors=forecast.factors
            ))

        stored = await self.repository.upsert_predictions(predictions)

        heights = series.heights
        statistics = TrendStatistics(
            historical_avg=round(sum(heights) / len(heights), 2) if heights else 0.0,
            historical_count=len(history),
            predictions_generated=len(stored),
            avg_confidence=round(sum(p.confidence for p in stored) / len(stored), 2) if stored else 0.0
        )
        logger.info(
            f"✅ {location.name}: stored {statistics.predictions_generated} predictions "
            f"(avg confidence {statistics.avg_confidence})"
        )
        return stored, statistics
