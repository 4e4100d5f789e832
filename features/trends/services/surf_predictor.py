import logging
from datetime import date
from typing import List, Optional, Sequence
import pandas as pd
from pydantic import BaseModel

from features.trends.models.trend_types import PredictionFactors
from features.trends.utils.statistics import moving_average, trend_slope, standard_deviation
from features.surf.models.surf_types import SurfConditions
from features.surf.services.surf_height import estimate_from_feet, format_surf_range, FORECAST_CAP

logger = logging.getLogger(__name__)

DEFAULT_WAVE_HEIGHT = 2.0  # feet, used when there is no usable history
DEFAULT_PERIOD = 8.0  # seconds

TREND_WINDOW = 7
TREND_WEIGHT = 0.3
MEAN_REVERSION_WEIGHT = 0.2
MA_CONVERGENCE_WEIGHT = 0.25
SEASONAL_WEIGHT = 0.15
PERIOD_WEIGHT = 0.1
MAX_UNCERTAINTY = 2.0
MIN_WAVE_HEIGHT = 0.5

SWELL_SEASON_MONTHS = range(5, 10)  # May through September
SWELL_SEASON_FACTOR = 1.1
OFF_SEASON_FACTOR = 0.9

MIN_CONFIDENCE = 0.3
MAX_CONFIDENCE = 0.95

class HistoricalSeries(BaseModel):
    """Positive wave heights (ft) and periods (s), oldest first."""
    heights: List[float] = []
    periods: List[float] = []

    @classmethod
    def from_conditions(cls, rows: Sequence[SurfConditions]) -> 'HistoricalSeries':
        if not rows:
            return cls()
        frame = pd.DataFrame(
            [{"date": r.date, "height": r.wave_height_ft, "period": r.period_s} for r in rows]
        ).sort_values("date")
        heights = pd.to_numeric(frame["height"], errors="coerce")
        periods = pd.to_numeric(frame["period"], errors="coerce")
        return cls(
            heights=heights[heights > 0].tolist(),
            periods=periods[periods > 0].tolist()
        )

class SurfHeightForecast(BaseModel):
    wave_min_ft: float
    wave_max_ft: float
    surf_min_ft: float
    surf_max_ft: float
    display: str
    confidence: float
    factors: PredictionFactors

def seasonal_factor(month: int) -> float:
    return SWELL_SEASON_FACTOR if month in SWELL_SEASON_MONTHS else OFF_SEASON_FACTOR

def prediction_confidence(days_ahead: int, volatility: float) -> float:
    confidence = 0.9 - days_ahead * 0.08 - volatility * 0.1
    return round(max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, confidence)), 2)

class SurfHeightPredictor:
    """Weighted trend / mean-reversion / seasonal blend, not a physical model."""

    def predict(
        self,
        series: HistoricalSeries,
        current_height_ft: Optional[float],
        current_period_s: Optional[float],
        days_ahead: int,
        reference_date: date
    ) -> SurfHeightForecast:
        heights = series.heights
        periods = series.periods

        avg_height = sum(heights) / len(heights) if heights else DEFAULT_WAVE_HEIGHT
        avg_period = sum(periods) / len(periods) if periods else DEFAULT_PERIOD

        recent = heights[-TREND_WINDOW:]
        trend = trend_slope(recent)
        ma3 = moving_average(heights, 3)
        ma7 = moving_average(heights, 7)
        volatility = standard_deviation(recent)

        current_height = current_height_ft if current_height_ft and current_height_ft > 0 else avg_height
        current_period = current_period_s if current_period_s and current_period_s > 0 else avg_period

        trend_term = trend * days_ahead * TREND_WEIGHT
        mean_reversion_term = (avg_height - current_height) * MEAN_REVERSION_WEIGHT * (days_ahead / 7)
        ma_convergence_term = (ma3 - ma7) * MA_CONVERGENCE_WEIGHT
        predicted = current_height + trend_term + mean_reversion_term + ma_convergence_term

        season = seasonal_factor(reference_date.month)
        predicted *= 1 + (season - 1) * SEASONAL_WEIGHT

        period_factor = current_period / avg_period if avg_period else 1.0
        predicted *= 1 + (period_factor - 1) * PERIOD_WEIGHT

        uncertainty = min(volatility * (1 + days_ahead * 0.2), MAX_UNCERTAINTY)
        wave_min = max(MIN_WAVE_HEIGHT, predicted - uncertainty)
        wave_max = max(wave_min, predicted + uncertainty)

        low = estimate_from_feet(wave_min, current_period, FORECAST_CAP)
        high = estimate_from_feet(wave_max, current_period, FORECAST_CAP)
        surf_min = low.min_feet
        surf_max = max(high.max_feet, surf_min)

        factors = PredictionFactors(
            trend=trend,
            moving_avg_3_day=ma3,
            moving_avg_7_day=ma7,
            volatility=volatility,
            current_wave_height=current_height,
            current_period=current_period,
            avg_wave_height=avg_height,
            avg_period=avg_period,
            trend_term=trend_term,
            mean_reversion_term=mean_reversion_term,
            ma_convergence_term=ma_convergence_term,
            seasonal_factor=season,
            period_factor=period_factor,
            uncertainty=uncertainty,
            predicted_wave_height=predicted
        )
        confidence = prediction_confidence(days_ahead, volatility)

        logger.info(
            f"Prediction +{days_ahead}d: surf {surf_min}-{surf_max} ft "
            f"(confidence {confidence:.2f}) factors={factors.model_dump()}"
        )

        return SurfHeightForecast(
            wave_min_ft=wave_min,
            wave_max_ft=wave_max,
            surf_min_ft=surf_min,
            surf_max_ft=surf_max,
            display=format_surf_range(surf_min, surf_max),
            confidence=confidence,
            factors=factors
        )
