from datetime import datetime
from typing import Optional
from pydantic import BaseModel

class PredictionFactors(BaseModel):
    """Every intermediate term of a prediction, kept for auditability."""
    trend: float
    moving_avg_3_day: float
    moving_avg_7_day: float
    volatility: float
    current_wave_height: float  # feet
    current_period: float  # seconds
    avg_wave_height: float  # feet
    avg_period: float  # seconds
    trend_term: float
    mean_reversion_term: float
    ma_convergence_term: float
    seasonal_factor: float
    period_factor: float
    uncertainty: float
    predicted_wave_height: float  # feet, before the surf conversion

class SurfPrediction(BaseModel):
    """Forecast for one future date, unique per (location, date)."""
    date: str
    location: str
    days_ahead: int
    predicted_wave_min_ft: float
    predicted_wave_max_ft: float
    predicted_surf_min: float
    predicted_surf_max: float
    display: str
    confidence: float
    factors: PredictionFactors
    created_at: Optional[datetime] = None

class TrendStatistics(BaseModel):
    historical_avg: float
    historical_count: int
    predictions_generated: int
    avg_confidence: float
