from typing import Sequence
import numpy as np

def moving_average(values: Sequence[float], window: int) -> float:
    """Mean of the last `window` samples; 0 for an empty series."""
    if len(values) == 0 or window <= 0:
        return 0.0
    return float(np.mean(np.asarray(values[-window:], dtype=float)))

def trend_slope(values: Sequence[float]) -> float:
    """Least-squares slope of value against index (index centered on (n-1)/2)."""
    n = len(values)
    if n < 2:
        return 0.0
    y = np.asarray(values, dtype=float)
    x = np.arange(n, dtype=float) - (n - 1) / 2
    denominator = float(np.sum(x * x))
    if denominator == 0:
        return 0.0
    return float(np.sum(x * (y - y.mean())) / denominator)

def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation (divides by n); 0 for an empty series."""
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))
