"""
Mention-count forecasting.

Fits a least-squares line through a daily mention-count series and projects
it forward. Used by the dashboard read path; no seasonality is modelled.
"""

import logging
from typing import List

import numpy as np

from trend_monitor.types import DataPoint, TrendDirection, TrendPrediction, clamp_unit

logger = logging.getLogger(__name__)

MIN_POINTS = 3
SLOPE_THRESHOLD = 0.1


def predict_trend(history: List[DataPoint], weeks_ahead: int = 4) -> TrendPrediction:
    """
    Forecast a mention-count series with a linear fit.

    Args:
        history: Observations in chronological order, one per day
        weeks_ahead: Number of weeks to forecast

    Returns:
        Daily forecast for ``weeks_ahead * 7`` days, fit confidence and
        trend direction. Series shorter than three points give an empty
        stable forecast with confidence 0.
    """
    timeframe = f"{weeks_ahead} weeks"

    if len(history) < MIN_POINTS:
        return TrendPrediction(timeframe=timeframe)

    y = np.array([point.value for point in history], dtype=float)
    x = np.arange(len(y), dtype=float)

    slope, intercept = np.polyfit(x, y, 1)

    future_x = np.arange(len(y), len(y) + weeks_ahead * 7, dtype=float)
    forecast = [int(round(max(0.0, v))) for v in slope * future_x + intercept]

    fitted = slope * x + intercept
    mean_error = float(np.mean(np.abs(y - fitted)))
    mean_value = float(np.mean(y))
    if mean_value > 0:
        confidence = clamp_unit(1 - mean_error / mean_value)
    else:
        confidence = 1.0 if mean_error == 0 else 0.0

    if slope > SLOPE_THRESHOLD:
        trend = TrendDirection.INCREASING
    elif slope < -SLOPE_THRESHOLD:
        trend = TrendDirection.DECREASING
    else:
        trend = TrendDirection.STABLE

    logger.debug(f"Forecast slope={slope:.3f} confidence={confidence:.2f}")

    return TrendPrediction(
        forecast=forecast,
        confidence=round(confidence, 4),
        timeframe=timeframe,
        trend=trend,
    )
