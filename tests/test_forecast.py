"""
Unit tests for mention-count forecasting.
"""

import pytest

from tests.fixtures import create_series
from trend_monitor.processing.forecast import predict_trend
from trend_monitor.types import TrendDirection


def test_perfect_increasing_line():
    prediction = predict_trend(create_series([1, 2, 3, 4, 5]), weeks_ahead=1)

    assert prediction.trend == TrendDirection.INCREASING
    assert prediction.confidence == pytest.approx(1.0)
    assert prediction.forecast == [6, 7, 8, 9, 10, 11, 12]
    assert prediction.timeframe == "1 weeks"


def test_decreasing_line_is_clamped_at_zero():
    prediction = predict_trend(create_series([10, 8, 6, 4]), weeks_ahead=1)

    assert prediction.trend == TrendDirection.DECREASING
    assert prediction.forecast[:3] == [2, 0, 0]
    assert all(v >= 0 for v in prediction.forecast)


def test_flat_series_is_stable():
    prediction = predict_trend(create_series([5, 5, 5, 5]), weeks_ahead=2)

    assert prediction.trend == TrendDirection.STABLE
    assert len(prediction.forecast) == 14
    assert prediction.confidence == pytest.approx(1.0)


def test_noisy_series_has_lower_confidence():
    prediction = predict_trend(create_series([2, 9, 1, 8, 3, 10]))

    assert 0 <= prediction.confidence < 1


@pytest.mark.parametrize("values", [[], [4], [4, 5]])
def test_too_few_points(values):
    prediction = predict_trend(create_series(values), weeks_ahead=4)

    assert prediction.forecast == []
    assert prediction.confidence == 0
    assert prediction.trend == TrendDirection.STABLE
    assert prediction.timeframe == "4 weeks"


def test_all_zero_series():
    prediction = predict_trend(create_series([0, 0, 0]), weeks_ahead=1)

    assert prediction.forecast == [0] * 7
    assert prediction.trend == TrendDirection.STABLE
