"""
Unit tests для Brier score.

Coverage:
- Расчёт по рассчитанным прогнозам, пропуск нерассчитанных
- Скользящее окно (границы включены)
- Целевой порог и рейтинг
- Валидация прогноза
"""

import math

import pytest

from weather_edge.core.domain.time_model import Duration, Instant
from weather_edge.core.math.brier import (
    DEFAULT_TARGET_BRIER_SCORE,
    BrierRating,
    Prediction,
    brier_score_rating,
    calculate_brier_score,
    calculate_rolling_brier_score,
    meets_target_score,
)


NOW = Instant.from_utc_ms(1_705_320_000_000)
HOUR_MS = Duration.from_hours(1).milliseconds


def prediction(probability, outcome=None, hours_ago=0, prediction_id="p1"):
    return Prediction(
        prediction_id=prediction_id,
        market_id="m1",
        probability=probability,
        timestamp=Instant.from_utc_ms(NOW.utc_ms - hours_ago * HOUR_MS),
        outcome=outcome,
    )


# =============================================================================
# BRIER SCORE
# =============================================================================


class TestCalculateBrierScore:
    """Тесты calculate_brier_score."""

    def test_perfect_predictions(self):
        result = calculate_brier_score([prediction(1.0, True), prediction(0.0, False)])

        assert result.score == 0.0
        assert result.count == 2

    def test_coin_flip(self):
        result = calculate_brier_score([prediction(0.5, True), prediction(0.5, False)])

        assert result.score == pytest.approx(0.25)

    def test_worst_predictions(self):
        result = calculate_brier_score([prediction(0.0, True), prediction(1.0, False)])

        assert result.score == pytest.approx(1.0)

    def test_mixed(self):
        # (0.8-1)² + (0.3-0)² + (0.6-0)² = 0.04 + 0.09 + 0.36
        result = calculate_brier_score(
            [prediction(0.8, True), prediction(0.3, False), prediction(0.6, False)]
        )

        assert result.score == pytest.approx(0.49 / 3)
        assert result.count == 3

    def test_unsettled_skipped(self):
        result = calculate_brier_score([prediction(0.9, True), prediction(0.1, None)])

        assert result.count == 1
        assert result.score == pytest.approx(0.01)
        assert all(p.settled for p in result.predictions)

    def test_no_settled_predictions(self):
        result = calculate_brier_score([prediction(0.7)])

        assert result.score == 0.0
        assert result.count == 0
        assert result.predictions == ()

    def test_accepts_generator(self):
        result = calculate_brier_score(prediction(0.5, True) for _ in range(3))

        assert result.count == 3


# =============================================================================
# СКОЛЬЗЯЩЕЕ ОКНО
# =============================================================================


class TestRollingBrierScore:
    """Тесты calculate_rolling_brier_score."""

    def test_window_bounds_inclusive(self):
        start = Instant.from_utc_ms(NOW.utc_ms - 72 * HOUR_MS)
        predictions = [
            prediction(0.9, True, hours_ago=0),
            prediction(0.9, True, hours_ago=72),
            prediction(0.0, True, hours_ago=73),
        ]

        result = calculate_rolling_brier_score(predictions, start, NOW)

        assert result.count == 2
        assert result.score == pytest.approx(0.01)

    def test_future_predictions_excluded(self):
        start = Instant.from_utc_ms(NOW.utc_ms - 24 * HOUR_MS)
        predictions = [prediction(0.9, True), prediction(0.0, True, hours_ago=-1)]

        assert calculate_rolling_brier_score(predictions, start, NOW).count == 1


# =============================================================================
# ЦЕЛЬ И РЕЙТИНГ
# =============================================================================


def test_meets_target_score_strict():
    assert meets_target_score(0.099)
    assert not meets_target_score(DEFAULT_TARGET_BRIER_SCORE)
    assert meets_target_score(0.15, threshold=0.2)


@pytest.mark.parametrize("score,rating", [
    (0.0, BrierRating.EXCELLENT),
    (0.049, BrierRating.EXCELLENT),
    (0.05, BrierRating.GOOD),
    (0.10, BrierRating.FAIR),
    (0.15, BrierRating.POOR),
    (0.25, BrierRating.VERY_POOR),
    (1.0, BrierRating.VERY_POOR),
])
def test_brier_score_rating(score, rating):
    assert brier_score_rating(score) == rating


def test_result_rating():
    result = calculate_brier_score([prediction(0.6, True)])

    assert result.score == pytest.approx(0.16)
    assert result.rating == BrierRating.POOR
    assert result.rating.value == "Poor"


# =============================================================================
# PREDICTION
# =============================================================================


class TestPrediction:
    """Тесты модели Prediction."""

    @pytest.mark.parametrize("probability", [-0.01, 1.01, math.nan])
    def test_invalid_probability(self, probability):
        with pytest.raises(ValueError, match="probability"):
            prediction(probability)

    def test_settle(self):
        open_prediction = prediction(0.7)
        settled = open_prediction.settle(True)

        assert settled.outcome is True
        assert settled.settled
        assert not open_prediction.settled

    def test_settle_twice_rejected(self):
        with pytest.raises(ValueError, match="already settled"):
            prediction(0.7).settle(False).settle(True)
