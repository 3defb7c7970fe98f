"""
Brier Score — калибровка вероятностной модели в режиме мониторинга

BS = (1/N) * Σ (probability - outcome)²,  outcome ∈ {0, 1}

Меньше — лучше:
- 0.0  идеальные прогнозы
- 0.25 прогноз 50% для каждого исхода (нет информации)
- 1.0  худший возможный результат

Учитываются только рассчитанные прогнозы (outcome известен). Без рассчитанных
прогнозов score = 0.0 при count = 0; вызывающий проверяет count.

Хранение истории прогнозов вне ядра: функции чистые над переданным списком.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterable, Optional, Tuple

from weather_edge.core.domain.time_model import Instant
from weather_edge.core.math.numerical_safeguards import validate_in_range


# Целевой Brier score за период мониторинга перед переходом к торговле
DEFAULT_TARGET_BRIER_SCORE: Final[float] = 0.1


class BrierRating(str, Enum):
    """Качественная оценка Brier score"""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    VERY_POOR = "Very Poor"


# Верхние границы (строгие) для рейтингов, по возрастанию
_RATING_BOUNDS: Final[Tuple[Tuple[float, BrierRating], ...]] = (
    (0.05, BrierRating.EXCELLENT),
    (0.10, BrierRating.GOOD),
    (0.15, BrierRating.FAIR),
    (0.25, BrierRating.POOR),
)


@dataclass(frozen=True)
class Prediction:
    """
    Прогноз вероятности по рынку и (после расчёта) фактический исход.

    outcome: True — событие произошло, False — нет, None — ещё не рассчитан.
    """

    prediction_id: str
    market_id: str
    probability: float
    timestamp: Instant
    outcome: Optional[bool] = None

    def __post_init__(self) -> None:
        validate_in_range(self.probability, "probability", 0.0, 1.0)

    @property
    def settled(self) -> bool:
        return self.outcome is not None

    def settle(self, outcome: bool) -> "Prediction":
        """
        Фиксация исхода.

        Raises:
            ValueError: Если исход уже зафиксирован
        """
        if self.settled:
            raise ValueError(f"Prediction {self.prediction_id} is already settled")
        return Prediction(
            prediction_id=self.prediction_id,
            market_id=self.market_id,
            probability=self.probability,
            timestamp=self.timestamp,
            outcome=bool(outcome),
        )


@dataclass(frozen=True)
class BrierScoreResult:
    """Brier score и прогнозы, вошедшие в расчёт."""

    score: float
    count: int
    predictions: Tuple[Prediction, ...]

    @property
    def rating(self) -> BrierRating:
        return brier_score_rating(self.score)


def calculate_brier_score(predictions: Iterable[Prediction]) -> BrierScoreResult:
    """
    Brier score по рассчитанным прогнозам.

    Args:
        predictions: Прогнозы (нерассчитанные пропускаются)

    Returns:
        BrierScoreResult; при отсутствии рассчитанных прогнозов score=0.0, count=0
    """
    settled = tuple(p for p in predictions if p.settled)

    if not settled:
        return BrierScoreResult(score=0.0, count=0, predictions=settled)

    total = sum((p.probability - (1.0 if p.outcome else 0.0)) ** 2 for p in settled)
    return BrierScoreResult(score=total / len(settled), count=len(settled), predictions=settled)


def calculate_rolling_brier_score(
    predictions: Iterable[Prediction],
    window_start: Instant,
    window_end: Instant,
) -> BrierScoreResult:
    """Brier score по прогнозам с timestamp в [window_start, window_end] (границы включены)."""
    in_window = [p for p in predictions if window_start <= p.timestamp <= window_end]
    return calculate_brier_score(in_window)


def meets_target_score(score: float, threshold: float = DEFAULT_TARGET_BRIER_SCORE) -> bool:
    """Score строго меньше целевого порога."""
    return score < threshold


def brier_score_rating(score: float) -> BrierRating:
    for bound, rating in _RATING_BOUNDS:
        if score < bound:
            return rating
    return BrierRating.VERY_POOR
