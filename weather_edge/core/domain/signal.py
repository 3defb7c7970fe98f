"""
TradingSignal — торговый сигнал по одному рынку

Immutable Pydantic модель. Создаётся заново на каждую оценку рынка и не имеет
жизненного цикла вне цикла опроса, который её породил. Потребитель —
внешний модуль размещения ордеров (только при неактивном kill-switch).
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from weather_edge.core.domain.stations import StationId
from weather_edge.core.domain.time_model import Instant


# =============================================================================
# ENUMS
# =============================================================================


class SignalAction(str, Enum):
    """Действие по сигналу"""

    BUY = "BUY"
    HOLD = "HOLD"  # Недостижимо при MIN_EV >= 0, оставлено для коротких позиций


class FilterReason(str, Enum):
    """Причина, по которой рынок не дал сигнала"""

    EXPIRED = "expired"
    EV_TOO_LOW = "ev_too_low"
    MISSING_OBSERVATION = "missing_observation"


# =============================================================================
# SIGNAL MODEL
# =============================================================================


class TradingSignal(BaseModel):
    """
    Рекомендация по рынку: действие, цена и размер.

    Immutable модель (frozen=True).
    """

    # Идентификация
    market_id: str = Field(..., min_length=1, description="Идентификатор рынка")
    token_id: str = Field(..., min_length=1, description="Токен YES")
    station_id: StationId = Field(..., description="ICAO-код станции")
    action: SignalAction = Field(..., description="BUY/HOLD")

    # Входы модели
    current_temp: float = Field(..., description="Текущее наблюдение (°C)")
    min_threshold: float = Field(..., description="Нижняя граница (°C), -inf если нет")
    max_threshold: float = Field(..., description="Верхняя граница (°C), +inf если нет")

    # Оценка
    probability: float = Field(..., ge=0, le=1, description="Вероятность модели")
    market_price: float = Field(..., ge=0, le=1, description="Цена рынка")
    ev: float = Field(..., ge=-1, le=1, description="probability - market_price")

    # Рекомендация
    recommended_price: float = Field(..., ge=0, le=1, description="Лимитная цена")
    recommended_size: float = Field(..., ge=0, description="Размер в USDC")

    timestamp: Instant = Field(..., description="Момент оценки")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    def to_contract(self) -> Dict[str, Any]:
        """
        Сериализация в запись контракта "trading_signal".

        Бесконечные пороги сериализуются как null.
        """
        return {
            "market_id": self.market_id,
            "token_id": self.token_id,
            "station_id": self.station_id.value,
            "action": self.action.value,
            "current_temp": self.current_temp,
            "min_threshold": self.min_threshold if math.isfinite(self.min_threshold) else None,
            "max_threshold": self.max_threshold if math.isfinite(self.max_threshold) else None,
            "probability": self.probability,
            "market_price": self.market_price,
            "ev": self.ev,
            "recommended_price": self.recommended_price,
            "recommended_size": self.recommended_size,
            "timestamp_utc_ms": self.timestamp.utc_ms,
            "timestamp": self.timestamp.isoformat(),
        }


# =============================================================================
# BATCH RESULT
# =============================================================================


@dataclass(frozen=True)
class SignalGenerationResult:
    """Результат пакетной оценки рынков."""

    signals: List[TradingSignal]  # по убыванию ev
    filtered_by_ev: int
    filtered_by_expired: int
    filtered_by_missing_observation: int = 0
    failed_validation: List[str] = field(default_factory=list)  # market_id

    @property
    def total_signals(self) -> int:
        return len(self.signals)
