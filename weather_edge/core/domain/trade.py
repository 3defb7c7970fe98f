"""
Trade — запись о сделке для учёта P&L

Immutable Pydantic модель. Добавляется внешним модулем исполнения при
размещении/исполнении ордера. pnl равен None до расчёта (settlement) и
устанавливается ровно один раз: через settle() или сразу в записи уже
рассчитанной сделки. Установленный pnl не меняется.
"""

import math
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from weather_edge.core.domain.time_model import Instant


# =============================================================================
# ENUMS
# =============================================================================


class TradeSide(str, Enum):
    """Сторона сделки"""

    BUY = "BUY"
    SELL = "SELL"


# =============================================================================
# TRADE MODEL
# =============================================================================


def _finite_pnl(value: float) -> float:
    if not math.isfinite(value):
        raise ValueError(f"pnl must be finite, got {value}")
    return value


class Trade(BaseModel):
    """
    Сделка по токену рынка.

    Immutable модель (frozen=True). Расчёт сделки возвращает новый экземпляр.
    """

    order_id: str = Field(..., min_length=1, description="Идентификатор ордера")
    token_id: str = Field(..., min_length=1, description="Токен рынка")
    side: TradeSide = Field(..., description="BUY/SELL")
    price: float = Field(..., ge=0, le=1, description="Цена исполнения")
    size: float = Field(..., gt=0, description="Размер в USDC")
    timestamp: Instant = Field(..., description="Время сделки")
    pnl: float | None = Field(None, description="Реализованный P&L (None до settlement)")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("pnl")
    @classmethod
    def validate_pnl(cls, v: float | None) -> float | None:
        return v if v is None else _finite_pnl(v)

    def is_settled(self) -> bool:
        return self.pnl is not None

    def settle(self, pnl: float) -> "Trade":
        """
        Фиксация реализованного P&L.

        Raises:
            ValueError: Если сделка уже рассчитана или pnl NaN/Inf
        """
        if self.is_settled():
            raise ValueError(f"Trade {self.order_id} is already settled (pnl={self.pnl})")
        return self.model_copy(update={"pnl": _finite_pnl(float(pnl))})


# =============================================================================
# PNL
# =============================================================================


@dataclass(frozen=True)
class PnL:
    """
    P&L за скользящее окно.

    unrealized всегда 0: mark-to-market вне области ядра (известное
    ограничение), поэтому total == realized.
    """

    realized: float

    @property
    def unrealized(self) -> float:
        return 0.0

    @property
    def total(self) -> float:
        return self.realized + self.unrealized
