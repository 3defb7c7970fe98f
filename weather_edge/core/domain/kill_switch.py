"""
Kill-switch — причины остановки торговли и статус

KillSwitchReason — sum type из трёх вариантов с собственными полями:
- MacroLoss: убыток за 24 часа превысил долю бюджета
- DataQuality: расхождение источников температуры выше порога
- FeedUnavailable: основной источник наблюдений недоступен

Одновременно активна ровно одна причина. KillSwitchStatus принадлежит
Risk Manager и меняется только через явные activate/deactivate.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from weather_edge.core.domain.time_model import Instant


class KillSwitchReasonType(str, Enum):
    """Дискриминант причины kill-switch"""

    MACRO_LOSS = "MACRO_LOSS"
    DATA_QUALITY = "DATA_QUALITY"
    FEED_UNAVAILABLE = "FEED_UNAVAILABLE"


# =============================================================================
# ВАРИАНТЫ ПРИЧИН
# =============================================================================


@dataclass(frozen=True)
class MacroLoss:
    """Убыток за скользящее окно превысил порог."""

    loss: float  # |total P&L|, USDC
    threshold: float  # доля бюджета, USDC

    @property
    def kind(self) -> KillSwitchReasonType:
        return KillSwitchReasonType.MACRO_LOSS

    @property
    def message(self) -> str:
        return (
            f"24-hour loss (${self.loss:.2f}) exceeds macro loss threshold "
            f"(${self.threshold:.2f})"
        )

    def to_contract(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "loss": self.loss, "threshold": self.threshold}


@dataclass(frozen=True)
class DataQuality:
    """Расхождение основного и вторичного источника температуры."""

    divergence: float  # °F
    station_id: Optional[str] = None

    @property
    def kind(self) -> KillSwitchReasonType:
        return KillSwitchReasonType.DATA_QUALITY

    @property
    def message(self) -> str:
        station = f" for {self.station_id}" if self.station_id else ""
        return f"Temperature divergence ({self.divergence:.1f}°F) exceeds threshold{station}"

    def to_contract(self) -> Dict[str, Any]:
        return {
            "type": self.kind.value,
            "divergence": self.divergence,
            "station_id": self.station_id,
        }


@dataclass(frozen=True)
class FeedUnavailable:
    """Основной источник наблюдений не вернул данных."""

    station_id: str

    @property
    def kind(self) -> KillSwitchReasonType:
        return KillSwitchReasonType.FEED_UNAVAILABLE

    @property
    def message(self) -> str:
        return f"Primary observation feed unavailable for {self.station_id}"

    def to_contract(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "station_id": self.station_id}


KillSwitchReason = Union[MacroLoss, DataQuality, FeedUnavailable]


# =============================================================================
# STATUS
# =============================================================================


@dataclass(frozen=True)
class KillSwitchStatus:
    """
    Статус kill-switch.

    Инвариант: active <=> reason is not None <=> activated_at is not None.
    """

    active: bool
    reason: Optional[KillSwitchReason] = None
    activated_at: Optional[Instant] = None

    def __post_init__(self) -> None:
        if self.active != (self.reason is not None) or self.active != (self.activated_at is not None):
            raise ValueError(
                "KillSwitchStatus requires reason and activated_at exactly when active "
                f"(active={self.active}, reason={self.reason}, activated_at={self.activated_at})"
            )

    @classmethod
    def inactive(cls) -> "KillSwitchStatus":
        return cls(active=False)

    @classmethod
    def activated(cls, reason: KillSwitchReason, at: Instant) -> "KillSwitchStatus":
        return cls(active=True, reason=reason, activated_at=at)

    def to_contract(self) -> Dict[str, Any]:
        """Сериализация в запись контракта "kill_switch_status"."""
        return {
            "active": self.active,
            "reason": self.reason.to_contract() if self.reason is not None else None,
            "activated_at_utc_ms": self.activated_at.utc_ms if self.activated_at is not None else None,
        }
