"""Risk Manager — журнал сделок, скользящий P&L и kill-switch

Проверки (не активируют kill-switch сами, а возвращают кандидата причины):
- check_macro_loss: total P&L за окно строго меньше -(macro_loss_fraction * budget)
- check_data_quality: основной источник недоступен → FeedUnavailable;
  расхождение с вторичным источником строго больше порога (°F) → DataQuality

Активация и деактивация — только явные вызовы activate()/deactivate().
Автоматического восстановления нет.

Не потокобезопасен: единственный писатель (внешний цикл). При совместном
использовании из нескольких потоков синхронизация на стороне вызывающего.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from weather_edge.core.config import EngineConfig
from weather_edge.core.domain.kill_switch import (
    DataQuality,
    FeedUnavailable,
    KillSwitchReason,
    KillSwitchStatus,
    MacroLoss,
)
from weather_edge.core.domain.temperature import PrecisionTemperature
from weather_edge.core.domain.time_model import Duration, Instant
from weather_edge.core.domain.trade import PnL, Trade
from weather_edge.core.math.numerical_safeguards import validate_in_range
from weather_edge.risk.state_machine import KillSwitchStateMachine, KillSwitchTransitionResult


KillSwitchNotifier = Callable[[KillSwitchStatus], None]


@dataclass(frozen=True)
class TemperatureComparison:
    """Сравнение основного и вторичного наблюдения температуры."""

    primary_temp: Optional[PrecisionTemperature]
    secondary_temp_f: Optional[float]
    divergence_f: Optional[float]  # None, если сравнивать не с чем
    is_valid: bool


class RiskManager:
    """Учёт сделок, P&L за окно и статус kill-switch."""

    def __init__(
        self,
        config: EngineConfig,
        logger: Optional[logging.Logger] = None,
        notifier: Optional[KillSwitchNotifier] = None,
    ):
        """
        Args:
            config: Конфигурация (budget, macro_loss_fraction, порог расхождения)
            logger: Логгер (по умолчанию логгер модуля)
            notifier: Получает новый KillSwitchStatus при активации и при
                деактивации активного kill-switch (optional)
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.notifier = notifier

        self._state_machine = KillSwitchStateMachine()
        self._status = KillSwitchStatus.inactive()
        self._trades: List[Trade] = []

    # -------------------------------------------------------------------------
    # Журнал сделок
    # -------------------------------------------------------------------------

    def record_trade(self, trade: Trade) -> None:
        """Добавление сделки в журнал (без дедупликации и вытеснения)."""
        self._trades.append(trade)
        self.logger.info(
            "Trade recorded: %s %s %s size=%.2f @ %.4f",
            trade.order_id, trade.side.value, trade.token_id, trade.size, trade.price,
        )

    def settle_trade(self, order_id: str, pnl: float) -> Trade:
        """
        Фиксация P&L последней нерассчитанной сделки с данным order_id.

        Raises:
            KeyError: Сделок с таким order_id нет
            ValueError: Все сделки с таким order_id уже рассчитаны, pnl NaN/Inf
        """
        validate_in_range(pnl, "pnl")

        indices = [i for i, t in enumerate(self._trades) if t.order_id == order_id]
        if not indices:
            raise KeyError(f"Unknown order_id: {order_id}")

        for i in reversed(indices):
            if not self._trades[i].is_settled():
                settled = self._trades[i].settle(pnl)
                self._trades[i] = settled
                self.logger.info("Trade settled: %s pnl=%.2f", order_id, settled.pnl)
                return settled

        # Все рассчитаны: settle() последней сделки выбросит ValueError
        return self._trades[indices[-1]].settle(pnl)

    def all_trades(self) -> List[Trade]:
        return list(self._trades)

    def recent_trades(self, now: Instant) -> List[Trade]:
        """Сделки с timestamp в окне [now - window, now]."""
        window_start = now.utc_ms - self._window().milliseconds
        return [t for t in self._trades if window_start <= t.timestamp.utc_ms <= now.utc_ms]

    # -------------------------------------------------------------------------
    # P&L и проверки
    # -------------------------------------------------------------------------

    def rolling_pnl(self, now: Instant) -> PnL:
        """
        Реализованный P&L за скользящее окно.

        Нерассчитанные сделки (pnl is None) не учитываются; unrealized = 0.
        """
        realized = sum(t.pnl for t in self.recent_trades(now) if t.pnl is not None)
        return PnL(realized=float(realized))

    def check_macro_loss(self, now: Instant) -> Optional[MacroLoss]:
        """
        Кандидат MacroLoss, если убыток за окно строго больше порога.

        Kill-switch не активируется.
        """
        pnl = self.rolling_pnl(now)
        threshold = self.config.macro_loss_threshold

        if pnl.total < -threshold:
            return MacroLoss(loss=abs(pnl.total), threshold=threshold)
        return None

    def compare_temperatures(
        self,
        primary: Optional[PrecisionTemperature],
        secondary_f: Optional[float],
    ) -> TemperatureComparison:
        """
        Расхождение основного (°C) и вторичного (°F) наблюдения в °F.

        Raises:
            ValueError: Если вторичное наблюдение NaN/Inf
        """
        if secondary_f is not None:
            validate_in_range(secondary_f, "secondary temperature (°F)")

        if primary is None or secondary_f is None:
            return TemperatureComparison(
                primary_temp=primary,
                secondary_temp_f=secondary_f,
                divergence_f=None,
                is_valid=primary is not None,
            )

        divergence = abs(primary.to_fahrenheit() - secondary_f)
        return TemperatureComparison(
            primary_temp=primary,
            secondary_temp_f=secondary_f,
            divergence_f=divergence,
            is_valid=divergence <= self.config.divergence_threshold_f,
        )

    def check_data_quality(
        self,
        primary: Optional[PrecisionTemperature],
        secondary_f: Optional[float],
        station_id: str,
        now: Instant,
    ) -> Optional[KillSwitchReason]:
        """
        Кандидат причины по качеству данных.

        Returns:
            FeedUnavailable, если основного наблюдения нет;
            DataQuality, если расхождение строго больше порога;
            иначе None (в том числе когда вторичного наблюдения нет)
        """
        if primary is None:
            self.logger.warning("No primary observation for %s at %s", station_id, now.isoformat())
            return FeedUnavailable(station_id=station_id)

        comparison = self.compare_temperatures(primary, secondary_f)
        if not comparison.is_valid:
            self.logger.warning(
                "Temperature divergence %.1f°F for %s (primary %.1f°F, secondary %.1f°F)",
                comparison.divergence_f, station_id, primary.to_fahrenheit(), secondary_f,
            )
            return DataQuality(divergence=comparison.divergence_f, station_id=station_id)
        return None

    # -------------------------------------------------------------------------
    # Kill-switch
    # -------------------------------------------------------------------------

    def activate(self, reason: KillSwitchReason, now: Instant) -> KillSwitchTransitionResult:
        """Активация (или замена причины активного) kill-switch."""
        result = self._state_machine.activate(self._status, reason, now)
        self._status = result.new_status

        self.logger.error("KILL SWITCH ACTIVATED: %s", reason.message)
        self._notify(result)
        return result

    def deactivate(self) -> KillSwitchTransitionResult:
        """Деактивация kill-switch; из неактивного состояния no-op."""
        result = self._state_machine.deactivate(self._status)
        self._status = result.new_status

        if result.transition_occurred:
            self.logger.info("Kill switch deactivated: %s", result.details)
            self._notify(result)
        return result

    def is_active(self) -> bool:
        return self._status.active

    def status(self) -> KillSwitchStatus:
        return self._status

    def reset(self) -> None:
        """Очистка журнала сделок и статуса (без уведомления)."""
        self._trades.clear()
        self._status = KillSwitchStatus.inactive()
        self.logger.debug("Risk manager reset")

    # -------------------------------------------------------------------------
    # Внутреннее
    # -------------------------------------------------------------------------

    def _window(self) -> Duration:
        return Duration.from_hours(self.config.pnl_window_hours)

    def _notify(self, result: KillSwitchTransitionResult) -> None:
        if self.notifier is not None:
            self.notifier(result.new_status)
