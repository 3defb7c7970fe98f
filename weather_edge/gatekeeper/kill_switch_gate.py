"""Kill-switch Gate — допуск новых ордеров в текущем цикле

Блокирует размещение ордеров при:
- активном kill-switch (дополнительно требует отмены открытых ордеров)
- monitoring mode (сигналы только логируются, открытые ордера не трогаем)

Gate не выполняет переходов kill-switch: это делает RiskManager.
"""

from dataclasses import dataclass
from typing import Optional

from weather_edge.core.domain.kill_switch import KillSwitchReasonType, KillSwitchStatus


@dataclass(frozen=True)
class KillSwitchGateResult:
    """Результат Kill-switch Gate."""

    orders_allowed: bool
    cancel_open_orders: bool
    block_reason: str

    # Причина kill-switch, если он активен
    reason_kind: Optional[KillSwitchReasonType]

    # Детали
    details: str


class KillSwitchGate:
    """Kill-switch Gate.

    Порядок проверок:
    1. Активный kill-switch → блокировка + отмена открытых ордеров
    2. Monitoring mode → блокировка
    3. PASS
    """

    def evaluate(self, status: KillSwitchStatus, monitoring_mode: bool) -> KillSwitchGateResult:
        """Оценка допуска ордеров.

        Args:
            status: текущий статус kill-switch (RiskManager.status())
            monitoring_mode: режим только-логирования из EngineConfig

        Returns:
            KillSwitchGateResult с решением о допуске
        """
        # 1. Kill-switch (высший приоритет)
        if status.active:
            return KillSwitchGateResult(
                orders_allowed=False,
                cancel_open_orders=True,
                block_reason="kill_switch_active",
                reason_kind=status.reason.kind,
                details=(
                    f"Kill-switch active since {status.activated_at.isoformat()}: "
                    f"{status.reason.message}"
                ),
            )

        # 2. Monitoring mode
        if monitoring_mode:
            return KillSwitchGateResult(
                orders_allowed=False,
                cancel_open_orders=False,
                block_reason="monitoring_mode",
                reason_kind=None,
                details="Monitoring mode: signals are logged, no orders placed",
            )

        # 3. PASS
        return KillSwitchGateResult(
            orders_allowed=True,
            cancel_open_orders=False,
            block_reason="",
            reason_kind=None,
            details="PASS: kill-switch inactive, live mode",
        )
