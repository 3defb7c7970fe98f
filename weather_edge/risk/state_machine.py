"""Kill-switch State Machine — переходы INACTIVE ↔ ACTIVE(reason).

- Начальное состояние INACTIVE
- activate(reason) из любого состояния → ACTIVE(reason); повторная активация
  заменяет причину и время активации
- deactivate() из любого состояния → INACTIVE (идемпотентно)
- Автоматического восстановления нет: выход из ACTIVE только явным deactivate()

Машина не хранит состояние: текущий статус передаётся на вход, новый
возвращается в KillSwitchTransitionResult. Владелец статуса — RiskManager.
"""

from dataclasses import dataclass

from weather_edge.core.domain.kill_switch import KillSwitchReason, KillSwitchStatus
from weather_edge.core.domain.time_model import Instant


@dataclass(frozen=True)
class KillSwitchTransitionResult:
    """Результат перехода kill-switch."""

    new_status: KillSwitchStatus
    previous_status: KillSwitchStatus

    # Диагностика
    transition_occurred: bool
    transition_reason: str

    # Для отладки
    details: str

    @property
    def activated(self) -> bool:
        """Переход привёл к (пере)активации."""
        return self.transition_occurred and self.new_status.active

    @property
    def deactivated(self) -> bool:
        return self.transition_occurred and not self.new_status.active


class KillSwitchStateMachine:
    """Kill-switch State Machine.

    States:
    - INACTIVE: торговля разрешена
    - ACTIVE(reason): новые ордера запрещены, открытые подлежат отмене
    """

    def activate(
        self,
        current_status: KillSwitchStatus,
        reason: KillSwitchReason,
        now: Instant,
    ) -> KillSwitchTransitionResult:
        """Переход в ACTIVE(reason).

        Args:
            current_status: текущий статус
            reason: причина активации
            now: момент активации

        Returns:
            KillSwitchTransitionResult; transition_occurred всегда True
        """
        new_status = KillSwitchStatus.activated(reason, now)

        if current_status.active:
            return self._create_result(
                new_status=new_status,
                previous_status=current_status,
                transition_reason="reactivated",
                details=(
                    f"Kill-switch reason replaced: {current_status.reason.kind.value} → "
                    f"{reason.kind.value}: {reason.message}"
                ),
            )

        return self._create_result(
            new_status=new_status,
            previous_status=current_status,
            transition_reason="activated",
            details=f"Kill-switch activated: {reason.kind.value}: {reason.message}",
        )

    def deactivate(self, current_status: KillSwitchStatus) -> KillSwitchTransitionResult:
        """Переход в INACTIVE. Из INACTIVE без перехода."""
        if not current_status.active:
            return KillSwitchTransitionResult(
                new_status=current_status,
                previous_status=current_status,
                transition_occurred=False,
                transition_reason="already_inactive",
                details="Kill-switch already inactive",
            )

        return self._create_result(
            new_status=KillSwitchStatus.inactive(),
            previous_status=current_status,
            transition_reason="deactivated",
            details=f"Kill-switch deactivated (was {current_status.reason.kind.value})",
        )

    def _create_result(
        self,
        new_status: KillSwitchStatus,
        previous_status: KillSwitchStatus,
        transition_reason: str,
        details: str,
    ) -> KillSwitchTransitionResult:
        return KillSwitchTransitionResult(
            new_status=new_status,
            previous_status=previous_status,
            transition_occurred=True,
            transition_reason=transition_reason,
            details=details,
        )
