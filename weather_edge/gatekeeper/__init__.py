"""Gatekeeper — допуск сигналов к исполнению."""

from weather_edge.gatekeeper.kill_switch_gate import KillSwitchGate, KillSwitchGateResult

__all__ = [
    "KillSwitchGate",
    "KillSwitchGateResult",
]
