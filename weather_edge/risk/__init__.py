"""
Risk management: trade log, rolling P&L and kill-switch.
"""

from weather_edge.risk.manager import KillSwitchNotifier, RiskManager, TemperatureComparison
from weather_edge.risk.state_machine import KillSwitchStateMachine, KillSwitchTransitionResult

__all__ = [
    "RiskManager",
    "TemperatureComparison",
    "KillSwitchNotifier",
    "KillSwitchStateMachine",
    "KillSwitchTransitionResult",
]
