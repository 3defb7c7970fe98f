"""
Contract Validation Module

Модуль для валидации JSON контрактов на границе ядра weather_edge.
"""

from .validators import (
    ContractValidator,
    KillSwitchStatusValidator,
    MarketValidator,
    SchemaLoader,
    TradingSignalValidator,
    validate_kill_switch_status,
    validate_market,
    validate_trading_signal,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "MarketValidator",
    "TradingSignalValidator",
    "KillSwitchStatusValidator",
    # Functions
    "validate_market",
    "validate_trading_signal",
    "validate_kill_switch_status",
]
