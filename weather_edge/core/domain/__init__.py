"""
Domain models and value objects.

Contains the time model, temperature value type, stations, Market,
TradingSignal, Trade and kill-switch types.
"""

from weather_edge.core.domain.kill_switch import (
    DataQuality,
    FeedUnavailable,
    KillSwitchReason,
    KillSwitchReasonType,
    KillSwitchStatus,
    MacroLoss,
)
from weather_edge.core.domain.market import PLACEHOLDER_MARKET_PRICE, Market
from weather_edge.core.domain.signal import (
    FilterReason,
    SignalAction,
    SignalGenerationResult,
    TradingSignal,
)
from weather_edge.core.domain.stations import (
    BASE_SIGMA_BY_STATION,
    STATION_TIMEZONES,
    StationId,
    UnknownStationError,
    base_sigma,
    parse_station,
    station_timezone,
)
from weather_edge.core.domain.temperature import (
    PrecisionTemperature,
    celsius_to_fahrenheit,
    fahrenheit_to_celsius,
)
from weather_edge.core.domain.time_model import (
    Duration,
    Instant,
    LocalTimeParseError,
    from_local_time,
    now,
    subtract,
)
from weather_edge.core.domain.trade import PnL, Trade, TradeSide

__all__ = [
    # Time model
    "Instant",
    "Duration",
    "LocalTimeParseError",
    "now",
    "from_local_time",
    "subtract",
    # Temperature
    "PrecisionTemperature",
    "celsius_to_fahrenheit",
    "fahrenheit_to_celsius",
    # Stations
    "StationId",
    "UnknownStationError",
    "STATION_TIMEZONES",
    "BASE_SIGMA_BY_STATION",
    "parse_station",
    "station_timezone",
    "base_sigma",
    # Market
    "Market",
    "PLACEHOLDER_MARKET_PRICE",
    # Signal
    "TradingSignal",
    "SignalAction",
    "FilterReason",
    "SignalGenerationResult",
    # Trade
    "Trade",
    "TradeSide",
    "PnL",
    # Kill-switch
    "KillSwitchReason",
    "KillSwitchReasonType",
    "MacroLoss",
    "DataQuality",
    "FeedUnavailable",
    "KillSwitchStatus",
]
