"""
Stations — станции наблюдения, их часовые пояса и базовая волатильность

Каждый рынок привязан к станции (ICAO-код аэропорта). От станции зависят:
- часовой пояс, в котором указан дедлайн наблюдения;
- base σ — ожидаемая 24-часовая волатильность максимальной температуры (°C).

Base σ выше для континентального климата и ниже для морского:
- KLGA (New York LaGuardia): 3.5°C, умеренная волатильность
- KORD (Chicago O'Hare): 4.2°C, континентальный климат
- EGLC (London City): 2.8°C, морской климат

NOTE: значения стоит периодически пересматривать по скользящим историческим
данным (сезонность).
"""

from enum import Enum
from types import MappingProxyType
from typing import Final, Mapping


class UnknownStationError(ValueError):
    """Станция отсутствует в таблице."""


class StationId(str, Enum):
    """ICAO-коды поддерживаемых станций."""

    KLGA = "KLGA"
    KORD = "KORD"
    EGLC = "EGLC"


STATION_TIMEZONES: Final[Mapping[StationId, str]] = MappingProxyType({
    StationId.KLGA: "America/New_York",
    StationId.KORD: "America/Chicago",
    StationId.EGLC: "Europe/London",
})

BASE_SIGMA_BY_STATION: Final[Mapping[StationId, float]] = MappingProxyType({
    StationId.KLGA: 3.5,
    StationId.KORD: 4.2,
    StationId.EGLC: 2.8,
})


def parse_station(station_id: str) -> StationId:
    """
    Нормализация строкового кода станции.

    Raises:
        UnknownStationError: Если код не поддерживается
    """
    try:
        return StationId(station_id.strip().upper())
    except (ValueError, AttributeError) as e:
        raise UnknownStationError(f"Unknown station: {station_id!r}") from e


def station_timezone(station_id: str) -> str:
    """IANA-зона станции (например, KLGA → America/New_York)."""
    return STATION_TIMEZONES[parse_station(station_id)]


def base_sigma(
    station_id: str,
    table: Mapping[str, float] | None = None,
) -> float:
    """
    Базовая 24-часовая σ станции.

    Args:
        station_id: Код станции
        table: Альтернативная таблица σ (по умолчанию BASE_SIGMA_BY_STATION)

    Raises:
        UnknownStationError: Если станции нет в таблице
    """
    if table is None:
        return BASE_SIGMA_BY_STATION[parse_station(station_id)]

    key = station_id.strip().upper() if isinstance(station_id, str) else station_id
    if key not in table:
        raise UnknownStationError(f"No base sigma configured for station {station_id!r}")
    return table[key]
