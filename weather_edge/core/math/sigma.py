"""
Sigma — стандартное отклонение максимальной температуры с учётом времени

σ = base_σ[station] * sqrt(clamp(hours_remaining, 0, 24) / 24)

Свойства:
- hours_remaining <= 0 → σ = 0 (исход детерминирован)
- hours_remaining >= 24 → σ = base_σ (не растёт дальше)
- σ не возрастает при уменьшении оставшегося времени, σ >= 0

Пример: base_σ = 3.5, 12 часов → σ ≈ 3.5 * sqrt(0.5) ≈ 2.47°C
"""

import math
from typing import Final, Mapping

from weather_edge.core.domain.stations import base_sigma
from weather_edge.core.domain.time_model import Duration
from weather_edge.core.math.numerical_safeguards import clamp, validate_positive


# Горизонт, на котором σ достигает base_σ
SIGMA_HORIZON_HOURS: Final[float] = 24.0


def calculate_sigma(
    station_id: str,
    time_remaining: Duration,
    table: Mapping[str, float] | None = None,
) -> float:
    """
    σ для станции с учётом оставшегося времени.

    Args:
        station_id: ICAO-код станции
        time_remaining: Время до дедлайна наблюдения
        table: Альтернативная таблица base σ (optional)

    Returns:
        σ в °C (>= 0)

    Raises:
        UnknownStationError: Если станция неизвестна
        ValueError: Если base σ в таблице не положительна
    """
    sigma_base = base_sigma(station_id, table)
    validate_positive(sigma_base, f"base sigma for {station_id}")
    hours = time_remaining.hours

    if hours <= 0:
        return 0.0

    if hours >= SIGMA_HORIZON_HOURS:
        return sigma_base

    hours_clamped = clamp(hours, 0.0, SIGMA_HORIZON_HOURS)
    return sigma_base * math.sqrt(hours_clamped / SIGMA_HORIZON_HOURS)


def is_sigma_monotonic(
    station_id: str,
    longer: Duration,
    shorter: Duration,
    table: Mapping[str, float] | None = None,
) -> bool:
    """
    Проверка монотонности: σ(longer) >= σ(shorter).

    Возвращает False, если longer короче shorter (некорректный порядок аргументов).
    """
    if longer.milliseconds < shorter.milliseconds:
        return False

    return calculate_sigma(station_id, longer, table) >= calculate_sigma(station_id, shorter, table)


class SigmaCalculator:
    """σ-калькулятор с зафиксированной таблицей base σ."""

    def __init__(self, table: Mapping[str, float] | None = None):
        """
        Raises:
            ValueError: Если base σ в таблице не положительна
        """
        if table is not None:
            for station_id, value in table.items():
                validate_positive(value, f"base sigma for {station_id}")
        self.table = table

    def base_sigma(self, station_id: str) -> float:
        return base_sigma(station_id, self.table)

    def sigma(self, station_id: str, time_remaining: Duration) -> float:
        return calculate_sigma(station_id, time_remaining, self.table)
