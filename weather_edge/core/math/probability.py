"""
Probability Calculator — вероятность попадания максимума в диапазон порогов

Модель: T_max ~ N(μ = T_current, σ = sigma(station, time_remaining))

Формулы (Φ — стандартная нормальная CDF):
- конечный диапазон [min, max]:  Φ((max - μ)/σ) - Φ((min - μ)/σ)
- потолок [min, +inf):           1 - Φ((min - μ)/σ)
- пол (-inf, max]:               Φ((max - μ)/σ)
- одиночный порог (min == max):  1 - Φ((threshold - μ)/σ)  ("превысит")

Граничные случаи:
- time_remaining < 0 → 0.0 (рынок истёк, проверяется первым)
- σ == 0 → 1.0 если текущее наблюдение уже в области, иначе 0.0
- min > max → InvalidThresholdRangeError (некорректные метаданные рынка)

Результат всегда в [0, 1].
"""

import math
from typing import Mapping

from weather_edge.core.domain.temperature import PrecisionTemperature
from weather_edge.core.domain.time_model import Duration
from weather_edge.core.math.numerical_safeguards import clamp_probability, is_valid_float
from weather_edge.core.math.sigma import calculate_sigma


# =============================================================================
# ERRORS
# =============================================================================


class InvalidThresholdRangeError(ValueError):
    """Нижняя граница диапазона больше верхней."""


class InvalidProbabilityError(ValueError):
    """Вероятность или цена рынка вне [0, 1]."""


# =============================================================================
# NORMAL CDF
# =============================================================================


def normal_cdf(z: float) -> float:
    """
    Стандартная нормальная CDF.

    Φ(z) = 0.5 * (1 + erf(z / sqrt(2))); Φ(-inf) = 0, Φ(+inf) = 1.
    """
    if z == math.inf:
        return 1.0
    if z == -math.inf:
        return 0.0
    return 0.5 * (1.0 + math.erf(z / math.sqrt(2.0)))


# =============================================================================
# ВЕРОЯТНОСТЬ
# =============================================================================


def _value(temp: PrecisionTemperature | float) -> float:
    if isinstance(temp, PrecisionTemperature):
        return temp.celsius
    return float(temp)


def _satisfies_region(mu: float, min_threshold: float, max_threshold: float) -> bool:
    """Детерминированная проверка при σ = 0."""
    if min_threshold == max_threshold:
        return mu > min_threshold
    return min_threshold <= mu <= max_threshold


def calculate_range_probability(
    current_temp: PrecisionTemperature,
    min_threshold: PrecisionTemperature | float,
    max_threshold: PrecisionTemperature | float,
    station_id: str,
    time_remaining: Duration,
    sigma_table: Mapping[str, float] | None = None,
) -> float:
    """
    Вероятность, что максимум температуры попадёт в [min_threshold, max_threshold].

    Args:
        current_temp: Текущее наблюдение (μ)
        min_threshold: Нижняя граница (°C) или -inf
        max_threshold: Верхняя граница (°C) или +inf
        station_id: ICAO-код станции (для σ)
        time_remaining: Время до дедлайна наблюдения
        sigma_table: Альтернативная таблица base σ (optional)

    Returns:
        Вероятность в [0, 1]

    Raises:
        InvalidThresholdRangeError: Если min_threshold > max_threshold или NaN

    Examples:
        >>> calculate_range_probability(
        ...     PrecisionTemperature.from_celsius(20.0), 25.0, math.inf,
        ...     "KLGA", Duration.from_hours(12),
        ... )  # doctest: +ELLIPSIS
        0.02...
    """
    mu = _value(current_temp)
    low = _value(min_threshold)
    high = _value(max_threshold)

    if math.isnan(low) or math.isnan(high):
        raise InvalidThresholdRangeError(f"Invalid range: NaN threshold (min={low}, max={high})")

    if low > high:
        raise InvalidThresholdRangeError(f"Invalid range: min ({low}) > max ({high})")

    if time_remaining.is_negative():
        return 0.0

    sigma = calculate_sigma(station_id, time_remaining, sigma_table)

    if sigma == 0:
        return 1.0 if _satisfies_region(mu, low, high) else 0.0

    # Одиночный порог: "превысит ли максимум порог"
    if low == high:
        return clamp_probability(1.0 - normal_cdf((low - mu) / sigma))

    # Потолок: [min, +inf)
    if high == math.inf and math.isfinite(low):
        return clamp_probability(1.0 - normal_cdf((low - mu) / sigma))

    # Пол: (-inf, max]
    if low == -math.inf and math.isfinite(high):
        return clamp_probability(normal_cdf((high - mu) / sigma))

    # Конечный диапазон (или (-inf, +inf), где результат 1.0)
    probability = normal_cdf((high - mu) / sigma) - normal_cdf((low - mu) / sigma)
    return clamp_probability(probability)


def calculate_probability(
    current_temp: PrecisionTemperature,
    threshold: PrecisionTemperature | float,
    station_id: str,
    time_remaining: Duration,
    sigma_table: Mapping[str, float] | None = None,
) -> float:
    """
    Вероятность, что максимум температуры превысит threshold.

    Обёртка над calculate_range_probability с min == max.
    """
    return calculate_range_probability(
        current_temp, threshold, threshold, station_id, time_remaining, sigma_table
    )


# =============================================================================
# EV
# =============================================================================


def expected_value(probability: float, market_price: float) -> float:
    """
    EV = probability - market_price.

    Положительный EV означает, что рынок недооценивает вероятность.

    Raises:
        InvalidProbabilityError: Если probability или market_price вне [0, 1]

    Examples:
        >>> round(expected_value(0.65, 0.50), 10)
        0.15
    """
    if not is_valid_float(probability) or not 0.0 <= probability <= 1.0:
        raise InvalidProbabilityError(
            f"Invalid probability: {probability}. Must be between 0 and 1."
        )

    if not is_valid_float(market_price) or not 0.0 <= market_price <= 1.0:
        raise InvalidProbabilityError(
            f"Invalid market price: {market_price}. Must be between 0 and 1."
        )

    return probability - market_price


def is_expired(time_remaining: Duration) -> bool:
    """Рынок истёк, если оставшееся время отрицательно."""
    return time_remaining.is_negative()
