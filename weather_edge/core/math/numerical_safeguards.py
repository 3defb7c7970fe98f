"""
Numerical Safeguards — базовые численные примитивы

Модуль обеспечивает численную устойчивость расчётов вероятности и сайзинга:
- NaN/Inf проверки для входов модели
- Ограничение значений диапазоном (clamp)
- Валидация диапазонов с явной ошибкой
- Округление half-away-from-zero до шага 0.1

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. NaN никогда не проходит валидацию (validate_* всегда падает)
2. clamp_probability всегда возвращает значение в [0, 1]
3. Все операции детерминированы и воспроизводимы
"""

import math
from typing import Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Абсолютная толерантность для сравнения float
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12

# Относительная толерантность для сравнения float
EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9


# =============================================================================
# NaN/Inf ПРОВЕРКИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float конечным числом (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение конечно
    """
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def is_close(
    a: float,
    b: float,
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_FLOAT_COMPARE_ABS,
) -> bool:
    """
    Сравнение двух float с учётом машинной точности.

    Examples:
        >>> is_close(0.1 + 0.2, 0.3)
        True
    """
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)


# =============================================================================
# ОГРАНИЧЕНИЕ И ОКРУГЛЕНИЕ
# =============================================================================


def clamp(
    value: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """
    Ограничение значения в заданном диапазоне.

    Args:
        value: Исходное значение
        min_value: Минимальное допустимое значение (optional)
        max_value: Максимальное допустимое значение (optional)

    Returns:
        Значение, ограниченное диапазоном [min_value, max_value]

    Examples:
        >>> clamp(-1.0, 0.0, 10.0)
        0.0
        >>> clamp(15.0, 0.0, 10.0)
        10.0
    """
    result = value

    if min_value is not None:
        result = max(result, min_value)

    if max_value is not None:
        result = min(result, max_value)

    return result


def clamp_probability(value: float) -> float:
    """Ограничение вероятности отрезком [0, 1]. NaN трактуется как 0."""
    if math.isnan(value):
        return 0.0
    return clamp(value, 0.0, 1.0)


def round_to_tenth(value: float) -> float:
    """
    Округление до 0.1 (half away from zero).

    Делим целое число шагов на 10, а не умножаем на 0.1: так результат
    удовлетворяет round(v * 10) / 10 == v.

    Examples:
        >>> round_to_tenth(20.06)
        20.1
        >>> round_to_tenth(-3.25)
        -3.3
    """
    scaled = value * 10

    if scaled >= 0:
        steps = math.floor(scaled + 0.5)
    else:
        steps = math.ceil(scaled - 0.5)

    return steps / 10


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_positive(value: float, name: str) -> None:
    """
    Валидация, что значение конечно и строго положительно.

    Raises:
        ValueError: Если value <= 0 или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")


def validate_in_range(
    value: float,
    name: str,
    min_value: float | None = None,
    max_value: float | None = None,
) -> None:
    """
    Валидация, что значение в заданном диапазоне (границы включены).

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)
        min_value: Минимальное допустимое значение (optional)
        max_value: Максимальное допустимое значение (optional)

    Raises:
        ValueError: Если value вне диапазона или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if min_value is not None and value < min_value:
        raise ValueError(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise ValueError(f"{name} must be <= {max_value}, got {value}")
