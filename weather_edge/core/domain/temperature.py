"""
PrecisionTemperature — температура с точностью 0.1°C

Единственный допустимый способ представления наблюдаемой температуры в ядре.
Все конструкторы округляют значение до 0.1°C, поэтому после создания всегда
выполняется инвариант round(value * 10) / 10 == value.

ЗАПРЕЩЕНО смешивать °C и °F без явного конвертера из этого модуля.
"""

from dataclasses import dataclass

from weather_edge.core.math.numerical_safeguards import is_valid_float, round_to_tenth


# =============================================================================
# КОНВЕРТЕРЫ
# =============================================================================


def celsius_to_fahrenheit(celsius: float) -> float:
    """°C → °F (без округления)."""
    return celsius * 9 / 5 + 32


def fahrenheit_to_celsius(fahrenheit: float) -> float:
    """°F → °C (без округления)."""
    return (fahrenheit - 32) * 5 / 9


# =============================================================================
# VALUE TYPE
# =============================================================================


@dataclass(frozen=True, order=True)
class PrecisionTemperature:
    """
    Температура в °C, округлённая до 0.1.

    Округление выполняется в __post_init__, так что инвариант точности держится
    при любом способе создания. Предпочтительные фабрики: from_celsius,
    from_fahrenheit.
    """

    celsius: float

    def __post_init__(self) -> None:
        if not is_valid_float(self.celsius):
            raise ValueError(f"Temperature must be a finite number, got {self.celsius}")
        object.__setattr__(self, "celsius", round_to_tenth(float(self.celsius)))

    @classmethod
    def from_celsius(cls, value: float) -> "PrecisionTemperature":
        return cls(celsius=value)

    @classmethod
    def from_fahrenheit(cls, value: float) -> "PrecisionTemperature":
        """
        Создание из °F: конверсия в °C и округление до 0.1°C.

        Examples:
            >>> PrecisionTemperature.from_fahrenheit(68.0).celsius
            20.0
        """
        if not is_valid_float(value):
            raise ValueError(f"Temperature must be a finite number, got {value}")
        return cls(celsius=fahrenheit_to_celsius(value))

    def to_fahrenheit(self) -> float:
        return celsius_to_fahrenheit(self.celsius)

    def __float__(self) -> float:
        return self.celsius

    def __str__(self) -> str:
        return f"{self.celsius:.1f}°C"
