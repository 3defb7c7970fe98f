"""
Unit tests для PrecisionTemperature и конвертеров °C/°F.
"""

import math

import pytest

from weather_edge.core.domain.temperature import (
    PrecisionTemperature,
    celsius_to_fahrenheit,
    fahrenheit_to_celsius,
)


class TestConverters:
    """Тесты конвертеров."""

    @pytest.mark.parametrize("celsius,fahrenheit", [(0.0, 32.0), (100.0, 212.0), (-40.0, -40.0)])
    def test_known_points(self, celsius, fahrenheit):
        assert celsius_to_fahrenheit(celsius) == pytest.approx(fahrenheit)
        assert fahrenheit_to_celsius(fahrenheit) == pytest.approx(celsius)


class TestPrecisionTemperature:
    """Тесты PrecisionTemperature."""

    def test_from_celsius_rounds(self):
        assert PrecisionTemperature.from_celsius(20.06).celsius == 20.1
        assert PrecisionTemperature.from_celsius(20.04).celsius == 20.0

    def test_direct_constructor_rounds(self):
        """Инвариант точности держится и при прямом вызове конструктора."""
        assert PrecisionTemperature(celsius=-3.25).celsius == -3.3

    def test_from_fahrenheit(self):
        """68°F = 20.0°C; 75°F ≈ 23.9°C."""
        assert PrecisionTemperature.from_fahrenheit(68.0).celsius == 20.0
        assert PrecisionTemperature.from_fahrenheit(75.0).celsius == 23.9

    def test_to_fahrenheit(self):
        assert PrecisionTemperature.from_celsius(20.0).to_fahrenheit() == pytest.approx(68.0)

    @pytest.mark.parametrize("value", [12.345, -0.77, 31.05, 0.0, 99.99])
    def test_precision_invariant(self, value):
        temp = PrecisionTemperature.from_celsius(value)
        assert round(temp.celsius * 10) / 10 == temp.celsius

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, value):
        with pytest.raises(ValueError, match="finite"):
            PrecisionTemperature.from_celsius(value)

    def test_non_finite_fahrenheit_rejected(self):
        with pytest.raises(ValueError):
            PrecisionTemperature.from_fahrenheit(math.nan)

    def test_immutable(self):
        temp = PrecisionTemperature.from_celsius(20.0)

        with pytest.raises(AttributeError):
            temp.celsius = 21.0

    def test_ordering_and_equality(self):
        assert PrecisionTemperature.from_celsius(20.04) == PrecisionTemperature.from_celsius(19.96)
        assert PrecisionTemperature.from_celsius(19.0) < PrecisionTemperature.from_celsius(20.0)

    def test_float_and_str(self):
        temp = PrecisionTemperature.from_celsius(20.0)

        assert float(temp) == 20.0
        assert str(temp) == "20.0°C"
