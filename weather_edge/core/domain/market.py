"""
Market — бинарный рынок на пересечение температурного порога

Immutable Pydantic модель. Создаётся внешним модулем извлечения (discovery /
extraction) и используется ядром только для чтения.

Формы диапазона:
- конечный диапазон [min, max]
- потолок [min, +inf)
- пол (-inf, max]
- одиночный порог (min == max): "превысит ли максимум порог"

Инвариант: min_threshold <= max_threshold.
"""

import math
from typing import Any, Dict, Final

from pydantic import BaseModel, Field, field_validator

from weather_edge.core.contracts import validate_market
from weather_edge.core.domain.stations import StationId, station_timezone
from weather_edge.core.domain.time_model import Instant
from weather_edge.core.math.numerical_safeguards import round_to_tenth


# Цена рынка до интеграции с order book (известный пробел)
PLACEHOLDER_MARKET_PRICE: Final[float] = 0.5


class Market(BaseModel):
    """
    Рынок с температурным порогом и дедлайном наблюдения.

    Конечные пороги округляются до 0.1°C; бесконечности обозначают
    неограниченную сторону диапазона.
    """

    id: str = Field(..., min_length=1, description="Идентификатор рынка")
    yes_token_id: str = Field(..., min_length=1, description="Токен исхода YES")
    station_id: StationId = Field(..., description="ICAO-код станции")
    min_threshold: float = Field(-math.inf, description="Нижняя граница (°C), -inf если нет")
    max_threshold: float = Field(math.inf, description="Верхняя граница (°C), +inf если нет")
    observation_end: Instant = Field(..., description="Дедлайн наблюдения")
    market_price: float = Field(
        PLACEHOLDER_MARKET_PRICE, ge=0, le=1, description="Цена YES (implied probability)"
    )

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("min_threshold")
    @classmethod
    def validate_min_threshold(cls, v: float) -> float:
        """NaN и +inf недопустимы; конечное значение округляется до 0.1°C"""
        if math.isnan(v) or v == math.inf:
            raise ValueError(f"min_threshold must be finite or -inf, got {v}")
        return v if math.isinf(v) else round_to_tenth(v)

    @field_validator("max_threshold")
    @classmethod
    def validate_max_threshold(cls, v: float, info) -> float:
        """NaN и -inf недопустимы; max_threshold >= min_threshold"""
        if math.isnan(v) or v == -math.inf:
            raise ValueError(f"max_threshold must be finite or +inf, got {v}")
        value = v if math.isinf(v) else round_to_tenth(v)
        if "min_threshold" in info.data:
            min_threshold = info.data["min_threshold"]
            if min_threshold > value:
                raise ValueError(
                    f"min_threshold {min_threshold} must be <= max_threshold {value}"
                )
        return value

    # -------------------------------------------------------------------------
    # Форма диапазона
    # -------------------------------------------------------------------------

    def is_single_threshold(self) -> bool:
        return self.min_threshold == self.max_threshold

    def is_ceiling(self) -> bool:
        return math.isfinite(self.min_threshold) and self.max_threshold == math.inf

    def is_floor(self) -> bool:
        return self.min_threshold == -math.inf and math.isfinite(self.max_threshold)

    def is_finite_range(self) -> bool:
        return (
            math.isfinite(self.min_threshold)
            and math.isfinite(self.max_threshold)
            and self.min_threshold < self.max_threshold
        )

    # -------------------------------------------------------------------------
    # Контракт
    # -------------------------------------------------------------------------

    @classmethod
    def from_contract(cls, data: Dict[str, Any]) -> "Market":
        """
        Создание Market из записи контракта "market".

        Запись валидируется JSON Schema; null-порог означает неограниченную
        сторону; observation_end_local интерпретируется в зоне станции (или в
        явно указанной timezone).

        Raises:
            jsonschema.ValidationError: Запись не соответствует контракту
            LocalTimeParseError: Некорректное время дедлайна
            pydantic.ValidationError: Нарушены инварианты модели
        """
        validate_market(data)

        zone = data.get("timezone") or station_timezone(data["station_id"])
        min_threshold = data.get("min_threshold")
        max_threshold = data.get("max_threshold")

        fields: Dict[str, Any] = {
            "id": data["id"],
            "yes_token_id": data["yes_token_id"],
            "station_id": data["station_id"],
            "min_threshold": -math.inf if min_threshold is None else min_threshold,
            "max_threshold": math.inf if max_threshold is None else max_threshold,
            "observation_end": Instant.from_local_time(data["observation_end_local"], zone),
        }
        if data.get("market_price") is not None:
            fields["market_price"] = data["market_price"]

        return cls(**fields)
