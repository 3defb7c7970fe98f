"""
EngineConfig — конфигурация ядра принятия решений

Immutable Pydantic модель. Валидируется при создании; может быть загружена из
переменных окружения (MIN_EV, BUDGET, POLL_INTERVAL, TARGET_ICAO,
MONITORING_MODE). Учётные данные биржи сюда не входят: они принадлежат
модулю исполнения.
"""

import os
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from weather_edge.core.domain.stations import StationId


class ConfigError(ValueError):
    """Конфигурация не прошла валидацию."""


class EngineConfig(BaseModel):
    """
    Параметры фильтра сигналов, сайзинга и kill-switch.

    Immutable модель (frozen=True).
    """

    # Фильтр сигналов
    min_ev: float = Field(0.05, ge=0, le=1, description="Минимальный EV (строгое сравнение)")

    # Капитал и сайзинг
    budget: float = Field(..., gt=0, description="Бюджет в USDC")
    max_allocation_fraction: float = Field(
        0.10, gt=0, le=1, description="Максимальная доля бюджета на сделку"
    )
    price_shade: float = Field(
        0.01, ge=0, lt=1, description="Отступ лимитной цены ниже вероятности модели"
    )

    # Цикл опроса
    poll_interval_ms: int = Field(
        300_000, ge=60_000, description="Интервал опроса (мс, минимум 1 минута)"
    )
    target_stations: List[StationId] = Field(
        default_factory=lambda: list(StationId), min_length=1, description="Станции"
    )
    monitoring_mode: bool = Field(
        True, description="Только логировать сигналы, не размещать ордера"
    )

    # Kill-switch
    macro_loss_fraction: float = Field(
        0.20, gt=0, le=1, description="Доля бюджета для macro kill-switch"
    )
    divergence_threshold_f: float = Field(
        5.0, gt=0, description="Допустимое расхождение источников (°F)"
    )
    pnl_window_hours: float = Field(24.0, gt=0, description="Скользящее окно P&L (часы)")

    model_config = {"frozen": True}

    @field_validator("target_stations")
    @classmethod
    def validate_unique_stations(cls, v: List[StationId]) -> List[StationId]:
        """Дубликаты станций недопустимы"""
        if len(set(v)) != len(v):
            raise ValueError(f"target_stations contains duplicates: {[s.value for s in v]}")
        return v

    @property
    def macro_loss_threshold(self) -> float:
        """Порог macro kill-switch в USDC."""
        return self.budget * self.macro_loss_fraction

    @property
    def max_trade_size(self) -> float:
        return self.budget * self.max_allocation_fraction


# =============================================================================
# ЗАГРУЗКА ИЗ ОКРУЖЕНИЯ
# =============================================================================


_ENV_FIELDS: Dict[str, str] = {
    "MIN_EV": "min_ev",
    "BUDGET": "budget",
    "POLL_INTERVAL": "poll_interval_ms",
    "TARGET_ICAO": "target_stations",
    "MONITORING_MODE": "monitoring_mode",
}


def _env_to_fields(environ: Mapping[str, str]) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}

    for env_name, field_name in _ENV_FIELDS.items():
        raw = environ.get(env_name)
        if raw is None or raw.strip() == "":
            continue

        if field_name == "target_stations":
            fields[field_name] = [code.strip().upper() for code in raw.split(",") if code.strip()]
        elif field_name == "monitoring_mode":
            fields[field_name] = raw.strip().lower() == "true"
        else:
            fields[field_name] = raw.strip()

    return fields


def load_config(environ: Optional[Mapping[str, str]] = None) -> EngineConfig:
    """
    Загрузка конфигурации из переменных окружения.

    Args:
        environ: Источник переменных (по умолчанию os.environ)

    Returns:
        Валидированный EngineConfig

    Raises:
        ConfigError: Если конфигурация некорректна (все ошибки в сообщении)
    """
    source = os.environ if environ is None else environ

    try:
        return EngineConfig(**_env_to_fields(source))
    except ValidationError as e:
        raise ConfigError(
            f"Configuration validation failed:\n{e}\n\n"
            "Please check your environment and ensure all required variables are set correctly."
        ) from e


def validate_config(
    environ: Mapping[str, str],
) -> Tuple[bool, Optional[EngineConfig], Optional[ConfigError]]:
    """Валидация конфигурации без исключения: (ok, config, error)."""
    try:
        return True, load_config(environ), None
    except ConfigError as e:
        return False, None, e
