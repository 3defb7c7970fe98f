"""
JSON Schema Contract Validators

Модуль для валидации записей, пересекающих границу ядра, согласно формальным
JSON Schema контрактам. Использует библиотеку jsonschema.

Схемы (weather_edge/core/contracts/schema/):
- market.json — рынок от модуля извлечения (вход)
- trading_signal.json — сигнал для модуля размещения ордеров (выход)
- kill_switch_status.json — статус kill-switch для внешнего цикла (выход)
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы лежат в каталоге schema/ рядом с этим модулем.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'market')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        return self.validator.iter_errors(data)


class MarketValidator(ContractValidator):
    """Валидатор для контракта market."""

    def __init__(self):
        super().__init__("market")


class TradingSignalValidator(ContractValidator):
    """Валидатор для контракта trading_signal."""

    def __init__(self):
        super().__init__("trading_signal")


class KillSwitchStatusValidator(ContractValidator):
    """Валидатор для контракта kill_switch_status."""

    def __init__(self):
        super().__init__("kill_switch_status")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_market(data: Dict[str, Any]) -> None:
    """
    Валидация записи market.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    MarketValidator().validate(data)


def validate_trading_signal(data: Dict[str, Any]) -> None:
    """
    Валидация записи trading_signal.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    TradingSignalValidator().validate(data)


def validate_kill_switch_status(data: Dict[str, Any]) -> None:
    """
    Валидация записи kill_switch_status.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    KillSwitchStatusValidator().validate(data)
