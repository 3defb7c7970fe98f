"""
Tests for EngineConfig and environment loading

Проверяет:
- Значения по умолчанию
- Валидацию диапазонов
- Загрузку из переменных окружения
- Сообщения об ошибках
"""

import pytest
from pydantic import ValidationError

from weather_edge.core.config import ConfigError, EngineConfig, load_config, validate_config
from weather_edge.core.domain.stations import StationId


# =============================================================================
# ENGINE CONFIG
# =============================================================================


class TestEngineConfig:
    """Тесты модели EngineConfig."""

    def test_defaults(self):
        config = EngineConfig(budget=1000.0)

        assert config.min_ev == 0.05
        assert config.max_allocation_fraction == 0.10
        assert config.price_shade == 0.01
        assert config.poll_interval_ms == 300_000
        assert config.target_stations == [StationId.KLGA, StationId.KORD, StationId.EGLC]
        assert config.monitoring_mode is True
        assert config.divergence_threshold_f == 5.0
        assert config.pnl_window_hours == 24.0

    def test_derived_thresholds(self):
        config = EngineConfig(budget=1000.0)

        assert config.macro_loss_threshold == pytest.approx(200.0)
        assert config.max_trade_size == pytest.approx(100.0)

    def test_budget_required(self):
        with pytest.raises(ValidationError):
            EngineConfig()

    @pytest.mark.parametrize("budget", [0.0, -10.0])
    def test_budget_positive(self, budget):
        with pytest.raises(ValidationError):
            EngineConfig(budget=budget)

    @pytest.mark.parametrize("min_ev", [-0.01, 1.01])
    def test_min_ev_range(self, min_ev):
        with pytest.raises(ValidationError):
            EngineConfig(budget=1000.0, min_ev=min_ev)

    def test_poll_interval_minimum(self):
        EngineConfig(budget=1000.0, poll_interval_ms=60_000)

        with pytest.raises(ValidationError):
            EngineConfig(budget=1000.0, poll_interval_ms=59_999)

    def test_unknown_station_rejected(self):
        with pytest.raises(ValidationError):
            EngineConfig(budget=1000.0, target_stations=["KJFK"])

    def test_empty_stations_rejected(self):
        with pytest.raises(ValidationError):
            EngineConfig(budget=1000.0, target_stations=[])

    def test_duplicate_stations_rejected(self):
        with pytest.raises(ValidationError, match="duplicates"):
            EngineConfig(budget=1000.0, target_stations=["KLGA", "KLGA"])

    def test_immutable(self):
        config = EngineConfig(budget=1000.0)

        with pytest.raises(ValidationError):
            config.budget = 5.0


# =============================================================================
# ЗАГРУЗКА ИЗ ОКРУЖЕНИЯ
# =============================================================================


class TestLoadConfig:
    """Тесты load_config / validate_config."""

    def test_full_environment(self):
        config = load_config(
            {
                "MIN_EV": "0.08",
                "BUDGET": "500",
                "POLL_INTERVAL": "120000",
                "TARGET_ICAO": "klga, EGLC",
                "MONITORING_MODE": "false",
            }
        )

        assert config.min_ev == 0.08
        assert config.budget == 500.0
        assert config.poll_interval_ms == 120_000
        assert config.target_stations == [StationId.KLGA, StationId.EGLC]
        assert config.monitoring_mode is False

    def test_defaults_from_minimal_environment(self):
        config = load_config({"BUDGET": "1000"})

        assert config.min_ev == 0.05
        assert config.monitoring_mode is True

    def test_blank_values_ignored(self):
        config = load_config({"BUDGET": "1000", "MIN_EV": "  "})

        assert config.min_ev == 0.05

    def test_monitoring_mode_only_true_is_true(self):
        assert load_config({"BUDGET": "1", "MONITORING_MODE": "TRUE"}).monitoring_mode is True
        assert load_config({"BUDGET": "1", "MONITORING_MODE": "yes"}).monitoring_mode is False

    def test_missing_budget(self):
        with pytest.raises(ConfigError, match="budget"):
            load_config({})

    def test_invalid_number(self):
        with pytest.raises(ConfigError):
            load_config({"BUDGET": "lots"})

    def test_all_errors_reported(self):
        with pytest.raises(ConfigError) as exc_info:
            load_config({"BUDGET": "-1", "MIN_EV": "2", "POLL_INTERVAL": "1000"})

        message = str(exc_info.value)
        assert "budget" in message
        assert "min_ev" in message
        assert "poll_interval_ms" in message

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            load_config({})

    def test_default_source_is_os_environ(self, monkeypatch):
        monkeypatch.setenv("BUDGET", "750")
        for name in ("MIN_EV", "POLL_INTERVAL", "TARGET_ICAO", "MONITORING_MODE"):
            monkeypatch.delenv(name, raising=False)

        assert load_config().budget == 750.0

    def test_validate_config(self):
        ok, config, error = validate_config({"BUDGET": "1000"})
        assert ok and config is not None and error is None

        ok, config, error = validate_config({"BUDGET": "0"})
        assert not ok and config is None
        assert isinstance(error, ConfigError)
