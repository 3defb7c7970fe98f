"""
Unit tests для Signal Generator.

Coverage:
- Фильтр истёкших рынков
- Строгий EV-фильтр (ev <= min_ev → нет сигнала)
- Рекомендация цены и размера
- Пакетная оценка: сортировка, счётчики фильтров, пропуск невалидных рынков
"""

import logging
import math

import pytest

from weather_edge.core.config import EngineConfig
from weather_edge.core.contracts import validate_trading_signal
from weather_edge.core.domain.market import Market
from weather_edge.core.domain.signal import FilterReason, SignalAction
from weather_edge.core.domain.stations import StationId
from weather_edge.core.domain.temperature import PrecisionTemperature
from weather_edge.core.domain.time_model import Duration, Instant, from_local_time
from weather_edge.core.math.probability import InvalidThresholdRangeError, calculate_range_probability
from weather_edge.signal.generator import SignalGenerator


NOW = from_local_time("2024-01-15 12:00", "America/New_York")


def market(
    market_id="m1",
    station=StationId.KLGA,
    min_threshold=25.0,
    max_threshold=math.inf,
    observation_end=None,
    market_price=0.5,
):
    return Market(
        id=market_id,
        yes_token_id=f"{market_id}-yes",
        station_id=station,
        min_threshold=min_threshold,
        max_threshold=max_threshold,
        observation_end=observation_end if observation_end is not None else NOW,
        market_price=market_price,
    )


def temp(c: float) -> PrecisionTemperature:
    return PrecisionTemperature.from_celsius(c)


@pytest.fixture
def config():
    """budget = 1000, MIN_EV = 0.05."""
    return EngineConfig(budget=1000.0)


@pytest.fixture
def generator(config):
    return SignalGenerator(config)


# =============================================================================
# ОДИН РЫНОК
# =============================================================================


class TestGenerateSignal:
    """Тесты generate_signal / evaluate_market."""

    def test_buy_signal_deterministic(self, generator):
        """Дедлайн сейчас (σ = 0), наблюдение в области → p = 1, BUY."""
        signal = generator.generate_signal(
            market(min_threshold=18.0, max_threshold=22.0, market_price=0.7), temp(20.0), NOW
        )

        assert signal is not None
        assert signal.action == SignalAction.BUY
        assert signal.probability == 1.0
        assert signal.ev == pytest.approx(0.3)
        assert signal.recommended_price == pytest.approx(0.99)
        assert signal.recommended_size == pytest.approx(30.0)
        assert signal.market_id == "m1"
        assert signal.token_id == "m1-yes"
        assert signal.timestamp == NOW

    def test_signal_fields_from_market(self, generator):
        signal = generator.generate_signal(
            market(station=StationId.KORD, min_threshold=-math.inf, max_threshold=22.0),
            temp(20.0),
            NOW,
        )

        assert signal.station_id == StationId.KORD
        assert signal.current_temp == 20.0
        assert signal.min_threshold == -math.inf
        assert signal.max_threshold == 22.0
        assert signal.market_price == 0.5

    def test_expired_market(self, generator):
        expired = market(observation_end=Instant.from_utc_ms(NOW.utc_ms - 1))
        evaluation = generator.evaluate_market(expired, temp(30.0), NOW)

        assert evaluation.signal is None
        assert evaluation.filter_reason == FilterReason.EXPIRED
        assert not evaluation.passed
        assert generator.generate_signal(expired, temp(30.0), NOW) is None

    def test_negative_sigma_table_rejected(self, config):
        with pytest.raises(ValueError, match="base sigma for KLGA"):
            SignalGenerator(config, sigma_table={"KLGA": -3.5})

    def test_custom_sigma_table_keeps_tail_probability(self, config):
        """20°C против потолка 25°C за 12ч: вероятность ~2%, сигнала нет."""
        generator = SignalGenerator(config, sigma_table={"KLGA": 3.5})
        end = Instant.from_utc_ms(NOW.utc_ms + Duration.from_hours(12).milliseconds)

        evaluation = generator.evaluate_market(market(observation_end=end), temp(20.0), NOW)

        assert evaluation.probability == pytest.approx(0.0217, abs=1e-3)
        assert evaluation.filter_reason == FilterReason.EV_TOO_LOW

    def test_ev_below_threshold_filtered(self, generator):
        """ev = 0.04 при MIN_EV = 0.05 → нет сигнала, фильтр по EV."""
        end = Instant.from_utc_ms(NOW.utc_ms + Duration.from_hours(12).milliseconds)
        p = calculate_range_probability(temp(20.0), -math.inf, 25.0, "KLGA", Duration.from_hours(12))

        evaluation = generator.evaluate_market(
            market(min_threshold=-math.inf, max_threshold=25.0, observation_end=end, market_price=p - 0.04),
            temp(20.0),
            NOW,
        )

        assert evaluation.signal is None
        assert evaluation.filter_reason == FilterReason.EV_TOO_LOW
        assert evaluation.ev == pytest.approx(0.04)
        assert evaluation.probability == pytest.approx(p)

    def test_ev_equal_to_min_ev_filtered(self):
        """Сравнение строгое: ev == min_ev не проходит."""
        generator = SignalGenerator(EngineConfig(budget=1000.0, min_ev=0.25))

        at_threshold = generator.evaluate_market(
            market(min_threshold=18.0, max_threshold=22.0, market_price=0.75), temp(20.0), NOW
        )
        above = generator.evaluate_market(
            market(min_threshold=18.0, max_threshold=22.0, market_price=0.74), temp(20.0), NOW
        )

        assert at_threshold.ev == 0.25
        assert at_threshold.filter_reason == FilterReason.EV_TOO_LOW
        assert above.passed

    def test_negative_ev_filtered(self, generator):
        """20°C против потолка 25°C за 12 часов при цене 0.5."""
        end = Instant.from_utc_ms(NOW.utc_ms + Duration.from_hours(12).milliseconds)

        assert generator.generate_signal(market(observation_end=end), temp(20.0), NOW) is None

    def test_invalid_range_propagates(self, generator):
        invalid = Market.model_construct(
            id="bad",
            yes_token_id="bad-yes",
            station_id=StationId.KLGA,
            min_threshold=25.0,
            max_threshold=20.0,
            observation_end=NOW,
            market_price=0.5,
        )

        with pytest.raises(InvalidThresholdRangeError):
            generator.generate_signal(invalid, temp(20.0), NOW)

    def test_signal_matches_contract(self, generator):
        signal = generator.generate_signal(market(min_threshold=18.0), temp(20.0), NOW)

        validate_trading_signal(signal.to_contract())


# =============================================================================
# ЦЕНА И РАЗМЕР
# =============================================================================


class TestPriceAndSize:
    """Рекомендации цены и размера."""

    def test_should_generate_signal(self, generator):
        assert generator.min_ev == 0.05
        assert generator.should_generate_signal(0.06)
        assert not generator.should_generate_signal(0.05)
        assert not generator.should_generate_signal(-0.2)

    def test_price_shade_clamped_at_zero(self, generator):
        assert generator._recommended_price(0.005, 0.0, SignalAction.BUY) == 0.0

    def test_hold_uses_market_price(self, generator):
        assert generator._recommended_price(0.9, 0.42, SignalAction.HOLD) == 0.42

    def test_size_proportional_to_ev(self, generator):
        """budget * 0.10 * ev."""
        assert generator._recommended_size(0.2) == pytest.approx(20.0)
        assert generator._recommended_size(1.0) == pytest.approx(100.0)

    def test_size_never_exceeds_budget(self):
        generator = SignalGenerator(EngineConfig(budget=50.0, max_allocation_fraction=1.0))

        assert generator._recommended_size(1.0) == 50.0
        assert generator._recommended_size(-0.5) == 0.0


# =============================================================================
# ПАКЕТ РЫНКОВ
# =============================================================================


class TestGenerateSignals:
    """Тесты generate_signals."""

    def test_sorted_by_ev_and_counts(self, generator):
        markets = [
            market("low_ev", min_threshold=18.0, max_threshold=22.0, market_price=0.97),
            market("ev_30", min_threshold=18.0, max_threshold=22.0, market_price=0.70),
            market("expired", observation_end=Instant.from_utc_ms(NOW.utc_ms - 60_000)),
            market("ev_50", min_threshold=18.0, max_threshold=22.0, market_price=0.50),
        ]

        result = generator.generate_signals(markets, {"KLGA": temp(20.0)}, NOW)

        assert [s.market_id for s in result.signals] == ["ev_50", "ev_30"]
        assert result.total_signals == 2
        assert result.filtered_by_ev == 1
        assert result.filtered_by_expired == 1
        assert result.filtered_by_missing_observation == 0
        assert result.failed_validation == []

    def test_ev_filtered_not_counted_as_expired(self, generator):
        result = generator.generate_signals(
            [market(min_threshold=18.0, max_threshold=22.0, market_price=0.96)],
            temp(20.0),
            NOW,
        )

        assert result.filtered_by_ev == 1
        assert result.filtered_by_expired == 0

    def test_missing_observation(self, generator):
        markets = [
            market("ny", min_threshold=18.0, max_threshold=22.0),
            market("london", station=StationId.EGLC, min_threshold=18.0, max_threshold=22.0),
        ]

        result = generator.generate_signals(markets, {"KLGA": temp(20.0)}, NOW)

        assert [s.market_id for s in result.signals] == ["ny"]
        assert result.filtered_by_missing_observation == 1

    def test_invalid_market_skipped_and_logged(self, generator, caplog):
        invalid = Market.model_construct(
            id="bad",
            yes_token_id="bad-yes",
            station_id=StationId.KLGA,
            min_threshold=25.0,
            max_threshold=20.0,
            observation_end=NOW,
            market_price=0.5,
        )
        markets = [invalid, market("ok", min_threshold=18.0, max_threshold=22.0)]

        with caplog.at_level(logging.WARNING, logger="weather_edge"):
            result = generator.generate_signals(markets, {"KLGA": temp(20.0)}, NOW)

        assert result.failed_validation == ["bad"]
        assert [s.market_id for s in result.signals] == ["ok"]
        assert any("bad" in r.getMessage() for r in caplog.records if r.levelno == logging.WARNING)

    def test_empty_batch(self, generator):
        result = generator.generate_signals([], {}, NOW)

        assert result.signals == []
        assert result.total_signals == 0
        assert result.filtered_by_ev == 0
        assert result.filtered_by_expired == 0

    def test_injected_logger(self, config, caplog):
        logger = logging.getLogger("weather_edge.test.signals")
        generator = SignalGenerator(config, logger=logger)

        with caplog.at_level(logging.INFO, logger="weather_edge.test.signals"):
            generator.generate_signals([market(min_threshold=18.0)], temp(20.0), NOW)

        assert any(r.name == "weather_edge.test.signals" for r in caplog.records)
