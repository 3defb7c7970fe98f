"""Signal Generator — EV-фильтр и рекомендация цены/размера

Конвейер по одному рынку (останавливается на первом дисквалифицирующем условии):
1. time_remaining = observation_end - now
2. Рынок истёк → нет сигнала (filtered: expired)
3. probability = calculate_range_probability(...)
4. ev = probability - market_price
5. ev <= min_ev → нет сигнала (filtered: EV too low), сравнение строгое
6. action = BUY при ev > 0, иначе HOLD
7. recommended_price: BUY → clamp(probability - price_shade, 0, 1); HOLD → market_price
8. recommended_size = clamp(budget * max_allocation_fraction * min(ev, 1), 0, budget)

Пакетная оценка сортирует сигналы по ev (убывание) и раздельно считает
отфильтрованные по истечению и по EV.

Ошибки валидации (min > max, цена вне [0, 1]) не являются фильтрами: в
одиночной оценке они пробрасываются вызывающему, в пакетной — рынок
пропускается, ошибка логируется и попадает в failed_validation.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from weather_edge.core.config import EngineConfig
from weather_edge.core.domain.market import Market
from weather_edge.core.domain.stations import UnknownStationError
from weather_edge.core.domain.signal import (
    FilterReason,
    SignalAction,
    SignalGenerationResult,
    TradingSignal,
)
from weather_edge.core.domain.temperature import PrecisionTemperature
from weather_edge.core.domain.time_model import Instant, subtract
from weather_edge.core.math.numerical_safeguards import clamp
from weather_edge.core.math.probability import (
    InvalidProbabilityError,
    InvalidThresholdRangeError,
    calculate_range_probability,
    expected_value,
    is_expired,
)
from weather_edge.core.math.sigma import SigmaCalculator


@dataclass(frozen=True)
class SignalEvaluation:
    """Результат оценки одного рынка: сигнал или причина фильтрации."""

    market_id: str
    signal: Optional[TradingSignal]
    filter_reason: Optional[FilterReason]
    probability: Optional[float] = None
    ev: Optional[float] = None

    @property
    def passed(self) -> bool:
        return self.signal is not None


class SignalGenerator:
    """Генератор торговых сигналов на основе EV.

    Чистые вычисления над входами; состояния между вызовами нет.
    """

    def __init__(
        self,
        config: EngineConfig,
        logger: Optional[logging.Logger] = None,
        sigma_table: Optional[Mapping[str, float]] = None,
    ):
        """
        Args:
            config: Конфигурация ядра (min_ev, budget, сайзинг)
            logger: Логгер (по умолчанию логгер модуля)
            sigma_table: Альтернативная таблица base σ (optional)

        Raises:
            ValueError: Если base σ в sigma_table не положительна
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.sigma_table = SigmaCalculator(sigma_table).table

    @property
    def min_ev(self) -> float:
        return self.config.min_ev

    def should_generate_signal(self, ev: float) -> bool:
        """EV строго больше порога."""
        return ev > self.config.min_ev

    # -------------------------------------------------------------------------
    # Один рынок
    # -------------------------------------------------------------------------

    def evaluate_market(
        self,
        market: Market,
        current_temp: PrecisionTemperature,
        now: Instant,
    ) -> SignalEvaluation:
        """Оценка рынка с указанием причины фильтрации.

        Raises:
            InvalidThresholdRangeError: min_threshold > max_threshold
            InvalidProbabilityError: market_price вне [0, 1]
        """
        # 1-2. Истечение
        time_remaining = subtract(market.observation_end, now)
        if is_expired(time_remaining):
            self.logger.debug(
                "Market %s filtered: expired %.2fh ago", market.id, -time_remaining.hours
            )
            return SignalEvaluation(
                market_id=market.id, signal=None, filter_reason=FilterReason.EXPIRED
            )

        # 3-4. Вероятность и EV
        probability = calculate_range_probability(
            current_temp,
            market.min_threshold,
            market.max_threshold,
            market.station_id.value,
            time_remaining,
            self.sigma_table,
        )
        ev = expected_value(probability, market.market_price)

        # 5. EV-фильтр
        if not self.should_generate_signal(ev):
            self.logger.debug(
                "Market %s filtered: ev=%.4f <= min_ev=%.4f (p=%.4f, price=%.4f)",
                market.id, ev, self.config.min_ev, probability, market.market_price,
            )
            return SignalEvaluation(
                market_id=market.id,
                signal=None,
                filter_reason=FilterReason.EV_TOO_LOW,
                probability=probability,
                ev=ev,
            )

        # 6-8. Действие, цена, размер
        action = SignalAction.BUY if ev > 0 else SignalAction.HOLD
        signal = TradingSignal(
            market_id=market.id,
            token_id=market.yes_token_id,
            station_id=market.station_id,
            action=action,
            current_temp=current_temp.celsius,
            min_threshold=market.min_threshold,
            max_threshold=market.max_threshold,
            probability=probability,
            market_price=market.market_price,
            ev=ev,
            recommended_price=self._recommended_price(probability, market.market_price, action),
            recommended_size=self._recommended_size(ev),
            timestamp=now,
        )

        self.logger.info(
            "Signal %s %s: p=%.4f price=%.4f ev=%.4f size=%.2f @ %.2f",
            signal.action.value, market.id, probability, market.market_price, ev,
            signal.recommended_size, signal.recommended_price,
        )
        return SignalEvaluation(
            market_id=market.id, signal=signal, filter_reason=None, probability=probability, ev=ev
        )

    def generate_signal(
        self,
        market: Market,
        current_temp: PrecisionTemperature,
        now: Instant,
    ) -> Optional[TradingSignal]:
        """Сигнал по рынку или None, если рынок отфильтрован."""
        return self.evaluate_market(market, current_temp, now).signal

    # -------------------------------------------------------------------------
    # Пакет рынков
    # -------------------------------------------------------------------------

    def generate_signals(
        self,
        markets: Iterable[Market],
        observations: Mapping[str, PrecisionTemperature] | PrecisionTemperature,
        now: Instant,
    ) -> SignalGenerationResult:
        """Оценка набора рынков.

        Args:
            markets: Рынки для оценки
            observations: Наблюдения по станциям (или одно наблюдение для всех)
            now: Текущий момент

        Returns:
            SignalGenerationResult с сигналами по убыванию ev и счётчиками фильтров
        """
        signals = []
        filtered_by_ev = 0
        filtered_by_expired = 0
        filtered_by_missing = 0
        failed_validation = []

        for market in markets:
            current_temp = self._observation_for(market, observations)
            if current_temp is None:
                filtered_by_missing += 1
                self.logger.debug(
                    "Market %s filtered: no observation for %s", market.id, market.station_id.value
                )
                continue

            try:
                evaluation = self.evaluate_market(market, current_temp, now)
            except (InvalidThresholdRangeError, InvalidProbabilityError, UnknownStationError) as e:
                self.logger.warning("Market %s skipped: %s", market.id, e)
                failed_validation.append(market.id)
                continue

            if evaluation.signal is not None:
                signals.append(evaluation.signal)
            elif evaluation.filter_reason == FilterReason.EXPIRED:
                filtered_by_expired += 1
            else:
                filtered_by_ev += 1

        signals.sort(key=lambda s: s.ev, reverse=True)

        self.logger.info(
            "Signal batch: %d signals, %d filtered by EV, %d expired, %d missing observation, %d invalid",
            len(signals), filtered_by_ev, filtered_by_expired, filtered_by_missing,
            len(failed_validation),
        )
        return SignalGenerationResult(
            signals=signals,
            filtered_by_ev=filtered_by_ev,
            filtered_by_expired=filtered_by_expired,
            filtered_by_missing_observation=filtered_by_missing,
            failed_validation=failed_validation,
        )

    # -------------------------------------------------------------------------
    # Внутреннее
    # -------------------------------------------------------------------------

    @staticmethod
    def _observation_for(
        market: Market,
        observations: Mapping[str, PrecisionTemperature] | PrecisionTemperature,
    ) -> Optional[PrecisionTemperature]:
        if isinstance(observations, PrecisionTemperature):
            return observations
        return observations.get(market.station_id.value)

    def _recommended_price(
        self, probability: float, market_price: float, action: SignalAction
    ) -> float:
        """BUY: чуть ниже вероятности модели; HOLD: цена рынка."""
        if action == SignalAction.BUY:
            return clamp(probability - self.config.price_shade, 0.0, 1.0)
        return market_price

    def _recommended_size(self, ev: float) -> float:
        """Размер пропорционален EV, ограничен долей бюджета (не полный Kelly)."""
        size = self.config.budget * self.config.max_allocation_fraction * min(ev, 1.0)
        return clamp(size, 0.0, self.config.budget)
