"""
Time Model — моменты времени с привязкой к часовому поясу

Все дедлайны рынков задаются в локальном времени станции (NYC, Chicago,
London), а расчёт вероятности зависит от оставшегося времени. Ошибка часового
пояса искажает σ и порождает ложные сигналы, поэтому:

- Instant хранит момент в UTC (миллисекунды) и метку IANA-зоны, из которой он
  получен. Метка — только метаданные, сравнение всегда по UTC.
- Duration — знаковый интервал, получаемый только вычитанием двух Instant или
  из количества миллисекунд.
- Разбор локального времени никогда не подставляет значение по умолчанию:
  некорректная строка или неизвестная зона → LocalTimeParseError.

DST:
- несуществующее локальное время (spring-forward gap) сдвигается вперёд на
  длину разрыва (02:30 при переходе 02:00→03:00 становится 03:30);
- неоднозначное локальное время (fall-back overlap) разрешается в более ранний
  момент (смещение до перехода).
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Final
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

UTC_ZONE: Final[str] = "UTC"

MS_PER_SECOND: Final[int] = 1_000
MS_PER_MINUTE: Final[int] = 60_000
MS_PER_HOUR: Final[int] = 3_600_000

DEFAULT_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S %Z"

# Дата и время суток обязательны: "YYYY-MM-DD HH:MM" или "YYYY-MM-DDTHH:MM[:SS[.fff]]"
CIVIL_PATTERN: Final[re.Pattern] = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?(?=$|[+\-Z])")


# =============================================================================
# ERRORS
# =============================================================================


class LocalTimeParseError(ValueError):
    """Строка локального времени или идентификатор зоны не распознаны."""


# =============================================================================
# DURATION
# =============================================================================


@dataclass(frozen=True)
class Duration:
    """Знаковый интервал времени с точностью до миллисекунды."""

    milliseconds: int

    @classmethod
    def from_milliseconds(cls, ms: int) -> "Duration":
        return cls(milliseconds=int(ms))

    @classmethod
    def from_hours(cls, hours: float) -> "Duration":
        return cls(milliseconds=round(hours * MS_PER_HOUR))

    @property
    def seconds(self) -> float:
        return self.milliseconds / MS_PER_SECOND

    @property
    def minutes(self) -> float:
        return self.milliseconds / MS_PER_MINUTE

    @property
    def hours(self) -> float:
        return self.milliseconds / MS_PER_HOUR

    def is_negative(self) -> bool:
        return self.milliseconds < 0

    def is_positive(self) -> bool:
        return self.milliseconds > 0


# =============================================================================
# INSTANT
# =============================================================================


@dataclass(frozen=True, eq=False)
class Instant:
    """
    Момент времени в UTC с меткой исходного часового пояса.

    Immutable. Создаётся только через фабрики now/from_utc/from_utc_ms/
    from_local_time. Упорядочивание и is_same_moment используют только utc_ms.
    """

    utc_ms: int
    timezone: str = UTC_ZONE

    def __post_init__(self) -> None:
        if not isinstance(self.utc_ms, int) or isinstance(self.utc_ms, bool):
            raise TypeError(f"utc_ms must be int, got {type(self.utc_ms).__name__}")
        _load_zone(self.timezone)

    # -------------------------------------------------------------------------
    # Фабрики
    # -------------------------------------------------------------------------

    @classmethod
    def now(cls) -> "Instant":
        """Текущий момент в UTC."""
        return cls.from_utc(datetime.now(timezone.utc))

    @classmethod
    def from_utc(cls, value: datetime) -> "Instant":
        """
        Instant из aware datetime (любой зоны, приводится к UTC).

        Raises:
            ValueError: Если datetime naive (без tzinfo)
        """
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError("from_utc requires a timezone-aware datetime")
        delta = value.astimezone(timezone.utc) - _EPOCH
        utc_ms = (delta.days * 86_400 + delta.seconds) * MS_PER_SECOND + delta.microseconds // 1000
        return cls(utc_ms=utc_ms, timezone=UTC_ZONE)

    @classmethod
    def from_utc_ms(cls, utc_ms: int, zone: str = UTC_ZONE) -> "Instant":
        return cls(utc_ms=int(utc_ms), timezone=zone)

    @classmethod
    def from_local_time(cls, civil: str, zone: str) -> "Instant":
        """
        Интерпретация строки как настенного времени в зоне zone.

        Формат: ISO-8601 без смещения ("2024-01-15 23:59", "2024-01-15T23:59:00").

        Args:
            civil: Дата-время в локальном времени
            zone: IANA-идентификатор зоны (например, "America/New_York")

        Returns:
            Instant с меткой zone

        Raises:
            LocalTimeParseError: Некорректная строка, строка со смещением,
                неизвестная зона
        """
        tz = _load_zone(zone)

        if not isinstance(civil, str) or not civil.strip():
            raise LocalTimeParseError(f"Empty or non-string local time: {civil!r}")

        if not CIVIL_PATTERN.match(civil.strip()):
            raise LocalTimeParseError(
                f"Malformed local time {civil!r}: expected YYYY-MM-DD HH:MM[:SS]"
            )

        try:
            naive = datetime.fromisoformat(civil.strip())
        except ValueError as e:
            raise LocalTimeParseError(f"Malformed local time {civil!r}: {e}") from e

        if naive.tzinfo is not None:
            raise LocalTimeParseError(
                f"Local time {civil!r} carries its own offset; expected wall-clock time for {zone}"
            )

        # fold=0: в overlap берётся первое вхождение, в gap берётся смещение до перехода,
        # что сдвигает момент вперёд на длину разрыва
        aware = naive.replace(tzinfo=tz, fold=0)
        utc_value = aware.astimezone(timezone.utc)

        roundtrip = utc_value.astimezone(tz).replace(tzinfo=None)
        if roundtrip != naive:
            logger.debug(
                "Nonexistent local time %s in %s shifted forward to %s",
                civil, zone, roundtrip.isoformat(sep=" "),
            )
        elif aware.replace(fold=1).utcoffset() != aware.utcoffset():
            logger.debug("Ambiguous local time %s in %s resolved to earlier offset", civil, zone)

        return cls(utc_ms=cls.from_utc(utc_value).utc_ms, timezone=zone)

    # -------------------------------------------------------------------------
    # Операции
    # -------------------------------------------------------------------------

    def to_datetime(self) -> datetime:
        """Aware datetime в UTC."""
        return _EPOCH + timedelta(milliseconds=self.utc_ms)

    def to_local_datetime(self) -> datetime:
        """Aware datetime в зоне метки."""
        return self.to_datetime().astimezone(_load_zone(self.timezone))

    def to_timezone(self, zone: str) -> "Instant":
        """Тот же момент с другой меткой зоны (только для отображения)."""
        return Instant(utc_ms=self.utc_ms, timezone=zone)

    def format(self, fmt: str = DEFAULT_FORMAT) -> str:
        """Форматирование в зоне метки (strftime-формат)."""
        return self.to_local_datetime().strftime(fmt)

    def isoformat(self) -> str:
        return self.to_datetime().isoformat().replace("+00:00", "Z")

    def is_same_moment(self, other: "Instant") -> bool:
        return self.utc_ms == other.utc_ms

    def __sub__(self, other: "Instant") -> Duration:
        if not isinstance(other, Instant):
            return NotImplemented
        return subtract(self, other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self.utc_ms == other.utc_ms

    def __hash__(self) -> int:
        return hash(self.utc_ms)

    def __lt__(self, other: "Instant") -> bool:
        return self.utc_ms < other.utc_ms

    def __le__(self, other: "Instant") -> bool:
        return self.utc_ms <= other.utc_ms

    def __gt__(self, other: "Instant") -> bool:
        return self.utc_ms > other.utc_ms

    def __ge__(self, other: "Instant") -> bool:
        return self.utc_ms >= other.utc_ms


_EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _load_zone(zone: str) -> ZoneInfo:
    if not isinstance(zone, str) or not zone:
        raise LocalTimeParseError(f"Invalid timezone identifier: {zone!r}")
    try:
        return ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise LocalTimeParseError(f"Unknown timezone: {zone!r}") from e


# =============================================================================
# MODULE-LEVEL API
# =============================================================================


def now() -> Instant:
    return Instant.now()


def from_local_time(civil: str, zone: str) -> Instant:
    return Instant.from_local_time(civil, zone)


def subtract(later: Instant, earlier: Instant) -> Duration:
    """
    Интервал later − earlier (знак сохраняется).

    Используется для расчёта оставшегося времени до дедлайна:
    отрицательный результат означает, что рынок истёк.
    """
    return Duration.from_milliseconds(later.utc_ms - earlier.utc_ms)
