"""
Core Module - Engine Clock.

============================================================
RESPONSIBILITY
============================================================
Provides a single, injectable notion of "now" for every
time-relative metric in the engine:

- "new protocols in the last 30 days"
- velocity windows and decay status
- dormant protocol detection
- generatedAt stamps on results

Analysis functions accept an optional clock so identical input
plus an identical clock always produces identical output.

============================================================
DESIGN PRINCIPLES
============================================================
- UTC only - naive datetimes are interpreted as UTC
- Mockable for testing
- Thread-safe

============================================================
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from typing import Any, Generator, Optional
import threading

from .numbers import round_half_up


# Epoch values above this are treated as milliseconds (year ~5138 in seconds).
_EPOCH_MS_CUTOFF = 100_000_000_000


# ============================================================
# CLOCK PROTOCOL
# ============================================================

class ClockProtocol(ABC):
    """Abstract interface for the engine clock."""

    @abstractmethod
    def now(self) -> datetime:
        """Get current UTC datetime."""
        pass

    def timestamp(self) -> float:
        """Get current Unix timestamp."""
        return self.now().timestamp()

    def today(self) -> date:
        """Get current UTC date."""
        return self.now().date()

    def days_ago(self, days: float) -> datetime:
        """Get the UTC datetime `days` before now."""
        return self.now() - timedelta(days=days)


# ============================================================
# SYSTEM CLOCK (PRODUCTION)
# ============================================================

class SystemClock(ClockProtocol):
    """
    Production clock using actual system time.

    All times are in UTC.
    """

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


# ============================================================
# MOCK CLOCK (TESTING)
# ============================================================

class MockClock(ClockProtocol):
    """
    Mock clock for testing.

    Allows time manipulation for deterministic tests.
    """

    def __init__(self, initial_time: Optional[datetime] = None):
        """
        Initialize mock clock.

        Args:
            initial_time: Starting time (defaults to current UTC)
        """
        self._time = ensure_utc(initial_time or datetime.now(timezone.utc))
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._time

    def set_time(self, new_time: datetime) -> None:
        """Set the current time."""
        with self._lock:
            self._time = ensure_utc(new_time)

    def advance(self, seconds: float = 0, **kwargs) -> None:
        """
        Advance time by the specified amount.

        Args:
            seconds: Number of seconds to advance
            **kwargs: Passed to timedelta (hours, minutes, days, etc.)
        """
        with self._lock:
            self._time = self._time + timedelta(seconds=seconds, **kwargs)


# ============================================================
# DEFAULT CLOCK
# ============================================================

class ClockFactory:
    """Holds the process-wide default clock."""

    _instance: Optional[ClockProtocol] = None
    _lock = threading.Lock()

    @classmethod
    def get_clock(cls) -> ClockProtocol:
        """Get the global clock instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = SystemClock()
            return cls._instance

    @classmethod
    def set_clock(cls, clock: ClockProtocol) -> None:
        """Set the global clock instance."""
        with cls._lock:
            cls._instance = clock

    @classmethod
    def reset(cls) -> None:
        """Reset to default system clock."""
        with cls._lock:
            cls._instance = SystemClock()

    @classmethod
    @contextmanager
    def use_mock(
        cls,
        initial_time: Optional[datetime] = None,
    ) -> Generator[MockClock, None, None]:
        """
        Context manager to use mock clock temporarily.

        Args:
            initial_time: Initial time for mock clock
        """
        original = cls._instance
        mock = MockClock(initial_time)
        cls.set_clock(mock)
        try:
            yield mock
        finally:
            with cls._lock:
                cls._instance = original


def resolve_clock(clock: Optional[ClockProtocol] = None) -> ClockProtocol:
    """Return the given clock, or the global default."""
    return clock if clock is not None else ClockFactory.get_clock()


# ============================================================
# TIMESTAMP UTILITIES
# ============================================================

def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso8601(dt: datetime) -> str:
    """
    Format as ISO 8601 UTC with millisecond precision.

    Example: 2024-03-01T12:00:00.000Z
    """
    dt = ensure_utc(dt)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def from_iso8601(iso_string: str) -> datetime:
    """Parse ISO 8601 string (a trailing 'Z' is accepted) to UTC datetime."""
    value = iso_string.strip()
    if value.endswith("Z") or value.endswith("z"):
        value = value[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(value))


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Coerce a provider timestamp into a UTC datetime.

    Accepts datetimes, ISO 8601 strings, and Unix epochs in
    seconds or milliseconds. Returns None for None / empty input.

    Raises:
        ValueError: If the value cannot be interpreted as a time
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, bool):
        raise ValueError(f"Not a timestamp: {value!r}")
    if isinstance(value, (int, float)):
        seconds = value / 1000 if abs(value) >= _EPOCH_MS_CUTOFF else value
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise ValueError(f"Epoch out of range: {value!r}") from e
    if isinstance(value, str):
        stripped = value.strip()
        try:
            return parse_timestamp(float(stripped))
        except ValueError:
            return from_iso8601(stripped)
    raise ValueError(f"Not a timestamp: {value!r}")


def days_between(start: Optional[datetime], end: Optional[datetime]) -> int:
    """Whole days from start to end, rounded, never negative; 0 if either is missing."""
    if start is None or end is None:
        return 0
    diff = (ensure_utc(end) - ensure_utc(start)).total_seconds()
    return max(int(round_half_up(diff / 86400)), 0)


# ============================================================
# EXPORTS
# ============================================================

__all__ = [
    "ClockProtocol",
    "SystemClock",
    "MockClock",
    "ClockFactory",
    "resolve_clock",
    "ensure_utc",
    "to_iso8601",
    "from_iso8601",
    "parse_timestamp",
    "days_between",
]
