"""
Time provider abstraction for deterministic testing

"Days until the event" drives several alerts, so "now" is injectable:
production reads the system clock, tests freeze and advance it.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Protocol


class TimeProvider(Protocol):
    """Protocol for time providers - allows deterministic testing"""

    def now(self) -> datetime:
        """Return current UTC datetime"""
        ...


class RealTimeProvider:
    """Production time provider using system clock"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class TestTimeProvider:
    """
    Controllable time provider for deterministic tests

    Allows tests to freeze time and advance it day by day.
    """

    __test__ = False  # not a pytest test class

    def __init__(self, initial_time: datetime | None = None) -> None:
        self._current_time = initial_time or datetime(1970, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._current_time

    def set_time(self, dt: datetime) -> None:
        self._current_time = dt

    def advance_days(self, days: int) -> None:
        self._current_time += timedelta(days=days)


def as_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC so stored and live values compare"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def days_until(event_date: date | None, now: datetime) -> int | None:
    """
    Whole days from now until the event date

    Returns None when the event has no date. Past events give negative values.
    """
    if event_date is None:
        return None
    return (event_date - now.date()).days


default_time_provider: TimeProvider = RealTimeProvider()
