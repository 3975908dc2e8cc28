"""Clock abstraction so timer due-ness can be driven deterministically in tests."""

from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Source of the current instant."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock, always timezone-aware UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class ManualClock:
    """Clock that only moves when told to.

    Example:
        clock = ManualClock(datetime(2030, 1, 1, tzinfo=UTC))
        clock.advance(seconds=5)
    """

    def __init__(self, start: datetime | None = None) -> None:
        if start is not None and start.tzinfo is None:
            raise ValueError("ManualClock requires a timezone-aware start time")
        self._now = start or datetime.now(UTC)
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def set(self, value: datetime) -> None:
        if value.tzinfo is None:
            raise ValueError("ManualClock requires a timezone-aware time")
        with self._lock:
            self._now = value

    def advance(self, delta: timedelta | None = None, *, seconds: float = 0) -> datetime:
        step = (delta or timedelta()) + timedelta(seconds=seconds)
        with self._lock:
            self._now = self._now + step
            return self._now
