from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock whose successive readings strictly increase.

    Outbox items are ordered by ``created_at``; equal readings would leave
    two mutations of one task ordered by their random ids.
    """

    _TICK = timedelta(microseconds=1)

    def __init__(self) -> None:
        self._last: datetime | None = None

    def now(self) -> datetime:
        current = datetime.now(timezone.utc)
        if self._last is not None and current <= self._last:
            current = self._last + self._TICK
        self._last = current
        return current


system_clock = SystemClock()
