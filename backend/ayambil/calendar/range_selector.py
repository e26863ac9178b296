"""Two-click range gesture for bulk opening or closing calendar dates."""

from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable
from datetime import date, timedelta

from ayambil.calendar.dates import is_past, parse_iso

RangeWriter = Callable[[list[str], str], Awaitable[None]]


class RangeState(str, enum.Enum):
    IDLE = "idle"
    ANCHOR_SET = "anchor_set"
    RANGE_READY = "range_ready"


class DateStatus(str, enum.Enum):
    """Admin-curated status of a date. Absence of an entry means closed."""

    OPEN = "open"
    CLOSED = "closed"


def _ordered(first: str, second: str) -> tuple[str, str]:
    first_date, second_date = parse_iso(first), parse_iso(second)
    if first_date is None or second_date is None:
        raise ValueError(f"Invalid ISO dates: {first!r}, {second!r}")
    if first_date <= second_date:
        return first_date.isoformat(), second_date.isoformat()
    return second_date.isoformat(), first_date.isoformat()


def dates_in_range(start: str, end: str) -> list[str]:
    """Every ISO date from ``min(start, end)`` to ``max(start, end)`` inclusive."""
    low, high = _ordered(start, end)
    current, last = date.fromisoformat(low), date.fromisoformat(high)
    days: list[str] = []
    while current <= last:
        days.append(current.isoformat())
        current += timedelta(days=1)
    return days


class RangeSelector:
    """Anchor / preview / complete state machine.

    ``anchor`` is set only while waiting for the second click. ``start`` and
    ``end`` hold the hover preview during that phase and the committed range
    afterwards.
    """

    def __init__(self) -> None:
        self.anchor: str | None = None
        self.start: str | None = None
        self.end: str | None = None

    @property
    def state(self) -> RangeState:
        if self.anchor is not None:
            return RangeState.ANCHOR_SET
        if self.start is not None and self.end is not None:
            return RangeState.RANGE_READY
        return RangeState.IDLE

    def click(self, iso_date: str, today: date) -> RangeState:
        if parse_iso(iso_date) is None or is_past(iso_date, today):
            return self.state
        if self.anchor is None:
            self.anchor = iso_date
            self.start = None
            self.end = None
        else:
            self.start, self.end = _ordered(self.anchor, iso_date)
            self.anchor = None
        return self.state

    def hover(self, iso_date: str, today: date) -> RangeState:
        """Preview the range while the anchor is set; never commits."""
        if self.anchor is None:
            return self.state
        if parse_iso(iso_date) is None or is_past(iso_date, today):
            return self.state
        self.start, self.end = _ordered(self.anchor, iso_date)
        return self.state

    def cancel(self) -> None:
        self.anchor = None
        self.start = None
        self.end = None

    def contains(self, iso_date: str) -> bool:
        """Whether ``iso_date`` lies in the highlighted (preview or final) range."""
        if self.start is None or self.end is None:
            return False
        target = parse_iso(iso_date)
        if target is None:
            return False
        return date.fromisoformat(self.start) <= target <= date.fromisoformat(self.end)

    def pending_dates(self) -> list[str]:
        if self.state is not RangeState.RANGE_READY:
            return []
        assert self.start is not None and self.end is not None
        return dates_in_range(self.start, self.end)

    async def commit(self, status: DateStatus | str, writer: RangeWriter) -> list[str]:
        """Write ``status`` for the whole range through ``writer``.

        On success the selector returns to IDLE and the written dates are
        returned. If ``writer`` raises, the range stays selected and the error
        propagates so the caller can report it and retry.
        """
        if self.state is not RangeState.RANGE_READY:
            return []
        value = DateStatus(status)
        days = self.pending_dates()
        await writer(days, value.value)
        self.cancel()
        return days


__all__ = [
    "DateStatus",
    "RangeSelector",
    "RangeState",
    "RangeWriter",
    "dates_in_range",
]
