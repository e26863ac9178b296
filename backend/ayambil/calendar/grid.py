"""Gregorian month grid construction."""

from __future__ import annotations

from datetime import date

from ayambil.calendar.dates import to_iso

_MONTH_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def _check_month(month0: int) -> None:
    if not 0 <= month0 <= 11:
        raise ValueError(f"month0 must be within 0..11, got {month0}")


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month0: int) -> int:
    """Number of days in the zero-based month of ``year``."""
    _check_month(month0)
    if month0 == 1 and is_leap_year(year):
        return 29
    return _MONTH_LENGTHS[month0]


def first_weekday_offset(year: int, month0: int) -> int:
    """Weekday index of day 1 with Sunday as 0."""
    _check_month(month0)
    return (date(year, month0 + 1, 1).weekday() + 1) % 7


def build_month_grid(year: int, month0: int) -> list[int | None]:
    """Return leading ``None`` padding followed by ``1..days_in_month``.

    The tail is not padded, so the last row of a seven-column grid may be short.
    """
    offset = first_weekday_offset(year, month0)
    return [None] * offset + list(range(1, days_in_month(year, month0) + 1))


def month_bounds(year: int, month0: int) -> tuple[str, str]:
    """First and last ISO dates of the month."""
    return to_iso(1, month0, year), to_iso(days_in_month(year, month0), month0, year)


def shift_month(year: int, month0: int, delta: int) -> tuple[int, int]:
    """Move ``delta`` months forward (or back), rolling the year over."""
    _check_month(month0)
    index = year * 12 + month0 + delta
    return index // 12, index % 12


def can_go_prev(year: int, month0: int, today: date) -> bool:
    """True while the displayed month is after the month containing ``today``."""
    return (year, month0) > (today.year, today.month - 1)


__all__ = [
    "build_month_grid",
    "can_go_prev",
    "days_in_month",
    "first_weekday_offset",
    "is_leap_year",
    "month_bounds",
    "shift_month",
]
