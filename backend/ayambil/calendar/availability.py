"""Per-day availability classification shared by every calendar screen."""

from __future__ import annotations

import enum
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date

from ayambil.calendar.dates import is_past, to_iso
from ayambil.calendar.grid import build_month_grid

DEFAULT_MAX_BOOKINGS_PER_DAY = 3


class Availability(str, enum.Enum):
    """Derived state of a calendar day. Never persisted."""

    PAST = "past"
    NOT_OPEN = "not_open"
    AVAILABLE = "available"
    FULL = "full"
    SELECTED = "selected"


SELECTABLE = frozenset({Availability.AVAILABLE, Availability.SELECTED})


@dataclass(frozen=True)
class MonthAvailability:
    """Remote data for one displayed month: open dates, counts and the daily cap."""

    year: int
    month0: int
    open_dates: frozenset[str] = frozenset()
    counts: Mapping[str, int] = field(default_factory=dict)
    cap: int = DEFAULT_MAX_BOOKINGS_PER_DAY

    @classmethod
    def from_service(
        cls,
        year: int,
        month0: int,
        *,
        statuses: Iterable[Mapping[str, str]],
        counts: Mapping[str, int],
        cap: int | None,
    ) -> "MonthAvailability":
        """Build from the raw ``[{date, status}]`` list and count map.

        Only entries whose status is ``open`` are kept; a missing entry means closed.
        """
        open_dates = frozenset(
            str(item["date"]) for item in statuses if item.get("status") == "open"
        )
        return cls(
            year=year,
            month0=month0,
            open_dates=open_dates,
            counts={key: max(0, int(value)) for key, value in counts.items()},
            cap=cap or DEFAULT_MAX_BOOKINGS_PER_DAY,
        )

    def matches(self, year: int, month0: int) -> bool:
        return self.year == year and self.month0 == month0

    def remaining(self, iso_date: str) -> int:
        return remaining(iso_date, self.counts, self.cap)


@dataclass(frozen=True)
class DayCell:
    """One rendered slot of a month grid; ``day`` is None for padding."""

    day: int | None
    iso_date: str | None = None
    availability: Availability | None = None
    remaining: int | None = None


def classify(
    day: int | None,
    year: int,
    month0: int,
    open_dates: Collection[str],
    counts: Mapping[str, int],
    cap: int,
    selection: Collection[str],
    today: date,
) -> Availability | None:
    """Classify one day; first matching rule wins.

    PAST > NOT_OPEN > FULL > SELECTED > AVAILABLE. Padding slots (``day is None``)
    have no classification.
    """
    if day is None:
        return None
    iso_date = to_iso(day, month0, year)
    if is_past(iso_date, today):
        return Availability.PAST
    if iso_date not in open_dates:
        return Availability.NOT_OPEN
    if counts.get(iso_date, 0) >= cap:
        return Availability.FULL
    if iso_date in selection:
        return Availability.SELECTED
    return Availability.AVAILABLE


def classify_date(
    iso_date: str,
    month: MonthAvailability,
    selection: Collection[str],
    today: date,
) -> Availability | None:
    """Classify an ISO date that belongs to ``month``; other months yield None."""
    if not iso_date.startswith(f"{month.year:04d}-{month.month0 + 1:02d}-"):
        return None
    try:
        day = int(iso_date[8:10])
    except ValueError:
        return None
    return classify(
        day,
        month.year,
        month.month0,
        month.open_dates,
        month.counts,
        month.cap,
        selection,
        today,
    )


def remaining(iso_date: str, counts: Mapping[str, int], cap: int) -> int:
    """Seats left on a day, never negative."""
    return max(0, cap - counts.get(iso_date, 0))


def is_selectable(availability: Availability | None) -> bool:
    return availability in SELECTABLE


def classify_month(
    month: MonthAvailability,
    selection: Collection[str],
    today: date,
) -> list[DayCell]:
    """Annotate the month grid with a classification per day."""
    cells: list[DayCell] = []
    for day in build_month_grid(month.year, month.month0):
        if day is None:
            cells.append(DayCell(day=None))
            continue
        iso_date = to_iso(day, month.month0, month.year)
        cells.append(
            DayCell(
                day=day,
                iso_date=iso_date,
                availability=classify(
                    day,
                    month.year,
                    month.month0,
                    month.open_dates,
                    month.counts,
                    month.cap,
                    selection,
                    today,
                ),
                remaining=month.remaining(iso_date),
            )
        )
    return cells


__all__ = [
    "Availability",
    "DEFAULT_MAX_BOOKINGS_PER_DAY",
    "DayCell",
    "MonthAvailability",
    "SELECTABLE",
    "classify",
    "classify_date",
    "classify_month",
    "is_selectable",
    "remaining",
]
