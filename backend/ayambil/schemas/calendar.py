"""Schemas for the admin-curated booking calendar."""
from __future__ import annotations

import datetime as dt

from pydantic import model_validator

from ayambil.calendar.range_selector import DateStatus
from ayambil.schemas.base import CamelModel

MAX_BULK_DAYS = 366


class CalendarDateRead(CamelModel):
    date: dt.date
    status: DateStatus


class CalendarStatusUpdate(CamelModel):
    """Set the status of one date."""

    date: dt.date
    status: DateStatus


class CalendarBulkUpdate(CamelModel):
    """Apply one status to a contiguous range or an explicit list of dates."""

    status: DateStatus
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    dates: list[dt.date] | None = None

    @model_validator(mode="after")
    def _check_target(self) -> "CalendarBulkUpdate":
        has_range = self.start_date is not None and self.end_date is not None
        if not has_range and not self.dates:
            raise ValueError("Provide startDate and endDate, or a non-empty dates list")
        if has_range and self.dates:
            raise ValueError("Provide either a date range or a dates list, not both")
        if self.dates and len(self.dates) > MAX_BULK_DAYS:
            raise ValueError(f"At most {MAX_BULK_DAYS} dates per request")
        if has_range:
            assert self.start_date is not None and self.end_date is not None
            if abs((self.end_date - self.start_date).days) + 1 > MAX_BULK_DAYS:
                raise ValueError(f"At most {MAX_BULK_DAYS} dates per request")
        return self


class CalendarBulkResult(CamelModel):
    status: DateStatus
    updated: int
    dates: list[dt.date]
