"""Screen controllers driving the public and admin calendars.

Each screen owns one displayed month and applies only the fetch result that
matches the month still on display; responses for a month the user has
navigated away from are dropped.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date
from typing import Any

from ayambil.calendar.availability import (
    Availability,
    DayCell,
    MonthAvailability,
    classify_date,
    classify_month,
)
from ayambil.calendar.dates import is_past, to_iso
from ayambil.calendar.grid import build_month_grid, can_go_prev, shift_month
from ayambil.calendar.range_selector import DateStatus, RangeSelector, RangeState
from ayambil.calendar.selection import DEFAULT_MAX_DATES, SelectionManager
from ayambil.client.api import CalendarServiceClient, ServiceError, ValidationFailed

logger = logging.getLogger(__name__)

_TEN_DIGITS = re.compile(r"^\d{10}$")

BACKEND_TO_FORM_FIELDS = {
    "upiNumber": "upiMobile",
    "whatsappNumber": "whatsappMobile",
    "ayambilShalaName": "schoolName",
    "bookingDate": "date",
}


class NotificationKind(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    message: str
    kind: NotificationKind = NotificationKind.SUCCESS


class MonthCalendarScreen:
    """Month navigation, loading flag and stale-response guard."""

    def __init__(
        self,
        client: CalendarServiceClient,
        *,
        year: int | None = None,
        month0: int | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.client = client
        self.clock = clock
        today = clock()
        self.year = today.year if year is None else year
        self.month0 = today.month - 1 if month0 is None else month0
        self.month: MonthAvailability | None = None
        self._in_flight: dict[tuple[int, int], int] = {}
        self.notifications: list[Notification] = []

    @property
    def loading(self) -> bool:
        """Whether a fetch for the displayed month is still pending."""
        return self._in_flight.get((self.year, self.month0), 0) > 0

    @property
    def today(self) -> date:
        return self.clock()

    def notify(self, message: str, kind: NotificationKind = NotificationKind.SUCCESS) -> None:
        self.notifications.append(Notification(message, kind))

    def dismiss(self, notification: Notification) -> None:
        """Remove one notification; unknown ones are ignored."""
        for index, current in enumerate(self.notifications):
            if current is notification:
                del self.notifications[index]
                return

    def clear_notifications(self) -> None:
        self.notifications.clear()

    def go_to(self, year: int, month0: int) -> None:
        if not 0 <= month0 <= 11:
            raise ValueError(f"month0 must be in 0..11, got {month0}")
        self.year, self.month0 = year, month0

    def can_go_prev(self) -> bool:
        return can_go_prev(self.year, self.month0, self.today)

    def navigate(self, delta: int) -> bool:
        """Move by ``delta`` months; backwards stops at the current month."""
        if delta < 0 and not self.can_go_prev():
            return False
        self.year, self.month0 = shift_month(self.year, self.month0, delta)
        return True

    async def _fetch(self, year: int, month0: int) -> MonthAvailability:
        return await self.client.fetch_month(year, month0)

    async def load(self) -> bool:
        """Fetch the displayed month. Returns True when the result was applied."""
        requested = (self.year, self.month0)
        self._in_flight[requested] = self._in_flight.get(requested, 0) + 1
        try:
            data = await self._fetch(*requested)
        except ServiceError as exc:
            if (self.year, self.month0) == requested:
                self.notify(exc.message, NotificationKind.ERROR)
            logger.warning("Failed to load %s-%02d: %s", requested[0], requested[1] + 1, exc.message)
            return False
        finally:
            self._in_flight[requested] -= 1
            if not self._in_flight[requested]:
                del self._in_flight[requested]

        if (self.year, self.month0) != requested:
            logger.debug("Discarding stale month %s-%02d", requested[0], requested[1] + 1)
            return False
        self.month = data
        return True

    async def change_month(self, delta: int) -> bool:
        if not self.navigate(delta):
            return False
        return await self.load()

    def _current_month(self) -> MonthAvailability:
        if self.month is not None and self.month.matches(self.year, self.month0):
            return self.month
        # Nothing loaded yet for this month: every day reads as not open.
        return MonthAvailability(self.year, self.month0)


class _DatePickingScreen(MonthCalendarScreen):
    def __init__(
        self,
        client: CalendarServiceClient,
        *,
        max_dates: int = DEFAULT_MAX_DATES,
        initial: Iterable[str] = (),
        on_complete: Callable[[list[str]], None] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(client, **kwargs)
        self.selection = SelectionManager(max_dates, initial=initial, on_complete=on_complete)

    def cells(self) -> list[DayCell]:
        return classify_month(self._current_month(), self.selection.selected, self.today)

    def availability(self, iso_date: str) -> Availability | None:
        return classify_date(
            iso_date, self._current_month(), self.selection.selected, self.today
        )

    def select(self, iso_date: str) -> bool:
        return self.selection.toggle(iso_date, self.availability(iso_date))


class AvailableDatesScreen(_DatePickingScreen):
    """Browse open dates and hand the chosen ones over to the booking form.

    ``on_complete`` receives the selection as soon as it is full.
    """

    def proceed(self) -> list[str]:
        return self.selection.selected


@dataclass
class BookingForm:
    name: str = ""
    upi_mobile: str = ""
    whatsapp_mobile: str = ""
    school_name: str = ""
    city: str = ""
    email: str = ""

    def payload(self, iso_date: str) -> dict[str, str]:
        body = {
            "name": self.name.strip(),
            "upiNumber": self.upi_mobile.strip(),
            "whatsappNumber": self.whatsapp_mobile.strip(),
            "ayambilShalaName": self.school_name.strip(),
            "city": self.city.strip(),
            "bookingDate": iso_date,
        }
        if self.email.strip():
            body["email"] = self.email.strip()
        return body


def _check_mobile(value: str, label: str) -> str | None:
    value = value.strip()
    if not value:
        return f"{label} number is required"
    if not _TEN_DIGITS.match(value):
        return f"{label} number must be exactly 10 digits"
    return None


def validate_form(form: BookingForm, selected: list[str]) -> dict[str, str]:
    """Client-side checks keyed by form field name; empty when valid."""
    errors: dict[str, str] = {}
    if not form.name.strip():
        errors["name"] = "Name is required"
    upi_error = _check_mobile(form.upi_mobile, "UPI")
    if upi_error:
        errors["upiMobile"] = upi_error
    whatsapp_error = _check_mobile(form.whatsapp_mobile, "WhatsApp")
    if whatsapp_error:
        errors["whatsappMobile"] = whatsapp_error
    if not form.school_name.strip():
        errors["schoolName"] = "Ayambil shala name is required"
    if not form.city.strip():
        errors["city"] = "City is required"
    if not selected:
        errors["date"] = "Please select at least one date"
    return errors


def map_field_errors(errors: dict[str, str]) -> dict[str, str]:
    return {BACKEND_TO_FORM_FIELDS.get(field, field): message for field, message in errors.items()}


class BookingScreen(_DatePickingScreen):
    """Calendar plus booking form; one booking is created per selected date."""

    def __init__(self, client: CalendarServiceClient, **kwargs: Any) -> None:
        super().__init__(client, **kwargs)
        self.form = BookingForm()
        self.field_errors: dict[str, str] = {}
        self.submit_error: str | None = None
        self.submitting = False
        self.submitted = False

    async def submit(self) -> bool:
        """Submit every selected date in order, stopping at the first rejection."""
        if self.submitting:
            return False
        self.field_errors = {}
        self.submit_error = None
        self.submitted = False

        selected = self.selection.selected
        errors = validate_form(self.form, selected)
        if errors:
            self.field_errors = errors
            return False

        self.submitting = True
        try:
            for iso_date in selected:
                try:
                    await self.client.submit_booking(self.form.payload(iso_date))
                except ValidationFailed as exc:
                    self.field_errors = map_field_errors(exc.errors)
                    logger.info("Booking for %s rejected: %s", iso_date, exc.message)
                    return False
                except ServiceError as exc:
                    self.submit_error = exc.message
                    self.notify(exc.message, NotificationKind.ERROR)
                    return False
        finally:
            self.submitting = False

        self.submitted = True
        self.form = BookingForm()
        self.selection.clear()
        self.notify("Booking submitted successfully")
        await self.load()
        return True


@dataclass(frozen=True)
class AdminDayCell:
    day: int | None
    iso_date: str | None = None
    is_open: bool = False
    is_past: bool = False
    in_range: bool = False


class AdminCalendarScreen(MonthCalendarScreen):
    """Open or close dates, one at a time or as a two-click range."""

    def __init__(self, client: CalendarServiceClient, **kwargs: Any) -> None:
        super().__init__(client, **kwargs)
        self.range = RangeSelector()
        self.saving = False

    def cells(self) -> list[AdminDayCell]:
        month = self._current_month()
        cells: list[AdminDayCell] = []
        for day in build_month_grid(self.year, self.month0):
            if day is None:
                cells.append(AdminDayCell(day=None))
                continue
            iso_date = to_iso(day, self.month0, self.year)
            cells.append(
                AdminDayCell(
                    day=day,
                    iso_date=iso_date,
                    is_open=iso_date in month.open_dates,
                    is_past=is_past(iso_date, self.today),
                    in_range=self.range.contains(iso_date),
                )
            )
        return cells

    def click(self, iso_date: str) -> RangeState:
        return self.range.click(iso_date, self.today)

    def hover(self, iso_date: str) -> RangeState:
        return self.range.hover(iso_date, self.today)

    def cancel(self) -> None:
        self.range.cancel()

    def _mark(self, days: Iterable[str], status: DateStatus) -> None:
        if self.month is None:
            return
        open_dates = set(self.month.open_dates)
        if status is DateStatus.OPEN:
            open_dates.update(days)
        else:
            open_dates.difference_update(days)
        self.month = dataclasses.replace(self.month, open_dates=frozenset(open_dates))

    async def _write_range(self, days: list[str], status: str) -> None:
        await self.client.set_date_statuses(days, status)

    async def apply_range(self, status: DateStatus | str) -> bool:
        """Commit the selected range. On failure the range stays selected."""
        if self.saving or self.range.state is not RangeState.RANGE_READY:
            return False
        target = DateStatus(status)
        self.saving = True
        try:
            days = await self.range.commit(target, self._write_range)
        except ServiceError as exc:
            logger.warning("Range update failed: %s", exc.message)
            self.notify("Failed to update range", NotificationKind.ERROR)
            return False
        finally:
            self.saving = False
        self._mark(days, target)
        self.notify("Range updated successfully")
        return True

    async def set_status(self, iso_date: str, status: DateStatus | str) -> bool:
        if self.saving or is_past(iso_date, self.today):
            return False
        target = DateStatus(status)
        self.saving = True
        try:
            await self.client.set_date_status(iso_date, target)
        except ServiceError as exc:
            self.notify(exc.message, NotificationKind.ERROR)
            return False
        finally:
            self.saving = False
        self._mark([iso_date], target)
        return True


__all__ = [
    "AdminCalendarScreen",
    "AdminDayCell",
    "AvailableDatesScreen",
    "BACKEND_TO_FORM_FIELDS",
    "BookingForm",
    "BookingScreen",
    "MonthCalendarScreen",
    "Notification",
    "NotificationKind",
    "map_field_errors",
    "validate_form",
]
