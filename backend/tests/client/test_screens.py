"""Screen controllers: navigation, stale responses, booking and range commits."""
from __future__ import annotations

import asyncio
from datetime import date
from typing import Any

import pytest

from ayambil.calendar.availability import Availability, MonthAvailability
from ayambil.calendar.range_selector import RangeState
from ayambil.client.api import (
    TIMEOUT_MESSAGE,
    CalendarServiceClient,
    ServiceError,
    ServiceTimeout,
    ValidationFailed,
)
from ayambil.client.screens import (
    AdminCalendarScreen,
    AvailableDatesScreen,
    BookingForm,
    BookingScreen,
    NotificationKind,
    map_field_errors,
    validate_form,
)

pytestmark = pytest.mark.asyncio

TODAY = date(2030, 3, 10)


def _clock() -> date:
    return TODAY


class FakeService:
    """Stand-in for CalendarServiceClient with scripted responses."""

    def __init__(self, months: dict[tuple[int, int], MonthAvailability] | None = None) -> None:
        self.months = months or {}
        self.gates: dict[tuple[int, int], asyncio.Event] = {}
        self.bookings: list[dict[str, Any]] = []
        self.booking_errors: dict[str, Exception] = {}
        self.range_writes: list[tuple[list[str], str]] = []
        self.range_error: Exception | None = None
        self.booking_gate: asyncio.Event | None = None
        self.range_gate: asyncio.Event | None = None

    async def fetch_month(self, year: int, month0: int) -> MonthAvailability:
        gate = self.gates.get((year, month0))
        if gate is not None:
            await gate.wait()
        return self.months.get((year, month0), MonthAvailability(year, month0))

    async def submit_booking(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.bookings.append(payload)
        if self.booking_gate is not None:
            await self.booking_gate.wait()
        error = self.booking_errors.get(payload["bookingDate"])
        if error is not None:
            raise error
        return {"id": str(len(self.bookings)), **payload}

    async def set_date_statuses(self, dates: list[str], status: str) -> dict[str, Any]:
        self.range_writes.append((list(dates), status))
        if self.range_gate is not None:
            await self.range_gate.wait()
        if self.range_error is not None:
            raise self.range_error
        return {"status": status, "updated": len(dates), "dates": list(dates)}


def _march(*open_days: int, counts: dict[str, int] | None = None) -> MonthAvailability:
    return MonthAvailability(
        2030,
        2,
        frozenset(f"2030-03-{day:02d}" for day in open_days),
        counts or {},
        3,
    )


def _filled_form() -> BookingForm:
    return BookingForm(
        name="Asha Shah",
        upi_mobile="9876543210",
        whatsapp_mobile="9123456789",
        school_name="Shree Parshwanath Ayambil Shala",
        city="Ahmedabad",
    )


async def test_screen_starts_on_current_month_and_cannot_go_back() -> None:
    screen = AvailableDatesScreen(FakeService(), clock=_clock)  # type: ignore[arg-type]
    assert (screen.year, screen.month0) == (2030, 2)
    assert not screen.navigate(-1)
    assert await screen.change_month(10)
    assert (screen.year, screen.month0) == (2031, 0)
    assert screen.navigate(-1)
    assert (screen.year, screen.month0) == (2030, 11)


async def test_stale_month_response_is_discarded() -> None:
    service = FakeService({(2030, 2): _march(12), (2030, 3): MonthAvailability(2030, 3)})
    service.gates[(2030, 2)] = asyncio.Event()
    screen = AvailableDatesScreen(service, clock=_clock)  # type: ignore[arg-type]

    slow = asyncio.create_task(screen.load())
    await asyncio.sleep(0)
    assert screen.loading

    assert await screen.change_month(1)
    assert screen.month is not None and screen.month.matches(2030, 3)
    assert not screen.loading

    service.gates[(2030, 2)].set()
    assert await slow is False
    assert screen.month.matches(2030, 3)


async def test_cells_before_load_are_not_open() -> None:
    screen = AvailableDatesScreen(FakeService(), clock=_clock)  # type: ignore[arg-type]
    future = [cell for cell in screen.cells() if cell.day and cell.day >= 10]
    assert {cell.availability for cell in future} == {Availability.NOT_OPEN}


async def test_failed_load_notifies() -> None:
    service = FakeService()

    async def broken(year: int, month0: int) -> MonthAvailability:
        raise ServiceTimeout()

    service.fetch_month = broken  # type: ignore[method-assign]
    screen = AvailableDatesScreen(service, clock=_clock)  # type: ignore[arg-type]
    assert await screen.load() is False
    assert screen.notifications[-1].message == TIMEOUT_MESSAGE
    assert screen.notifications[-1].kind is NotificationKind.ERROR
    assert not screen.loading


async def test_available_dates_hand_off_when_selection_is_full() -> None:
    handed_off: list[list[str]] = []
    service = FakeService({(2030, 2): _march(9, 12, 13, 14, 15, counts={"2030-03-15": 3})})
    screen = AvailableDatesScreen(
        service, clock=_clock, max_dates=2, on_complete=handed_off.append  # type: ignore[arg-type]
    )
    await screen.load()

    assert not screen.select("2030-03-09")
    assert not screen.select("2030-03-15")
    assert not screen.select("2030-03-11")
    assert screen.select("2030-03-12")
    assert screen.availability("2030-03-12") is Availability.SELECTED
    assert screen.select("2030-03-14")
    assert handed_off == [["2030-03-12", "2030-03-14"]]
    assert screen.proceed() == ["2030-03-12", "2030-03-14"]


async def test_form_validation() -> None:
    errors = validate_form(BookingForm(upi_mobile="12ab", whatsapp_mobile=" "), [])
    assert errors == {
        "name": "Name is required",
        "upiMobile": "UPI number must be exactly 10 digits",
        "whatsappMobile": "WhatsApp number is required",
        "schoolName": "Ayambil shala name is required",
        "city": "City is required",
        "date": "Please select at least one date",
    }
    assert validate_form(_filled_form(), ["2030-03-12"]) == {}


async def test_backend_field_names_are_mapped() -> None:
    assert map_field_errors(
        {"upiNumber": "a", "whatsappNumber": "b", "ayambilShalaName": "c", "bookingDate": "d", "city": "e"}
    ) == {"upiMobile": "a", "whatsappMobile": "b", "schoolName": "c", "date": "d", "city": "e"}


async def test_invalid_form_does_not_call_the_service() -> None:
    service = FakeService({(2030, 2): _march(12)})
    screen = BookingScreen(service, clock=_clock)  # type: ignore[arg-type]
    await screen.load()
    screen.select("2030-03-12")
    screen.form = BookingForm(name="Asha")

    assert await screen.submit() is False
    assert "upiMobile" in screen.field_errors
    assert service.bookings == []


async def test_booking_loop_stops_at_first_rejection() -> None:
    service = FakeService({(2030, 2): _march(12, 13, 14)})
    service.booking_errors["2030-03-13"] = ValidationFailed(
        "Selected date is fully booked",
        {"bookingDate": "Selected date is fully booked"},
        status_code=409,
    )
    screen = BookingScreen(service, clock=_clock)  # type: ignore[arg-type]
    await screen.load()
    for day in ("2030-03-12", "2030-03-13", "2030-03-14"):
        screen.select(day)
    screen.form = _filled_form()

    assert await screen.submit() is False
    assert [payload["bookingDate"] for payload in service.bookings] == [
        "2030-03-12",
        "2030-03-13",
    ]
    assert screen.field_errors == {"date": "Selected date is fully booked"}
    assert screen.selection.selected == ["2030-03-12", "2030-03-13", "2030-03-14"]
    assert not screen.submitting
    assert not screen.submitted


async def test_generic_failure_sets_submit_error() -> None:
    service = FakeService({(2030, 2): _march(12)})
    service.booking_errors["2030-03-12"] = ServiceError("API request failed", status_code=500)
    screen = BookingScreen(service, clock=_clock)  # type: ignore[arg-type]
    await screen.load()
    screen.select("2030-03-12")
    screen.form = _filled_form()

    assert await screen.submit() is False
    assert screen.submit_error == "API request failed"
    assert screen.notifications[-1].kind is NotificationKind.ERROR


async def test_admin_range_failure_keeps_selection() -> None:
    service = FakeService({(2030, 2): _march(12)})
    service.range_error = ServiceError("Failed to update calendar range", status_code=500)
    screen = AdminCalendarScreen(service, clock=_clock)  # type: ignore[arg-type]
    await screen.load()

    screen.click("2030-03-14")
    screen.click("2030-03-16")
    assert await screen.apply_range("open") is False
    assert screen.range.state is RangeState.RANGE_READY
    assert not screen.saving
    assert screen.notifications[-1].message == "Failed to update range"

    service.range_error = None
    assert await screen.apply_range("open") is True
    assert screen.range.state is RangeState.IDLE
    assert service.range_writes[-1] == (["2030-03-14", "2030-03-15", "2030-03-16"], "open")
    assert screen.month is not None
    assert screen.month.open_dates == frozenset(
        {"2030-03-12", "2030-03-14", "2030-03-15", "2030-03-16"}
    )


async def test_admin_cells_show_range_preview() -> None:
    screen = AdminCalendarScreen(FakeService({(2030, 2): _march(12)}), clock=_clock)  # type: ignore[arg-type]
    await screen.load()
    screen.click("2030-03-11")
    screen.hover("2030-03-13")

    cells = {cell.iso_date: cell for cell in screen.cells() if cell.day}
    assert cells["2030-03-09"].is_past
    assert cells["2030-03-12"].is_open and cells["2030-03-12"].in_range
    assert cells["2030-03-13"].in_range
    assert not cells["2030-03-14"].in_range
    assert await screen.apply_range("open") is False


async def test_full_date_end_to_end(service_client: CalendarServiceClient) -> None:
    await service_client.login("admin", "Passw0rd!")
    await service_client.set_date_statuses(["2030-03-12", "2030-03-13"], "open")
    await service_client.update_settings(max_bookings_per_day=1)

    screen = BookingScreen(service_client, clock=_clock)
    assert await screen.load()
    assert screen.select("2030-03-12")
    screen.form = _filled_form()
    assert await screen.submit() is True
    assert screen.submitted
    assert screen.selection.selected == []
    assert screen.form == BookingForm()
    assert screen.notifications[-1].kind is NotificationKind.SUCCESS

    # The reload after submitting picks up the new count.
    assert screen.availability("2030-03-12") is Availability.FULL
    assert not screen.select("2030-03-12")
    assert screen.availability("2030-03-13") is Availability.AVAILABLE


async def test_admin_screen_end_to_end(service_client: CalendarServiceClient) -> None:
    await service_client.login("admin", "Passw0rd!")
    screen = AdminCalendarScreen(service_client, clock=_clock)
    await screen.load()

    screen.click("2030-03-20")
    screen.click("2030-03-18")
    assert await screen.apply_range("open")
    assert await screen.set_status("2030-03-19", "closed")
    assert not await screen.set_status("2030-03-01", "open")

    statuses = await service_client.get_calendar_statuses("2030-03-01", "2030-03-31")
    assert [item["date"] for item in statuses] == ["2030-03-18", "2030-03-20"]
    assert screen.month is not None
    assert screen.month.open_dates == frozenset({"2030-03-18", "2030-03-20"})


async def test_failed_load_notice_can_be_dismissed() -> None:
    service = FakeService()

    async def broken(year: int, month0: int) -> MonthAvailability:
        raise ServiceTimeout()

    service.fetch_month = broken  # type: ignore[method-assign]
    screen = AvailableDatesScreen(service, clock=_clock)  # type: ignore[arg-type]
    await screen.load()
    notice = screen.notifications[-1]

    screen.dismiss(notice)
    assert screen.notifications == []
    screen.dismiss(notice)
    assert screen.notifications == []

    for _ in range(3):
        await screen.load()
    assert len(screen.notifications) == 3
    screen.clear_notifications()
    assert screen.notifications == []


async def test_second_submit_while_first_is_in_flight_is_ignored() -> None:
    service = FakeService({(2030, 2): _march(12)})
    service.booking_gate = asyncio.Event()
    screen = BookingScreen(service, clock=_clock)  # type: ignore[arg-type]
    await screen.load()
    screen.select("2030-03-12")
    screen.form = _filled_form()

    first = asyncio.create_task(screen.submit())
    await asyncio.sleep(0)
    assert screen.submitting
    assert len(service.bookings) == 1

    assert await screen.submit() is False
    assert len(service.bookings) == 1

    service.booking_gate.set()
    assert await first is True
    assert len(service.bookings) == 1
    assert not screen.submitting


async def test_range_commit_in_flight_blocks_further_writes() -> None:
    service = FakeService({(2030, 2): _march(12)})
    service.range_gate = asyncio.Event()
    screen = AdminCalendarScreen(service, clock=_clock)  # type: ignore[arg-type]
    await screen.load()
    screen.click("2030-03-14")
    screen.click("2030-03-16")

    first = asyncio.create_task(screen.apply_range("open"))
    await asyncio.sleep(0)
    assert screen.saving
    assert len(service.range_writes) == 1

    assert await screen.apply_range("open") is False
    assert await screen.set_status("2030-03-20", "open") is False
    assert len(service.range_writes) == 1

    service.range_gate.set()
    assert await first is True
    assert len(service.range_writes) == 1
    assert not screen.saving
