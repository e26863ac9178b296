"""CalendarServiceClient against the in-process app and mocked transports."""
from __future__ import annotations

import httpx
import pytest

from ayambil.calendar.range_selector import DateStatus
from ayambil.client.api import (
    TIMEOUT_MESSAGE,
    AuthenticationRequired,
    CalendarServiceClient,
    ServiceError,
    ServiceTimeout,
    ValidationFailed,
)

pytestmark = pytest.mark.asyncio

BOOKING = {
    "name": "Asha Shah",
    "upiNumber": "9876543210",
    "whatsappNumber": "9123456789",
    "ayambilShalaName": "Shree Parshwanath Ayambil Shala",
    "city": "Ahmedabad",
}


async def test_login_stores_token_on_the_session(
    service_client: CalendarServiceClient,
) -> None:
    session = await service_client.login("admin", "Passw0rd!")
    assert session.is_authenticated
    assert session.username == "admin"
    assert session.role == "superadmin"

    service_client.logout()
    assert not service_client.session.is_authenticated


async def test_failed_login_raises_authentication_required(
    service_client: CalendarServiceClient,
) -> None:
    with pytest.raises(AuthenticationRequired) as excinfo:
        await service_client.login("admin", "nope")
    assert excinfo.value.message == "Invalid username or password"
    assert excinfo.value.status_code == 401


async def test_rejected_token_is_cleared(service_client: CalendarServiceClient) -> None:
    service_client.session.token = "stale-token"
    with pytest.raises(AuthenticationRequired):
        await service_client.get_settings()
    assert service_client.session.token is None


async def test_admin_writes_feed_month_availability(
    service_client: CalendarServiceClient,
) -> None:
    await service_client.login("admin", "Passw0rd!")
    result = await service_client.set_date_statuses(
        ["2030-03-13", "2030-03-12"], DateStatus.OPEN
    )
    assert result["updated"] == 2
    await service_client.set_date_status("2030-03-20", "open")
    await service_client.set_date_status("2030-03-13", DateStatus.CLOSED)

    month = await service_client.fetch_month(2030, 2)
    assert month.open_dates == frozenset({"2030-03-12", "2030-03-20"})
    assert month.cap == 3
    assert month.counts == {}


async def test_booking_rejection_maps_fields(service_client: CalendarServiceClient) -> None:
    with pytest.raises(ValidationFailed) as closed:
        await service_client.submit_booking({**BOOKING, "bookingDate": "2030-03-12"})
    assert closed.value.status_code == 409
    assert closed.value.errors == {"bookingDate": "Selected date is not open for booking"}

    with pytest.raises(ValidationFailed) as invalid:
        await service_client.submit_booking(
            {**BOOKING, "upiNumber": "123", "bookingDate": "2030-03-12"}
        )
    assert invalid.value.status_code == 422
    assert invalid.value.errors["upiNumber"] == "UPI number must be exactly 10 digits"


async def test_admin_submission_management(service_client: CalendarServiceClient) -> None:
    await service_client.login("admin", "Passw0rd!")
    await service_client.set_date_statuses(["2030-03-12"], "open")
    created = await service_client.submit_booking({**BOOKING, "bookingDate": "2030-03-12"})

    counts, cap = await service_client.get_booking_counts("2030-03-01", "2030-03-31")
    assert counts == {"2030-03-12": 1}
    assert cap == 3
    assert (await service_client.check_date("2030-03-12"))["remaining"] == 2

    page = await service_client.list_submissions(status="pending", city=None)
    assert page["pagination"]["total"] == 1
    assert [item["id"] for item in await service_client.search_submissions("asha")] == [
        created["id"]
    ]

    updated = await service_client.update_submission(created["id"], {"status": "confirmed"})
    assert updated["status"] == "confirmed"
    assert (await service_client.get_submission(created["id"]))["status"] == "confirmed"
    assert (await service_client.get_statistics())["confirmed"] == 1

    settings = await service_client.update_settings(max_bookings_per_day=4)
    assert settings["maxBookingsPerDay"] == 4
    assert (await service_client.get_settings())["maxBookingsPerDay"] == 4

    assert await service_client.delete_submission(created["id"]) is None
    with pytest.raises(ServiceError) as missing:
        await service_client.get_submission(created["id"])
    assert missing.value.status_code == 404
    assert missing.value.message == "Submission not found"


async def test_timeout_becomes_service_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with CalendarServiceClient(
        "http://test/api", transport=httpx.MockTransport(handler)
    ) as client:
        with pytest.raises(ServiceTimeout) as excinfo:
            await client.get_calendar_statuses("2030-03-01", "2030-03-31")
    assert excinfo.value.message == TIMEOUT_MESSAGE
    assert isinstance(excinfo.value, ServiceError)


async def test_server_errors_surface_the_detail() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer token-123"
        return httpx.Response(500, json={"detail": "Failed to update calendar range"})

    async with CalendarServiceClient(
        "http://test/api", transport=httpx.MockTransport(handler)
    ) as client:
        client.session.token = "token-123"
        with pytest.raises(ServiceError) as excinfo:
            await client.set_date_statuses(["2030-03-12"], "open")
    assert excinfo.value.message == "Failed to update calendar range"
    assert excinfo.value.status_code == 500
    assert not isinstance(excinfo.value, ValidationFailed)


async def test_non_json_error_uses_generic_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad gateway")

    async with CalendarServiceClient(
        "http://test/api", transport=httpx.MockTransport(handler)
    ) as client:
        with pytest.raises(ServiceError) as excinfo:
            await client.check_date("2030-03-12")
    assert excinfo.value.message == "API request failed"


async def test_requests_are_rooted_at_the_base_url() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=[])

    async with CalendarServiceClient(
        "http://test/api", transport=httpx.MockTransport(handler)
    ) as client:
        await client.get_calendar_statuses("2030-03-01", "2030-03-31")
    assert seen == ["http://test/api/calendar?startDate=2030-03-01&endDate=2030-03-31"]
