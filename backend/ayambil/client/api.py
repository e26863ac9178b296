"""Async client for the booking REST service.

The bearer token lives on an explicit :class:`Session` handed to the client,
so nothing here reads or writes ambient storage.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from ayambil.calendar.availability import MonthAvailability
from ayambil.calendar.grid import month_bounds
from ayambil.calendar.range_selector import DateStatus
from ayambil.client.config import get_client_settings

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "Request timeout - please try again"


class ServiceError(Exception):
    """Generic failure carrying a human readable message."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ServiceTimeout(ServiceError):
    def __init__(self) -> None:
        super().__init__(TIMEOUT_MESSAGE)


class AuthenticationRequired(ServiceError):
    """401/403 from the service; the session token has been cleared."""


class ValidationFailed(ServiceError):
    """Per-field rejection; ``errors`` maps backend field names to messages."""

    def __init__(
        self,
        message: str,
        errors: Mapping[str, str],
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.errors = dict(errors)


@dataclass
class Session:
    """Admin credentials obtained from :meth:`CalendarServiceClient.login`."""

    token: str | None = None
    username: str | None = None
    role: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def clear(self) -> None:
        self.token = None
        self.username = None
        self.role = None


def _error_map(errors: Any) -> dict[str, str]:
    mapped: dict[str, str] = {}
    if not isinstance(errors, list):
        return mapped
    for item in errors:
        if isinstance(item, Mapping) and item.get("field"):
            mapped.setdefault(str(item["field"]), str(item.get("message") or ""))
    return mapped


class CalendarServiceClient:
    """Thin wrapper over ``httpx.AsyncClient`` for the calendar and booking API."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        session: Session | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_client_settings()
        self.session = session or Session()
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.api_url,
            timeout=timeout if timeout is not None else settings.timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "CalendarServiceClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        headers = {}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        try:
            response = await self._http.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out", method, path)
            raise ServiceTimeout() from exc
        except httpx.HTTPError as exc:
            raise ServiceError(str(exc) or "API request failed") from exc

        if response.status_code == httpx.codes.NO_CONTENT:
            return None
        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_success:
            return body

        detail = body.get("detail") if isinstance(body, Mapping) else None
        message = detail if isinstance(detail, str) and detail else None
        if response.status_code in (httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN):
            self.session.clear()
            raise AuthenticationRequired(
                message or "Authentication required", status_code=response.status_code
            )
        errors = _error_map(body.get("errors") if isinstance(body, Mapping) else None)
        if errors:
            raise ValidationFailed(
                message or next(iter(errors.values())) or "Validation failed",
                errors,
                status_code=response.status_code,
            )
        raise ServiceError(
            message or "API request failed", status_code=response.status_code
        )

    # Admin authentication

    async def login(self, username: str, password: str) -> Session:
        body = await self._request(
            "POST", "/admin/login", json={"username": username, "password": password}
        )
        user = body.get("user") or {}
        self.session.token = body["token"]
        self.session.username = user.get("username")
        self.session.role = user.get("role")
        return self.session

    def logout(self) -> None:
        self.session.clear()

    # Calendar

    async def get_calendar_statuses(self, start_date: str, end_date: str) -> list[dict[str, str]]:
        """``[{date, status}]`` for every configured date in the range."""
        return await self._request(
            "GET", "/calendar", params={"startDate": start_date, "endDate": end_date}
        )

    async def get_booking_counts(self, start_date: str, end_date: str) -> tuple[dict[str, int], int]:
        """Per-date active booking counts and the daily cap."""
        body = await self._request(
            "GET",
            "/submissions/bookings/date-range",
            params={"startDate": start_date, "endDate": end_date},
        )
        return dict(body.get("bookingCounts") or {}), body.get("maxBookingsPerDay")

    async def fetch_month(self, year: int, month0: int) -> MonthAvailability:
        first, last = month_bounds(year, month0)
        statuses = await self.get_calendar_statuses(first, last)
        counts, cap = await self.get_booking_counts(first, last)
        return MonthAvailability.from_service(
            year, month0, statuses=statuses, counts=counts, cap=cap
        )

    async def check_date(self, iso_date: str) -> dict[str, Any]:
        return await self._request("GET", f"/submissions/bookings/check/{iso_date}")

    async def set_date_status(self, iso_date: str, status: DateStatus | str) -> dict[str, str]:
        return await self._request(
            "POST",
            "/calendar/status",
            json={"date": iso_date, "status": DateStatus(status).value},
        )

    async def set_date_statuses(
        self, dates: Iterable[str], status: DateStatus | str
    ) -> dict[str, Any]:
        """Write one status for every date in a single transaction."""
        return await self._request(
            "POST",
            "/calendar/bulk",
            json={"status": DateStatus(status).value, "dates": list(dates)},
        )

    # Bookings

    async def submit_booking(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/submissions", json=dict(payload))

    async def list_submissions(
        self, page: int = 1, limit: int = 50, **filters: str | None
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"page": page, "limit": limit}
        params.update({key: value for key, value in filters.items() if value})
        return await self._request("GET", "/submissions", params=params)

    async def search_submissions(self, query: str) -> list[dict[str, Any]]:
        return await self._request("GET", "/submissions/search", params={"q": query})

    async def get_submission(self, submission_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/submissions/{submission_id}")

    async def update_submission(
        self, submission_id: str, changes: Mapping[str, Any]
    ) -> dict[str, Any]:
        return await self._request(
            "PUT", f"/submissions/{submission_id}", json=dict(changes)
        )

    async def delete_submission(self, submission_id: str) -> None:
        await self._request("DELETE", f"/submissions/{submission_id}")

    async def get_statistics(self) -> dict[str, Any]:
        return await self._request("GET", "/submissions/stats")

    # Settings

    async def get_settings(self) -> dict[str, int]:
        return await self._request("GET", "/admin/settings")

    async def update_settings(self, **changes: int) -> dict[str, int]:
        payload = {
            "maxBookingsPerDay": changes.get("max_bookings_per_day"),
            "maxBookingsPerMonth": changes.get("max_bookings_per_month"),
        }
        return await self._request(
            "PUT",
            "/admin/settings",
            json={key: value for key, value in payload.items() if value is not None},
        )


__all__ = [
    "AuthenticationRequired",
    "CalendarServiceClient",
    "ServiceError",
    "ServiceTimeout",
    "Session",
    "TIMEOUT_MESSAGE",
    "ValidationFailed",
]
