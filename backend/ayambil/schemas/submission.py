"""Schemas for booking submissions."""
from __future__ import annotations

import re
import uuid
import datetime as dt

from pydantic import EmailStr, Field, field_validator

from ayambil.models.submission import SubmissionStatus
from ayambil.schemas.base import CamelModel

_TEN_DIGITS = re.compile(r"^\d{10}$")


def _check_mobile(value: str, label: str) -> str:
    if not value:
        raise ValueError(f"{label} number is required")
    if not _TEN_DIGITS.match(value):
        raise ValueError(f"{label} number must be exactly 10 digits")
    return value


class SubmissionBase(CamelModel):
    name: str = Field(min_length=1, max_length=120)
    upi_number: str
    whatsapp_number: str
    ayambil_shala_name: str = Field(min_length=1, max_length=200)
    city: str = Field(min_length=1, max_length=120)
    booking_date: dt.date
    email: EmailStr | None = None

    @field_validator("upi_number")
    @classmethod
    def _valid_upi(cls, value: str) -> str:
        return _check_mobile(value, "UPI")

    @field_validator("whatsapp_number")
    @classmethod
    def _valid_whatsapp(cls, value: str) -> str:
        return _check_mobile(value, "WhatsApp")

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class SubmissionCreate(SubmissionBase):
    """Public booking form payload."""


class SubmissionUpdate(CamelModel):
    """Admin edit; only provided fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=120)
    upi_number: str | None = None
    whatsapp_number: str | None = None
    ayambil_shala_name: str | None = Field(default=None, min_length=1, max_length=200)
    city: str | None = Field(default=None, min_length=1, max_length=120)
    booking_date: dt.date | None = None
    email: EmailStr | None = None
    status: SubmissionStatus | None = None

    @field_validator("upi_number")
    @classmethod
    def _valid_upi(cls, value: str | None) -> str | None:
        return None if value is None else _check_mobile(value, "UPI")

    @field_validator("whatsapp_number")
    @classmethod
    def _valid_whatsapp(cls, value: str | None) -> str | None:
        return None if value is None else _check_mobile(value, "WhatsApp")


class SubmissionRead(SubmissionBase):
    id: uuid.UUID
    status: SubmissionStatus
    ip_address: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime
    email: str | None = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class SubmissionPage(CamelModel):
    data: list[SubmissionRead]
    pagination: Pagination


class BookingCounts(CamelModel):
    """Per-day booking counts for a range plus the daily cap."""

    booking_counts: dict[str, int]
    max_bookings_per_day: int


class DateAvailability(CamelModel):
    date: dt.date
    is_open: bool
    booked: int
    remaining: int
    available: bool


class SubmissionStats(CamelModel):
    total: int
    pending: int
    confirmed: int
    cancelled: int
    today: int
    upcoming: int
    by_date: dict[str, int] = Field(default_factory=dict)
