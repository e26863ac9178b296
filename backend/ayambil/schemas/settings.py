"""Schemas for admin-editable booking limits."""
from __future__ import annotations

from pydantic import Field

from ayambil.schemas.base import CamelModel


class SystemSettingsRead(CamelModel):
    max_bookings_per_day: int
    max_bookings_per_month: int


class SystemSettingsUpdate(CamelModel):
    """Partial update; omitted fields keep their current value."""

    max_bookings_per_day: int | None = Field(default=None, ge=1)
    max_bookings_per_month: int | None = Field(default=None, ge=1)
