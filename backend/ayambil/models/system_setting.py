"""Process-wide booking limits."""
from __future__ import annotations

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from ayambil.db.base import Base
from ayambil.models.mixins import TimestampMixin

SYSTEM_SETTINGS_ID = 1


class SystemSettings(TimestampMixin, Base):
    """Singleton row holding the booking caps edited from the admin panel."""

    __tablename__ = "system_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SYSTEM_SETTINGS_ID)
    max_bookings_per_day: Mapped[int] = mapped_column(Integer, nullable=False)
    max_bookings_per_month: Mapped[int] = mapped_column(Integer, nullable=False)
