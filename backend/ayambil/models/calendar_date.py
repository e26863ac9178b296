"""Admin-curated booking calendar."""
from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import Date, Enum
from sqlalchemy.orm import Mapped, mapped_column

from ayambil.calendar.range_selector import DateStatus
from ayambil.db.base import Base
from ayambil.models.mixins import TimestampMixin


class CalendarDate(TimestampMixin, Base):
    """Status row for a single date; a missing row means the date is closed."""

    __tablename__ = "calendar_dates"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    day: Mapped[date] = mapped_column("date", Date, unique=True, nullable=False)
    status: Mapped[DateStatus] = mapped_column(
        Enum(
            DateStatus,
            values_callable=lambda enum_cls: [item.value for item in enum_cls],
        ),
        default=DateStatus.OPEN,
        nullable=False,
    )
