"""Booking submissions made through the public form."""
from __future__ import annotations

import enum
import uuid
from datetime import date

from sqlalchemy import Date, Enum, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ayambil.db.base import Base
from ayambil.models.mixins import TimestampMixin


class SubmissionStatus(str, enum.Enum):
    """Lifecycle states for a booking."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Submission(TimestampMixin, Base):
    """One booking of one ritual date by one devotee."""

    __tablename__ = "submissions"
    __table_args__ = (Index("ix_submissions_booking_date_status", "booking_date", "status"),)

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    upi_number: Mapped[str] = mapped_column(String(10), nullable=False)
    whatsapp_number: Mapped[str] = mapped_column(String(10), nullable=False)
    ayambil_shala_name: Mapped[str] = mapped_column(String(200), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    booking_date: Mapped[date] = mapped_column(Date, nullable=False)
    email: Mapped[str | None] = mapped_column(String(320))
    status: Mapped[SubmissionStatus] = mapped_column(
        Enum(
            SubmissionStatus,
            values_callable=lambda enum_cls: [item.value for item in enum_cls],
        ),
        default=SubmissionStatus.PENDING,
        nullable=False,
    )
    ip_address: Mapped[str | None] = mapped_column(String(64))
