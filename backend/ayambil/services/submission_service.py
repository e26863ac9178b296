"""Booking submission service helpers."""
from __future__ import annotations

import logging
import math
import uuid
from collections.abc import Sequence
from datetime import date, timedelta

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ayambil.models.submission import Submission, SubmissionStatus
from ayambil.schemas.submission import SubmissionCreate, SubmissionUpdate
from ayambil.services import calendar_service, settings_service

logger = logging.getLogger(__name__)

_ALLOWED_STATUS_TRANSITIONS: dict[SubmissionStatus, set[SubmissionStatus]] = {
    SubmissionStatus.PENDING: {SubmissionStatus.CONFIRMED, SubmissionStatus.CANCELLED},
    SubmissionStatus.CONFIRMED: {SubmissionStatus.CANCELLED},
    SubmissionStatus.CANCELLED: set(),
}

_COUNTED_STATUSES = (SubmissionStatus.PENDING, SubmissionStatus.CONFIRMED)

MAX_PAGE_SIZE = 200


class BookingRejected(ValueError):
    """A booking violates a calendar or capacity rule for one form field."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class InvalidTransition(ValueError):
    """Requested status change is not allowed from the current status."""


def _month_bounds(day: date) -> tuple[date, date]:
    first = day.replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)
    return first, next_month - timedelta(days=1)


def _counted_between(start_date: date, end_date: date) -> Select[tuple[int]]:
    return select(func.count()).select_from(Submission).where(
        Submission.booking_date >= start_date,
        Submission.booking_date <= end_date,
        Submission.status.in_(_COUNTED_STATUSES),
    )


async def count_bookings_by_date(
    session: AsyncSession,
    *,
    start_date: date,
    end_date: date,
) -> dict[str, int]:
    """Active (non-cancelled) bookings per ISO date in the inclusive range."""
    if start_date > end_date:
        raise ValueError("startDate must be before or equal to endDate")
    result = await session.execute(
        select(Submission.booking_date, func.count())
        .where(
            Submission.booking_date >= start_date,
            Submission.booking_date <= end_date,
            Submission.status.in_(_COUNTED_STATUSES),
        )
        .group_by(Submission.booking_date)
        .order_by(Submission.booking_date.asc())
    )
    return {booking_date.isoformat(): count for booking_date, count in result.all()}


async def _count_between(
    session: AsyncSession,
    start_date: date,
    end_date: date,
    *,
    exclude_id: uuid.UUID | None = None,
) -> int:
    stmt = _counted_between(start_date, end_date)
    if exclude_id is not None:
        stmt = stmt.where(Submission.id != exclude_id)
    return (await session.execute(stmt)).scalar_one()


async def check_date_availability(
    session: AsyncSession,
    *,
    day: date,
    today: date,
) -> dict[str, object]:
    """Whether a single date can still take a booking, with counts."""
    limits = await settings_service.get_system_settings(session)
    booked = await _count_between(session, day, day)
    is_open = await calendar_service.is_open(session, day=day)
    remaining = max(0, limits.max_bookings_per_day - booked)
    return {
        "date": day,
        "is_open": is_open,
        "booked": booked,
        "remaining": remaining,
        "available": is_open and remaining > 0 and day >= today,
    }


async def _ensure_bookable(
    session: AsyncSession,
    *,
    day: date,
    today: date,
    exclude_id: uuid.UUID | None = None,
) -> None:
    """Reject past, closed, full-day and full-month bookings."""
    if day < today:
        raise BookingRejected("bookingDate", "Booking date cannot be in the past")
    if not await calendar_service.is_open(session, day=day):
        raise BookingRejected("bookingDate", "Selected date is not open for booking")
    await _check_capacity(session, day=day, exclude_id=exclude_id)


async def _check_capacity(
    session: AsyncSession,
    *,
    day: date,
    exclude_id: uuid.UUID | None = None,
    pending: int = 0,
) -> None:
    """Reject when the day or month is full.

    ``pending`` is the number of rows this transaction has already flushed
    for ``day``; they are counted by the queries but not held against the cap.
    """
    limits = await settings_service.get_system_settings(session)
    booked = await _count_between(session, day, day, exclude_id=exclude_id) - pending
    if booked >= limits.max_bookings_per_day:
        raise BookingRejected("bookingDate", "Selected date is fully booked")

    month_start, month_end = _month_bounds(day)
    month_booked = (
        await _count_between(session, month_start, month_end, exclude_id=exclude_id)
        - pending
    )
    if month_booked >= limits.max_bookings_per_month:
        raise BookingRejected("bookingDate", "Monthly booking limit reached")


async def create_submission(
    session: AsyncSession,
    *,
    payload: SubmissionCreate,
    today: date,
    ip_address: str | None = None,
) -> Submission:
    await _ensure_bookable(session, day=payload.booking_date, today=today)
    submission = Submission(
        name=payload.name,
        upi_number=payload.upi_number,
        whatsapp_number=payload.whatsapp_number,
        ayambil_shala_name=payload.ayambil_shala_name,
        city=payload.city,
        booking_date=payload.booking_date,
        email=str(payload.email) if payload.email else None,
        status=SubmissionStatus.PENDING,
        ip_address=ip_address,
    )
    session.add(submission)
    try:
        await session.flush()
        # Recount with the new row in place; bookings committed since the
        # first check push this one over the cap.
        await _check_capacity(session, day=payload.booking_date, pending=1)
        await session.commit()
    except BookingRejected:
        await session.rollback()
        logger.info("Booking for %s lost a race for the last slot", payload.booking_date)
        raise
    except IntegrityError:
        await session.rollback()
        raise
    await session.refresh(submission)
    logger.info(
        "Booking %s created for %s", submission.id, submission.booking_date.isoformat()
    )
    return submission


async def get_submission(
    session: AsyncSession, *, submission_id: uuid.UUID
) -> Submission | None:
    return await session.get(Submission, submission_id)


async def list_submissions(
    session: AsyncSession,
    *,
    page: int = 1,
    limit: int = 50,
    status: SubmissionStatus | None = None,
    booking_date: date | None = None,
    city: str | None = None,
) -> tuple[Sequence[Submission], int, int]:
    """Return one page of submissions, the total count and the page count."""
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    filters = []
    if status is not None:
        filters.append(Submission.status == status)
    if booking_date is not None:
        filters.append(Submission.booking_date == booking_date)
    if city:
        filters.append(func.lower(Submission.city) == city.strip().lower())

    total = (
        await session.execute(select(func.count()).select_from(Submission).where(*filters))
    ).scalar_one()
    result = await session.execute(
        select(Submission)
        .where(*filters)
        .order_by(Submission.created_at.desc(), Submission.booking_date.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    total_pages = max(1, math.ceil(total / limit))
    return result.scalars().all(), total, total_pages


async def search_submissions(
    session: AsyncSession, *, query: str, limit: int = 100
) -> Sequence[Submission]:
    """Case-insensitive substring match across the contact fields."""
    term = f"%{query.strip().lower()}%"
    result = await session.execute(
        select(Submission)
        .where(
            or_(
                func.lower(Submission.name).like(term),
                func.lower(Submission.city).like(term),
                func.lower(Submission.ayambil_shala_name).like(term),
                Submission.upi_number.like(term),
                Submission.whatsapp_number.like(term),
            )
        )
        .order_by(Submission.created_at.desc())
        .limit(limit)
    )
    return result.scalars().all()


def _validate_status_transition(current: SubmissionStatus, target: SubmissionStatus) -> None:
    if target == current:
        return
    if target not in _ALLOWED_STATUS_TRANSITIONS.get(current, set()):
        raise InvalidTransition(
            f"Invalid status transition from {current.value} to {target.value}"
        )


async def update_submission(
    session: AsyncSession,
    *,
    submission: Submission,
    payload: SubmissionUpdate,
    today: date,
) -> Submission:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    target_status = changes.pop("status", None)
    if target_status is not None:
        _validate_status_transition(submission.status, target_status)

    new_day = changes.get("booking_date")
    still_counted = (target_status or submission.status) in _COUNTED_STATUSES
    if new_day is not None and new_day != submission.booking_date and still_counted:
        await _ensure_bookable(
            session, day=new_day, today=today, exclude_id=submission.id
        )

    for key, value in changes.items():
        setattr(submission, key, str(value) if key == "email" else value)
    if target_status is not None:
        submission.status = target_status

    await session.commit()
    await session.refresh(submission)
    return submission


async def delete_submission(session: AsyncSession, *, submission: Submission) -> None:
    await session.delete(submission)
    await session.commit()
    logger.info("Booking %s deleted", submission.id)


async def get_statistics(session: AsyncSession, *, today: date) -> dict[str, object]:
    """Totals per status plus today's and upcoming active bookings."""
    per_status = dict(
        (
            await session.execute(
                select(Submission.status, func.count()).group_by(Submission.status)
            )
        ).all()
    )
    today_count = await _count_between(session, today, today)
    upcoming = (
        await session.execute(
            select(func.count())
            .select_from(Submission)
            .where(
                Submission.booking_date > today,
                Submission.status.in_(_COUNTED_STATUSES),
            )
        )
    ).scalar_one()
    by_date = await count_bookings_by_date(
        session, start_date=today, end_date=today + timedelta(days=30)
    )
    return {
        "total": sum(per_status.values()),
        "pending": per_status.get(SubmissionStatus.PENDING, 0),
        "confirmed": per_status.get(SubmissionStatus.CONFIRMED, 0),
        "cancelled": per_status.get(SubmissionStatus.CANCELLED, 0),
        "today": today_count,
        "upcoming": upcoming,
        "by_date": by_date,
    }
