"""Admin-curated open/closed calendar."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ayambil.calendar.range_selector import DateStatus, dates_in_range
from ayambil.models.calendar_date import CalendarDate

logger = logging.getLogger(__name__)


def _validate_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise ValueError("startDate must be before or equal to endDate")


def expand_range(start_date: date, end_date: date) -> list[date]:
    """Inclusive day list; argument order does not matter."""
    return [
        date.fromisoformat(value)
        for value in dates_in_range(start_date.isoformat(), end_date.isoformat())
    ]


async def list_statuses(
    session: AsyncSession,
    *,
    start_date: date,
    end_date: date,
) -> list[CalendarDate]:
    """Return stored status rows in ``[start_date, end_date]`` ordered by day."""
    _validate_range(start_date, end_date)
    result = await session.execute(
        select(CalendarDate)
        .where(CalendarDate.day >= start_date, CalendarDate.day <= end_date)
        .order_by(CalendarDate.day.asc())
    )
    return list(result.scalars().all())


async def is_open(session: AsyncSession, *, day: date) -> bool:
    result = await session.execute(
        select(CalendarDate.status).where(CalendarDate.day == day)
    )
    return result.scalar_one_or_none() == DateStatus.OPEN


async def _apply(session: AsyncSession, days: list[date], status: DateStatus) -> None:
    if status == DateStatus.CLOSED:
        await session.execute(delete(CalendarDate).where(CalendarDate.day.in_(days)))
        return
    existing = await session.execute(
        select(CalendarDate).where(CalendarDate.day.in_(days))
    )
    rows = {row.day: row for row in existing.scalars().all()}
    for day in days:
        row = rows.get(day)
        if row is None:
            session.add(CalendarDate(day=day, status=DateStatus.OPEN))
        else:
            row.status = DateStatus.OPEN


async def set_status(
    session: AsyncSession,
    *,
    day: date,
    status: DateStatus,
) -> None:
    """Open a date (upsert) or close it (drop its row). Last write wins."""
    await _apply(session, [day], status)
    await session.commit()
    logger.info("Calendar date %s set to %s", day.isoformat(), status.value)


async def bulk_set_status(
    session: AsyncSession,
    *,
    days: Iterable[date],
    status: DateStatus,
) -> list[date]:
    """Apply one status to every date in a single transaction.

    Either every date is written or none is.
    """
    unique_days = sorted(set(days))
    if not unique_days:
        return []
    try:
        await _apply(session, unique_days, status)
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        logger.exception("Bulk calendar update failed for %d dates", len(unique_days))
        raise
    logger.info(
        "Calendar %s..%s (%d dates) set to %s",
        unique_days[0].isoformat(),
        unique_days[-1].isoformat(),
        len(unique_days),
        status.value,
    )
    return unique_days
