"""Booking calendar endpoints."""

from __future__ import annotations

import datetime as dt
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ayambil.api import deps
from ayambil.models.admin_user import AdminUser
from ayambil.schemas.calendar import (
    CalendarBulkResult,
    CalendarBulkUpdate,
    CalendarDateRead,
    CalendarStatusUpdate,
)
from ayambil.services import calendar_service

router = APIRouter()


@router.get(
    "",
    response_model=list[CalendarDateRead],
    summary="List date statuses in a range",
)
async def list_calendar(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    start_date: Annotated[dt.date, Query(alias="startDate")],
    end_date: Annotated[dt.date, Query(alias="endDate")],
) -> list[CalendarDateRead]:
    """Dates without an entry are closed."""
    try:
        rows = await calendar_service.list_statuses(
            session, start_date=start_date, end_date=end_date
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return [CalendarDateRead(date=row.day, status=row.status) for row in rows]


@router.post(
    "/status",
    response_model=CalendarDateRead,
    summary="Set the status of one date",
)
async def set_calendar_status(
    payload: CalendarStatusUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[AdminUser, Depends(deps.get_current_admin)],
) -> CalendarDateRead:
    await calendar_service.set_status(session, day=payload.date, status=payload.status)
    return CalendarDateRead(date=payload.date, status=payload.status)


@router.post(
    "/bulk",
    response_model=CalendarBulkResult,
    summary="Set one status across a range of dates",
)
async def bulk_set_calendar_status(
    payload: CalendarBulkUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[AdminUser, Depends(deps.get_current_admin)],
) -> CalendarBulkResult:
    if payload.dates:
        days = payload.dates
    else:
        assert payload.start_date is not None and payload.end_date is not None
        days = calendar_service.expand_range(payload.start_date, payload.end_date)
    try:
        written = await calendar_service.bulk_set_status(
            session, days=days, status=payload.status
        )
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update calendar range",
        ) from exc
    return CalendarBulkResult(status=payload.status, updated=len(written), dates=written)
