"""Booking submission endpoints."""

from __future__ import annotations

import datetime as dt
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ayambil.api import deps
from ayambil.api.errors import rejection
from ayambil.core.config import get_settings
from ayambil.models.admin_user import AdminUser
from ayambil.models.submission import Submission, SubmissionStatus
from ayambil.schemas.submission import (
    BookingCounts,
    DateAvailability,
    Pagination,
    SubmissionCreate,
    SubmissionPage,
    SubmissionRead,
    SubmissionStats,
    SubmissionUpdate,
)
from ayambil.services import settings_service, submission_service
from ayambil.services.submission_service import BookingRejected, InvalidTransition

router = APIRouter()

_BOOKING_RATE_DEP = deps.rate_limit(
    deps.parse_rate(get_settings().rate_limit_booking, fallback=(20, 60))
)


@router.post(
    "",
    response_model=SubmissionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a booking",
    dependencies=[_BOOKING_RATE_DEP],
)
async def create_submission(
    payload: SubmissionCreate,
    request: Request,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    today: Annotated[dt.date, Depends(deps.get_today)],
) -> SubmissionRead:
    try:
        submission = await submission_service.create_submission(
            session,
            payload=payload,
            today=today,
            ip_address=deps.client_ip(request),
        )
    except BookingRejected as exc:
        raise rejection(status.HTTP_409_CONFLICT, exc.field, exc.message) from exc
    return SubmissionRead.model_validate(submission)


@router.get(
    "/bookings/date-range",
    response_model=BookingCounts,
    summary="Booking counts per date",
)
async def booking_counts(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    start_date: Annotated[dt.date, Query(alias="startDate")],
    end_date: Annotated[dt.date, Query(alias="endDate")],
) -> BookingCounts:
    try:
        counts = await submission_service.count_bookings_by_date(
            session, start_date=start_date, end_date=end_date
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    limits = await settings_service.get_system_settings(session)
    return BookingCounts(
        booking_counts=counts, max_bookings_per_day=limits.max_bookings_per_day
    )


@router.get(
    "/bookings/check/{booking_date}",
    response_model=DateAvailability,
    summary="Check whether a date can take a booking",
)
async def check_date(
    booking_date: dt.date,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    today: Annotated[dt.date, Depends(deps.get_today)],
) -> DateAvailability:
    result = await submission_service.check_date_availability(
        session, day=booking_date, today=today
    )
    return DateAvailability.model_validate(result)


@router.get("", response_model=SubmissionPage, summary="List bookings")
async def list_submissions(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[AdminUser, Depends(deps.get_current_admin)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=submission_service.MAX_PAGE_SIZE)] = 50,
    status_filter: Annotated[SubmissionStatus | None, Query(alias="status")] = None,
    booking_date: Annotated[dt.date | None, Query(alias="bookingDate")] = None,
    city: Annotated[str | None, Query(max_length=120)] = None,
) -> SubmissionPage:
    items, total, total_pages = await submission_service.list_submissions(
        session,
        page=page,
        limit=limit,
        status=status_filter,
        booking_date=booking_date,
        city=city,
    )
    return SubmissionPage(
        data=[SubmissionRead.model_validate(item) for item in items],
        pagination=Pagination(page=page, limit=limit, total=total, total_pages=total_pages),
    )


@router.get("/search", response_model=list[SubmissionRead], summary="Search bookings")
async def search_submissions(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[AdminUser, Depends(deps.get_current_admin)],
    q: Annotated[str, Query(min_length=1, max_length=120)],
) -> list[SubmissionRead]:
    items = await submission_service.search_submissions(session, query=q)
    return [SubmissionRead.model_validate(item) for item in items]


@router.get("/stats", response_model=SubmissionStats, summary="Booking statistics")
async def submission_stats(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[AdminUser, Depends(deps.get_current_admin)],
    today: Annotated[dt.date, Depends(deps.get_today)],
) -> SubmissionStats:
    stats = await submission_service.get_statistics(session, today=today)
    return SubmissionStats.model_validate(stats)


async def _load_submission(session: AsyncSession, submission_id: uuid.UUID) -> Submission:
    submission = await submission_service.get_submission(
        session, submission_id=submission_id
    )
    if submission is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found"
        )
    return submission


@router.get("/{submission_id}", response_model=SubmissionRead, summary="Get booking")
async def read_submission(
    submission_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[AdminUser, Depends(deps.get_current_admin)],
) -> SubmissionRead:
    submission = await _load_submission(session, submission_id)
    return SubmissionRead.model_validate(submission)


@router.put("/{submission_id}", response_model=SubmissionRead, summary="Update booking")
async def update_submission(
    submission_id: uuid.UUID,
    payload: SubmissionUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[AdminUser, Depends(deps.get_current_admin)],
    today: Annotated[dt.date, Depends(deps.get_today)],
) -> SubmissionRead:
    submission = await _load_submission(session, submission_id)
    try:
        updated = await submission_service.update_submission(
            session, submission=submission, payload=payload, today=today
        )
    except BookingRejected as exc:
        raise rejection(status.HTTP_409_CONFLICT, exc.field, exc.message) from exc
    except InvalidTransition as exc:
        raise rejection(status.HTTP_400_BAD_REQUEST, "status", str(exc)) from exc
    return SubmissionRead.model_validate(updated)


@router.delete(
    "/{submission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete booking",
)
async def delete_submission(
    submission_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[AdminUser, Depends(deps.get_current_admin)],
) -> None:
    submission = await _load_submission(session, submission_id)
    await submission_service.delete_submission(session, submission=submission)
    return None
