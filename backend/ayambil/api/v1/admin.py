"""Admin login and booking limit settings."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ayambil.api import deps
from ayambil.core.config import get_settings
from ayambil.models.admin_user import AdminUser
from ayambil.schemas.auth import AdminUserRead, LoginRequest, LoginResponse
from ayambil.schemas.settings import SystemSettingsRead, SystemSettingsUpdate
from ayambil.services import settings_service
from ayambil.services.auth_service import (
    authenticate_admin,
    create_access_token_for_admin,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_LOGIN_RATE_DEP = deps.rate_limit(
    deps.parse_rate(get_settings().rate_limit_login, fallback=(10, 60))
)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Obtain admin access token",
    dependencies=[_LOGIN_RATE_DEP],
)
async def login(
    payload: LoginRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> LoginResponse:
    admin = await authenticate_admin(
        session, username=payload.username, password=payload.password
    )
    if admin is None:
        logger.warning("Failed admin login for %s", payload.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return LoginResponse(
        token=create_access_token_for_admin(admin),
        user=AdminUserRead.model_validate(admin),
    )


@router.get("/me", response_model=AdminUserRead, summary="Current admin")
async def read_me(
    current_admin: Annotated[AdminUser, Depends(deps.get_current_admin)],
) -> AdminUserRead:
    return AdminUserRead.model_validate(current_admin)


@router.get(
    "/settings", response_model=SystemSettingsRead, summary="Read booking limits"
)
async def read_settings(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[AdminUser, Depends(deps.get_current_admin)],
) -> SystemSettingsRead:
    row = await settings_service.get_system_settings(session)
    return SystemSettingsRead.model_validate(row)


@router.put(
    "/settings", response_model=SystemSettingsRead, summary="Update booking limits"
)
async def update_settings(
    payload: SystemSettingsUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[AdminUser, Depends(deps.get_current_admin)],
) -> SystemSettingsRead:
    row = await settings_service.update_system_settings(session, payload)
    return SystemSettingsRead.model_validate(row)
