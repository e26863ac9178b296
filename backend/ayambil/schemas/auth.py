"""Authentication schemas."""
from __future__ import annotations

from pydantic import Field

from ayambil.models.admin_user import AdminRole
from ayambil.schemas.base import CamelModel


class LoginRequest(CamelModel):
    """Admin login payload."""

    username: str = Field(min_length=1, max_length=120)
    password: str = Field(min_length=1)


class AdminUserRead(CamelModel):
    username: str
    role: AdminRole


class LoginResponse(CamelModel):
    """Bearer token issued on successful login."""

    token: str
    token_type: str = "bearer"
    user: AdminUserRead
