"""Admin authentication helpers."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ayambil.core.security import create_access_token, get_password_hash, verify_password
from ayambil.models.admin_user import AdminRole, AdminUser


async def get_admin_by_username(session: AsyncSession, username: str) -> AdminUser | None:
    result = await session.execute(
        select(AdminUser).where(AdminUser.username == username.strip().lower())
    )
    return result.scalar_one_or_none()


async def create_admin(
    session: AsyncSession,
    *,
    username: str,
    password: str,
    role: AdminRole = AdminRole.ADMIN,
) -> AdminUser:
    """Persist a new admin with a hashed password."""
    admin = AdminUser(
        username=username.strip().lower(),
        hashed_password=get_password_hash(password),
        role=role,
        is_active=True,
    )
    session.add(admin)
    await session.commit()
    await session.refresh(admin)
    return admin


async def authenticate_admin(
    session: AsyncSession, username: str, password: str
) -> AdminUser | None:
    """Validate credentials and return the admin if correct."""
    admin = await get_admin_by_username(session, username)
    if admin is None or not admin.is_active:
        return None
    if not verify_password(password, admin.hashed_password):
        return None
    admin.last_login_at = datetime.now(UTC)
    await session.commit()
    return admin


def create_access_token_for_admin(admin: AdminUser) -> str:
    return create_access_token(str(admin.id), role=admin.role.value, username=admin.username)
