"""Bootstrap helpers for default data."""

from __future__ import annotations

import logging

from ayambil.core.config import get_settings
from ayambil.db.session import create_schema, get_sessionmaker
from ayambil.models.admin_user import AdminRole
from ayambil.services import settings_service
from ayambil.services.auth_service import create_admin, get_admin_by_username

logger = logging.getLogger(__name__)


async def ensure_schema() -> None:
    """SQLite databases are created in place; others are migrated with Alembic."""
    settings = get_settings()
    if settings.database_url.startswith("sqlite"):
        await create_schema(settings.database_url)


async def ensure_defaults() -> None:
    """Create the settings row and the configured admin if missing."""
    settings = get_settings()
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        await settings_service.get_system_settings(session)
        if not settings.admin_password:
            logger.warning("ADMIN_PASSWORD not set; skipping default admin creation")
            return
        if await get_admin_by_username(session, settings.admin_username) is not None:
            return
        await create_admin(
            session,
            username=settings.admin_username,
            password=settings.admin_password,
            role=AdminRole.SUPERADMIN,
        )
        logger.info("Created default admin %s", settings.admin_username)
