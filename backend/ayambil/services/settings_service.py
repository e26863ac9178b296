"""Booking limit settings."""
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ayambil.core.config import get_settings
from ayambil.models.system_setting import SYSTEM_SETTINGS_ID, SystemSettings
from ayambil.schemas.settings import SystemSettingsUpdate

logger = logging.getLogger(__name__)


async def get_system_settings(session: AsyncSession) -> SystemSettings:
    """Return the singleton settings row, creating it from config defaults."""
    row = await session.get(SystemSettings, SYSTEM_SETTINGS_ID)
    if row is not None:
        return row
    config = get_settings()
    row = SystemSettings(
        id=SYSTEM_SETTINGS_ID,
        max_bookings_per_day=config.default_max_bookings_per_day,
        max_bookings_per_month=config.default_max_bookings_per_month,
    )
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return row


async def update_system_settings(
    session: AsyncSession, payload: SystemSettingsUpdate
) -> SystemSettings:
    row = await get_system_settings(session)
    for key, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(row, key, value)
    await session.commit()
    await session.refresh(row)
    logger.info(
        "Booking limits updated: per day=%d, per month=%d",
        row.max_bookings_per_day,
        row.max_bookings_per_month,
    )
    return row
