"""Admin identities for the management panel."""
from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from ayambil.db.base import Base
from ayambil.models.mixins import TimestampMixin


class AdminRole(str, enum.Enum):
    """Role enumeration for panel permissions."""

    SUPERADMIN = "superadmin"
    ADMIN = "admin"


class AdminUser(TimestampMixin, Base):
    """Username/password account allowed into the admin panel."""

    __tablename__ = "admin_users"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    username: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[AdminRole] = mapped_column(
        Enum(
            AdminRole,
            values_callable=lambda enum_cls: [item.value for item in enum_cls],
        ),
        default=AdminRole.ADMIN,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
