"""Initial booking schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    admin_role_enum = sa.Enum("superadmin", "admin", name="adminrole")
    date_status_enum = sa.Enum("open", "closed", name="datestatus")
    submission_status_enum = sa.Enum(
        "pending", "confirmed", "cancelled", name="submissionstatus"
    )

    op.create_table(
        "admin_users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("username", sa.String(length=120), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", admin_role_enum, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )

    op.create_table(
        "calendar_dates",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False, unique=True),
        sa.Column("status", date_status_enum, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "submissions",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("upi_number", sa.String(length=10), nullable=False),
        sa.Column("whatsapp_number", sa.String(length=10), nullable=False),
        sa.Column("ayambil_shala_name", sa.String(length=200), nullable=False),
        sa.Column("city", sa.String(length=120), nullable=False),
        sa.Column("booking_date", sa.Date(), nullable=False),
        sa.Column("email", sa.String(length=320)),
        sa.Column("status", submission_status_enum, nullable=False),
        sa.Column("ip_address", sa.String(length=64)),
        *_timestamps(),
    )
    op.create_index(
        "ix_submissions_booking_date_status",
        "submissions",
        ["booking_date", "status"],
    )

    op.create_table(
        "system_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("max_bookings_per_day", sa.Integer(), nullable=False),
        sa.Column("max_bookings_per_month", sa.Integer(), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("system_settings")
    op.drop_index("ix_submissions_booking_date_status", table_name="submissions")
    op.drop_table("submissions")
    op.drop_table("calendar_dates")
    op.drop_table("admin_users")
    sa.Enum(name="submissionstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="datestatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="adminrole").drop(op.get_bind(), checkfirst=True)
