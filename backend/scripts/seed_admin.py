"""Create an admin account for local development."""
from __future__ import annotations

import asyncio
import os

from ayambil.db.session import create_schema, get_sessionmaker
from ayambil.models import AdminRole
from ayambil.services.auth_service import create_admin, get_admin_by_username

USERNAME = os.environ.get("DEV_ADMIN_USERNAME", "admin")
PASSWORD = os.environ.get("DEV_ADMIN_PASSWORD", "admin123")


async def main() -> None:
    await create_schema()
    async with get_sessionmaker()() as session:
        if await get_admin_by_username(session, USERNAME) is not None:
            print(f"Admin {USERNAME} already exists")
            return
        await create_admin(
            session, username=USERNAME, password=PASSWORD, role=AdminRole.SUPERADMIN
        )
        print(f"Created admin {USERNAME}")


if __name__ == "__main__":
    asyncio.run(main())
