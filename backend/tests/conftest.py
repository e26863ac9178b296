"""Test fixtures for the Ayambil booking backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.pop("REDIS_URL", None)

from ayambil.api import deps
from ayambil.client.api import CalendarServiceClient
from ayambil.core.config import get_settings
from ayambil.core.security import get_password_hash
from ayambil.db.base import Base
from ayambil.db.session import dispose_engine, get_sessionmaker
from ayambil.main import app
from ayambil.models import AdminRole, AdminUser

TODAY = date(2030, 3, 10)


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def app_context(
    reset_database: AsyncIterator[None], db_url: str
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client, a pinned "today" and a seeded admin."""
    sessionmaker = get_sessionmaker(db_url)
    admin_password = "Passw0rd!"

    async with sessionmaker() as session:
        admin = AdminUser(
            username="admin",
            hashed_password=get_password_hash(admin_password),
            role=AdminRole.SUPERADMIN,
            is_active=True,
        )
        session.add(admin)
        await session.commit()

    app.dependency_overrides[deps.get_today] = lambda: TODAY
    context: dict[str, object] = {
        "today": TODAY,
        "admin_username": "admin",
        "admin_password": admin_password,
    }
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            context["client"] = client
            yield context
    finally:
        app.dependency_overrides.pop(deps.get_today, None)


@pytest_asyncio.fixture()
async def service_client(
    app_context: dict[str, object],
) -> AsyncIterator[CalendarServiceClient]:
    """CalendarServiceClient wired to the app in-process."""
    async with CalendarServiceClient(
        "http://test/api", transport=ASGITransport(app=app)
    ) as client:
        yield client

