import asyncio
import sys
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.api.dependencies import get_db_session, get_view_counter
from app.core.config import settings
from app.db.base import Base
from app.db import models  # noqa: F401
from app.main import app
from app.services.view_counter import ViewCounter
from tests.utils.helpers import (
    ADMIN_EMAIL,
    PROXY_SECRET,
    WEBHOOK_SECRET,
    InMemoryRedis,
)

if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


@pytest.fixture(autouse=True)
def configure_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "app_proxy_shared_secret", PROXY_SECRET)
    monkeypatch.setattr(settings, "shopify_webhook_secret", WEBHOOK_SECRET)
    monkeypatch.setattr(settings, "admin_emails", ADMIN_EMAIL)
    monkeypatch.setattr(settings, "proxy_errors_as_ok", False)
    monkeypatch.setattr(settings, "min_payout_cents", 5000)
    monkeypatch.setattr(settings, "default_currency", "EUR")


@pytest_asyncio.fixture(scope="function")
async def session_factory(
    tmp_path: Path,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh SQLite schema per test, built from the ORM metadata."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'payouts.db'}", poolclass=NullPool
    )

    # Let SQLAlchemy emit BEGIN itself so SAVEPOINT (begin_nested) nests properly.
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_redis() -> InMemoryRedis:
    return InMemoryRedis()


@pytest.fixture
def view_counter(fake_redis: InMemoryRedis) -> ViewCounter:
    return ViewCounter("redis://unused", client=fake_redis)


@pytest_asyncio.fixture(scope="function")
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    view_counter: ViewCounter,
) -> AsyncGenerator[AsyncClient, None]:
    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session
    app.dependency_overrides[get_view_counter] = lambda: view_counter

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def sample_trainer_id() -> str:
    return "7001"


@pytest.fixture
def admin_headers() -> dict:
    return {"X-MF-Admin-Email": ADMIN_EMAIL}


@pytest.fixture
def banking_payload() -> dict:
    return {
        "payout_name": "Claire Martin",
        "payout_country": "fr",
        "payout_iban": "FR76 3000 6000 0112 3456 7890 189",
        "payout_bic": "AGRIFRPP",
    }
