import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from typing import AsyncGenerator

from ticketd.config import settings
from ticketd.database import enable_sqlite_foreign_keys, get_db, init_models
from ticketd.main import app
from ticketd.store.sql import SQLRepository

ADMIN_USER = "admin"
ADMIN_PASS = "s3cret"


@pytest_asyncio.fixture(scope="function")
async def db_session(tmp_path) -> AsyncGenerator[AsyncSession, None]:
    """Fresh SQLite database per test, schema created the same way the app does it."""
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ticketd-test.db'}", echo=False)
    enable_sqlite_foreign_keys(test_engine)
    await init_models(test_engine)

    TestingSessionLocal = sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with TestingSessionLocal() as session:
        yield session

    await test_engine.dispose()


@pytest.fixture
def store(db_session: AsyncSession) -> SQLRepository:
    return SQLRepository(db_session)


@pytest.fixture
def admin_auth(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_USER", ADMIN_USER)
    monkeypatch.setattr(settings, "ADMIN_PASS", ADMIN_PASS)
    monkeypatch.setattr(settings, "DISABLE_AUTH", False)
    return (ADMIN_USER, ADMIN_PASS)


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Client for testing API endpoints."""
    # Override the get_db dependency to use our test session
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
