"""Pytest configuration and fixtures for the portal tests."""

import os

# Settings are read at import time, so the environment must be set first
os.environ.setdefault("APP_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ["APP_ENV"] = "test"

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from portal.access.identity import IdentityResolver, SessionRegistry
from portal.database import get_db, init_db
from portal.store.gateway import RecordStoreGateway
from portal.utils.security import create_access_token
from tests.factories import RecordFactory


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """A fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def gateway(session: AsyncSession) -> RecordStoreGateway:
    return RecordStoreGateway(session)


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def resolver(gateway: RecordStoreGateway, registry: SessionRegistry) -> IdentityResolver:
    return IdentityResolver(gateway, registry)


@pytest.fixture
def factory(session: AsyncSession) -> RecordFactory:
    """Creates committed records through the gateway."""
    return RecordFactory(session)


@pytest.fixture
async def app(session_factory):
    """The application wired to the test database."""
    from portal.main import create_app

    app = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers():
    """Build bearer headers for a principal, standing in for the auth provider."""

    def _headers(principal_id, email: str = "") -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(principal_id, email)}"}

    return _headers
