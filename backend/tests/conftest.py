"""Shared fixtures: in-memory SQLite database, sellers, orders and an API client."""

import os

# Settings are read at import time; keep the module-level engine off PostgreSQL
os.environ.setdefault("QUICKINVOICE_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("QUICKINVOICE_TIMEZONE", "Africa/Accra")

from collections.abc import AsyncIterator  # noqa: E402
from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from quickinvoice.api.v1.dependencies import get_clock  # noqa: E402
from quickinvoice.db import create_engine, get_session  # noqa: E402
from quickinvoice.main import app  # noqa: E402
from quickinvoice.models import Seller, SubscriptionTier  # noqa: E402
from quickinvoice.utils.retry import RetryConfig  # noqa: E402

from tests.factories import NOW  # noqa: E402


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def no_wait_retry() -> RetryConfig:
    return RetryConfig(max_attempts=5, min_wait=0.0, max_wait=0.0)


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_maker() as session:
        yield session


@pytest.fixture
async def free_seller(session: AsyncSession) -> Seller:
    seller = Seller(email="ama@example.com", business_name="Ama's Kitchen", phone="0244123456", created_at=NOW)
    session.add(seller)
    await session.commit()
    return seller


@pytest.fixture
async def premium_seller(session: AsyncSession) -> Seller:
    seller = Seller(
        email="kofi@example.com",
        business_name="Kofi Fabrics",
        phone="0201112222",
        momo_number="0559998888",
        subscription_tier=SubscriptionTier.PREMIUM,
        subscription_expires_at=NOW + timedelta(days=30),
        created_at=NOW,
    )
    session.add(seller)
    await session.commit()
    return seller


@pytest.fixture
async def client(session_maker: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncClient]:
    async def _get_session() -> AsyncIterator[AsyncSession]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_clock] = lambda: NOW
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
