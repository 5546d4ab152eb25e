"""
Little Stars - Test Configuration
Pytest fixtures and configuration for testing
"""
import os
from collections.abc import AsyncGenerator
from datetime import date
from typing import Any

# Keep the application engine off PostgreSQL while the app module imports
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

import littlestars.models  # noqa: F401
from littlestars.core.database import Base, get_db
from littlestars.main import app
from littlestars.models.child import Child


@pytest_asyncio.fixture(scope="function")
async def session_maker(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """A fresh SQLite database per test."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database session override."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def child(db_session: AsyncSession) -> Child:
    """A child with no activity yet."""
    child = Child(name="Budi Santoso", nickname="Budi")
    db_session.add(child)
    await db_session.commit()
    return child


@pytest.fixture
def today() -> date:
    return date(2024, 12, 7)


@pytest.fixture
def sample_attempt() -> dict[str, Any]:
    """Sample attempt payload: a completed letter quiz scoring 85."""
    return {
        "content_type": "letter",
        "content_id": 1,
        "activity_type": "quiz",
        "completed": True,
        "score": 85,
        "time_spent_seconds": 90,
    }
