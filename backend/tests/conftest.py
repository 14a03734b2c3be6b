"""
Spacetime Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the test suite.

Fixture Hierarchy:
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── temp_storage:    Temporary upload directory
    ├── sample_image_bytes: Minimal JPEG bytes
    ├── db_engine:       Fresh in-memory SQLite database per test
    ├── test_client:     HTTPX AsyncClient bound to the app and db_engine
    └── make_user / auth_headers: Users and bearer headers for API tests
"""

import os
import tempfile

# Settings are read at import time, so the environment must be in place
# before anything under `app` is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-not-real"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="spacetime_test_")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RETRY_MAX_ATTEMPTS"] = "1"
os.environ["GITHUB_CLIENT_ID"] = "test-client-id"
os.environ["GITHUB_CLIENT_SECRET"] = "test-client-secret"

from datetime import datetime, timezone
from typing import Dict
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db_session
from app.models import User
from app.services.token_service import token_service


# ══════════════════════════════════════════════════════════════════════════
# Unit Test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = memory
        result = await memory_service.get_memory(mock_db_session, memory_id, user_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "uploads"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def sample_memory_data():
    return {
        "id": uuid4(),
        "content": "The day we watched the launch from the beach.",
        "cover_url": "http://localhost:3333/uploads/cover.png",
        "is_public": False,
        "user_id": uuid4(),
        "created_at": datetime.now(timezone.utc),
    }


# ══════════════════════════════════════════════════════════════════════════
# API Test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """A fresh in-memory database with all tables, dropped after the test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to the app through ASGITransport, with
    get_db_session pointed at the per-test database.
    """
    from app.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    """Factory inserting a User row and returning its id."""
    counter = {"github_id": 1000}

    async def _make_user(login: str = "octocat") -> UUID:
        counter["github_id"] += 1
        async with session_factory() as session:
            user = User(
                github_id=counter["github_id"],
                login=login,
                name=login.title(),
                avatar_url=f"https://avatars.example/{login}.png",
            )
            session.add(user)
            await session.commit()
            return user.id

    return _make_user


@pytest.fixture
def auth_headers():
    """Factory building an Authorization header for a user id."""

    def _headers(user_id: UUID) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token_service.issue(user_id, name='Test')}"}

    return _headers
