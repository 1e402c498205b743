"""
Quillnote Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession (service unit tests, no DB)
    ├── sample_note_data: Field values matching the Note model
    ├── db_engine: In-memory SQLite engine with the schema created
    ├── test_client: HTTPX AsyncClient bound to a fresh app on db_engine
    └── fake_llm: Stand-in summarization provider for API tests
"""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

# Must be set BEFORE any quillnote import: settings and the engine are
# created at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LLM_PROVIDER"] = "openai"
os.environ["OPENAI_API_KEY"] = "test-key-not-real"
os.environ["GEMINI_API_KEY"] = "test-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RETRY_MAX_ATTEMPTS"] = "1"  # No backoff sleeps in tests
os.environ["RATE_LIMIT_REQUESTS"] = "10000"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from quillnote.database import Base, get_db_session
from quillnote.models.note import Note  # noqa: F401  (registers the table)
from quillnote.services.llm_factory import reset_llm_services


@pytest.fixture(autouse=True)
def _fresh_llm_services():
    """Each test starts with new provider instances (and closed circuit breakers)."""
    reset_llm_services()
    yield
    reset_llm_services()


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_note(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
            result = await note_service.get_note(mock_db_session, note_id)
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
def sample_note_data():
    now = datetime.now(timezone.utc)
    return {
        "id": uuid4(),
        "title": "Meeting notes",
        "content": "Discussed the Q3 roadmap. Agreed to ship search first.",
        "summary": "",
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def make_note_row(sample_note_data):
    """Builds a MagicMock shaped like a Note row (overrides via kwargs)."""
    def _make(**overrides):
        row = MagicMock()
        for key, value in {**sample_note_data, **overrides}.items():
            setattr(row, key, value)
        return row
    return _make


@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite engine shared by every session in one test.

    StaticPool keeps a single connection, so the schema created here is the
    one every request sees (each new :memory: connection would be empty).
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    HTTPX AsyncClient talking to a fresh app through ASGITransport.

    get_db_session is overridden to use db_engine with the same
    commit/rollback behavior as the real dependency.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from quillnote.main import create_app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def fake_llm():
    """A configured provider whose summarize() is an AsyncMock."""
    llm = MagicMock()
    llm.provider = "openai"
    llm.model_name = "gpt-4o-mini"
    llm.is_configured = True
    llm.summarize = AsyncMock(return_value="One-line summary.\n- idea one\n- idea two\n- idea three")
    return llm
