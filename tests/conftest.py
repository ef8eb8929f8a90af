"""
ShipTrack Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides are applied before anything under `shiptrack`
       is imported, so the settings singleton and the module-level engine
       never point at a real PostgreSQL instance.

Fixture Hierarchy (all function-scoped):
    ├── db_engine: fresh in-memory SQLite database with all tables
    ├── db_session: AsyncSession bound to db_engine (service tests)
    ├── mock_db_session: AsyncMock session (storage-failure tests)
    ├── test_client: HTTPX AsyncClient whose get_db_session uses db_engine
    └── make_shipment / make_issue: insert rows with explicit timestamps
"""

import os

# Override settings for testing BEFORE any shiptrack imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["INITIAL_SHIPMENT_STATUS"] = "In afwachting"
os.environ["ACTOR_HEADER"] = "X-Actor"

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import shiptrack.models  # noqa: F401
from shiptrack.database import Base, get_db_session
from shiptrack.models import IssueReport, Shipment


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite engine shared by every session of one test.

    StaticPool keeps a single connection alive; with the default pool each
    new connection would see a fresh, empty in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """
    Provides a real AsyncSession for service-level tests.

    Usage:
        async def test_get_shipment(db_session):
            result = await shipment_service.get_shipment(db_session, 1)
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    What:    An AsyncMock that simulates AsyncSession behavior.
    Why:     Storage failures are easiest to provoke by making execute/get
             raise SQLAlchemy errors.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Row Builders
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_shipment(db_session):
    """Inserts a shipment with explicit values (created_at included)."""

    async def _make(
        assigned_to=None,
        revenue=None,
        created_at=None,
        expected_delivery=None,
        status="In afwachting",
        destination="Rotterdam",
    ) -> Shipment:
        shipment = Shipment(
            status=status,
            destination=destination,
            assigned_to=assigned_to,
            expected_delivery=expected_delivery,
            weight="10 kg",
            revenue=Decimal(str(revenue)) if revenue is not None else None,
            created_at=created_at or datetime.now(timezone.utc),
        )
        db_session.add(shipment)
        await db_session.flush()
        return shipment

    return _make


@pytest.fixture
def make_issue(db_session):
    """Inserts an issue report with an explicit created_at."""

    async def _make(title="Pakket beschadigd", shipment_id=None, created_at=None) -> IssueReport:
        issue = IssueReport(
            title=title,
            shipment_id=shipment_id,
            created_at=created_at or datetime.now(timezone.utc),
            is_important=False,
            is_fixed=False,
        )
        db_session.add(issue)
        await db_session.flush()
        return issue

    return _make


# ══════════════════════════════════════════════════════════════════════════
# API Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient talking to the FastAPI app in-process.
    How:     get_db_session is overridden to use the in-memory test engine
             with the same commit/rollback behavior as production.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from shiptrack.main import app

    async def _override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
