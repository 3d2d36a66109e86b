"""Pytest configuration and shared fixtures.

Usage Guide:
- For ORM model tests: import factories from tests.factories
- For schema validation tests: use the payload factories (make_github_pr, etc.)
- For sync tests: use `sync_config` (no retry delay, no pacing) and a
  mocked GitHubClient
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from devops_metrics.config import SyncConfig
from devops_metrics.db.models import Base
from devops_metrics.github.client import GitHubClient

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# Define a consistent "test epoch" for deterministic date matching across tests.
# All hardcoded dates should reference these constants for consistency.
# -----------------------------------------------------------------------------

# Base dates (datetime objects for Pydantic/ORM)
MAY_30 = datetime(2024, 5, 30, 12, 0, 0, tzinfo=UTC)  # Older than the watermark
JUN_01 = datetime(2024, 6, 1, 0, 0, 0, tzinfo=UTC)    # Watermark
JUN_03 = datetime(2024, 6, 3, 12, 0, 0, tzinfo=UTC)   # Second-newest feed item
JUN_05 = datetime(2024, 6, 5, 12, 0, 0, tzinfo=UTC)   # Newest feed item
JUN_10 = datetime(2024, 6, 10, 9, 0, 0, tzinfo=UTC)   # PR opened
JUN_11 = datetime(2024, 6, 11, 21, 0, 0, tzinfo=UTC)  # PR merged (36h later)

# ISO 8601 strings (for GitHub API mocks)
MAY_30_ISO = "2024-05-30T12:00:00Z"
JUN_01_ISO = "2024-06-01T00:00:00Z"
JUN_03_ISO = "2024-06-03T12:00:00Z"
JUN_05_ISO = "2024-06-05T12:00:00Z"
JUN_10_ISO = "2024-06-10T09:00:00Z"
JUN_11_ISO = "2024-06-11T21:00:00Z"


# -----------------------------------------------------------------------------
# Database Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
async def test_engine():
    """Create an in-memory SQLite engine for tests.

    Each test gets a fresh database with all tables created.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """Create an async session with auto-rollback.

    Sync services commit in batches, so committed rows survive the rollback;
    the engine itself is discarded after each test.
    """
    session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


# -----------------------------------------------------------------------------
# Sync Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sync_config() -> SyncConfig:
    """Sync configuration with no waiting between attempts or requests."""
    return SyncConfig(
        page_size=3,
        retry_attempts=3,
        retry_delay_ms=0,
        request_interval_ms=0,
        commit_batch_size=2,
    )


@pytest.fixture
def mock_client() -> AsyncMock:
    """GitHubClient double; tests set return values on the endpoint methods."""
    return AsyncMock(spec=GitHubClient)


# -----------------------------------------------------------------------------
# Utility Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def utc_now() -> datetime:
    """Current UTC datetime for tests."""
    return datetime.now(UTC)
