"""Tests for database engine and session management."""

import pytest
from sqlalchemy import func, select, text

from devops_metrics.config import get_settings
from devops_metrics.db import (
    Repository,
    create_tables,
    dispose_engine,
    drop_tables,
    get_session,
)


@pytest.fixture
async def file_database(tmp_path, monkeypatch):
    """Point the module-level engine at a throwaway SQLite file."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'metrics.db'}")
    get_settings.cache_clear()
    await dispose_engine()
    await create_tables()
    yield
    await dispose_engine()
    get_settings.cache_clear()


class TestDatabaseEngine:
    """Tests for async SQLAlchemy engine operations."""

    async def test_create_tables(self, test_engine):
        """All tables are created from the metadata."""
        async with test_engine.connect() as conn:
            result = await conn.execute(
                text("SELECT name FROM sqlite_master WHERE type='table'")
            )
            tables = {row[0] for row in result.fetchall()}

        assert {
            "repositories",
            "users",
            "labels",
            "pull_requests",
            "pull_request_labels",
            "pull_request_assignees",
            "pull_request_reviewers",
            "reviews",
            "review_comments",
        } <= tables

    async def test_session_commits_on_success(self, file_database):
        async with get_session() as session:
            session.add(
                Repository(
                    github_id=1,
                    owner="octo-org",
                    name="service",
                    html_url="https://github.com/octo-org/service",
                )
            )

        async with get_session() as session:
            count = await session.scalar(select(func.count()).select_from(Repository))
        assert count == 1

    async def test_session_rolls_back_on_error(self, file_database):
        with pytest.raises(ValueError):
            async with get_session() as session:
                session.add(
                    Repository(
                        github_id=2,
                        owner="octo-org",
                        name="rollback-test",
                        html_url="https://github.com/octo-org/rollback-test",
                    )
                )
                await session.flush()
                raise ValueError("Simulated error")

        async with get_session() as session:
            count = await session.scalar(select(func.count()).select_from(Repository))
        assert count == 0

    async def test_drop_tables(self, file_database):
        await drop_tables()

        async with get_session() as session:
            result = await session.execute(
                text("SELECT name FROM sqlite_master WHERE type='table'")
            )
            assert "repositories" not in {row[0] for row in result.fetchall()}

    async def test_dispose_engine_is_idempotent(self):
        await dispose_engine()
        await dispose_engine()
