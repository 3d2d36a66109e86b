"""Tests for WatermarkResolver."""

import pytest

from devops_metrics.dates import EPOCH
from devops_metrics.db.repositories import RepositoryRepository
from devops_metrics.github import GitHubNotFoundError, GitHubRetryableError
from devops_metrics.github.sync import RepositoryResolutionError, WatermarkResolver
from devops_metrics.schemas.github_api import GitHubRepository
from tests.conftest import JUN_01
from tests.factories import make_github_repository, make_repository


class TestWatermarkResolver:
    async def test_known_repository_uses_stored_watermark(self, db_session, mock_client):
        repo = make_repository(db_session, last_sync=JUN_01)
        await db_session.flush()

        resolved, watermark = await WatermarkResolver(db_session, mock_client).resolve(
            "octo-org", "service"
        )

        assert resolved.id == repo.id
        assert watermark == JUN_01
        mock_client.get_repository.assert_not_awaited()

    async def test_never_synced_repository_starts_at_epoch(self, db_session, mock_client):
        make_repository(db_session)
        await db_session.flush()

        _, watermark = await WatermarkResolver(db_session, mock_client).resolve(
            "octo-org", "service"
        )

        assert watermark == EPOCH

    async def test_unknown_repository_is_registered(self, db_session, mock_client):
        mock_client.get_repository.return_value = GitHubRepository.model_validate(
            make_github_repository(repo_id=77)
        )

        repo, watermark = await WatermarkResolver(db_session, mock_client).resolve(
            "octo-org", "service"
        )

        assert watermark == EPOCH
        assert repo.github_id == 77
        assert repo.last_sync is None
        stored = await RepositoryRepository(db_session).get_by_owner_and_name(
            "octo-org", "service"
        )
        assert stored is repo
        mock_client.get_repository.assert_awaited_once_with("octo-org", "service")

    async def test_lookup_failure_is_fatal_without_retry(self, db_session, mock_client):
        mock_client.get_repository.side_effect = GitHubRetryableError("502")

        with pytest.raises(RepositoryResolutionError) as exc_info:
            await WatermarkResolver(db_session, mock_client).resolve("octo-org", "service")

        assert "octo-org/service" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, GitHubRetryableError)
        assert mock_client.get_repository.await_count == 1

    async def test_missing_repository(self, db_session, mock_client):
        mock_client.get_repository.side_effect = GitHubNotFoundError("not found")

        with pytest.raises(RepositoryResolutionError):
            await WatermarkResolver(db_session, mock_client).resolve("octo-org", "nope")

        assert await RepositoryRepository(db_session).count() == 0
