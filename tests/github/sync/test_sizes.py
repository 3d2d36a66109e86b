"""Tests for PullRequestSizeBackfill."""

import pytest

from devops_metrics.db.repositories import PullRequestRepository
from devops_metrics.github import GitHubNotFoundError, PullRequestSizeBackfill
from devops_metrics.github.sync import RepositoryNotSyncedError
from tests.factories import make_pull_request, make_repository, parsed_pr


@pytest.fixture
def backfill(db_session, mock_client, sync_config) -> PullRequestSizeBackfill:
    return PullRequestSizeBackfill(db_session, mock_client, sync_config)


class TestSizeBackfill:
    async def test_unknown_repository(self, backfill, mock_client):
        with pytest.raises(RepositoryNotSyncedError) as exc_info:
            await backfill.run_for("octo-org", "service")

        assert "sync run" in str(exc_info.value)
        mock_client.get_pull_request.assert_not_awaited()

    async def test_fills_missing_sizes(self, db_session, backfill, mock_client):
        repo = make_repository(db_session)
        await db_session.flush()
        make_pull_request(db_session, repo, number=1)
        make_pull_request(db_session, repo, number=2, size=99)
        await db_session.flush()
        mock_client.get_pull_request.return_value = parsed_pr(
            number=1, additions=120, deletions=45
        )

        result = await backfill.run_for("octo-org", "service")

        assert result.candidates == 1
        assert result.updated == 1
        mock_client.get_pull_request.assert_awaited_once_with("octo-org", "service", 1)
        pr = await PullRequestRepository(db_session).get_by_number(repo.id, 1)
        assert pr is not None
        assert pr.size == 165

    async def test_missing_stats_and_failures(self, db_session, backfill, mock_client):
        repo = make_repository(db_session)
        await db_session.flush()
        for number in (1, 2, 3):
            make_pull_request(db_session, repo, number=number)
        await db_session.flush()

        async def get_pull_request(owner, name, number):
            if number == 2:
                raise GitHubNotFoundError(f"PR #{number} not found")
            if number == 3:
                return parsed_pr(number=3)
            return parsed_pr(number=1, additions=1, deletions=2)

        mock_client.get_pull_request.side_effect = get_pull_request

        result = await backfill.run(repo)

        assert result.updated == 1
        assert result.unavailable == 1
        assert result.failed_pull_requests == [2]
        assert result.to_dict()["candidates"] == 3
        remaining = await PullRequestRepository(db_session).get_missing_size(repo.id)
        assert [pr.number for pr in remaining] == [2, 3]
