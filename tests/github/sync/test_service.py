"""End-to-end tests for RepositorySyncService against an in-memory database."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from devops_metrics.dates import EPOCH, as_utc
from devops_metrics.db.repositories import PullRequestRepository, RepositoryRepository
from devops_metrics.github import (
    GitHubClient,
    GitHubNotFoundError,
    GitHubPayloadError,
    GitHubRetryableError,
    RepositorySyncService,
)
from devops_metrics.github.sync import RepositoryResolutionError
from devops_metrics.schemas.github_api import GitHubRepository
from tests.conftest import JUN_01, JUN_03_ISO, JUN_05, JUN_05_ISO, JUN_10, MAY_30_ISO
from tests.factories import (
    make_github_pr,
    make_github_repository,
    make_repository,
    parsed_issue_comment,
    parsed_pr,
    parsed_review,
)

PASS_START = JUN_10


@pytest.fixture(autouse=True)
def fixed_clock():
    """Pin the pass start time."""
    with patch("devops_metrics.github.sync.service.utc_now", return_value=PASS_START):
        yield


@pytest.fixture
def service(db_session, mock_client, sync_config) -> RepositorySyncService:
    return RepositorySyncService(db_session, mock_client, sync_config)


@pytest.fixture
def quiet_activity(mock_client):
    """No reviews or comments on any PR."""
    mock_client.get_pull_request_reviews.return_value = []
    mock_client.get_pull_request_review_comments.return_value = []
    mock_client.get_issue_comments.return_value = []


def feed_jun05_jun03_may30():
    return [
        parsed_pr(number=3, updated_at=JUN_05_ISO),
        parsed_pr(number=2, updated_at=JUN_03_ISO),
        parsed_pr(number=1, updated_at=MAY_30_ISO),
    ]


class TestFirstPass:
    async def test_unknown_repository_synced_from_epoch(
        self, db_session, service, mock_client, quiet_activity
    ):
        mock_client.get_repository.return_value = GitHubRepository.model_validate(
            make_github_repository()
        )
        mock_client.list_pull_requests_page.side_effect = [feed_jun05_jun03_may30(), []]

        result = await service.sync("octo-org", "service")

        assert result.previous_watermark == EPOCH
        assert result.pull_requests_synced == [3, 2, 1]
        assert result.pages_fetched == 2
        assert result.reviewed_pull_requests == 3
        assert result.new_watermark == PASS_START
        assert result.success is True

        repo = await RepositoryRepository(db_session).get_by_owner_and_name("octo-org", "service")
        assert repo is not None
        assert as_utc(repo.last_sync) == PASS_START

    async def test_resolution_failure_aborts_before_feed(self, db_session, service, mock_client):
        mock_client.get_repository.side_effect = GitHubNotFoundError("404")

        with pytest.raises(RepositoryResolutionError):
            await service.sync("octo-org", "missing")

        mock_client.list_pull_requests_page.assert_not_awaited()


class TestIncrementalPass:
    async def test_only_prs_after_watermark(
        self, db_session, service, mock_client, quiet_activity
    ):
        repo = make_repository(db_session, last_sync=JUN_01)
        await db_session.flush()
        mock_client.list_pull_requests_page.side_effect = [feed_jun05_jun03_may30()]

        result = await service.sync("octo-org", "service")

        assert result.pull_requests_synced == [3, 2]
        assert result.reached_watermark is True
        mock_client.list_pull_requests_page.assert_awaited_once()
        assert mock_client.get_pull_request_reviews.await_count == 2
        prs = PullRequestRepository(db_session)
        assert await prs.get_by_number(repo.id, 1) is None
        assert as_utc(repo.last_sync) == PASS_START

    async def test_reviews_and_comments_counted(self, db_session, service, mock_client):
        make_repository(db_session, last_sync=JUN_01)
        await db_session.flush()
        mock_client.list_pull_requests_page.side_effect = [
            [parsed_pr(number=3, updated_at=JUN_05_ISO)],
            [],
        ]
        mock_client.get_pull_request_reviews.return_value = [parsed_review()]
        mock_client.get_pull_request_review_comments.return_value = []
        mock_client.get_issue_comments.return_value = [
            parsed_issue_comment(comment_id=1),
            parsed_issue_comment(comment_id=2),
        ]

        result = await service.sync("octo-org", "service")

        assert result.reviews_synced == 1
        assert result.issue_comments_synced == 2
        assert result.to_dict()["pull_requests_synced"] == 1

    async def test_watermark_never_moves_backwards(
        self, db_session, service, mock_client, quiet_activity
    ):
        future = PASS_START + timedelta(days=1)
        repo = make_repository(db_session, last_sync=future)
        await db_session.flush()
        mock_client.list_pull_requests_page.side_effect = [feed_jun05_jun03_may30()]

        result = await service.sync("octo-org", "service")

        assert result.pull_requests_synced == []
        assert result.new_watermark == future
        assert as_utc(repo.last_sync) == future


class TestFailures:
    async def test_failed_pr_is_recovered_next_pass(self, db_session, service, mock_client):
        repo = make_repository(db_session, last_sync=JUN_01)
        await db_session.flush()

        async def reviews(owner, name, number):
            if number == 3:
                raise GitHubRetryableError("502")
            return []

        mock_client.list_pull_requests_page.side_effect = [feed_jun05_jun03_may30()]
        mock_client.get_pull_request_reviews.side_effect = reviews
        mock_client.get_pull_request_review_comments.return_value = []
        mock_client.get_issue_comments.return_value = []

        result = await service.sync("octo-org", "service")

        assert result.failed_pull_requests == [3]
        assert result.reviewed_pull_requests == 2
        assert result.success is False
        assert as_utc(repo.last_sync) == JUN_05 - timedelta(microseconds=1)

        # Next pass: the feed re-delivers PR 3 and its reviews now succeed
        mock_client.list_pull_requests_page.side_effect = [
            [parsed_pr(number=3, updated_at=JUN_05_ISO)],
            [],
        ]
        mock_client.get_pull_request_reviews.side_effect = None
        mock_client.get_pull_request_reviews.return_value = [parsed_review()]

        second = await service.sync("octo-org", "service")

        assert second.pull_requests_synced == [3]
        assert second.failed_pull_requests == []
        assert as_utc(repo.last_sync) == PASS_START

    async def test_remote_abort_keeps_rows_and_watermark(
        self, db_session, service, mock_client, quiet_activity
    ):
        repo = make_repository(db_session, last_sync=JUN_01)
        await db_session.flush()
        full_page = [
            parsed_pr(number=6, updated_at=JUN_05_ISO),
            parsed_pr(number=5, updated_at=JUN_05_ISO),
            parsed_pr(number=4, updated_at=JUN_05_ISO),
        ]
        mock_client.list_pull_requests_page.side_effect = [
            full_page,
            GitHubRetryableError("502"),
            GitHubRetryableError("502"),
            GitHubRetryableError("502"),
        ]

        with pytest.raises(GitHubRetryableError):
            await service.sync("octo-org", "service")

        await db_session.rollback()
        await db_session.refresh(repo)
        assert as_utc(repo.last_sync) == JUN_01
        prs = PullRequestRepository(db_session)
        for number in (4, 5, 6):
            assert await prs.get_by_number(repo.id, number) is not None
        mock_client.get_pull_request_reviews.assert_not_awaited()


def listing_page(*payloads):
    """A githubkit list response whose items dump to ``payloads``."""
    items = []
    for payload in payloads:
        item = MagicMock()
        item.model_dump.return_value = payload
        items.append(item)
    return MagicMock(parsed_data=items)


class TestFeedPayloads:
    """Feed items go through the real client's validation."""

    @pytest.fixture
    def github(self):
        with patch("devops_metrics.github.client.GitHub") as github_class:
            github = github_class.return_value
            empty = AsyncMock(return_value=listing_page())
            github.rest.pulls.async_list_reviews = empty
            github.rest.pulls.async_list_review_comments = empty
            github.rest.issues.async_list_comments = empty
            yield github

    @pytest.fixture
    def live_service(self, db_session, github, sync_config) -> RepositorySyncService:
        client = GitHubClient(token="test-token", request_interval_ms=0)
        return RepositorySyncService(db_session, client, sync_config)

    @staticmethod
    def without_reviewers(number, updated_at):
        payload = make_github_pr(number=number, updated_at=updated_at)
        payload["requested_reviewers"] = None
        payload["labels"] = None
        return payload

    async def test_null_lists_do_not_end_the_walk(self, db_session, github, live_service):
        repo = make_repository(db_session, last_sync=JUN_01)
        await db_session.flush()
        github.rest.pulls.async_list = AsyncMock(
            side_effect=[
                listing_page(
                    self.without_reviewers(9, JUN_05_ISO),
                    self.without_reviewers(8, JUN_05_ISO),
                    self.without_reviewers(7, JUN_05_ISO),
                ),
                listing_page(
                    make_github_pr(number=6, updated_at=JUN_03_ISO),
                    make_github_pr(number=5, updated_at=MAY_30_ISO),
                ),
            ]
        )

        result = await live_service.sync("octo-org", "service")

        assert result.pages_fetched == 2
        assert result.pull_requests_synced == [9, 8, 7, 6]
        assert as_utc(repo.last_sync) == PASS_START

    async def test_unparseable_item_holds_the_watermark(self, db_session, github, live_service):
        repo = make_repository(db_session, last_sync=JUN_01)
        await db_session.flush()
        broken = make_github_pr(number=8, updated_at=JUN_05_ISO)
        del broken["updated_at"]
        github.rest.pulls.async_list = AsyncMock(
            return_value=listing_page(make_github_pr(number=9, updated_at=JUN_05_ISO), broken)
        )

        with pytest.raises(GitHubPayloadError):
            await live_service.sync("octo-org", "service")

        # Retried like any remote failure, then the pass aborts
        assert github.rest.pulls.async_list.await_count == 3
        await db_session.rollback()
        await db_session.refresh(repo)
        assert as_utc(repo.last_sync) == JUN_01
        assert await PullRequestRepository(db_session).get_by_number(repo.id, 9) is None
