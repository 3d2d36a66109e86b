"""Walk the newest-first PR activity feed down to the watermark."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import TYPE_CHECKING

from devops_metrics.dates import as_utc
from devops_metrics.logging import bind_repo

if TYPE_CHECKING:
    from devops_metrics.db.models import Repository
    from devops_metrics.github.client import GitHubClient
    from devops_metrics.github.retry import RetryPolicy

    from .commit_manager import CommitManager
    from .pull_request import PullRequestMaterializer


@dataclass
class FeedWalkResult:
    """What a feed walk fetched and stored."""

    pages_fetched: int = 0
    pull_request_numbers: list[int] = field(default_factory=list)
    reached_watermark: bool = False
    """True if the walk stopped on an item at or before the watermark."""

    @property
    def materialized(self) -> int:
        return len(self.pull_request_numbers)


class PullRequestPaginator:
    """Drive the PR listing sorted by update time, newest first.

    Pages are requested one at a time and every item is materialized
    before the next page is requested. The first item whose updated_at is
    not after the watermark ends the walk: nothing after it on the page is
    touched and no further page is requested. An empty page ends it too.
    """

    def __init__(
        self,
        client: GitHubClient,
        materializer: PullRequestMaterializer,
        retry: RetryPolicy,
        commit_manager: CommitManager,
        page_size: int = 100,
    ) -> None:
        self._client = client
        self._materializer = materializer
        self._retry = retry
        self._commit_manager = commit_manager
        self._page_size = page_size

    async def fetch_new_pull_requests(
        self, repository: Repository, watermark: datetime
    ) -> FeedWalkResult:
        """Materialize every PR updated after ``watermark``.

        Args:
            repository: Repository being synced
            watermark: Exclusive lower bound on updated_at (UTC)

        Returns:
            FeedWalkResult describing the walk
        """
        log = bind_repo(repository.owner, repository.name)
        result = FeedWalkResult()
        page = 1

        while True:
            prs = await self._retry.execute(
                partial(
                    self._client.list_pull_requests_page,
                    repository.owner,
                    repository.name,
                    page=page,
                    state="all",
                    sort="updated",
                    direction="desc",
                    per_page=self._page_size,
                ),
                description=f"PR list page {page}",
            )
            result.pages_fetched += 1
            log.info("Fetched page {} ({} PRs)", page, len(prs))

            if not prs:
                break

            for gh_pr in prs:
                if as_utc(gh_pr.updated_at) <= watermark:
                    log.info(
                        "Reached watermark at PR #{} (updated {})",
                        gh_pr.number,
                        gh_pr.updated_at.isoformat(),
                    )
                    result.reached_watermark = True
                    return result

                await self._materializer.materialize(gh_pr, repository.id)
                result.pull_request_numbers.append(gh_pr.number)
                await self._commit_manager.record_success()
                log.debug("Synced PR #{}", gh_pr.number)

            page += 1

        return result
