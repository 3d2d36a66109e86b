"""PR size backfill.

The PR listing the feed walk reads carries no diff stats, so freshly
synced PRs have no size. This fills additions/deletions/size in from the
single-PR endpoint for every PR still missing them.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from devops_metrics.config import SyncConfig, get_settings
from devops_metrics.db.repositories import PullRequestRepository, RepositoryRepository
from devops_metrics.github.retry import RetryPolicy
from devops_metrics.logging import bind_pr, bind_repo

from .commit_manager import CommitManager
from .exceptions import RepositoryNotSyncedError
from .results import SizeBackfillResult

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from devops_metrics.db.models import Repository
    from devops_metrics.github.client import GitHubClient


class PullRequestSizeBackfill:
    """Fetch diff stats for stored PRs whose size is unknown."""

    def __init__(
        self,
        session: AsyncSession,
        client: GitHubClient,
        config: SyncConfig | None = None,
    ) -> None:
        config = config or get_settings().sync
        self._client = client
        self._retry = RetryPolicy.from_config(config)
        self._commit_manager = CommitManager(session, batch_size=config.commit_batch_size)
        self._repositories = RepositoryRepository(session)
        self._prs = PullRequestRepository(session)

    async def run_for(self, owner: str, name: str) -> SizeBackfillResult:
        """Backfill sizes for a repository that has been synced before.

        Raises:
            RepositoryNotSyncedError: If the repository is not in the database
        """
        repository = await self._repositories.get_by_owner_and_name(owner, name)
        if repository is None:
            raise RepositoryNotSyncedError(owner, name)
        return await self.run(repository)

    async def run(self, repository: Repository) -> SizeBackfillResult:
        """Backfill sizes for every PR of ``repository`` with no size.

        A PR whose fetch fails (after retries) is logged and skipped; it is
        picked up again by the next run.

        Args:
            repository: Repository whose PRs to backfill

        Returns:
            SizeBackfillResult
        """
        owner, name = repository.owner, repository.name
        log = bind_repo(owner, name)
        result = SizeBackfillResult(repository=repository.full_name)

        prs = await self._prs.get_missing_size(repository.id)
        result.candidates = len(prs)
        log.info("Found {} PRs without size", len(prs))

        for pr in prs:
            pr_log = bind_pr(owner, name, pr.number)
            try:
                gh_pr = await self._retry.execute(
                    partial(self._client.get_pull_request, owner, name, pr.number),
                    description=f"PR #{pr.number}",
                )
            except Exception as e:
                pr_log.error("Failed to fetch PR for size: {}", e)
                result.failed_pull_requests.append(pr.number)
                continue

            if gh_pr.additions is None or gh_pr.deletions is None:
                pr_log.warning("GitHub returned no diff stats")
                result.unavailable += 1
                continue

            await self._prs.update_size(pr.id, gh_pr.additions, gh_pr.deletions)
            await self._commit_manager.record_success()
            result.updated += 1
            pr_log.debug("Size {} (+{} -{})", pr.size, gh_pr.additions, gh_pr.deletions)

        await self._commit_manager.finalize()
        log.info(
            "Size backfill complete: {}/{} updated, {} failed",
            result.updated,
            result.candidates,
            len(result.failed_pull_requests),
        )
        return result
