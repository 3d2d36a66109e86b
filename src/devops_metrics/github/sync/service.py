"""Repository Sync Service - one incremental pass over a repository.

A pass runs strictly in sequence:

1. Resolve the repository and its watermark (fatal on failure).
2. Walk the PR feed newest-first, materializing every PR updated after
   the watermark.
3. Sync reviews and comments for every stored PR updated at or after the
   watermark. A PR that fails here is logged and skipped.
4. Advance the watermark to the time the pass started.

Rows are committed in batches as they are written. A remote failure that
aborts the pass keeps what was written but leaves the watermark alone, so
the next pass covers the same window again.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from devops_metrics.config import SyncConfig, get_settings
from devops_metrics.dates import as_utc, utc_now
from devops_metrics.db.repositories import PullRequestRepository, RepositoryRepository
from devops_metrics.github.retry import RetryPolicy
from devops_metrics.logging import bind_repo, get_logger

from .commit_manager import CommitManager
from .pagination import PullRequestPaginator
from .pull_request import PullRequestMaterializer
from .results import RepositorySyncResult
from .reviews import ReviewMaterializer
from .watermark import WatermarkResolver

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from devops_metrics.db.models import PullRequest, Repository
    from devops_metrics.github.client import GitHubClient

logger = get_logger(__name__)


class RepositorySyncService:
    """Incremental sync of one repository's PR activity.

    Usage:
        async with get_session() as session, GitHubClient() as client:
            service = RepositorySyncService(session, client)
            result = await service.sync("octo-org", "service")
    """

    def __init__(
        self,
        session: AsyncSession,
        client: GitHubClient,
        config: SyncConfig | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            session: Async SQLAlchemy session (committed in batches by the pass)
            client: GitHub client
            config: Sync configuration (defaults to settings.sync)
        """
        config = config or get_settings().sync
        self._session = session
        self._retry = RetryPolicy.from_config(config)
        self._commit_manager = CommitManager(session, batch_size=config.commit_batch_size)

        self._repositories = RepositoryRepository(session)
        self._prs = PullRequestRepository(session)
        self._resolver = WatermarkResolver(session, client)
        self._paginator = PullRequestPaginator(
            client,
            PullRequestMaterializer(session),
            self._retry,
            self._commit_manager,
            page_size=config.page_size,
        )
        self._reviews = ReviewMaterializer(session, client, self._retry)

    async def sync(self, owner: str, name: str) -> RepositorySyncResult:
        """Run one pass for ``owner/name``.

        Args:
            owner: Repository owner
            name: Repository name

        Returns:
            RepositorySyncResult for the pass

        Raises:
            RepositoryResolutionError: If the repository cannot be resolved
            SQLAlchemyError: On any datastore failure
            Exception: A remote failure that outlasted the retry policy
        """
        log = bind_repo(owner, name)
        started_at = utc_now()
        repository, watermark = await self._resolver.resolve(owner, name)

        result = RepositorySyncResult(
            repository=f"{owner}/{name}",
            previous_watermark=watermark,
            started_at=started_at,
        )

        failed_updated_at: list[datetime] = []
        try:
            walk = await self._paginator.fetch_new_pull_requests(repository, watermark)
            result.pages_fetched = walk.pages_fetched
            result.reached_watermark = walk.reached_watermark
            result.pull_requests_synced = walk.pull_request_numbers
            await self._commit_manager.commit()
            log.info("Feed walk done: {} PRs over {} pages", walk.materialized, walk.pages_fetched)

            for pr in await self._prs.get_updated_since(repository.id, watermark):
                if not await self._sync_pull_request_activity(repository, pr, result):
                    failed_updated_at.append(as_utc(pr.updated_at))
        except SQLAlchemyError:
            raise
        except Exception:
            committed = await self._commit_manager.finalize()
            log.error(
                "Sync aborted; kept {} uncommitted PRs already written, watermark unchanged",
                committed,
            )
            raise

        new_watermark = self._next_watermark(started_at, failed_updated_at)
        await self._repositories.update_last_sync(repository.id, new_watermark)
        await self._commit_manager.finalize()
        result.new_watermark = max(watermark, new_watermark)

        log.info(
            "Sync complete: {} PRs, {} reviews, {} comments, {} failed; watermark {}",
            len(result.pull_requests_synced),
            result.reviews_synced,
            result.review_comments_synced + result.issue_comments_synced,
            len(result.failed_pull_requests),
            result.new_watermark.isoformat(),
        )
        return result

    async def _sync_pull_request_activity(
        self,
        repository: Repository,
        pr: PullRequest,
        result: RepositorySyncResult,
    ) -> bool:
        """Sync reviews then comments for one PR; returns False if either failed."""
        log = bind_repo(repository.owner, repository.name)
        ok = True

        try:
            result.reviews_synced += await self._reviews.materialize_reviews(
                repository, pr.number, pr.id
            )
        except SQLAlchemyError:
            raise
        except Exception as e:
            log.error("Error processing reviews for PR #{}: {}", pr.number, e)
            ok = False

        try:
            counts = await self._reviews.materialize_comments(repository, pr.number, pr.id)
            result.review_comments_synced += counts.review_comments
            result.issue_comments_synced += counts.issue_comments
            result.self_comments_skipped += counts.skipped_self_comments
        except SQLAlchemyError:
            raise
        except Exception as e:
            log.error("Error processing comments for PR #{}: {}", pr.number, e)
            ok = False

        result.reviewed_pull_requests += 1
        if not ok:
            result.failed_pull_requests.append(pr.number)
        await self._commit_manager.record_success()
        return ok

    @staticmethod
    def _next_watermark(started_at: datetime, failed_updated_at: list[datetime]) -> datetime:
        """Watermark to store after a pass.

        Normally the pass start time. If some PR's reviews or comments
        failed, stop just short of the earliest such PR so the next pass
        selects it again.
        """
        if not failed_updated_at:
            return started_at
        return min(started_at, min(failed_updated_at) - timedelta(microseconds=1))
