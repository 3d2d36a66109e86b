"""Commit Manager - batch commit boundaries for a sync pass.

Instead of committing everything at session exit (all-or-nothing), the
sync engine commits every ``batch_size`` pull requests, so a crash loses
at most the last uncommitted batch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from devops_metrics.logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


class CommitManager:
    """Manages commit boundaries for batch operations.

    Usage:
        async with get_session() as session:
            commit_manager = CommitManager(session, batch_size=25)

            # ... process PRs ...
            await commit_manager.record_success()  # Auto-commits at batch_size

            await commit_manager.finalize()  # Commit remaining

    Attributes:
        uncommitted_count: Number of items pending commit.
        total_committed: Total items committed across all batches.
    """

    def __init__(self, session: AsyncSession, batch_size: int = 25) -> None:
        """Initialize the commit manager.

        Args:
            session: Async SQLAlchemy session to commit on.
            batch_size: Number of successful operations before auto-commit.
        """
        self._session = session
        self._batch_size = batch_size
        self._uncommitted_count = 0
        self._total_committed = 0

    @property
    def uncommitted_count(self) -> int:
        """Number of items pending commit."""
        return self._uncommitted_count

    @property
    def total_committed(self) -> int:
        """Total items committed across all batches."""
        return self._total_committed

    @property
    def batch_size(self) -> int:
        """Configured batch size."""
        return self._batch_size

    async def record_success(self) -> int:
        """Record a processed item, committing once batch_size is reached.

        Returns:
            Number of items committed (0 if the batch is not full yet).
        """
        self._uncommitted_count += 1
        if self._uncommitted_count >= self._batch_size:
            return await self.commit()
        return 0

    async def commit(self) -> int:
        """Commit pending items, if any.

        Returns:
            Number of items committed (0 if nothing to commit).
        """
        if self._uncommitted_count == 0:
            return 0

        await self._session.commit()

        committed = self._uncommitted_count
        self._total_committed += committed
        self._uncommitted_count = 0

        logger.debug(
            "Committed batch of {} items (total: {})",
            committed,
            self._total_committed,
        )
        return committed

    async def finalize(self) -> int:
        """Commit everything written so far, counted or not.

        Rows written outside record_success() (repository row, watermark)
        are committed too.

        Returns:
            Number of counted items committed.
        """
        committed = await self.commit()
        await self._session.commit()
        return committed
