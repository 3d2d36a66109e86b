"""Repository for PullRequest model CRUD operations."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from devops_metrics.db.models import (
    PullRequest,
    PullRequestAssignee,
    PullRequestLabel,
    PullRequestReviewer,
    User,
)
from devops_metrics.db.upserts import (
    pr_assignee_link_params,
    pr_label_link_params,
    pr_reviewer_link_params,
)

from .base import BaseRepository


class PullRequestRepository(BaseRepository[PullRequest]):
    """Repository for PullRequest entities and their label/people links.

    Nothing here deletes: links accumulate, and a PR's row is only ever
    upserted in place.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PullRequest)
        self._labels = BaseRepository(session, PullRequestLabel)
        self._assignees = BaseRepository(session, PullRequestAssignee)
        self._reviewers = BaseRepository(session, PullRequestReviewer)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_by_number(
        self,
        repository_id: int,
        number: int,
    ) -> PullRequest | None:
        """Get a PR by repository and PR number.

        Args:
            repository_id: Repository ID
            number: PR number

        Returns:
            PullRequest or None if not found
        """
        stmt = select(PullRequest).where(
            PullRequest.repository_id == repository_id,
            PullRequest.number == number,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_updated_since(
        self,
        repository_id: int,
        since: datetime,
    ) -> list[PullRequest]:
        """Get PRs whose remote updated_at is at or after ``since``.

        Args:
            repository_id: Repository ID
            since: Inclusive lower bound (the pre-pass watermark)

        Returns:
            PRs ordered newest update first
        """
        stmt = (
            select(PullRequest)
            .where(
                PullRequest.repository_id == repository_id,
                PullRequest.updated_at >= since,
            )
            .order_by(PullRequest.updated_at.desc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_missing_size(self, repository_id: int) -> list[PullRequest]:
        """Get PRs whose diff size has not been recorded yet."""
        stmt = (
            select(PullRequest)
            .where(
                PullRequest.repository_id == repository_id,
                PullRequest.size.is_(None),
            )
            .order_by(PullRequest.number)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_author_github_id(self, pr_id: int) -> int | None:
        """GitHub user ID of the PR author, if the author is known."""
        stmt = (
            select(User.github_id)
            .join(PullRequest, PullRequest.author_id == User.id)
            .where(PullRequest.id == pr_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    # -------------------------------------------------------------------------
    # Update Methods
    # -------------------------------------------------------------------------

    async def set_author(self, pr_id: int, user_id: int) -> PullRequest | None:
        pr = await self.get_by_id(pr_id)
        if pr is None:
            return None

        pr.author_id = user_id
        await self.flush()
        return pr

    async def update_size(
        self,
        pr_id: int,
        additions: int,
        deletions: int,
    ) -> PullRequest | None:
        """Store diff stats and the derived size.

        Args:
            pr_id: PR ID
            additions: Lines added
            deletions: Lines deleted

        Returns:
            Updated PR or None if not found
        """
        pr = await self.get_by_id(pr_id)
        if pr is None:
            return None

        pr.additions = additions
        pr.deletions = deletions
        pr.size = additions + deletions
        await self.flush()
        return pr

    # -------------------------------------------------------------------------
    # Links
    # -------------------------------------------------------------------------

    async def link_label(self, pr_id: int, label_id: int) -> bool:
        """Attach a label; returns True if the link is new."""
        _, created = await self._labels.upsert(pr_label_link_params(pr_id, label_id))
        return created

    async def link_assignee(self, pr_id: int, user_id: int, assigned_at: datetime) -> bool:
        """Attach an assignee; assigned_at is kept from the first observation."""
        _, created = await self._assignees.upsert(
            pr_assignee_link_params(pr_id, user_id, assigned_at)
        )
        return created

    async def link_reviewer(self, pr_id: int, user_id: int, requested_at: datetime) -> bool:
        """Attach a requested reviewer; requested_at is kept from the first observation."""
        _, created = await self._reviewers.upsert(
            pr_reviewer_link_params(pr_id, user_id, requested_at)
        )
        return created
