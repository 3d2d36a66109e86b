"""Repositories for reviews and review comments."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from devops_metrics.db.models import CommentType, Review, ReviewComment

from .base import BaseRepository


class ReviewRepository(BaseRepository[Review]):
    """Repository for submitted reviews."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Review)

    async def get_by_github_id(self, github_id: int) -> Review | None:
        """Get a review by its GitHub review ID.

        Args:
            github_id: GitHub review ID

        Returns:
            Review or None if it has not been stored yet
        """
        return await self._get_one(github_id=github_id)

    async def get_for_pull_request(self, pull_request_id: int) -> list[Review]:
        stmt = (
            select(Review)
            .where(Review.pull_request_id == pull_request_id)
            .order_by(Review.submitted_at)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())


class ReviewCommentRepository(BaseRepository[ReviewComment]):
    """Repository for line comments and conversation comments."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ReviewComment)

    async def get_by_github_id(self, github_id: int) -> ReviewComment | None:
        return await self._get_one(github_id=github_id)

    async def get_for_pull_request(self, pull_request_id: int) -> list[ReviewComment]:
        stmt = (
            select(ReviewComment)
            .where(ReviewComment.pull_request_id == pull_request_id)
            .order_by(ReviewComment.created_at)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_uncategorized(self, limit: int | None = None) -> list[ReviewComment]:
        """Line comments still waiting for a category.

        Args:
            limit: Maximum number of comments to return

        Returns:
            REVIEW_COMMENT rows with no category, oldest first
        """
        stmt = (
            select(ReviewComment)
            .where(
                ReviewComment.category.is_(None),
                ReviewComment.comment_type == CommentType.REVIEW_COMMENT,
            )
            .order_by(ReviewComment.created_at)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
