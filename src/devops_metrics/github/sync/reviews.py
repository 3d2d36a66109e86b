"""Review and comment materialization for a stored pull request."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

from devops_metrics.db.models import CommentType
from devops_metrics.db.repositories import (
    PullRequestRepository,
    ReviewCommentRepository,
    ReviewRepository,
    UserRepository,
)
from devops_metrics.db.upserts import (
    review_comment_upsert_params,
    review_upsert_params,
    user_upsert_params,
)
from devops_metrics.logging import bind_pr

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from devops_metrics.db.models import Repository
    from devops_metrics.github.client import GitHubClient
    from devops_metrics.github.retry import RetryPolicy
    from devops_metrics.schemas.github_api import GitHubUser


@dataclass
class CommentSyncCounts:
    """Comments written for one PR."""

    review_comments: int = 0
    issue_comments: int = 0
    skipped_self_comments: int = 0
    """Conversation comments by the PR author, which are not review feedback."""


class ReviewMaterializer:
    """Fetch and store reviews and comments for one PR at a time."""

    def __init__(
        self,
        session: AsyncSession,
        client: GitHubClient,
        retry: RetryPolicy,
    ) -> None:
        self._client = client
        self._retry = retry
        self._prs = PullRequestRepository(session)
        self._users = UserRepository(session)
        self._reviews = ReviewRepository(session)
        self._comments = ReviewCommentRepository(session)

    async def _upsert_user(self, gh_user: GitHubUser | None) -> int | None:
        if gh_user is None:
            return None
        user, _ = await self._users.upsert(user_upsert_params(gh_user))
        return user.id

    async def materialize_reviews(
        self, repository: Repository, pr_number: int, pull_request_id: int
    ) -> int:
        """Store every review on a PR, keyed by GitHub review ID.

        Args:
            repository: Repository the PR belongs to
            pr_number: PR number on GitHub
            pull_request_id: Local PR ID

        Returns:
            Number of reviews written
        """
        reviews = await self._retry.execute(
            partial(
                self._client.get_pull_request_reviews,
                repository.owner,
                repository.name,
                pr_number,
            ),
            description=f"reviews for PR #{pr_number}",
        )

        for gh_review in reviews:
            user_id = await self._upsert_user(gh_review.user)
            await self._reviews.upsert(review_upsert_params(gh_review, pull_request_id, user_id))

        bind_pr(repository.owner, repository.name, pr_number).info(
            "Processed {} reviews", len(reviews)
        )
        return len(reviews)

    async def materialize_comments(
        self, repository: Repository, pr_number: int, pull_request_id: int
    ) -> CommentSyncCounts:
        """Store diff comments and conversation comments on a PR.

        Diff comments are linked to their review when that review is
        already stored. Conversation comments written by the PR author are
        skipped.

        Args:
            repository: Repository the PR belongs to
            pr_number: PR number on GitHub
            pull_request_id: Local PR ID

        Returns:
            CommentSyncCounts for the PR
        """
        owner, name = repository.owner, repository.name
        counts = CommentSyncCounts()

        review_comments = await self._retry.execute(
            partial(self._client.get_pull_request_review_comments, owner, name, pr_number),
            description=f"review comments for PR #{pr_number}",
        )
        for comment in review_comments:
            user_id = await self._upsert_user(comment.user)
            review_id = None
            if comment.pull_request_review_id is not None:
                review = await self._reviews.get_by_github_id(comment.pull_request_review_id)
                review_id = review.id if review is not None else None
            await self._comments.upsert(
                review_comment_upsert_params(
                    comment, pull_request_id, user_id, review_id, CommentType.REVIEW_COMMENT
                )
            )
            counts.review_comments += 1

        issue_comments = await self._retry.execute(
            partial(self._client.get_issue_comments, owner, name, pr_number),
            description=f"issue comments for PR #{pr_number}",
        )
        author_github_id = await self._prs.get_author_github_id(pull_request_id)
        for comment in issue_comments:
            if (
                author_github_id is not None
                and comment.user is not None
                and comment.user.id == author_github_id
            ):
                counts.skipped_self_comments += 1
                continue
            user_id = await self._upsert_user(comment.user)
            await self._comments.upsert(
                review_comment_upsert_params(
                    comment, pull_request_id, user_id, None, CommentType.ISSUE_COMMENT
                )
            )
            counts.issue_comments += 1

        bind_pr(owner, name, pr_number).info(
            "Processed {} review comments and {} issue comments ({} by author skipped)",
            counts.review_comments,
            counts.issue_comments,
            counts.skipped_self_comments,
        )
        return counts
