"""Pull request materialization: one feed item into the relational store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from devops_metrics.db.repositories import (
    LabelRepository,
    PullRequestRepository,
    UserRepository,
)
from devops_metrics.db.upserts import (
    label_upsert_params,
    pull_request_upsert_params,
    user_upsert_params,
)
from devops_metrics.logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from devops_metrics.db.models import PullRequest
    from devops_metrics.schemas.github_api import GitHubPullRequest

logger = get_logger(__name__)


class PullRequestMaterializer:
    """Write a parsed PR and everything it references.

    Order matters: the PR row first, then each referenced user or label
    before the link that points at it. Every step is an idempotent upsert,
    so a PR interrupted halfway is completed by the next observation.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._prs = PullRequestRepository(session)
        self._users = UserRepository(session)
        self._labels = LabelRepository(session)

    async def materialize(
        self, gh_pr: GitHubPullRequest, repository_id: int
    ) -> tuple[PullRequest, bool]:
        """Upsert a PR with its author, labels, assignee and requested reviewers.

        Args:
            gh_pr: Parsed PR from the activity feed
            repository_id: Local repository ID

        Returns:
            Tuple of (PullRequest, created)
        """
        pr, created = await self._prs.upsert(pull_request_upsert_params(gh_pr, repository_id))

        if gh_pr.user is not None:
            author, _ = await self._users.upsert(user_upsert_params(gh_pr.user))
            await self._prs.set_author(pr.id, author.id)

        for gh_label in gh_pr.labels:
            label, _ = await self._labels.upsert(label_upsert_params(gh_label))
            await self._prs.link_label(pr.id, label.id)

        if gh_pr.assignee is not None:
            assignee, _ = await self._users.upsert(user_upsert_params(gh_pr.assignee))
            await self._prs.link_assignee(pr.id, assignee.id, gh_pr.assigned_at)

        for gh_reviewer in gh_pr.requested_reviewers:
            reviewer, _ = await self._users.upsert(user_upsert_params(gh_reviewer))
            await self._prs.link_reviewer(pr.id, reviewer.id, gh_reviewer.requested_at)

        logger.debug(
            "{} PR #{} (labels={}, reviewers={})",
            "Created" if created else "Updated",
            gh_pr.number,
            len(gh_pr.labels),
            len(gh_pr.requested_reviewers),
        )
        return pr, created
