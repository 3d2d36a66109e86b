"""Upsert parameter builders.

Each builder turns a parsed GitHub payload into an ``UpsertParams`` triple:
``where`` identifies the row, ``update`` is applied when it already exists,
and ``where | create`` is inserted when it does not. Builders are pure; the
repository layer executes them (see ``BaseRepository.upsert``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from devops_metrics.db.models import CommentType

if TYPE_CHECKING:
    from devops_metrics.schemas.github_api import (
        GitHubIssueComment,
        GitHubLabel,
        GitHubPullRequest,
        GitHubRepository,
        GitHubReview,
        GitHubReviewComment,
        GitHubUser,
    )


@dataclass(frozen=True)
class UpsertParams:
    """Find-by / update-if-found / create-if-absent field sets."""

    where: dict[str, Any]
    update: dict[str, Any] = field(default_factory=dict)
    create: dict[str, Any] = field(default_factory=dict)

    @property
    def create_values(self) -> dict[str, Any]:
        """Full column set for an insert."""
        return {**self.where, **self.create}


# ------------------------------------------------------------------------------
# Entities
# ------------------------------------------------------------------------------
def repository_upsert_params(gh_repo: GitHubRepository) -> UpsertParams:
    values = {
        "owner": gh_repo.owner.login,
        "name": gh_repo.name,
        "html_url": gh_repo.html_url,
    }
    return UpsertParams(
        where={"github_id": gh_repo.id},
        update=dict(values),
        create={**values, "last_sync": None},
    )


def user_upsert_params(gh_user: GitHubUser) -> UpsertParams:
    """Users are matched on GitHub id; the stored login is never overwritten."""
    values = {
        "avatar_url": gh_user.avatar_url,
        "html_url": gh_user.html_url,
    }
    return UpsertParams(
        where={"github_id": gh_user.id},
        update=dict(values),
        create={**values, "login": gh_user.login},
    )


def label_upsert_params(gh_label: GitHubLabel) -> UpsertParams:
    values = {
        "name": gh_label.name,
        "color": gh_label.color,
        "description": gh_label.description,
    }
    return UpsertParams(where={"github_id": gh_label.id}, update=dict(values), create=dict(values))


def pull_request_upsert_params(gh_pr: GitHubPullRequest, repository_id: int) -> UpsertParams:
    """Build PR upsert params, matched on (repository_id, number).

    Identity fields (github_id, created_at, html_url) are written on create
    only. Diff stats are included only when the payload carries them, so a
    list-endpoint observation never erases a size the backfill stored.

    Args:
        gh_pr: Parsed pull request payload
        repository_id: Local repository ID

    Returns:
        UpsertParams for PullRequestRepository.upsert
    """
    values: dict[str, Any] = {
        "state": gh_pr.local_state,
        "title": gh_pr.title,
        "updated_at": gh_pr.updated_at,
        "merged_at": gh_pr.merged_at,
        "closed_at": gh_pr.closed_at,
        "base_ref_name": gh_pr.base.ref,
        "head_ref_name": gh_pr.head.ref,
        "lead_time_in_seconds": gh_pr.lead_time_in_seconds,
    }
    if gh_pr.size is not None:
        values.update(
            additions=gh_pr.additions,
            deletions=gh_pr.deletions,
            size=gh_pr.size,
        )

    return UpsertParams(
        where={"repository_id": repository_id, "number": gh_pr.number},
        update=dict(values),
        create={
            **values,
            "github_id": gh_pr.id,
            "created_at": gh_pr.created_at,
            "html_url": gh_pr.html_url,
        },
    )


# ------------------------------------------------------------------------------
# Relations (composite keys, nothing to update)
# ------------------------------------------------------------------------------
def pr_label_link_params(pull_request_id: int, label_id: int) -> UpsertParams:
    return UpsertParams(where={"pull_request_id": pull_request_id, "label_id": label_id})


def pr_assignee_link_params(
    pull_request_id: int, user_id: int, assigned_at: datetime
) -> UpsertParams:
    return UpsertParams(
        where={"pull_request_id": pull_request_id, "user_id": user_id},
        create={"assigned_at": assigned_at},
    )


def pr_reviewer_link_params(
    pull_request_id: int, user_id: int, requested_at: datetime
) -> UpsertParams:
    return UpsertParams(
        where={"pull_request_id": pull_request_id, "user_id": user_id},
        create={"requested_at": requested_at},
    )


# ------------------------------------------------------------------------------
# Reviews and comments
# ------------------------------------------------------------------------------
def review_upsert_params(
    gh_review: GitHubReview, pull_request_id: int, user_id: int | None
) -> UpsertParams:
    values = {
        "state": gh_review.state,
        "body": gh_review.body,
        "submitted_at": gh_review.submitted_at,
    }
    return UpsertParams(
        where={"github_id": gh_review.id},
        update=dict(values),
        create={**values, "pull_request_id": pull_request_id, "user_id": user_id},
    )


def review_comment_upsert_params(
    comment: GitHubReviewComment | GitHubIssueComment,
    pull_request_id: int,
    user_id: int | None,
    review_id: int | None,
    comment_type: CommentType,
) -> UpsertParams:
    """Build params for either comment kind.

    Only diff comments carry a path and line. A review link resolved on a
    later pass is written on update; a known link is never cleared.
    """
    file_path = None
    line_number = None
    if comment_type is CommentType.REVIEW_COMMENT:
        file_path = getattr(comment, "path", None)
        line_number = getattr(comment, "line_number", None)

    values: dict[str, Any] = {
        "body": comment.body,
        "file_path": file_path,
        "line_number": line_number,
        "updated_at": comment.updated_at,
    }
    update = dict(values)
    if review_id is not None:
        update["review_id"] = review_id

    return UpsertParams(
        where={"github_id": comment.id},
        update=update,
        create={
            **values,
            "created_at": comment.created_at,
            "pull_request_id": pull_request_id,
            "user_id": user_id,
            "review_id": review_id,
            "comment_type": comment_type,
        },
    )
