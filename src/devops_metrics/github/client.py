"""Async GitHub API client wrapper using githubkit.

This module provides a typed async interface to the GitHub REST API for
the pull request, review and comment data the sync engine ingests.
Every request, each page of a listing included, is spaced at least
``request_interval_ms`` after the previous one. Response items that do not
validate raise GitHubPayloadError; nothing is dropped.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, Literal, TypeVar

from githubkit import GitHub
from githubkit.exception import RequestFailed
from pydantic import BaseModel, ValidationError

from devops_metrics.config import get_settings
from devops_metrics.logging import get_logger
from devops_metrics.schemas.github_api import (
    GitHubIssueComment,
    GitHubPullRequest,
    GitHubRepository,
    GitHubReview,
    GitHubReviewComment,
)

from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubPayloadError,
    GitHubRateLimitError,
    GitHubRetryableError,
)

logger = get_logger(__name__)

PRState = Literal["open", "closed", "all"]
ModelT = TypeVar("ModelT", bound=BaseModel)


def _payload(model: Any) -> dict[str, Any]:
    """Dump a githubkit model, leaving out keys absent from the response."""
    data: dict[str, Any] = model.model_dump(exclude_unset=True)
    return data


def _parse(model: type[ModelT], item: Any, what: str) -> ModelT:
    """Validate one response item, or raise GitHubPayloadError naming it."""
    try:
        return model.model_validate(_payload(item))
    except ValidationError as e:
        raise GitHubPayloadError(f"Unexpected {what} payload: {e}") from e


class GitHubClient:
    """Async GitHub API client for PR activity retrieval.

    Usage:
        async with GitHubClient() as client:
            prs = await client.list_pull_requests_page("octo-org", "service", page=1)
            newest = prs[0].updated_at if prs else None
    """

    def __init__(
        self,
        token: str | None = None,
        request_interval_ms: int | None = None,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub PAT. If not provided, uses GITHUB_TOKEN from settings.
            request_interval_ms: Minimum spacing between requests. Defaults to
                sync.request_interval_ms from settings.

        Raises:
            GitHubAuthenticationError: If no token is available.
        """
        settings = get_settings()
        self._token = token or settings.github_token
        if not self._token:
            raise GitHubAuthenticationError(
                "GitHub token required. Set GITHUB_TOKEN environment variable."
            )
        if request_interval_ms is None:
            request_interval_ms = settings.sync.request_interval_ms
        self._min_interval = request_interval_ms / 1000
        self._last_request_at: float | None = None
        self._client: GitHub[Any] | None = None

    @property
    def _github(self) -> GitHub[Any]:
        """Get or create the githubkit client instance."""
        if self._client is None:
            self._client = GitHub(self._token)
        return self._client

    async def _apply_pacing(self) -> None:
        """Wait until the minimum interval since the previous request has passed."""
        now = time.monotonic()
        if self._last_request_at is not None:
            delay = self._min_interval - (now - self._last_request_at)
            if delay > 0:
                logger.trace("Pacing: waiting {:.3f}s before request", delay)
                await asyncio.sleep(delay)
        self._last_request_at = time.monotonic()

    async def _list_all_pages(
        self,
        endpoint: Callable[..., Awaitable[Any]],
        model: type[ModelT],
        what: str,
        *,
        per_page: int,
        **params: Any,
    ) -> list[ModelT]:
        """Collect every page of a list endpoint, pacing each request.

        A page shorter than ``per_page`` is the last one.
        """
        items: list[ModelT] = []
        page = 1
        while True:
            await self._apply_pacing()
            resp = await endpoint(**params, per_page=per_page, page=page)
            batch = resp.parsed_data
            items.extend(_parse(model, item, what) for item in batch)
            if len(batch) < per_page:
                return items
            page += 1

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    # -------------------------------------------------------------------------
    # Repository
    # -------------------------------------------------------------------------
    async def get_repository(self, owner: str, repo: str) -> GitHubRepository:
        """Get repository metadata.

        Args:
            owner: Repository owner (org or user)
            repo: Repository name

        Returns:
            GitHubRepository

        Raises:
            GitHubNotFoundError: If the repository doesn't exist or is not visible
        """
        try:
            await self._apply_pacing()
            resp = await self._github.rest.repos.async_get(owner=owner, repo=repo)
            return _parse(GitHubRepository, resp.parsed_data, "repository")
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(f"Repository {owner}/{repo} not found") from e
            raise self._handle_error(e) from e

    # -------------------------------------------------------------------------
    # Pull Request Methods
    # -------------------------------------------------------------------------
    async def list_pull_requests_page(
        self,
        owner: str,
        repo: str,
        *,
        page: int,
        state: PRState = "all",
        sort: Literal["created", "updated", "popularity", "long-running"] = "updated",
        direction: Literal["asc", "desc"] = "desc",
        per_page: int = 100,
    ) -> list[GitHubPullRequest]:
        """Fetch one page of the pull request listing.

        The listing carries no diff stats; use get_pull_request() for
        additions/deletions.

        Args:
            owner: Repository owner (org or user)
            repo: Repository name
            page: 1-based page number
            state: Filter by state ("open", "closed", "all")
            sort: What to sort results by
            direction: Sort direction ("asc", "desc")
            per_page: Results per page (max 100)

        Returns:
            PRs on the page, in feed order; empty past the last page
        """
        try:
            await self._apply_pacing()
            resp = await self._github.rest.pulls.async_list(
                owner=owner,
                repo=repo,
                state=state,
                sort=sort,
                direction=direction,
                per_page=per_page,
                page=page,
            )
        except RequestFailed as e:
            raise self._handle_error(e) from e

        return [
            _parse(GitHubPullRequest, pr_data, f"pull request (page {page} of {owner}/{repo})")
            for pr_data in resp.parsed_data
        ]

    async def get_pull_request(
        self,
        owner: str,
        repo: str,
        number: int,
    ) -> GitHubPullRequest:
        """Get full details for a single pull request.

        This endpoint returns complete PR data including additions/deletions.

        Args:
            owner: Repository owner
            repo: Repository name
            number: PR number

        Returns:
            GitHubPullRequest with full details

        Raises:
            GitHubNotFoundError: If PR doesn't exist
        """
        try:
            await self._apply_pacing()
            resp = await self._github.rest.pulls.async_get(
                owner=owner,
                repo=repo,
                pull_number=number,
            )
            return _parse(GitHubPullRequest, resp.parsed_data, f"pull request #{number}")
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(f"PR #{number} not found in {owner}/{repo}") from e
            raise self._handle_error(e) from e

    async def get_pull_request_reviews(
        self,
        owner: str,
        repo: str,
        number: int,
        *,
        per_page: int = 100,
    ) -> list[GitHubReview]:
        """Get all reviews for a pull request (every page).

        Args:
            owner: Repository owner
            repo: Repository name
            number: PR number
            per_page: Results per page (max 100)

        Returns:
            List of GitHubReview objects
        """
        try:
            return await self._list_all_pages(
                self._github.rest.pulls.async_list_reviews,
                GitHubReview,
                f"review on PR #{number}",
                owner=owner,
                repo=repo,
                pull_number=number,
                per_page=per_page,
            )
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(f"PR #{number} not found in {owner}/{repo}") from e
            raise self._handle_error(e) from e

    async def get_pull_request_review_comments(
        self,
        owner: str,
        repo: str,
        number: int,
        *,
        per_page: int = 100,
    ) -> list[GitHubReviewComment]:
        """Get diff-anchored review comments for a pull request."""
        try:
            return await self._list_all_pages(
                self._github.rest.pulls.async_list_review_comments,
                GitHubReviewComment,
                f"review comment on PR #{number}",
                owner=owner,
                repo=repo,
                pull_number=number,
                per_page=per_page,
            )
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(f"PR #{number} not found in {owner}/{repo}") from e
            raise self._handle_error(e) from e

    async def get_issue_comments(
        self,
        owner: str,
        repo: str,
        number: int,
        *,
        per_page: int = 100,
    ) -> list[GitHubIssueComment]:
        """Get conversation comments on a pull request (its issue thread)."""
        try:
            return await self._list_all_pages(
                self._github.rest.issues.async_list_comments,
                GitHubIssueComment,
                f"issue comment on PR #{number}",
                owner=owner,
                repo=repo,
                issue_number=number,
                per_page=per_page,
            )
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(f"PR #{number} not found in {owner}/{repo}") from e
            raise self._handle_error(e) from e

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _handle_error(self, error: RequestFailed) -> GitHubClientError:
        """Convert githubkit exceptions to our custom exceptions."""
        status = error.response.status_code

        if status == 401:
            return GitHubAuthenticationError("Invalid GitHub token")
        elif status == 403:
            headers = error.response.headers
            if "x-ratelimit-remaining" in headers:
                remaining = int(headers.get("x-ratelimit-remaining", "0"))
                if remaining == 0:
                    reset_ts = int(headers.get("x-ratelimit-reset", "0"))
                    reset_at = datetime.fromtimestamp(reset_ts, tz=UTC) if reset_ts else None
                    return GitHubRateLimitError(
                        "GitHub rate limit exceeded",
                        reset_at=reset_at,
                    )
            return GitHubClientError(f"Access forbidden: {error}")
        elif status == 404:
            return GitHubNotFoundError(str(error))
        elif status >= 500:
            return GitHubRetryableError(f"GitHub server error ({status}): {error}")
        else:
            return GitHubClientError(f"GitHub API error ({status}): {error}")
