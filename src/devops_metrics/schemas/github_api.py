"""Pydantic schemas for parsing GitHub API responses.

These schemas map directly to the GitHub REST API response structure and
are validated once, where a payload enters the sync engine.
See: https://docs.github.com/en/rest/pulls
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from devops_metrics.dates import utc_now
from devops_metrics.db.models import PullRequestState, ReviewState


class GitHubModel(BaseModel):
    """Base for payload schemas; unknown payload keys are ignored."""

    model_config = ConfigDict(extra="ignore")


class GitHubUser(GitHubModel):
    """GitHub user object from API responses."""

    id: int = Field(description="GitHub user ID")
    login: str = Field(description="GitHub username")
    avatar_url: str = Field(default="", description="Avatar image URL")
    html_url: str = Field(default="", description="Profile URL")


class GitHubRequestedReviewer(GitHubUser):
    """Requested reviewer; GitHub does not report when the request was made."""

    requested_at: datetime = Field(default_factory=utc_now)


class GitHubLabel(GitHubModel):
    """GitHub label object from API responses."""

    id: int = Field(description="Label ID")
    name: str = Field(description="Label name")
    color: str = Field(default="", description="Label color (hex without #)")
    description: str = Field(default="", description="Label description")

    @field_validator("description", mode="before")
    @classmethod
    def _none_to_empty(cls, value: str | None) -> str:
        return value or ""


class GitHubBranchRef(GitHubModel):
    """Base or head branch of a pull request."""

    ref: str = Field(description="Branch name")


class GitHubRepositoryOwner(GitHubModel):
    login: str


class GitHubRepository(GitHubModel):
    """GitHub repository object from GET /repos/{owner}/{repo}."""

    id: int = Field(description="Repository ID")
    name: str = Field(description="Repository name")
    owner: GitHubRepositoryOwner = Field(description="Owning user or organization")
    html_url: str = Field(description="Repository URL")


class GitHubPullRequest(GitHubModel):
    """GitHub Pull Request object from API.

    Maps to both the list endpoint (GET /repos/{owner}/{repo}/pulls) and the
    detail endpoint (GET /repos/{owner}/{repo}/pulls/{number}). Only the
    detail endpoint carries additions/deletions.
    """

    # Basic info
    id: int = Field(description="PR ID")
    number: int = Field(description="PR number")
    state: str = Field(description="PR state (open, closed)")
    title: str = Field(description="PR title")
    html_url: str = Field(description="GitHub PR URL")

    # People
    user: GitHubUser | None = Field(default=None, description="PR author")
    assignee: GitHubUser | None = Field(default=None, description="Primary assignee")
    assigned_at: datetime = Field(default_factory=utc_now)
    requested_reviewers: list[GitHubRequestedReviewer] = Field(default_factory=list)
    labels: list[GitHubLabel] = Field(default_factory=list)

    # Dates
    created_at: datetime = Field(description="When PR was created")
    updated_at: datetime = Field(description="Last update timestamp")
    merged_at: datetime | None = Field(default=None, description="When PR was merged")
    closed_at: datetime | None = Field(default=None, description="When PR was closed")

    # Branches
    base: GitHubBranchRef
    head: GitHubBranchRef

    # Stats (detail endpoint only)
    additions: int | None = Field(default=None, description="Lines added")
    deletions: int | None = Field(default=None, description="Lines deleted")

    @field_validator("requested_reviewers", "labels", mode="before")
    @classmethod
    def _null_as_empty(cls, value: object) -> object:
        return [] if value is None else value

    @property
    def local_state(self) -> PullRequestState:
        """Merged PRs are CLOSED with merged_at set."""
        if self.state == "open":
            return PullRequestState.OPEN
        return PullRequestState.CLOSED

    @property
    def size(self) -> int | None:
        """additions + deletions, or None when the payload lacks either."""
        if self.additions is None or self.deletions is None:
            return None
        return self.additions + self.deletions

    @property
    def lead_time_in_seconds(self) -> int | None:
        """Seconds from creation to merge, or None when not merged."""
        if self.merged_at is None:
            return None
        return int((self.merged_at - self.created_at).total_seconds())


class GitHubReview(GitHubModel):
    """GitHub review object from reviews endpoint."""

    id: int = Field(description="Review ID")
    user: GitHubUser | None = Field(default=None, description="Reviewer")
    state: ReviewState = Field(description="Review state")
    body: str | None = Field(default=None)
    submitted_at: datetime | None = Field(default=None, description="When review was submitted")

    @field_validator("state", mode="before")
    @classmethod
    def _upper_state(cls, value: str) -> str:
        return value.upper() if isinstance(value, str) else value


class GitHubReviewComment(GitHubModel):
    """Diff-anchored comment from the pull request review comments endpoint."""

    id: int
    pull_request_review_id: int | None = None
    user: GitHubUser | None = None
    body: str = ""
    path: str | None = None
    line: int | None = None
    original_line: int | None = None
    created_at: datetime
    updated_at: datetime

    @property
    def line_number(self) -> int | None:
        """Current line, falling back to the line on the original diff."""
        return self.line if self.line is not None else self.original_line


class GitHubIssueComment(GitHubModel):
    """Conversation comment from the issue comments endpoint."""

    id: int
    user: GitHubUser | None = None
    body: str = ""
    created_at: datetime
    updated_at: datetime
