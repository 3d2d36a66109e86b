"""Result objects for sync operations.

Structured results provide consistent interfaces for monitoring,
error handling, and CLI output.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class RepositorySyncResult:
    """Outcome of one incremental sync pass over a repository."""

    repository: str
    """owner/name"""

    previous_watermark: datetime
    started_at: datetime
    new_watermark: datetime | None = None
    """Watermark stored at the end of the pass (None if the pass aborted)."""

    pages_fetched: int = 0
    reached_watermark: bool = False
    pull_requests_synced: list[int] = field(default_factory=list)
    """Numbers of PRs materialized from the feed, newest first."""

    reviewed_pull_requests: int = 0
    reviews_synced: int = 0
    review_comments_synced: int = 0
    issue_comments_synced: int = 0
    self_comments_skipped: int = 0

    failed_pull_requests: list[int] = field(default_factory=list)
    """PRs whose review or comment sync raised; re-covered next pass."""

    @property
    def success(self) -> bool:
        return not self.failed_pull_requests

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "repository": self.repository,
            "success": self.success,
            "previous_watermark": self.previous_watermark.isoformat(),
            "new_watermark": self.new_watermark.isoformat() if self.new_watermark else None,
            "started_at": self.started_at.isoformat(),
            "pages_fetched": self.pages_fetched,
            "reached_watermark": self.reached_watermark,
            "pull_requests_synced": len(self.pull_requests_synced),
            "pull_request_numbers": list(self.pull_requests_synced),
            "reviewed_pull_requests": self.reviewed_pull_requests,
            "reviews_synced": self.reviews_synced,
            "review_comments_synced": self.review_comments_synced,
            "issue_comments_synced": self.issue_comments_synced,
            "self_comments_skipped": self.self_comments_skipped,
            "failed_pull_requests": list(self.failed_pull_requests),
        }


@dataclass
class SizeBackfillResult:
    """Outcome of a PR size backfill run."""

    repository: str
    candidates: int = 0
    updated: int = 0
    unavailable: int = 0
    """Fetched, but GitHub returned no diff stats."""

    failed_pull_requests: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "repository": self.repository,
            "candidates": self.candidates,
            "updated": self.updated,
            "unavailable": self.unavailable,
            "failed_pull_requests": list(self.failed_pull_requests),
        }
