"""GitHub API client module.

This module provides:
- GitHubClient: Async GitHub API client with request pacing
- RetryPolicy / execute_with_retry: fixed-delay retry for remote calls
- Incremental sync: RepositorySyncService, PullRequestSizeBackfill
"""

from .client import GitHubClient
from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubPayloadError,
    GitHubRateLimitError,
    GitHubRetryableError,
)
from .retry import RetryPolicy, execute_with_retry
from .sync import (
    PullRequestSizeBackfill,
    RepositorySyncResult,
    RepositorySyncService,
    SizeBackfillResult,
)

__all__ = [
    # Client
    "GitHubClient",
    # Exceptions
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubNotFoundError",
    "GitHubPayloadError",
    "GitHubRateLimitError",
    "GitHubRetryableError",
    # Retry
    "RetryPolicy",
    "execute_with_retry",
    # Sync
    "PullRequestSizeBackfill",
    "RepositorySyncResult",
    "RepositorySyncService",
    "SizeBackfillResult",
]
