"""GitHub client exceptions.

githubkit's ``RequestFailed`` is translated into these at the client
boundary so callers never depend on the HTTP library.
"""

from datetime import datetime


class GitHubClientError(Exception):
    """Base exception for GitHub client errors."""

    pass


class GitHubAuthenticationError(GitHubClientError):
    """Raised when the token is missing or rejected (401)."""

    pass


class GitHubRetryableError(GitHubClientError):
    """Transient failure; the same request may succeed later."""

    pass


class GitHubRateLimitError(GitHubRetryableError):
    """Raised when rate limit is exceeded (403 with rate limit headers)."""

    def __init__(self, message: str, reset_at: datetime | None = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class GitHubNotFoundError(GitHubClientError):
    """Raised when a resource is not found (404)."""

    pass


class GitHubPayloadError(GitHubClientError):
    """Raised when a response item does not match the expected shape."""

    pass
