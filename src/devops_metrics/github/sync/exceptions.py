"""Sync engine exceptions."""


class SyncError(Exception):
    """Base exception for sync failures that abort a repository pass."""

    pass


class RepositoryResolutionError(SyncError):
    """Raised when a repository's identity cannot be resolved on GitHub."""

    def __init__(self, owner: str, name: str, cause: Exception | None = None) -> None:
        message = f"Could not resolve repository {owner}/{name}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.owner = owner
        self.name = name


class RepositoryNotSyncedError(SyncError):
    """Raised when an operation needs a repository that has never been synced."""

    def __init__(self, owner: str, name: str) -> None:
        super().__init__(
            f"Repository {owner}/{name} is not in the database; run 'devmetrics sync run' first"
        )
        self.owner = owner
        self.name = name
