"""Incremental sync - GitHub PR activity to database.

Services:
- RepositorySyncService: One incremental pass (watermark, feed walk, reviews)
- PullRequestSizeBackfill: Fill in diff stats the PR listing omits
- CommitManager: Batch commit boundaries for database resilience
"""

from .commit_manager import CommitManager
from .exceptions import RepositoryNotSyncedError, RepositoryResolutionError, SyncError
from .pagination import FeedWalkResult, PullRequestPaginator
from .pull_request import PullRequestMaterializer
from .results import RepositorySyncResult, SizeBackfillResult
from .reviews import CommentSyncCounts, ReviewMaterializer
from .service import RepositorySyncService
from .sizes import PullRequestSizeBackfill
from .watermark import WatermarkResolver

__all__ = [
    # Orchestration
    "RepositorySyncResult",
    "RepositorySyncService",
    # Components
    "CommentSyncCounts",
    "FeedWalkResult",
    "PullRequestMaterializer",
    "PullRequestPaginator",
    "ReviewMaterializer",
    "WatermarkResolver",
    # Size backfill
    "PullRequestSizeBackfill",
    "SizeBackfillResult",
    # Commit management
    "CommitManager",
    # Errors
    "RepositoryNotSyncedError",
    "RepositoryResolutionError",
    "SyncError",
]
