"""Database module for DevOps Metrics."""

from devops_metrics.db.engine import (
    create_tables,
    dispose_engine,
    drop_tables,
    get_engine,
    get_session,
    get_session_factory,
)
from devops_metrics.db.models import (
    Base,
    CommentType,
    Label,
    PullRequest,
    PullRequestAssignee,
    PullRequestLabel,
    PullRequestReviewer,
    PullRequestState,
    Repository,
    Review,
    ReviewComment,
    ReviewCommentCategory,
    ReviewState,
    User,
)
from devops_metrics.db.repositories import (
    BaseRepository,
    LabelRepository,
    PullRequestRepository,
    RepositoryRepository,
    ReviewCommentRepository,
    ReviewRepository,
    UserRepository,
)
from devops_metrics.db.upserts import UpsertParams

__all__ = [
    # Models
    "Base",
    "CommentType",
    "Label",
    "PullRequest",
    "PullRequestAssignee",
    "PullRequestLabel",
    "PullRequestReviewer",
    "PullRequestState",
    "Repository",
    "Review",
    "ReviewComment",
    "ReviewCommentCategory",
    "ReviewState",
    "User",
    # Engine
    "create_tables",
    "dispose_engine",
    "drop_tables",
    "get_engine",
    "get_session",
    "get_session_factory",
    # Repositories
    "BaseRepository",
    "LabelRepository",
    "PullRequestRepository",
    "RepositoryRepository",
    "ReviewCommentRepository",
    "ReviewRepository",
    "UpsertParams",
    "UserRepository",
]
