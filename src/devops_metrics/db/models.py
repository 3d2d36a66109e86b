"""SQLAlchemy ORM models for DevOps Metrics."""

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class PullRequestState(str, Enum):
    """Pull request state enum.

    GitHub's "merged" is not a state of its own: a merged PR is CLOSED
    with merged_at set.
    """

    OPEN = "open"
    CLOSED = "closed"


class ReviewState(str, Enum):
    """Review state enum (GitHub review states, uppercased)."""

    APPROVED = "APPROVED"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"
    COMMENTED = "COMMENTED"
    DISMISSED = "DISMISSED"
    PENDING = "PENDING"


class CommentType(str, Enum):
    """Where a review comment was posted."""

    REVIEW_COMMENT = "REVIEW_COMMENT"  # anchored to a diff line
    ISSUE_COMMENT = "ISSUE_COMMENT"  # general PR conversation


class ReviewCommentCategory(str, Enum):
    """Classification of a review comment, written by the categorizer."""

    STYLE = "style"
    LOGIC = "logic"
    PERFORMANCE = "performance"
    SECURITY = "security"
    READABILITY = "readability"
    TESTING = "testing"
    DOCUMENTATION = "documentation"
    ARCHITECTURE = "architecture"
    CI_AUTOMATION = "ci_automation"
    OTHER = "other"


# ------------------------------------------------------------------------------
# Repository model
# ------------------------------------------------------------------------------
class Repository(Base):
    """Synced GitHub repository. ``last_sync`` is the sync watermark."""

    __tablename__ = "repositories"

    id: Mapped[int] = mapped_column(primary_key=True)
    github_id: Mapped[int] = mapped_column(BigInteger, unique=True)
    owner: Mapped[str] = mapped_column(String(100))
    name: Mapped[str] = mapped_column(String(100))
    html_url: Mapped[str] = mapped_column(String(500))
    last_sync: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    pull_requests: Mapped[list["PullRequest"]] = relationship(back_populates="repository")

    __table_args__ = (UniqueConstraint("owner", "name", name="uq_repo_owner_name"),)

    @property
    def full_name(self) -> str:
        """owner/name form."""
        return f"{self.owner}/{self.name}"

    def __repr__(self) -> str:
        return f"<Repository(id={self.id}, full_name='{self.full_name}')>"


# ------------------------------------------------------------------------------
# User model
# ------------------------------------------------------------------------------
class User(Base):
    """GitHub account seen as author, assignee, reviewer or commenter."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    github_id: Mapped[int] = mapped_column(BigInteger, unique=True)
    login: Mapped[str] = mapped_column(String(100))  # set on create only
    avatar_url: Mapped[str] = mapped_column(String(500), default="")
    html_url: Mapped[str] = mapped_column(String(500), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<User(id={self.id}, login='{self.login}')>"


# ------------------------------------------------------------------------------
# Label model
# ------------------------------------------------------------------------------
class Label(Base):
    """GitHub label."""

    __tablename__ = "labels"

    id: Mapped[int] = mapped_column(primary_key=True)
    github_id: Mapped[int] = mapped_column(BigInteger, unique=True)
    name: Mapped[str] = mapped_column(String(200))
    color: Mapped[str] = mapped_column(String(20), default="")
    description: Mapped[str] = mapped_column(Text, default="")

    def __repr__(self) -> str:
        return f"<Label(id={self.id}, name='{self.name}')>"


# ------------------------------------------------------------------------------
# PullRequest model
# ------------------------------------------------------------------------------
class PullRequest(Base):
    """GitHub pull request with the fields metrics are computed from."""

    __tablename__ = "pull_requests"

    id: Mapped[int] = mapped_column(primary_key=True)
    github_id: Mapped[int] = mapped_column(BigInteger, unique=True)
    repository_id: Mapped[int] = mapped_column(ForeignKey("repositories.id", ondelete="CASCADE"))
    author_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    # --------------------------------------------------------------------------
    # Set once on creation
    # --------------------------------------------------------------------------
    number: Mapped[int] = mapped_column()
    html_url: Mapped[str] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    # --------------------------------------------------------------------------
    # Refreshed on every observation
    # --------------------------------------------------------------------------
    state: Mapped[PullRequestState] = mapped_column(default=PullRequestState.OPEN)
    title: Mapped[str] = mapped_column(String(500))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    merged_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    base_ref_name: Mapped[str] = mapped_column(String(255), default="")
    head_ref_name: Mapped[str] = mapped_column(String(255), default="")
    lead_time_in_seconds: Mapped[int | None] = mapped_column(nullable=True)

    # Null until known; the list endpoint does not carry diff stats
    additions: Mapped[int | None] = mapped_column(nullable=True)
    deletions: Mapped[int | None] = mapped_column(nullable=True)
    size: Mapped[int | None] = mapped_column(nullable=True)

    # Local bookkeeping
    synced_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    # --------------------------------------------------------------------------
    # Relationships
    # --------------------------------------------------------------------------
    repository: Mapped["Repository"] = relationship(back_populates="pull_requests")
    author: Mapped["User | None"] = relationship()

    __table_args__ = (
        UniqueConstraint("repository_id", "number", name="uq_repo_pr_number"),
        Index("ix_pull_requests_repository_updated", "repository_id", "updated_at"),
    )

    def __repr__(self) -> str:
        return f"<PullRequest(id={self.id}, repo='{self.repository_id}', number={self.number})>"


# ------------------------------------------------------------------------------
# Join models: PullRequest <-> Label / assignee User / requested reviewer User
# ------------------------------------------------------------------------------
class PullRequestLabel(Base):
    """Label attached to a pull request."""

    __tablename__ = "pull_request_labels"

    pull_request_id: Mapped[int] = mapped_column(
        ForeignKey("pull_requests.id", ondelete="CASCADE"), primary_key=True
    )
    label_id: Mapped[int] = mapped_column(
        ForeignKey("labels.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())


class PullRequestAssignee(Base):
    """User assigned to a pull request."""

    __tablename__ = "pull_request_assignees"

    pull_request_id: Mapped[int] = mapped_column(
        ForeignKey("pull_requests.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class PullRequestReviewer(Base):
    """User whose review was requested on a pull request."""

    __tablename__ = "pull_request_reviewers"

    pull_request_id: Mapped[int] = mapped_column(
        ForeignKey("pull_requests.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    requested_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


# ------------------------------------------------------------------------------
# Review model
# ------------------------------------------------------------------------------
class Review(Base):
    """Submitted review on a pull request."""

    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(primary_key=True)
    github_id: Mapped[int] = mapped_column(BigInteger, unique=True)
    pull_request_id: Mapped[int] = mapped_column(
        ForeignKey("pull_requests.id", ondelete="CASCADE")
    )
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    state: Mapped[ReviewState] = mapped_column()
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, pr={self.pull_request_id}, state={self.state.value})>"


# ------------------------------------------------------------------------------
# ReviewComment model
# ------------------------------------------------------------------------------
class ReviewComment(Base):
    """Line comment or PR conversation comment counted as review feedback.

    ``created_at``/``updated_at`` are GitHub's timestamps; the ``local_*``
    pair records when this system wrote the row.
    """

    __tablename__ = "review_comments"

    id: Mapped[int] = mapped_column(primary_key=True)
    github_id: Mapped[int] = mapped_column(BigInteger, unique=True)
    pull_request_id: Mapped[int] = mapped_column(
        ForeignKey("pull_requests.id", ondelete="CASCADE")
    )
    review_id: Mapped[int | None] = mapped_column(ForeignKey("reviews.id"), nullable=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    body: Mapped[str] = mapped_column(Text, default="")
    file_path: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    line_number: Mapped[int | None] = mapped_column(nullable=True)
    comment_type: Mapped[CommentType] = mapped_column()
    category: Mapped[ReviewCommentCategory | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    local_created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    local_updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("ix_review_comments_category_type", "category", "comment_type"),
    )

    def __repr__(self) -> str:
        return (
            f"<ReviewComment(id={self.id}, pr={self.pull_request_id}, "
            f"type={self.comment_type.value})>"
        )
