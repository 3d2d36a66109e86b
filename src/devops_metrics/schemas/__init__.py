"""Pydantic schemas for DevOps Metrics.

This module provides input validation and output serialization models.
"""

from .base import SchemaBase
from .github_api import (
    GitHubBranchRef,
    GitHubIssueComment,
    GitHubLabel,
    GitHubPullRequest,
    GitHubRepository,
    GitHubRequestedReviewer,
    GitHubReview,
    GitHubReviewComment,
    GitHubUser,
)
from .repository import RepositoryRead, parse_repo_string

__all__ = [
    # GitHub API
    "GitHubBranchRef",
    "GitHubIssueComment",
    "GitHubLabel",
    "GitHubPullRequest",
    "GitHubRepository",
    "GitHubRequestedReviewer",
    "GitHubReview",
    "GitHubReviewComment",
    "GitHubUser",
    # Repository
    "RepositoryRead",
    "parse_repo_string",
    # Base
    "SchemaBase",
]
