"""Pydantic schemas for Repository model."""

from datetime import datetime

from .base import SchemaBase


def parse_repo_string(value: str) -> tuple[str, str]:
    """Split an ``owner/name`` string.

    Args:
        value: Repository path like 'octo-org/service'

    Returns:
        Tuple of (owner, name)

    Raises:
        ValueError: If the string is not of the form owner/name
    """
    parts = value.strip().split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError(f"Invalid repository '{value}': expected 'owner/name'")
    return parts[0], parts[1]


class RepositoryRead(SchemaBase):
    """Schema for reading repository data."""

    id: int
    github_id: int
    owner: str
    name: str
    html_url: str
    last_sync: datetime | None
    created_at: datetime

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"
