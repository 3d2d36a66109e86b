"""Watermark resolution for a repository sync pass."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from devops_metrics.dates import EPOCH, as_utc
from devops_metrics.db.repositories import RepositoryRepository
from devops_metrics.db.upserts import repository_upsert_params
from devops_metrics.logging import bind_repo

from .exceptions import RepositoryResolutionError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from devops_metrics.db.models import Repository
    from devops_metrics.github.client import GitHubClient


class WatermarkResolver:
    """Find or register a repository and report where the last pass ended.

    A repository seen for the first time is fetched from GitHub once (no
    retry) and stored without a watermark, which reads as the epoch so the
    first pass covers the whole history.
    """

    def __init__(self, session: AsyncSession, client: GitHubClient) -> None:
        self._client = client
        self._repositories = RepositoryRepository(session)

    async def resolve(self, owner: str, name: str) -> tuple[Repository, datetime]:
        """Resolve the repository row and its watermark.

        Args:
            owner: Repository owner
            name: Repository name

        Returns:
            Tuple of (repository, watermark) with the watermark in UTC

        Raises:
            RepositoryResolutionError: If the repository is unknown locally and
                GitHub cannot describe it
        """
        log = bind_repo(owner, name)
        repository = await self._repositories.get_by_owner_and_name(owner, name)

        if repository is None:
            log.info("Repository not registered yet, fetching metadata")
            try:
                gh_repo = await self._client.get_repository(owner, name)
            except Exception as e:
                raise RepositoryResolutionError(owner, name, e) from e
            repository, created = await self._repositories.upsert(
                repository_upsert_params(gh_repo)
            )
            log.info(
                "Registered repository (id={}, github_id={}, created={})",
                repository.id,
                repository.github_id,
                created,
            )

        watermark = as_utc(repository.last_sync) if repository.last_sync else EPOCH
        log.info("Watermark: {}", watermark.isoformat())
        return repository, watermark
