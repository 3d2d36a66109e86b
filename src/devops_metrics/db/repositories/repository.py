"""Repository for GitHub Repository model CRUD operations."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from devops_metrics.dates import as_utc
from devops_metrics.db.models import Repository

from .base import BaseRepository


class RepositoryRepository(BaseRepository[Repository]):
    """Repository for GitHub Repository entities.

    Owns the sync watermark (``Repository.last_sync``).
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Repository)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_by_owner_and_name(self, owner: str, name: str) -> Repository | None:
        """Get a repository by owner and name.

        Args:
            owner: Repository owner (e.g., "octo-org")
            name: Repository name (e.g., "service")

        Returns:
            Repository or None if not found
        """
        stmt = select(Repository).where(
            Repository.owner == owner,
            Repository.name == name,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_github_id(self, github_id: int) -> Repository | None:
        return await self._get_one(github_id=github_id)

    async def list_ordered(self) -> list[Repository]:
        """All repositories ordered by owner/name."""
        stmt = select(Repository).order_by(Repository.owner, Repository.name)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    # -------------------------------------------------------------------------
    # Watermark
    # -------------------------------------------------------------------------

    async def update_last_sync(
        self,
        repository_id: int,
        synced_at: datetime,
    ) -> Repository | None:
        """Advance the watermark for a repository.

        The watermark only moves forward; an earlier timestamp is ignored.

        Args:
            repository_id: Repository ID
            synced_at: Candidate watermark

        Returns:
            Repository (possibly unchanged) or None if not found
        """
        repo = await self.get_by_id(repository_id)
        if repo is None:
            return None

        if repo.last_sync is not None and as_utc(repo.last_sync) >= as_utc(synced_at):
            return repo

        repo.last_sync = as_utc(synced_at)
        await self.flush()
        return repo
