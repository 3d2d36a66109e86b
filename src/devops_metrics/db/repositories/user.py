"""Repositories for users and labels."""

from sqlalchemy.ext.asyncio import AsyncSession

from devops_metrics.db.models import Label, User

from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for GitHub accounts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_github_id(self, github_id: int) -> User | None:
        return await self._get_one(github_id=github_id)


class LabelRepository(BaseRepository[Label]):
    """Repository for GitHub labels."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Label)

    async def get_by_github_id(self, github_id: int) -> Label | None:
        return await self._get_one(github_id=github_id)
