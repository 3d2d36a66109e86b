"""Generic async repository shared by every synced aggregate.

The one write path the sync engine uses is ``upsert``: look a row up by its
natural key, then either create it from ``create_values`` or apply the
``update`` set. Every upsert flushes, so the returned row has its local id
and can be referenced by the next write.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from devops_metrics.db.models import Base
from devops_metrics.db.upserts import UpsertParams

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Session-bound access to one model class.

    Subclasses pass their model and add natural-key lookups:

        class LabelRepository(BaseRepository[Label]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, Label)

            async def get_by_github_id(self, github_id: int) -> Label | None:
                return await self._get_one(github_id=github_id)
    """

    def __init__(self, session: AsyncSession, model_class: type[ModelT]) -> None:
        self._session = session
        self._model_class = model_class

    async def get_by_id(self, id: int) -> ModelT | None:
        """Row by local primary key, or None."""
        return await self._session.get(self._model_class, id)

    async def _get_one(self, **natural_key: Any) -> ModelT | None:
        stmt = select(self._model_class).filter_by(**natural_key)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def count(self) -> int:
        stmt = select(func.count()).select_from(self._model_class)
        return (await self._session.execute(stmt)).scalar() or 0

    def add(self, entity: ModelT) -> ModelT:
        """Stage a new row (no flush)."""
        self._session.add(entity)
        return entity

    async def flush(self) -> None:
        await self._session.flush()

    async def upsert(self, params: UpsertParams) -> tuple[ModelT, bool]:
        """Insert or update the row matching ``params.where``.

        ``params.update`` is applied only to an existing row, so fields left
        out of it (a user's login, a backfilled size) are never overwritten.

        Returns:
            Tuple of (row, created)
        """
        existing = await self._get_one(**params.where)

        if existing is None:
            entity = self.add(self._model_class(**params.create_values))
            await self.flush()
            return entity, True

        for key, value in params.update.items():
            setattr(existing, key, value)
        await self.flush()
        return existing, False
