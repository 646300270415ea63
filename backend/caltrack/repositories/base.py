# caltrack/repositories/base.py
from __future__ import annotations
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")  # SQLAlchemy model type

class BaseRepository(Generic[T]):
    """Async repository bound to one session / one transaction.

    Repositories flush but never commit; ``Store.transaction()`` owns the
    commit so multi-repository work stays atomic. Bulk UPDATE/DELETE skip the
    identity map, so every read here asks for fresh rows (populate_existing).
    """
    model: type[T]

    def __init__(self, db: AsyncSession):
        self.db = db

    def select(self, *entities):
        return select(*(entities or (self.model,))).execution_options(populate_existing=True)

    async def scalars(self, stmt) -> list[T]:
        return list((await self.db.execute(stmt)).scalars().all())

    async def get(self, entity_id: int) -> T | None:
        return await self.db.get(self.model, entity_id, populate_existing=True)

    async def exists(self, entity_id: int | None) -> bool:
        if entity_id is None:
            return False
        stmt = select(self.model.id).where(self.model.id == entity_id)
        return (await self.db.execute(stmt)).first() is not None

    async def list_all(self) -> list[T]:
        return await self.scalars(self.select().order_by(self.model.id.asc()))

    async def add_and_refresh(self, entity: T) -> T:
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def update_fields(self, entity_id: int, values: dict[str, Any]) -> int:
        """UPDATE by id; returns rows affected (0 when the id is absent)."""
        if not values:
            return 1 if await self.exists(entity_id) else 0
        stmt = (
            update(self.model)
            .where(self.model.id == entity_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return (await self.db.execute(stmt)).rowcount

    async def delete_by_id(self, entity_id: int) -> int:
        stmt = (
            delete(self.model)
            .where(self.model.id == entity_id)
            .execution_options(synchronize_session=False)
        )
        return (await self.db.execute(stmt)).rowcount

    async def upsert(self, values: dict[str, Any]) -> bool:
        """Insert or overwrite the row with ``values["id"]``. True when it was new."""
        existed = await self.exists(values["id"])
        await self.db.merge(self.model(**values))
        await self.db.flush()
        return not existed
