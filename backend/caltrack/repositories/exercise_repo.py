from __future__ import annotations
from typing import Optional
from sqlalchemy import distinct, select
from caltrack.models import Exercise
from caltrack.repositories.base import BaseRepository
from caltrack.schemas.base import normalize_name

class ExerciseRepository(BaseRepository[Exercise]):
    model = Exercise

    # READS
    async def search(
        self,
        *,
        search: Optional[str] = None,
        category: Optional[str] = None,
        subtype: Optional[str] = None,
    ) -> list[Exercise]:
        stmt = self.select()
        if search:
            stmt = stmt.where(Exercise.name.icontains(search, autoescape=True))
        if category:
            stmt = stmt.where(Exercise.category == category)
        if subtype:
            stmt = stmt.where(Exercise.subtype == subtype)
        return await self.scalars(stmt.order_by(Exercise.id.asc()))

    async def find_by_name(self, name: str) -> Optional[Exercise]:
        """Oldest exercise whose normalised name matches ``name``."""
        key = normalize_name(name)
        if not key:
            return None
        for ex in await self.list_all():
            if normalize_name(ex.name) == key:
                return ex
        return None

    async def categories(self) -> list[str]:
        stmt = select(distinct(Exercise.category)).where(Exercise.category != "").order_by(Exercise.category)
        return list((await self.db.execute(stmt)).scalars().all())

    async def subtypes(self, category: Optional[str] = None) -> list[str]:
        stmt = select(distinct(Exercise.subtype)).where(Exercise.subtype != "")
        if category:
            stmt = stmt.where(Exercise.category == category)
        return list((await self.db.execute(stmt.order_by(Exercise.subtype))).scalars().all())

    # WRITES
    async def create(self, *, name: str, category: str = "", subtype: str = "", is_custom: bool = True) -> Exercise:
        ex = Exercise(name=name, category=category, subtype=subtype, is_custom=is_custom)
        return await self.add_and_refresh(ex)
