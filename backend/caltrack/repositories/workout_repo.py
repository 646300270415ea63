from __future__ import annotations
from typing import Optional
from caltrack.models import Workout
from caltrack.repositories.base import BaseRepository

class WorkoutRepository(BaseRepository[Workout]):
    model = Workout

    async def list_recent(self) -> list[Workout]:
        stmt = self.select().order_by(Workout.created_at.desc(), Workout.id.desc())
        return await self.scalars(stmt)

    async def create(self, *, name: str, goal: Optional[str] = None, comments: Optional[str] = None) -> Workout:
        # created_at comes from the server default and is never written again
        w = Workout(name=name, goal=goal, comments=comments)
        return await self.add_and_refresh(w)
