from __future__ import annotations
from sqlalchemy import delete
from caltrack.chain import insertion_point, order_chain
from caltrack.models import Progression
from caltrack.repositories.base import BaseRepository

class ProgressionRepository(BaseRepository[Progression]):
    model = Progression

    async def list_by_exercise(self, exercise_id: int) -> list[Progression]:
        stmt = (
            self.select()
            .where(Progression.exercise_id == exercise_id)
            .order_by(Progression.difficulty.asc(), Progression.id.asc())
        )
        return await self.scalars(stmt)

    async def chain(self, exercise_id: int) -> list[Progression]:
        """Head-to-tail order; raises ProgressionChainError if the links are broken."""
        return order_chain(await self.list_by_exercise(exercise_id))

    async def insert(
        self,
        exercise_id: int,
        *,
        name: str,
        description: str = "",
        goal: str = "",
        difficulty: int = 1,
    ) -> Progression:
        """Insert a node at the place its difficulty implies and relink the neighbours."""
        prev, nxt = insertion_point(await self.chain(exercise_id), difficulty)
        node = await self.add_and_refresh(Progression(
            exercise_id=exercise_id,
            name=name,
            description=description,
            goal=goal,
            difficulty=difficulty,
            prev_progression_id=prev.id if prev else None,
            next_progression_id=nxt.id if nxt else None,
        ))
        if prev is not None:
            await self.update_fields(prev.id, {"next_progression_id": node.id})
        if nxt is not None:
            await self.update_fields(nxt.id, {"prev_progression_id": node.id})
        return node

    async def splice_out(self, node: Progression) -> None:
        """Point the neighbours of ``node`` at each other."""
        prev_id, next_id = node.prev_progression_id, node.next_progression_id
        if prev_id is not None:
            await self.update_fields(prev_id, {"next_progression_id": next_id})
        if next_id is not None:
            await self.update_fields(next_id, {"prev_progression_id": prev_id})

    async def ids_for_exercise(self, exercise_id: int) -> list[int]:
        return [p.id for p in await self.list_by_exercise(exercise_id)]

    async def delete_for_exercise(self, exercise_id: int) -> int:
        stmt = (
            delete(Progression)
            .where(Progression.exercise_id == exercise_id)
            .execution_options(synchronize_session=False)
        )
        return (await self.db.execute(stmt)).rowcount
