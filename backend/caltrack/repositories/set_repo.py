from __future__ import annotations
from sqlalchemy import func
from caltrack.models import SetRecord
from caltrack.repositories.base import BaseRepository

class SetRepository(BaseRepository[SetRecord]):
    model = SetRecord

    async def list_by_workout_exercise(self, workout_exercise_id: int) -> list[SetRecord]:
        stmt = (
            self.select()
            .where(SetRecord.workout_exercise_id == workout_exercise_id)
            .order_by(SetRecord.id.asc())
        )
        return await self.scalars(stmt)

    async def create(self, workout_exercise_id: int, *, set_number: int, completed: bool = True) -> SetRecord:
        s = SetRecord(
            workout_exercise_id=workout_exercise_id,
            set_number=set_number,
            completed=completed,
            completed_at=func.now() if completed else None,
        )
        return await self.add_and_refresh(s)

    async def mark(self, set_id: int, *, completed: bool) -> int:
        values = {"completed": completed, "completed_at": func.now() if completed else None}
        return await self.update_fields(set_id, values)
