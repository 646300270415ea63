from __future__ import annotations
from typing import Any
from sqlalchemy import delete, update
from caltrack.models import Exercise, SetRecord, WorkoutExercise
from caltrack.repositories.base import BaseRepository

class WorkoutExerciseRepository(BaseRepository[WorkoutExercise]):
    model = WorkoutExercise

    async def list_by_workout(self, workout_id: int) -> list[WorkoutExercise]:
        stmt = self.select().where(WorkoutExercise.workout_id == workout_id).order_by(WorkoutExercise.id.asc())
        return await self.scalars(stmt)

    async def list_with_names(self, workout_id: int) -> list[tuple[WorkoutExercise, str | None]]:
        """Rows of the workout with the exercise name; LEFT JOIN keeps rows whose exercise is gone."""
        stmt = (
            self.select(WorkoutExercise, Exercise.name)
            .outerjoin(Exercise, Exercise.id == WorkoutExercise.exercise_id)
            .where(WorkoutExercise.workout_id == workout_id)
            .order_by(WorkoutExercise.id.asc())
        )
        return [(we, name) for we, name in (await self.db.execute(stmt)).all()]

    async def create(self, workout_id: int, values: dict[str, Any]) -> WorkoutExercise:
        return await self.add_and_refresh(WorkoutExercise(workout_id=workout_id, **values))

    async def increment_sets(self, workout_exercise_id: int) -> int:
        # Single statement: no read-modify-write window
        stmt = (
            update(WorkoutExercise)
            .where(WorkoutExercise.id == workout_exercise_id)
            .values(sets=WorkoutExercise.sets + 1)
            .execution_options(synchronize_session=False)
        )
        return (await self.db.execute(stmt)).rowcount

    async def clear_progressions(self, progression_ids: list[int]) -> int:
        if not progression_ids:
            return 0
        stmt = (
            update(WorkoutExercise)
            .where(WorkoutExercise.progression_id.in_(progression_ids))
            .values(progression_id=None)
            .execution_options(synchronize_session=False)
        )
        return (await self.db.execute(stmt)).rowcount

    async def delete_with_sets(self, workout_exercise_id: int) -> int:
        """Children first, then the row. Caller provides the transaction."""
        await self.db.execute(
            delete(SetRecord)
            .where(SetRecord.workout_exercise_id == workout_exercise_id)
            .execution_options(synchronize_session=False)
        )
        return await self.delete_by_id(workout_exercise_id)
