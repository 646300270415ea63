"""
RecordStore: every read and write the application performs.

Each public method runs in exactly one transaction and returns pydantic read
models, never live ORM rows. Updates and deletes of an absent id return 0;
writes that reference an absent parent raise ReferentialError after rollback.
"""
from __future__ import annotations
import logging
from typing import Optional

from caltrack.chain import order_chain
from caltrack.db import Store
from caltrack.errors import ReferentialError
from caltrack.repositories.exercise_repo import ExerciseRepository
from caltrack.repositories.progression_repo import ProgressionRepository
from caltrack.repositories.set_repo import SetRepository
from caltrack.repositories.workout_exercise_repo import WorkoutExerciseRepository
from caltrack.repositories.workout_repo import WorkoutRepository
from caltrack.schemas.exercise import ExerciseCreate, ExerciseFilter, ExerciseRead, ExerciseUpdate
from caltrack.schemas.progression import ProgressionCreate, ProgressionRead, ProgressionUpdate
from caltrack.schemas.set_record import SetRecordCreate, SetRecordRead, SetRecordUpdate
from caltrack.schemas.workout import WorkoutCreate, WorkoutRead, WorkoutUpdate
from caltrack.schemas.workout_exercise import (
    WorkoutExerciseCreate,
    WorkoutExerciseDetail,
    WorkoutExerciseRead,
    WorkoutExerciseUpdate,
)

log = logging.getLogger(__name__)


def _detail(row, exercise_name: str | None) -> WorkoutExerciseDetail:
    base = WorkoutExerciseRead.model_validate(row)
    return WorkoutExerciseDetail(**base.model_dump(), exercise_name=exercise_name)


class RecordStore:
    def __init__(self, store: Store):
        self.store = store

    # ------------------------------------------------------------------ exercises
    async def create_exercise(self, payload: ExerciseCreate) -> ExerciseRead:
        async with self.store.transaction() as db:
            ex = await ExerciseRepository(db).create(**payload.model_dump())
            return ExerciseRead.model_validate(ex)

    async def get_exercise(self, exercise_id: int) -> Optional[ExerciseRead]:
        async with self.store.snapshot() as db:
            ex = await ExerciseRepository(db).get(exercise_id)
            return ExerciseRead.model_validate(ex) if ex else None

    async def update_exercise(self, exercise_id: int, payload: ExerciseUpdate) -> int:
        async with self.store.transaction() as db:
            return await ExerciseRepository(db).update_fields(exercise_id, payload.model_dump(exclude_unset=True))

    async def delete_exercise(self, exercise_id: int) -> int:
        """Remove the exercise and its progressions.

        Workout exercises that used it stay and are later listed with a null
        exercise name; references to the removed progressions are cleared.
        """
        async with self.store.transaction() as db:
            progs = ProgressionRepository(db)
            await WorkoutExerciseRepository(db).clear_progressions(await progs.ids_for_exercise(exercise_id))
            await progs.delete_for_exercise(exercise_id)
            n = await ExerciseRepository(db).delete_by_id(exercise_id)
        if n:
            log.info("Deleted exercise %s with its progressions", exercise_id)
        return n

    async def list_exercises(self, filters: ExerciseFilter | None = None) -> list[ExerciseRead]:
        filters = filters or ExerciseFilter()
        async with self.store.snapshot() as db:
            rows = await ExerciseRepository(db).search(
                search=filters.search, category=filters.category, subtype=filters.subtype
            )
            return [ExerciseRead.model_validate(r) for r in rows]

    async def list_categories(self) -> list[str]:
        async with self.store.snapshot() as db:
            return await ExerciseRepository(db).categories()

    async def list_subtypes(self, category: Optional[str] = None) -> list[str]:
        async with self.store.snapshot() as db:
            return await ExerciseRepository(db).subtypes(category)

    async def find_exercise_by_name(self, name: str) -> Optional[ExerciseRead]:
        async with self.store.snapshot() as db:
            ex = await ExerciseRepository(db).find_by_name(name)
            return ExerciseRead.model_validate(ex) if ex else None

    # --------------------------------------------------------------- progressions
    async def create_progression(self, payload: ProgressionCreate) -> ProgressionRead:
        created = await self.create_progressions(payload.exercise_id, [payload])
        return created[0]

    async def create_progressions(
        self, exercise_id: int | None, payloads: list[ProgressionCreate]
    ) -> list[ProgressionRead]:
        """Insert several nodes into one exercise's chain in a single transaction."""
        async with self.store.transaction() as db:
            if not await ExerciseRepository(db).exists(exercise_id):
                raise ReferentialError("exercise", exercise_id)
            repo = ProgressionRepository(db)
            out = []
            for p in payloads:
                node = await repo.insert(
                    exercise_id, name=p.name, description=p.description, goal=p.goal, difficulty=p.difficulty
                )
                out.append(node.id)
            return [ProgressionRead.model_validate(await repo.get(pid)) for pid in out]

    async def get_progression(self, progression_id: int) -> Optional[ProgressionRead]:
        async with self.store.snapshot() as db:
            p = await ProgressionRepository(db).get(progression_id)
            return ProgressionRead.model_validate(p) if p else None

    async def update_progression(self, progression_id: int, payload: ProgressionUpdate) -> int:
        """Plain field edits, or relinking. The resulting chain(s) must stay valid."""
        values = payload.model_dump(exclude_unset=True)
        async with self.store.transaction() as db:
            repo = ProgressionRepository(db)
            current = await repo.get(progression_id)
            if current is None:
                return 0
            old_exercise = current.exercise_id
            new_exercise = values.get("exercise_id", old_exercise)
            if new_exercise != old_exercise and not await ExerciseRepository(db).exists(new_exercise):
                raise ReferentialError("exercise", new_exercise)
            n = await repo.update_fields(progression_id, values)
            touched = {"exercise_id", "prev_progression_id", "next_progression_id"}
            if touched & values.keys():
                for exercise_id in {old_exercise, new_exercise}:
                    await repo.chain(exercise_id)
            return n

    async def delete_progression(self, progression_id: int) -> int:
        async with self.store.transaction() as db:
            repo = ProgressionRepository(db)
            node = await repo.get(progression_id)
            if node is None:
                return 0
            await repo.splice_out(node)
            await WorkoutExerciseRepository(db).clear_progressions([progression_id])
            return await repo.delete_by_id(progression_id)

    async def list_progressions_for_exercise(self, exercise_id: int) -> list[ProgressionRead]:
        async with self.store.snapshot() as db:
            rows = await ProgressionRepository(db).list_by_exercise(exercise_id)
            return [ProgressionRead.model_validate(r) for r in rows]

    async def progression_chain(self, exercise_id: int) -> list[ProgressionRead]:
        nodes = await self.list_progressions_for_exercise(exercise_id)
        return order_chain(nodes)

    # ------------------------------------------------------------------- workouts
    async def create_workout(self, payload: WorkoutCreate) -> WorkoutRead:
        async with self.store.transaction() as db:
            w = await WorkoutRepository(db).create(**payload.model_dump())
            return WorkoutRead.model_validate(w)

    async def get_workout(self, workout_id: int) -> Optional[WorkoutRead]:
        async with self.store.snapshot() as db:
            w = await WorkoutRepository(db).get(workout_id)
            return WorkoutRead.model_validate(w) if w else None

    async def update_workout(self, workout_id: int, payload: WorkoutUpdate) -> int:
        async with self.store.transaction() as db:
            return await WorkoutRepository(db).update_fields(workout_id, payload.model_dump(exclude_unset=True))

    async def delete_workout(self, workout_id: int) -> int:
        async with self.store.transaction() as db:
            blocks = WorkoutExerciseRepository(db)
            for we in await blocks.list_by_workout(workout_id):
                await blocks.delete_with_sets(we.id)
            n = await WorkoutRepository(db).delete_by_id(workout_id)
        if n:
            log.info("Deleted workout %s", workout_id)
        return n

    async def list_workouts(self) -> list[WorkoutRead]:
        async with self.store.snapshot() as db:
            return [WorkoutRead.model_validate(w) for w in await WorkoutRepository(db).list_recent()]

    # ---------------------------------------------------------- workout exercises
    async def _check_block_refs(self, db, values: dict) -> None:
        if "exercise_id" in values and not await ExerciseRepository(db).exists(values["exercise_id"]):
            raise ReferentialError("exercise", values["exercise_id"])
        pid = values.get("progression_id")
        if pid is not None and not await ProgressionRepository(db).exists(pid):
            raise ReferentialError("progression", pid)

    async def add_workout_exercise(self, workout_id: int, payload: WorkoutExerciseCreate) -> WorkoutExerciseRead:
        values = payload.model_dump()
        async with self.store.transaction() as db:
            if not await WorkoutRepository(db).exists(workout_id):
                raise ReferentialError("workout", workout_id)
            await self._check_block_refs(db, values)
            we = await WorkoutExerciseRepository(db).create(workout_id, values)
            return WorkoutExerciseRead.model_validate(we)

    async def get_workout_exercise(self, workout_exercise_id: int) -> Optional[WorkoutExerciseRead]:
        async with self.store.snapshot() as db:
            we = await WorkoutExerciseRepository(db).get(workout_exercise_id)
            return WorkoutExerciseRead.model_validate(we) if we else None

    async def update_workout_exercise(self, workout_exercise_id: int, payload: WorkoutExerciseUpdate) -> int:
        values = payload.model_dump(exclude_unset=True)
        async with self.store.transaction() as db:
            await self._check_block_refs(db, values)
            return await WorkoutExerciseRepository(db).update_fields(workout_exercise_id, values)

    async def delete_workout_exercise(self, workout_exercise_id: int) -> int:
        async with self.store.transaction() as db:
            return await WorkoutExerciseRepository(db).delete_with_sets(workout_exercise_id)

    async def list_workout_exercises_for_workout(self, workout_id: int) -> list[WorkoutExerciseDetail]:
        async with self.store.snapshot() as db:
            rows = await WorkoutExerciseRepository(db).list_with_names(workout_id)
            return [_detail(we, name) for we, name in rows]

    async def increment_planned_sets(self, workout_exercise_id: int) -> int:
        async with self.store.transaction() as db:
            return await WorkoutExerciseRepository(db).increment_sets(workout_exercise_id)

    # ---------------------------------------------------------------- set records
    async def record_set(self, workout_exercise_id: int, payload: SetRecordCreate) -> SetRecordRead:
        async with self.store.transaction() as db:
            if not await WorkoutExerciseRepository(db).exists(workout_exercise_id):
                raise ReferentialError("workout exercise", workout_exercise_id)
            s = await SetRepository(db).create(
                workout_exercise_id, set_number=payload.set_number, completed=payload.completed
            )
            return SetRecordRead.model_validate(s)

    async def get_set_record(self, set_id: int) -> Optional[SetRecordRead]:
        async with self.store.snapshot() as db:
            s = await SetRepository(db).get(set_id)
            return SetRecordRead.model_validate(s) if s else None

    async def list_set_records(self, workout_exercise_id: int) -> list[SetRecordRead]:
        async with self.store.snapshot() as db:
            rows = await SetRepository(db).list_by_workout_exercise(workout_exercise_id)
            return [SetRecordRead.model_validate(s) for s in rows]

    async def update_set_record(self, set_id: int, payload: SetRecordUpdate) -> int:
        values = payload.model_dump(exclude_unset=True)
        async with self.store.transaction() as db:
            repo = SetRepository(db)
            n = 0
            if "set_number" in values:
                n = await repo.update_fields(set_id, {"set_number": values["set_number"]})
            if "completed" in values:
                n = await repo.mark(set_id, completed=values["completed"])
            if not values:
                n = await repo.update_fields(set_id, {})
            return n

    async def delete_set_record(self, set_id: int) -> int:
        async with self.store.transaction() as db:
            return await SetRepository(db).delete_by_id(set_id)

    # ---------------------------------------------------- composite reads (export)
    async def workout_with_exercises(
        self, workout_id: int
    ) -> Optional[tuple[WorkoutRead, list[WorkoutExerciseDetail]]]:
        async with self.store.snapshot() as db:
            w = await WorkoutRepository(db).get(workout_id)
            if w is None:
                return None
            rows = await WorkoutExerciseRepository(db).list_with_names(workout_id)
            return WorkoutRead.model_validate(w), [_detail(we, name) for we, name in rows]

    async def all_workouts_with_exercises(self) -> list[tuple[WorkoutRead, list[WorkoutExerciseDetail]]]:
        async with self.store.snapshot() as db:
            blocks = WorkoutExerciseRepository(db)
            out = []
            for w in await WorkoutRepository(db).list_recent():
                rows = await blocks.list_with_names(w.id)
                out.append((WorkoutRead.model_validate(w), [_detail(we, name) for we, name in rows]))
            return out

    async def exercise_library(self) -> list[tuple[ExerciseRead, list[ProgressionRead]]]:
        async with self.store.snapshot() as db:
            progs = ProgressionRepository(db)
            out = []
            for ex in await ExerciseRepository(db).list_all():
                rows = await progs.list_by_exercise(ex.id)
                out.append((ExerciseRead.model_validate(ex), [ProgressionRead.model_validate(p) for p in rows]))
            return out


