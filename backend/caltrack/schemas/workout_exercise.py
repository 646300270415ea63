from typing import Annotated
from pydantic import Field
from caltrack.schemas.base import CamelModel, PatchModel

PosInt = Annotated[int, Field(ge=1)]
NonNegInt = Annotated[int, Field(ge=0)]
NonNegFloat = Annotated[float, Field(ge=0, le=1000)]

class WorkoutExerciseCreate(CamelModel):
    exercise_id: int
    progression_id: int | None = None
    reps: NonNegInt = 0
    sets: PosInt = 1
    time_seconds: NonNegInt = 0
    weight: NonNegFloat | None = None
    notes: str | None = None

class WorkoutExerciseUpdate(PatchModel):
    NOT_NULL = ("exercise_id", "reps", "sets", "time_seconds")

    exercise_id: int | None = None
    progression_id: int | None = None
    reps: NonNegInt | None = None
    sets: PosInt | None = None
    time_seconds: NonNegInt | None = None
    weight: NonNegFloat | None = None
    notes: str | None = None

class WorkoutExerciseRead(CamelModel):
    id: int
    workout_id: int
    exercise_id: int
    progression_id: int | None = None
    reps: int = 0
    sets: int = 1
    time_seconds: int = 0
    weight: float | None = None
    notes: str | None = None

class WorkoutExerciseDetail(WorkoutExerciseRead):
    # None when the referenced exercise no longer exists
    exercise_name: str | None = None
