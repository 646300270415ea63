from pydantic import BaseModel, Field
from caltrack.schemas.base import CamelModel
from caltrack.schemas.exercise import ExerciseRead
from caltrack.schemas.progression import Difficulty, NameStr, ProgressionRead
from caltrack.schemas.workout import WorkoutRead
from caltrack.schemas.workout_exercise import NonNegFloat, NonNegInt, PosInt, WorkoutExerciseRead
from caltrack.schemas.set_record import SetNumber, SetRecordRead

class ExchangeDocument(CamelModel):
    """Full-store backup. A key left out (None) is skipped on import."""
    workouts: list[WorkoutRead] | None = None
    exercises: list[ExerciseRead] | None = None
    progressions: list[ProgressionRead] | None = None
    workout_exercises: list[WorkoutExerciseRead] | None = None
    sets: list[SetRecordRead] | None = None

# Incoming records get the same constraints as the create payloads
class ImportedExercise(ExerciseRead):
    name: NameStr

class ImportedProgression(ProgressionRead):
    name: NameStr
    difficulty: Difficulty

class ImportedWorkout(WorkoutRead):
    name: NameStr

class ImportedWorkoutExercise(WorkoutExerciseRead):
    reps: NonNegInt = 0
    sets: PosInt = 1
    time_seconds: NonNegInt = 0
    weight: NonNegFloat | None = None

class ImportedSetRecord(SetRecordRead):
    set_number: SetNumber

class ImportDocument(ExchangeDocument):
    workouts: list[ImportedWorkout] | None = None
    exercises: list[ImportedExercise] | None = None
    progressions: list[ImportedProgression] | None = None
    workout_exercises: list[ImportedWorkoutExercise] | None = None
    sets: list[ImportedSetRecord] | None = None

class ImportSummary(BaseModel):
    created: dict[str, int] = Field(default_factory=dict)
    updated: dict[str, int] = Field(default_factory=dict)
    skipped: dict[str, int] = Field(default_factory=dict)

    def bump(self, bucket: str, entity: str, n: int = 1) -> None:
        counts = getattr(self, bucket)
        counts[entity] = counts.get(entity, 0) + n
