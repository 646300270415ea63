from caltrack.models.exercise import Exercise
from caltrack.models.progression import Progression
from caltrack.models.workout import Workout
from caltrack.models.workout_exercise import WorkoutExercise
from caltrack.models.set_record import SetRecord

__all__ = ["Exercise", "Progression", "Workout", "WorkoutExercise", "SetRecord"]
