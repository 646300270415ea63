from typing import Annotated
from pydantic import Field, StringConstraints
from caltrack.schemas.base import CamelModel, PatchModel

Difficulty = Annotated[int, Field(ge=1, le=10)]
NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]

class ProgressionCreate(CamelModel):
    # Optional when the exercise is given separately (bulk chain creation)
    exercise_id: int | None = None
    name: NameStr
    description: str = ""
    goal: str = ""
    difficulty: Difficulty = 1

class ProgressionUpdate(PatchModel):
    # the chain links may be cleared, nothing else
    NOT_NULL = ("exercise_id", "name", "description", "goal", "difficulty")

    exercise_id: int | None = None
    name: NameStr | None = None
    description: str | None = None
    goal: str | None = None
    difficulty: Difficulty | None = None
    prev_progression_id: int | None = None
    next_progression_id: int | None = None

class ProgressionRead(CamelModel):
    id: int
    exercise_id: int
    name: str
    description: str = ""
    goal: str = ""
    difficulty: int
    prev_progression_id: int | None = None
    next_progression_id: int | None = None
