from typing import Annotated
from datetime import datetime
from pydantic import Field
from caltrack.schemas.base import CamelModel, PatchModel

SetNumber = Annotated[int, Field(ge=1)]

class SetRecordCreate(CamelModel):
    set_number: SetNumber
    completed: bool = True

class SetRecordUpdate(PatchModel):
    NOT_NULL = ("set_number", "completed")

    set_number: SetNumber | None = None
    completed: bool | None = None

class SetRecordRead(CamelModel):
    id: int
    workout_exercise_id: int
    set_number: int
    completed: bool
    completed_at: datetime | None = None
