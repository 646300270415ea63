from typing import Annotated
from datetime import datetime
from pydantic import Field, StringConstraints
from caltrack.schemas.base import CamelModel, PatchModel

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]
CommentsStr = Annotated[str, Field(max_length=2000)]

class WorkoutCreate(CamelModel):
    name: NameStr
    goal: str | None = None
    comments: CommentsStr | None = None

class WorkoutUpdate(PatchModel):
    NOT_NULL = ("name",)

    # created_at is deliberately absent: it is fixed at creation
    name: NameStr | None = None
    goal: str | None = None
    comments: CommentsStr | None = None

class WorkoutRead(CamelModel):
    id: int
    name: str
    created_at: datetime
    goal: str | None = None
    comments: str | None = None
