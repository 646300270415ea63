from typing import Annotated
from pydantic import Field, field_validator
from caltrack.schemas.base import CamelModel, PatchModel, clean_name

NameStr = Annotated[str, Field(max_length=120)]
LabelStr = Annotated[str, Field(max_length=60)]

class ExerciseCreate(CamelModel):
    name: NameStr
    category: LabelStr = ""
    subtype: LabelStr = ""
    is_custom: bool = True

    @field_validator("name")
    @classmethod
    def name_non_blank(cls, v: str) -> str:
        v2 = clean_name(v)
        if not v2:
            raise ValueError("name cannot be blank")
        return v2

class ExerciseUpdate(PatchModel):
    NOT_NULL = ("name", "category", "subtype")

    name: NameStr | None = None
    category: LabelStr | None = None
    subtype: LabelStr | None = None

    @field_validator("name")
    @classmethod
    def name_non_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v2 = clean_name(v)
        if not v2:
            raise ValueError("name cannot be blank")
        return v2

class ExerciseFilter(CamelModel):
    search: str | None = None
    category: str | None = None
    subtype: str | None = None

class ExerciseRead(CamelModel):
    id: int
    name: str
    category: str = ""
    subtype: str = ""
    is_custom: bool = True
