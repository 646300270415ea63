from typing import ClassVar
from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (exports, HTTP)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

class PatchModel(CamelModel):
    """Partial update: omitted fields are untouched, explicit nulls only where the column allows them."""
    NOT_NULL: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def no_null_for_required_columns(self):
        for name in self.NOT_NULL:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self

def normalize_name(name: str) -> str:
    """Key used to match exercise names: inner whitespace collapsed, case-folded."""
    return " ".join(name.split()).casefold()

def clean_name(name: str) -> str:
    return " ".join(name.split())
