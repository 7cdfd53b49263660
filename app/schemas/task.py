import json
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List, Any
from datetime import datetime

from app.core.constants import TaskKindEnum


def normalize_options(value: Any) -> Optional[List[str]]:
    """Bring the options payload to one canonical list of strings.

    Import files carry options either as a JSON-encoded string or as a native
    list. Strings are decoded exactly once; an already-decoded list is passed
    through untouched, so a string element is never decoded a second time.
    """
    if value is None:
        return None
    if isinstance(value, str):
        raw = value.strip()
        if not raw or raw == "null":
            return None
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValueError("options must be a JSON array of strings") from exc
    else:
        decoded = value
    if not isinstance(decoded, (list, tuple)):
        raise ValueError("options must be a list of strings")
    return [str(option) for option in decoded]


class TaskBase(BaseModel):
    kind: TaskKindEnum
    prompt_ref: str = Field(..., min_length=1)
    correct_answer: str = Field(..., min_length=1)
    options: Optional[List[str]] = None
    points: int = Field(default=1, ge=1)
    sheet_tag: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("options", mode="before")
    @classmethod
    def decode_options(cls, v):
        return normalize_options(v)

class TaskCreate(TaskBase):

    @model_validator(mode="after")
    def options_match_kind(self):
        if self.kind == TaskKindEnum.CLOSED and not self.options:
            raise ValueError("Closed tasks require at least one option.")
        if self.kind == TaskKindEnum.OPEN:
            if self.options:
                raise ValueError("Open tasks cannot have options.")
            self.options = None
        return self

class TaskUpdate(BaseModel):
    correct_answer: Optional[str] = Field(default=None, min_length=1)
    points: Optional[int] = Field(default=None, ge=1)
    options: Optional[List[str]] = None

    @field_validator("options", mode="before")
    @classmethod
    def decode_options(cls, v):
        return normalize_options(v)

class Task(TaskBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
