from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from app.core.constants import PracticeModeEnum, TaskKindEnum

class ProgressSubmit(BaseModel):
    task_id: int
    mode: PracticeModeEnum = PracticeModeEnum.STANDARD
    is_correct: bool
    earned_points: Optional[int] = Field(default=None, ge=0)

class ProgressRecord(BaseModel):
    id: int
    user_id: int
    task_id: int
    mode: PracticeModeEnum
    is_correct: bool
    earned_points: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

class ProgressReset(BaseModel):
    mode: PracticeModeEnum = PracticeModeEnum.STANDARD

class ProgressResetResult(BaseModel):
    mode: PracticeModeEnum
    deleted: int

class OutcomeCounts(BaseModel):
    correct: int = 0
    wrong: int = 0
    total: int = 0

class KindOutcomeCounts(OutcomeCounts):
    kind: TaskKindEnum

class ProgressSummary(BaseModel):
    mode: PracticeModeEnum
    overall: OutcomeCounts
    by_kind: List[KindOutcomeCounts] = []
