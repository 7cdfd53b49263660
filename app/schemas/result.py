from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List
from datetime import datetime

from app.core.constants import PracticeModeEnum

# Clients round the percent to two decimals
PERCENT_TOLERANCE = 0.01

class TaskOutcome(BaseModel):
    task_id: int
    is_correct: bool
    earned_points: int = Field(default=0, ge=0)

class ExamResultBase(BaseModel):
    exam_id: Optional[int] = None
    exam_name: Optional[str] = None
    mode: PracticeModeEnum = PracticeModeEnum.STANDARD
    earned_points: int = Field(default=0, ge=0)
    total_points: int = Field(default=0, ge=0)
    wrong_count: int = Field(default=0, ge=0)
    percent: float = Field(default=0.0, ge=0, le=100)
    closed_correct: int = Field(default=0, ge=0)
    closed_wrong: int = Field(default=0, ge=0)
    open_correct: int = Field(default=0, ge=0)
    open_wrong: int = Field(default=0, ge=0)

class ExamResultCreate(ExamResultBase):
    outcomes: List[TaskOutcome] = []

    @model_validator(mode="after")
    def percent_matches_points(self):
        if self.earned_points > self.total_points:
            raise ValueError("earned_points cannot exceed total_points.")
        expected = self.earned_points * 100 / self.total_points if self.total_points else 0.0
        if abs(self.percent - expected) > PERCENT_TOLERANCE:
            raise ValueError(f"percent must equal earned_points / total_points * 100 ({expected:.2f}).")
        return self

class ResultRecord(ExamResultBase):
    id: int
    user_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
