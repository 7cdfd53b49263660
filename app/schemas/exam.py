from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.schemas.task import Task

class ExamCreate(BaseModel):
    name: str = Field(..., min_length=1)
    task_ids: List[int] = Field(..., min_length=1)
    sheet_tag: Optional[str] = None

    @field_validator("name", "sheet_tag")
    @classmethod
    def strip_text(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be blank.")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Exam May 2024",
                "task_ids": [12, 7, 31],
                "sheet_tag": "May 2024"
            }
        }

class ExamRename(BaseModel):
    name: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be blank.")
        return v

class ExamSummary(BaseModel):
    id: int
    name: str
    task_ids: List[int] = []
    task_count: int = 0
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class ExamDetail(ExamSummary):
    tasks: List[Task] = []
