from pydantic import BaseModel
from typing import List

from app.core.constants import LeaderboardKindEnum, TaskKindEnum

class KindAccuracy(BaseModel):
    kind: TaskKindEnum
    correct: int = 0
    wrong: int = 0
    accuracy_percent: float = 0.0

class StatsSummary(BaseModel):
    total_solved: int
    total_correct: int
    total_wrong: int
    closed: KindAccuracy
    open: KindAccuracy
    exams_taken: int
    average_exam_percent: float
    best_exam_percent: float

class LeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    name: str
    points: int

class LeaderboardResponse(BaseModel):
    kind: LeaderboardKindEnum
    items: List[LeaderboardEntry]
