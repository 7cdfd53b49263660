import math
from collections import defaultdict
from typing import Dict, List, Tuple
from sqlalchemy.orm import Session

from app.core.constants import (
    EXAM_BONUS_POINTS_PER_STEP, EXAM_BONUS_STEP_PERCENT,
    LeaderboardKindEnum, PracticeModeEnum, TaskKindEnum
)
from app.crud.progress import progress as crud_progress
from app.crud.result import result as crud_result
from app.crud.user import user as crud_user
from app.models.user import User
from app.schemas.stats import KindAccuracy, LeaderboardEntry, LeaderboardResponse, StatsSummary


def exam_bonus_points(percent: float) -> int:
    """Leaderboard points an exam result is worth."""
    return math.floor(percent / EXAM_BONUS_STEP_PERCENT) * EXAM_BONUS_POINTS_PER_STEP


def _accuracy(kind: TaskKindEnum, correct: int, wrong: int) -> KindAccuracy:
    total = correct + wrong
    percent = round(correct / total * 100, 2) if total else 0.0
    return KindAccuracy(kind=kind, correct=correct, wrong=wrong, accuracy_percent=percent)


class StatsService:

    def get_summary(self, db: Session, current_user: User) -> StatsSummary:
        mode = PracticeModeEnum.STANDARD
        correct, wrong = crud_progress.count_by_outcome(db, user_id=current_user.id, mode=mode)
        per_kind = crud_progress.count_by_outcome_and_kind(db, user_id=current_user.id, mode=mode)
        exams_taken, average_percent, best_percent = crud_result.get_user_percent_stats(db, user_id=current_user.id)

        return StatsSummary(
            total_solved=correct + wrong,
            total_correct=correct,
            total_wrong=wrong,
            closed=_accuracy(TaskKindEnum.CLOSED, *per_kind.get(TaskKindEnum.CLOSED, (0, 0))),
            open=_accuracy(TaskKindEnum.OPEN, *per_kind.get(TaskKindEnum.OPEN, (0, 0))),
            exams_taken=exams_taken,
            average_exam_percent=average_percent,
            best_exam_percent=best_percent
        )

    def get_leaderboard(self, db: Session, kind: LeaderboardKindEnum = LeaderboardKindEnum.ALL) -> LeaderboardResponse:
        points: Dict[int, int] = defaultdict(int)
        names: Dict[int, str] = {}

        task_kind = None if kind == LeaderboardKindEnum.ALL else TaskKindEnum(kind.value)
        for user_id, name, earned in crud_progress.sum_points_by_user(db, mode=PracticeModeEnum.GAMES, kind=task_kind):
            points[user_id] += earned
            names[user_id] = name

        if kind == LeaderboardKindEnum.ALL:
            for user_id, percent in crud_result.get_all_percents(db):
                points[user_id] += exam_bonus_points(percent)
            for user_id in points.keys() - names.keys():
                user = crud_user.get(db, id=user_id)
                names[user_id] = user.name if user else str(user_id)

        ranked: List[Tuple[int, int]] = sorted(points.items(), key=lambda item: (-item[1], names[item[0]]))
        items = [
            LeaderboardEntry(rank=position, user_id=user_id, name=names[user_id], points=total)
            for position, (user_id, total) in enumerate(ranked, start=1)
        ]
        return LeaderboardResponse(kind=kind, items=items)


stats_service = StatsService()
