import logging
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from app.core.constants import PracticeModeEnum, TaskKindEnum
from app.crud.progress import progress as crud_progress
from app.crud.task import task as crud_task
from app.models.progress import ProgressRecord
from app.models.user import User
from app.schemas.progress import (
    KindOutcomeCounts, OutcomeCounts, ProgressResetResult, ProgressSubmit, ProgressSummary
)

logger = logging.getLogger(__name__)


class ProgressService:

    def submit_outcome(self, db: Session, progress_in: ProgressSubmit, current_user: User) -> ProgressRecord:
        task = crud_task.get(db, id=progress_in.task_id)
        if not task:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found.")
        if progress_in.earned_points is not None and progress_in.earned_points > task.points:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"earned_points must be between 0 and {task.points} for task {task.id}."
            )

        # Stored verbatim: is_correct is not re-derived from earned_points.
        return crud_progress.upsert(
            db,
            user_id=current_user.id,
            task_id=progress_in.task_id,
            mode=progress_in.mode,
            is_correct=progress_in.is_correct,
            earned_points=progress_in.earned_points
        )

    def reset_progress(self, db: Session, mode: PracticeModeEnum, current_user: User) -> ProgressResetResult:
        deleted = crud_progress.reset_for_user(db, user_id=current_user.id, mode=mode)
        logger.info(f"User {current_user.id} reset {deleted} {mode.value} progress record(s)")
        return ProgressResetResult(mode=mode, deleted=deleted)

    def get_summary(self, db: Session, mode: PracticeModeEnum, current_user: User) -> ProgressSummary:
        correct, wrong = crud_progress.count_by_outcome(db, user_id=current_user.id, mode=mode)
        per_kind = crud_progress.count_by_outcome_and_kind(db, user_id=current_user.id, mode=mode)

        by_kind = []
        for kind in TaskKindEnum:
            kind_correct, kind_wrong = per_kind.get(kind, (0, 0))
            by_kind.append(KindOutcomeCounts(
                kind=kind, correct=kind_correct, wrong=kind_wrong, total=kind_correct + kind_wrong
            ))

        return ProgressSummary(
            mode=mode,
            overall=OutcomeCounts(correct=correct, wrong=wrong, total=correct + wrong),
            by_kind=by_kind
        )


progress_service = ProgressService()
