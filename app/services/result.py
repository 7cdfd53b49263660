import logging
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from fastapi import HTTPException, status

from app.crud.progress import progress as crud_progress
from app.crud.result import result as crud_result
from app.crud.task import task as crud_task
from app.crud.exam import exam as crud_exam
from app.models.result import ResultRecord
from app.models.user import User
from app.schemas.result import ExamResultCreate

logger = logging.getLogger(__name__)


class ResultService:

    def submit_final_score(self, db: Session, result_in: ExamResultCreate, current_user: User) -> ResultRecord:
        """Record a finished exam attempt.

        Every per-task outcome goes into the progress ledger under the
        attempt's mode and one result row is appended, all in one transaction.
        """
        task_ids = [o.task_id for o in result_in.outcomes]
        existing_tasks = crud_task.get_by_ids(db, task_ids)

        for outcome in result_in.outcomes:
            task = existing_tasks.get(outcome.task_id)
            if task is not None and outcome.earned_points > task.points:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail=f"earned_points must be between 0 and {task.points} for task {task.id}."
                )

        exam_id = result_in.exam_id
        if exam_id is not None and not crud_exam.get(db, id=exam_id):
            logger.warning(f"Result for unknown exam {exam_id} stored without exam reference")
            exam_id = None

        result_data = result_in.model_dump(exclude={"outcomes"})
        result_data.update({"user_id": current_user.id, "exam_id": exam_id})

        try:
            for outcome in result_in.outcomes:
                if outcome.task_id not in existing_tasks:
                    logger.warning(f"Skipping outcome for missing task {outcome.task_id}")
                    continue
                crud_progress.upsert(
                    db,
                    user_id=current_user.id,
                    task_id=outcome.task_id,
                    mode=result_in.mode,
                    is_correct=outcome.is_correct,
                    earned_points=outcome.earned_points,
                    commit=False
                )
            new_result = crud_result.create(db, obj_in=result_data, commit=False)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        db.refresh(new_result)
        logger.info(
            f"User {current_user.id} finished exam '{result_in.exam_name}' "
            f"with {result_in.earned_points}/{result_in.total_points}"
        )
        return new_result

    def list_results(self, db: Session, current_user: User) -> List[ResultRecord]:
        return crud_result.get_all_by_user(db, user_id=current_user.id)


result_service = ResultService()
