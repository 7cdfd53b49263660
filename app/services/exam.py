import logging
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from fastapi import HTTPException, status

from app.crud.exam import exam as crud_exam
from app.crud.task import task as crud_task
from app.crud.result import result as crud_result
from app.models.exam import Exam
from app.models.user import User
from app.schemas.exam import ExamCreate, ExamRename, ExamDetail, ExamSummary
from app.schemas.task import Task as TaskSchema
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class ExamService:

    def _get_or_404(self, db: Session, exam_id: int) -> Exam:
        exam = crud_exam.get(db, id=exam_id)
        if not exam:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exam not found.")
        return exam

    def _require_unique_name(self, db: Session, name: str, exam_id: int = None):
        existing = crud_exam.get_by_name(db, name=name)
        if existing and existing.id != exam_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="An exam with this name already exists."
            )

    def list_exams(self, db: Session) -> List[Exam]:
        return crud_exam.get_multi(db)

    def get_exam(self, db: Session, exam_id: int) -> ExamDetail:
        """Return the exam with its tasks in stored order.

        Ids that no longer match a task are left out rather than failing the
        whole exam.
        """
        exam = self._get_or_404(db, exam_id)
        task_ids = list(exam.task_ids or [])
        tasks_by_id = crud_task.get_by_ids(db, task_ids)

        ordered_tasks = [TaskSchema.model_validate(tasks_by_id[tid]) for tid in task_ids if tid in tasks_by_id]
        dropped = len(task_ids) - len(ordered_tasks)
        if dropped:
            logger.warning(f"Exam {exam_id} references {dropped} missing task(s)")

        return ExamDetail(
            id=exam.id,
            name=exam.name,
            task_ids=task_ids,
            task_count=exam.task_count,
            created_at=exam.created_at,
            tasks=ordered_tasks
        )

    def create_exam(self, db: Session, exam_in: ExamCreate, current_user: User) -> Exam:
        permission_helper.require_admin(current_user)
        self._require_unique_name(db, exam_in.name)

        try:
            new_exam = crud_exam.create(
                db,
                obj_in={"name": exam_in.name, "task_ids": list(exam_in.task_ids)},
                commit=False
            )
            if exam_in.sheet_tag:
                tagged = crud_task.stamp_sheet_tag(db, task_ids=exam_in.task_ids, sheet_tag=exam_in.sheet_tag)
                logger.info(f"Stamped sheet '{exam_in.sheet_tag}' on {tagged} task(s)")
            db.commit()
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="An exam with this name already exists."
            )
        except SQLAlchemyError:
            db.rollback()
            raise

        db.refresh(new_exam)
        return new_exam

    def rename_exam(self, db: Session, exam_id: int, exam_in: ExamRename, current_user: User) -> Exam:
        permission_helper.require_admin(current_user)
        exam = self._get_or_404(db, exam_id)
        self._require_unique_name(db, exam_in.name, exam_id=exam_id)

        try:
            return crud_exam.update(db, db_obj=exam, obj_in={"name": exam_in.name})
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="An exam with this name already exists."
            )

    def delete_exam(self, db: Session, exam_id: int, current_user: User) -> ExamSummary:
        permission_helper.require_admin(current_user)
        exam = ExamSummary.model_validate(self._get_or_404(db, exam_id))

        try:
            removed = crud_result.delete_by_exam(db, exam_id)
            crud_exam.delete(db, id=exam_id, commit=False)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        logger.info(f"Exam {exam_id} deleted along with {removed} result(s)")
        return exam


exam_service = ExamService()
