import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from fastapi import HTTPException, status

from app.core.constants import PracticeModeEnum, TaskKindEnum
from app.crud.task import task as crud_task
from app.crud.progress import progress as crud_progress
from app.models.task import Task
from app.models.user import User
from app.schemas.task import TaskCreate, TaskUpdate, Task as TaskSchema
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class TaskService:

    def _get_or_404(self, db: Session, task_id: int) -> Task:
        task = crud_task.get(db, id=task_id)
        if not task:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found.")
        return task

    def list_tasks(self, db: Session, search: Optional[str] = None) -> List[Task]:
        return crud_task.get_multi_filtered(db, search=search)

    def get_task(self, db: Session, task_id: int) -> Task:
        return self._get_or_404(db, task_id)

    def get_unseen_random_task(
        self,
        db: Session,
        current_user: User,
        mode: PracticeModeEnum = PracticeModeEnum.STANDARD,
        kind: Optional[TaskKindEnum] = None,
        only_incorrect: bool = False
    ) -> Optional[Task]:
        """Pick a random task the user has not solved in this mode yet.

        None means the candidate pool is exhausted, which is a normal outcome.
        """
        return crud_task.get_random_unseen(
            db,
            user_id=current_user.id,
            mode=mode,
            kind=kind,
            only_incorrect=only_incorrect
        )

    def update_task(self, db: Session, task_id: int, task_in: TaskUpdate, current_user: User) -> Task:
        permission_helper.require_admin(current_user)
        task = self._get_or_404(db, task_id)

        update_data = task_in.model_dump(exclude_unset=True)
        if "options" in update_data:
            if task.kind == TaskKindEnum.OPEN and update_data["options"]:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="Open tasks cannot have options."
                )
            if task.kind == TaskKindEnum.CLOSED and not update_data["options"]:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="Closed tasks require at least one option."
                )
        if "correct_answer" in update_data and update_data["correct_answer"] is None:
            update_data.pop("correct_answer")
        if "points" in update_data and update_data["points"] is None:
            update_data.pop("points")

        return crud_task.update(db, db_obj=task, obj_in=update_data)

    def bulk_create(self, db: Session, tasks_in: List[TaskCreate], current_user: User) -> List[Task]:
        permission_helper.require_admin(current_user)
        if not tasks_in:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No tasks provided.")

        created = crud_task.bulk_create(db, objs_in=tasks_in)
        logger.info(f"User {current_user.id} imported {len(created)} tasks")
        return created

    def delete_task(self, db: Session, task_id: int, current_user: User) -> TaskSchema:
        permission_helper.require_admin(current_user)
        task = TaskSchema.model_validate(self._get_or_404(db, task_id))

        try:
            removed = crud_progress.delete_by_task(db, task_id=task_id)
            crud_task.delete(db, id=task_id, commit=False)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        logger.info(f"Task {task_id} deleted along with {removed} progress records")
        return task


task_service = TaskService()
