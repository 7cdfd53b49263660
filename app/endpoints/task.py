from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.constants import PracticeModeEnum, TaskKindEnum
from app.models.user import User
from app.schemas.response import APIResponse
from app.schemas.task import Task, TaskCreate, TaskUpdate
from app.services.task import task_service
from app.utils import deps

router = APIRouter()


@router.get("/", response_model=APIResponse[List[Task]])
def list_tasks(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    search: Optional[str] = Query(None, description="Matches part of the task id or sheet tag")
):
    tasks = task_service.list_tasks(db, search=search)
    return APIResponse(message="Tasks retrieved successfully", data=[Task.model_validate(t) for t in tasks])


@router.get("/random", response_model=APIResponse[Optional[Task]])
def get_random_task(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    mode: PracticeModeEnum = Query(PracticeModeEnum.STANDARD),
    kind: Optional[TaskKindEnum] = Query(None),
    only_incorrect: bool = Query(False)
):
    task = task_service.get_unseen_random_task(
        db, current_user, mode=mode, kind=kind, only_incorrect=only_incorrect
    )
    if task is None:
        return APIResponse(message="No tasks left to solve", data=None)
    return APIResponse(message="Task retrieved successfully", data=Task.model_validate(task))


@router.post("/bulk", response_model=APIResponse[List[Task]], status_code=status.HTTP_201_CREATED)
def bulk_create_tasks(
    *,
    db: Session = Depends(deps.get_transactional_db),
    tasks_in: List[TaskCreate],
    current_user: User = Depends(deps.require_admin)
):
    tasks = task_service.bulk_create(db, tasks_in=tasks_in, current_user=current_user)
    return APIResponse(message="Tasks created successfully", data=[Task.model_validate(t) for t in tasks])


@router.get("/{task_id}", response_model=APIResponse[Task])
def get_task(
    *,
    db: Session = Depends(deps.get_db),
    task_id: int,
    current_user: User = Depends(deps.get_current_user)
):
    task = task_service.get_task(db, task_id=task_id)
    return APIResponse(message="Task retrieved successfully", data=Task.model_validate(task))


@router.put("/{task_id}", response_model=APIResponse[Task])
def update_task(
    *,
    db: Session = Depends(deps.get_transactional_db),
    task_id: int,
    task_in: TaskUpdate,
    current_user: User = Depends(deps.require_admin)
):
    task = task_service.update_task(db, task_id=task_id, task_in=task_in, current_user=current_user)
    return APIResponse(message="Task updated successfully", data=Task.model_validate(task))


@router.delete("/{task_id}", response_model=APIResponse[Task])
def delete_task(
    *,
    db: Session = Depends(deps.get_transactional_db),
    task_id: int,
    current_user: User = Depends(deps.require_admin)
):
    task = task_service.delete_task(db, task_id=task_id, current_user=current_user)
    return APIResponse(message="Task deleted successfully", data=task)
