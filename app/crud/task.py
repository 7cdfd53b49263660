from typing import Any, Dict, List, Optional, Union
from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.orm import Session

from app.core.constants import PracticeModeEnum, TaskKindEnum
from app.crud.base import CRUDBase
from app.models.progress import ProgressRecord
from app.models.task import Task
from app.schemas.task import TaskCreate, TaskUpdate, normalize_options


class CRUDTask(CRUDBase[Task, TaskCreate, TaskUpdate]):

    def get_multi_filtered(self, db: Session, *, search: Optional[str] = None) -> List[Task]:
        query = db.query(Task)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    cast(Task.id, String).like(pattern),
                    Task.sheet_tag.like(pattern)
                )
            )
        return query.order_by(Task.id.desc()).all()

    def get_by_ids(self, db: Session, ids: List[int]) -> Dict[int, Task]:
        if not ids:
            return {}
        tasks = db.query(Task).filter(Task.id.in_(set(ids))).all()
        return {t.id: t for t in tasks}

    def get_random_unseen(
        self,
        db: Session,
        *,
        user_id: int,
        mode: PracticeModeEnum,
        kind: Optional[TaskKindEnum] = None,
        only_incorrect: bool = False
    ) -> Optional[Task]:
        if only_incorrect:
            query = (
                db.query(Task)
                .join(ProgressRecord, ProgressRecord.task_id == Task.id)
                .filter(
                    ProgressRecord.user_id == user_id,
                    ProgressRecord.mode == mode,
                    ProgressRecord.is_correct.is_(False)
                )
            )
        else:
            seen = select(ProgressRecord.task_id).where(
                ProgressRecord.user_id == user_id,
                ProgressRecord.mode == mode
            )
            query = db.query(Task).filter(Task.id.notin_(seen))

        if kind:
            query = query.filter(Task.kind == kind)

        return query.order_by(func.random()).first()

    def bulk_create(self, db: Session, *, objs_in: List[Union[TaskCreate, Dict[str, Any]]], commit: bool = True) -> List[Task]:
        """Insert every task or none of them."""
        created = []
        try:
            for obj_in in objs_in:
                data = dict(obj_in) if isinstance(obj_in, dict) else obj_in.model_dump()
                if "options" in data:
                    data["options"] = normalize_options(data["options"])
                db_obj = Task(**data)
                db.add(db_obj)
                created.append(db_obj)
            db.flush()
            if commit:
                db.commit()
        except Exception:
            db.rollback()
            raise
        for db_obj in created:
            db.refresh(db_obj)
        return created

    def stamp_sheet_tag(self, db: Session, *, task_ids: List[int], sheet_tag: str) -> int:
        return (
            db.query(Task)
            .filter(Task.id.in_(set(task_ids)))
            .update({Task.sheet_tag: sheet_tag}, synchronize_session=False)
        )


task = CRUDTask(Task)
