from typing import Dict, List, Optional, Tuple
from sqlalchemy import case, func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from app.core.constants import PracticeModeEnum, TaskKindEnum
from app.crud.base import CRUDBase
from app.models.progress import ProgressRecord
from app.models.task import Task
from app.models.user import User
from app.schemas.progress import ProgressSubmit

_UPSERT_DIALECTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}

_correct_sum = func.sum(case((ProgressRecord.is_correct.is_(True), 1), else_=0))
_wrong_sum = func.sum(case((ProgressRecord.is_correct.is_(False), 1), else_=0))


class CRUDProgress(CRUDBase[ProgressRecord, ProgressSubmit, ProgressSubmit]):

    def get_by_key(self, db: Session, *, user_id: int, task_id: int, mode: PracticeModeEnum) -> Optional[ProgressRecord]:
        return (
            db.query(ProgressRecord)
            .populate_existing()
            .filter(
                ProgressRecord.user_id == user_id,
                ProgressRecord.task_id == task_id,
                ProgressRecord.mode == mode
            )
            .first()
        )

    def get_all_by_user(self, db: Session, *, user_id: int, mode: Optional[PracticeModeEnum] = None) -> List[ProgressRecord]:
        query = db.query(ProgressRecord).filter(ProgressRecord.user_id == user_id)
        if mode:
            query = query.filter(ProgressRecord.mode == mode)
        return query.order_by(ProgressRecord.id).all()

    def upsert(
        self,
        db: Session,
        *,
        user_id: int,
        task_id: int,
        mode: PracticeModeEnum,
        is_correct: bool,
        earned_points: Optional[int] = None,
        commit: bool = True
    ) -> ProgressRecord:
        """Insert or overwrite the record for (user, task, mode) in one statement.

        The write is a single INSERT .. ON CONFLICT DO UPDATE keyed on the
        composite unique constraint, so duplicate submissions racing each
        other still leave exactly one row. is_correct and earned_points are
        stored as given.
        """
        if earned_points is None:
            earned_points = 1 if is_correct else 0

        dialect = db.get_bind().dialect.name
        insert_fn = _UPSERT_DIALECTS.get(dialect)
        if insert_fn is None:
            raise NotImplementedError(f"Progress upsert is not supported on {dialect}")

        stmt = insert_fn(ProgressRecord).values(
            user_id=user_id,
            task_id=task_id,
            mode=mode,
            is_correct=is_correct,
            earned_points=earned_points
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[ProgressRecord.user_id, ProgressRecord.task_id, ProgressRecord.mode],
            set_={
                "is_correct": stmt.excluded.is_correct,
                "earned_points": stmt.excluded.earned_points,
                "updated_at": func.now()
            }
        )
        db.execute(stmt)
        if commit:
            db.commit()
        return self.get_by_key(db, user_id=user_id, task_id=task_id, mode=mode)

    def reset_for_user(self, db: Session, *, user_id: int, mode: PracticeModeEnum, commit: bool = True) -> int:
        deleted = (
            db.query(ProgressRecord)
            .filter(ProgressRecord.user_id == user_id, ProgressRecord.mode == mode)
            .delete(synchronize_session=False)
        )
        if commit:
            db.commit()
        return deleted

    def delete_by_task(self, db: Session, *, task_id: int) -> int:
        return (
            db.query(ProgressRecord)
            .filter(ProgressRecord.task_id == task_id)
            .delete(synchronize_session=False)
        )

    def count_by_outcome(self, db: Session, *, user_id: int, mode: PracticeModeEnum) -> Tuple[int, int]:
        correct, wrong = (
            db.query(_correct_sum, _wrong_sum)
            .filter(ProgressRecord.user_id == user_id, ProgressRecord.mode == mode)
            .one()
        )
        return correct or 0, wrong or 0

    def count_by_outcome_and_kind(self, db: Session, *, user_id: int, mode: PracticeModeEnum) -> Dict[TaskKindEnum, Tuple[int, int]]:
        rows = (
            db.query(Task.kind, _correct_sum, _wrong_sum)
            .select_from(ProgressRecord)
            .join(Task, ProgressRecord.task_id == Task.id)
            .filter(ProgressRecord.user_id == user_id, ProgressRecord.mode == mode)
            .group_by(Task.kind)
            .all()
        )
        return {kind: (correct or 0, wrong or 0) for kind, correct, wrong in rows}

    def sum_points_by_user(
        self,
        db: Session,
        *,
        mode: PracticeModeEnum,
        kind: Optional[TaskKindEnum] = None
    ) -> List[Tuple[int, str, int]]:
        query = (
            db.query(
                User.id.label("user_id"),
                User.name.label("name"),
                func.sum(ProgressRecord.earned_points).label("points")
            )
            .join(ProgressRecord, ProgressRecord.user_id == User.id)
            .filter(ProgressRecord.mode == mode)
        )
        if kind:
            query = query.join(Task, ProgressRecord.task_id == Task.id).filter(Task.kind == kind)
        rows = query.group_by(User.id, User.name).all()
        return [(row.user_id, row.name, row.points or 0) for row in rows]


progress = CRUDProgress(ProgressRecord)
