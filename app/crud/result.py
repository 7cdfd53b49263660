from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Tuple

from app.crud.base import CRUDBase
from app.models.result import ResultRecord
from app.schemas.result import ExamResultBase


class CRUDResult(CRUDBase[ResultRecord, ExamResultBase, ExamResultBase]):

    def get_all_by_user(self, db: Session, user_id: int) -> List[ResultRecord]:
        return (
            db.query(ResultRecord)
            .filter(ResultRecord.user_id == user_id)
            .order_by(ResultRecord.created_at.desc(), ResultRecord.id.desc())
            .all()
        )

    def delete_by_exam(self, db: Session, exam_id: int) -> int:
        return (
            db.query(ResultRecord)
            .filter(ResultRecord.exam_id == exam_id)
            .delete(synchronize_session=False)
        )

    def get_user_percent_stats(self, db: Session, user_id: int) -> Tuple[int, float, float]:
        count, average, best = (
            db.query(
                func.count(ResultRecord.id),
                func.avg(ResultRecord.percent),
                func.max(ResultRecord.percent)
            )
            .filter(ResultRecord.user_id == user_id)
            .one()
        )
        return count or 0, round(average, 2) if average else 0.0, best or 0.0

    def get_all_percents(self, db: Session) -> List[Tuple[int, float]]:
        return db.query(ResultRecord.user_id, ResultRecord.percent).all()


result = CRUDResult(ResultRecord)
