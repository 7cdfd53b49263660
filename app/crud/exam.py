from sqlalchemy.orm import Session
from typing import List, Optional

from app.crud.base import CRUDBase
from app.models.exam import Exam
from app.schemas.exam import ExamCreate, ExamRename


class CRUDExam(CRUDBase[Exam, ExamCreate, ExamRename]):

    def get_multi(self, db: Session, skip: int = 0, limit: Optional[int] = None) -> List[Exam]:
        query = db.query(Exam).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_by_name(self, db: Session, *, name: str) -> Optional[Exam]:
        return db.query(Exam).filter(Exam.name == name).first()

exam = CRUDExam(Exam)
