from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base

class Exam(Base):
    __tablename__ = "exams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    task_ids = Column(JSON, nullable=False, default=list) # Order is significant
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    results = relationship("ResultRecord", back_populates="exam", passive_deletes=True)

    @property
    def task_count(self) -> int:
        return len(self.task_ids or [])
