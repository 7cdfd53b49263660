from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Float, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import PracticeModeEnum

class ResultRecord(Base):
    __tablename__ = "results"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id", ondelete="CASCADE"), nullable=True, index=True)
    exam_name = Column(String, nullable=True) # Snapshot of the exam name at submission
    mode = Column(Enum(PracticeModeEnum, values_callable=lambda enum: [e.value for e in enum]), nullable=False, default=PracticeModeEnum.STANDARD)
    earned_points = Column(Integer, nullable=False, default=0)
    total_points = Column(Integer, nullable=False, default=0)
    wrong_count = Column(Integer, nullable=False, default=0)
    percent = Column(Float, nullable=False, default=0.0)
    closed_correct = Column(Integer, nullable=False, default=0)
    closed_wrong = Column(Integer, nullable=False, default=0)
    open_correct = Column(Integer, nullable=False, default=0)
    open_wrong = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="results")
    exam = relationship("Exam", back_populates="results")
