from sqlalchemy import Column, Integer, DateTime, ForeignKey, Boolean, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import PracticeModeEnum

class ProgressRecord(Base):
    __tablename__ = "progress_records"
    __table_args__ = (
        UniqueConstraint("user_id", "task_id", "mode", name="uq_progress_user_task_mode"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    mode = Column(Enum(PracticeModeEnum, values_callable=lambda enum: [e.value for e in enum]), nullable=False)
    is_correct = Column(Boolean, nullable=False)
    earned_points = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="progress_records")
    task = relationship("Task", back_populates="progress_records")
