from sqlalchemy import Column, Integer, String, DateTime, Enum, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import TaskKindEnum

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(Enum(TaskKindEnum, values_callable=lambda enum: [e.value for e in enum]), nullable=False, index=True)
    prompt_ref = Column(String, nullable=False) # Usually an image URL
    correct_answer = Column(String, nullable=False)
    options = Column(JSON, nullable=True) # Ordered option strings, closed tasks only
    points = Column(Integer, nullable=False, default=1)
    sheet_tag = Column(String, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    progress_records = relationship("ProgressRecord", back_populates="task", passive_deletes=True)
