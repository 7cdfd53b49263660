from sqlalchemy import Column, String, Integer, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import RoleEnum

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(RoleEnum, values_callable=lambda enum: [e.value for e in enum]), nullable=False, default=RoleEnum.USER)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    progress_records = relationship("ProgressRecord", back_populates="user", cascade="all, delete-orphan")
    results = relationship("ResultRecord", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == RoleEnum.ADMIN
