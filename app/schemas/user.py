from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional
from datetime import datetime

from app.core.constants import RoleEnum

class UserBase(BaseModel):
    name: str

class UserCreate(UserBase):
    """Schema for registering a new user, includes password."""
    password: str

    @field_validator("name")
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Name cannot be empty or contain only whitespace.")
        return v.strip()

    @field_validator("password")
    def validate_password(cls, v):
        if not v or not v.strip():
            raise ValueError("Password cannot be empty or contain only whitespace.")
        if len(v) < 4:
            raise ValueError("Password must be at least 4 characters long.")
        return v

class UserLogin(BaseModel):
    name: str
    password: str

class User(UserBase):
    id: int
    role: RoleEnum
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
