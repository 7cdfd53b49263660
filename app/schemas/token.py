from pydantic import BaseModel
from app.core.constants import RoleEnum
from .user import User

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class TokenPayload(BaseModel):
    user_id: int
    sub: str | None = None
    role: RoleEnum = RoleEnum.USER
    jti: str | None = None
    exp: int | None = None

class AuthResponse(BaseModel):
    """Response for the register and login endpoints."""
    token: Token
    user: User
