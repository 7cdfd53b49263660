import logging
from datetime import timedelta
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from jose import JWTError
from pydantic import ValidationError

from app.core.config import settings
from app.core.constants import RoleEnum
from app.core.security import create_access_token, decode_access_token, get_password_hash, verify_password
from app.crud.user import user as crud_user
from app.models.user import User
from app.schemas.token import AuthResponse, Token, TokenPayload
from app.schemas.user import UserCreate, User as UserSchema

logger = logging.getLogger(__name__)


class AuthService:
    def _role_for_name(self, name: str) -> RoleEnum:
        admin_names = {n.lower() for n in settings.ADMIN_USERNAMES}
        return RoleEnum.ADMIN if name.lower() in admin_names else RoleEnum.USER

    def issue_token(self, user: User) -> Token:
        if user.role == RoleEnum.ADMIN:
            expires = timedelta(minutes=settings.ADMIN_TOKEN_EXPIRE_MINUTES)
        else:
            expires = timedelta(days=settings.USER_TOKEN_EXPIRE_DAYS)
        role = user.role.value if isinstance(user.role, RoleEnum) else user.role
        access_token = create_access_token(
            data={"user_id": user.id, "role": role},
            subject=user.name,
            expires_delta=expires
        )
        return Token(access_token=access_token, token_type="bearer")

    def verify_token(self, token: str) -> TokenPayload:
        try:
            payload = decode_access_token(token)
            return TokenPayload(**payload)
        except JWTError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Could not validate credentials",
            )
        except ValidationError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token payload",
            )

    def register(self, db: Session, *, user_in: UserCreate) -> AuthResponse:
        if crud_user.get_by_name(db, name=user_in.name):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A user with this name already exists."
            )

        try:
            new_user = crud_user.create(db, obj_in={
                "name": user_in.name,
                "hashed_password": get_password_hash(user_in.password),
                "role": self._role_for_name(user_in.name)
            })
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A user with this name already exists."
            )

        logger.info(f"Registered user {new_user.id} ({new_user.role.value})")
        return AuthResponse(token=self.issue_token(new_user), user=UserSchema.model_validate(new_user))

    def login(self, db: Session, *, name: str, password: str) -> AuthResponse:
        user = crud_user.get_by_name(db, name=name)
        if not user or not verify_password(password, user.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect name or password",
            )
        return AuthResponse(token=self.issue_token(user), user=UserSchema.model_validate(user))


auth_service = AuthService()
