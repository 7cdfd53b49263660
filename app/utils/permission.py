from fastapi import HTTPException, status

from app.core.constants import RoleEnum
from app.models.user import User


class PermissionHelper:
    @staticmethod
    def is_admin(user: User) -> bool:
        return user.role == RoleEnum.ADMIN

    @staticmethod
    def require_admin(user: User, message: str = "Only administrators can perform this action."):
        if not PermissionHelper.is_admin(user):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)
