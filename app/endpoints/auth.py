from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.models.user import User as UserModel
from app.schemas.response import APIResponse
from app.schemas.token import AuthResponse
from app.schemas.user import User, UserCreate, UserLogin
from app.services.auth import auth_service
from app.utils import deps

router = APIRouter()

@router.post("/register", response_model=APIResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
def register(
    *,
    db: Session = Depends(deps.get_transactional_db),
    user_in: UserCreate
):
    """Create an account and return a bearer token for it."""
    auth = auth_service.register(db, user_in=user_in)
    return APIResponse(message="User registered successfully", data=auth)

@router.post("/login", response_model=APIResponse[AuthResponse])
def login(
    request: UserLogin,
    db: Session = Depends(deps.get_db)
):
    auth = auth_service.login(db, name=request.name, password=request.password)
    return APIResponse(message="Login successful", data=auth)

@router.get("/me", response_model=APIResponse[User])
def read_current_user(current_user: UserModel = Depends(deps.get_current_user)):
    return APIResponse(message="User retrieved successfully", data=User.model_validate(current_user))
