from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.models.user import User
from app.schemas.response import APIResponse
from app.schemas.result import ExamResultCreate, ResultRecord
from app.services.result import result_service
from app.utils import deps

router = APIRouter()

@router.post("/", response_model=APIResponse[ResultRecord], status_code=status.HTTP_201_CREATED)
def submit_result(
    *,
    db: Session = Depends(deps.get_transactional_db),
    result_in: ExamResultCreate,
    current_user: User = Depends(deps.get_current_user)
):
    result = result_service.submit_final_score(db, result_in=result_in, current_user=current_user)
    return APIResponse(message="Result saved", data=ResultRecord.model_validate(result))


@router.get("/", response_model=APIResponse[List[ResultRecord]])
def list_results(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user)
):
    results = result_service.list_results(db, current_user=current_user)
    return APIResponse(message="Results retrieved successfully", data=[ResultRecord.model_validate(r) for r in results])
