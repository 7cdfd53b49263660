from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.constants import PracticeModeEnum
from app.models.user import User
from app.schemas.progress import ProgressRecord, ProgressReset, ProgressResetResult, ProgressSubmit, ProgressSummary
from app.schemas.response import APIResponse
from app.services.progress import progress_service
from app.utils import deps

router = APIRouter()

@router.post("/", response_model=APIResponse[ProgressRecord])
def submit_progress(
    *,
    db: Session = Depends(deps.get_transactional_db),
    progress_in: ProgressSubmit,
    current_user: User = Depends(deps.get_current_user)
):
    """Record the outcome of one task. Resubmitting overwrites the earlier outcome."""
    record = progress_service.submit_outcome(db, progress_in=progress_in, current_user=current_user)
    return APIResponse(message="Progress saved", data=ProgressRecord.model_validate(record))


@router.post("/reset", response_model=APIResponse[ProgressResetResult])
def reset_progress(
    *,
    db: Session = Depends(deps.get_transactional_db),
    reset_in: ProgressReset,
    current_user: User = Depends(deps.get_current_user)
):
    result = progress_service.reset_progress(db, mode=reset_in.mode, current_user=current_user)
    return APIResponse(message="Progress reset", data=result)


@router.get("/summary", response_model=APIResponse[ProgressSummary])
def get_progress_summary(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    mode: PracticeModeEnum = Query(PracticeModeEnum.STANDARD)
):
    summary = progress_service.get_summary(db, mode=mode, current_user=current_user)
    return APIResponse(message="Progress summary retrieved successfully", data=summary)
