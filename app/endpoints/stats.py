from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.constants import LeaderboardKindEnum
from app.models.user import User
from app.schemas.response import APIResponse
from app.schemas.stats import LeaderboardResponse, StatsSummary
from app.services.stats import stats_service
from app.utils import deps

router = APIRouter()

@router.get("/summary", response_model=APIResponse[StatsSummary])
def get_summary(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user)
):
    summary = stats_service.get_summary(db, current_user=current_user)
    return APIResponse(message="Stats retrieved successfully", data=summary)


@router.get("/leaderboard", response_model=APIResponse[LeaderboardResponse])
def get_leaderboard(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    kind: LeaderboardKindEnum = Query(LeaderboardKindEnum.ALL)
):
    leaderboard = stats_service.get_leaderboard(db, kind=kind)
    return APIResponse(message="Leaderboard retrieved successfully", data=leaderboard)
