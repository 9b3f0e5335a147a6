from typing import Literal
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from agency_dashboard.dependencies import get_db, get_current_user
from agency_dashboard.models.user import User as UserModel
from agency_dashboard.schemas.user import UserResponse
from agency_dashboard.services import analysis

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=list[UserResponse])
async def get_leaderboard(
    time_filter: Literal["all", "week", "month"] = Query("all", alias="timeFilter"),
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return await analysis.leaderboard(db, time_filter)
