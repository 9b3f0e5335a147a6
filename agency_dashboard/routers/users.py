from datetime import datetime
from fastapi import APIRouter, Depends, Query
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession
from agency_dashboard.dependencies import get_db, get_current_user, require_admin
from agency_dashboard.models.choices import Department, Role
from agency_dashboard.models.user import User as UserModel
from agency_dashboard.schemas.profile import EmployeeProfile, ProfileStats
from agency_dashboard.schemas.user import UserResponse
from agency_dashboard.services import analysis

router = APIRouter(prefix="/users", tags=["users"])


def _employees():
    return select(UserModel).filter(UserModel.role == Role.EMPLOYEE.value)


@router.get("", response_model=list[UserResponse])
async def list_users(
    department: str | None = None,
    db: AsyncSession = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    query = _employees()
    if department:
        query = query.filter(UserModel.department == department)
    result = await db.execute(query.order_by(UserModel.points.desc(), UserModel.id))
    return result.scalars().all()


@router.get("/departments", response_model=list[str])
async def list_departments():
    return [d.value for d in Department]


@router.get("/all", response_model=list[UserResponse])
async def list_all_employees(
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    result = await db.execute(_employees().order_by(UserModel.points.desc(), UserModel.id))
    return result.scalars().all()


@router.get("/by-department/{department}", response_model=list[UserResponse])
async def list_employees_by_department(
    department: str,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    result = await db.execute(
        _employees()
        .filter(UserModel.department == department)
        .order_by(UserModel.points.desc(), UserModel.id)
    )
    return result.scalars().all()


@router.get("/profile/{user_id}", response_model=EmployeeProfile)
async def get_employee_profile(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return await analysis.employee_profile(db, user_id)


@router.get("/profile/{user_id}/stats", response_model=ProfileStats)
async def get_employee_profile_stats(
    user_id: int,
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return await analysis.profile_stats(db, user_id, start_date, end_date)
