from datetime import datetime, timedelta
from sqlalchemy import case, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from agency_dashboard.errors import NotFound
from agency_dashboard.models.choices import Priority, Role, TaskStatus
from agency_dashboard.models.client import Client
from agency_dashboard.models.tasks import Task
from agency_dashboard.models.user import User
from agency_dashboard.schemas.profile import EmployeeProfile, ProfileStats, TaskBreakdown
from agency_dashboard.schemas.task import TaskOverview
from agency_dashboard.schemas.user import UserResponse
from agency_dashboard.utils.dates import as_utc, utcnow

LEADERBOARD_WINDOWS = {
    "week": timedelta(days=7),
    "month": timedelta(days=30),
}


def _count_where(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


async def task_breakdown(db: AsyncSession, *filters) -> TaskBreakdown:
    result = await db.execute(
        select(
            func.count(Task.id),
            _count_where(Task.status == TaskStatus.COMPLETED.value),
            _count_where(Task.status == TaskStatus.IN_PROGRESS.value),
            _count_where(Task.status == TaskStatus.PENDING.value),
            _count_where(Task.priority == Priority.HIGH.value),
        ).filter(*filters)
    )
    total, completed, in_progress, pending, high = result.one()
    return TaskBreakdown(
        total=total,
        completed=completed,
        in_progress=in_progress,
        pending=pending,
        high_priority=high,
    )


def completion_rate(stats: TaskBreakdown) -> float:
    if not stats.total:
        return 0
    return round(stats.completed / stats.total * 100, 1)


async def task_overview(db: AsyncSession, caller: User) -> TaskOverview:
    filters = [] if caller.is_admin else [Task.department == caller.department]
    stats = await task_breakdown(db, *filters)
    return TaskOverview(
        total_tasks=stats.total,
        completed_tasks=stats.completed,
        pending_tasks=stats.pending,
        in_progress_tasks=stats.in_progress,
        high_priority_tasks=stats.high_priority,
    )


def rank_employees(employees, totals: dict[int, tuple[int, int]]) -> list[UserResponse]:
    """
    Overlay per-window totals on every employee and order by points.

    `totals` maps user id to (completed count, points). Employees with no
    entry score zero. The sort is stable, so ties keep the input order.
    """
    board = []
    for user in employees:
        completed, points = totals.get(user.id, (0, 0))
        entry = UserResponse.model_validate(user).model_copy(
            update={"completed_tasks": completed, "points": points}
        )
        board.append(entry)
    board.sort(key=lambda e: e.points, reverse=True)
    return board


async def leaderboard(db: AsyncSession, time_filter: str = "all", now: datetime | None = None) -> list[UserResponse]:
    query = (
        select(
            Task.assigned_to_id,
            func.count(Task.id),
            func.coalesce(func.sum(Task.points), 0),
        )
        .filter(Task.status == TaskStatus.COMPLETED.value)
        .group_by(Task.assigned_to_id)
    )
    window = LEADERBOARD_WINDOWS.get(time_filter)
    if window is not None:
        query = query.filter(Task.completed_at >= (now or utcnow()) - window)

    result = await db.execute(query)
    totals = {user_id: (completed, points) for user_id, completed, points in result.all()}

    result = await db.execute(
        select(User).filter(User.role == Role.EMPLOYEE.value).order_by(User.id)
    )
    return rank_employees(result.scalars().all(), totals)


async def get_user_or_404(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


async def employee_profile(db: AsyncSession, user_id: int) -> EmployeeProfile:
    user = await get_user_or_404(db, user_id)

    result = await db.execute(
        select(Client).filter(Client.assigned_employee_id == user.id).order_by(Client.created_at.desc(), Client.id.desc())
    )
    clients = result.scalars().all()

    result = await db.execute(
        select(Task).filter(Task.assigned_to_id == user.id).order_by(Task.created_at.desc(), Task.id.desc())
    )
    tasks = result.scalars().all()

    stats = TaskBreakdown(
        total=len(tasks),
        completed=sum(1 for t in tasks if t.status == TaskStatus.COMPLETED.value),
        in_progress=sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS.value),
        pending=sum(1 for t in tasks if t.status == TaskStatus.PENDING.value),
        high_priority=sum(1 for t in tasks if t.priority == Priority.HIGH.value),
    )
    return EmployeeProfile.model_validate(
        {
            "user": user,
            "clients": clients,
            "tasks": tasks,
            "task_stats": stats,
            "completion_rate": completion_rate(stats),
        },
        from_attributes=True,
    )


async def profile_stats(
    db: AsyncSession,
    user_id: int,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> ProfileStats:
    """Task counts by assignedAt window and points by completedAt window, both bounds inclusive."""
    user = await get_user_or_404(db, user_id)
    start_date, end_date = as_utc(start_date), as_utc(end_date)

    assigned_filters = [Task.assigned_to_id == user.id]
    completed_filters = [Task.assigned_to_id == user.id, Task.status == TaskStatus.COMPLETED.value]
    if start_date:
        assigned_filters.append(Task.assigned_at >= start_date)
        completed_filters.append(Task.completed_at >= start_date)
    if end_date:
        assigned_filters.append(Task.assigned_at <= end_date)
        completed_filters.append(Task.completed_at <= end_date)

    stats = await task_breakdown(db, *assigned_filters)
    result = await db.execute(select(func.coalesce(func.sum(Task.points), 0)).filter(*completed_filters))
    points_earned = result.scalar_one()

    return ProfileStats(
        user_id=user.id,
        start_date=start_date,
        end_date=end_date,
        task_stats=stats,
        points_earned=points_earned,
        completion_rate=completion_rate(stats),
    )
