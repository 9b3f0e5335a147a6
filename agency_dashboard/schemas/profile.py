from datetime import datetime
from agency_dashboard.schemas.base import ApiModel
from agency_dashboard.schemas.client import Client
from agency_dashboard.schemas.task import Task
from agency_dashboard.schemas.user import UserResponse


class TaskBreakdown(ApiModel):
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    pending: int = 0
    high_priority: int = 0


class EmployeeProfile(ApiModel):
    user: UserResponse
    clients: list[Client] = []
    tasks: list[Task] = []
    task_stats: TaskBreakdown
    completion_rate: float = 0


class ProfileStats(ApiModel):
    user_id: int
    start_date: datetime | None = None
    end_date: datetime | None = None
    task_stats: TaskBreakdown
    points_earned: int = 0
    completion_rate: float = 0
