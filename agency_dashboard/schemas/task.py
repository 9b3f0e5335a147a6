from pydantic import Field, field_validator, model_validator
from datetime import datetime
from agency_dashboard.models.choices import Department, Priority, TaskStatus
from agency_dashboard.schemas.base import ApiModel
from agency_dashboard.utils.sanitization import sanitize_string


# ── Common base for readable/writeable fields ──
class TaskBase(ApiModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=1000)
    department: Department
    deadline: datetime
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING

    @field_validator("title", "description", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class TaskCreate(TaskBase):
    # assignee by display name or by id; assignedBy and points are never accepted
    assigned_to: str | None = None
    assigned_to_id: int | None = None
    assigned_at: datetime | None = None

    @model_validator(mode="after")
    def require_assignee(self):
        if not self.assigned_to and self.assigned_to_id is None:
            raise ValueError("Assigned to is required")
        return self


class TaskUpdate(ApiModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1, max_length=1000)
    department: Department | None = None
    assigned_to: str | None = None
    assigned_to_id: int | None = None
    deadline: datetime | None = None
    priority: Priority | None = None
    status: TaskStatus | None = None
    assigned_at: datetime | None = None

    @field_validator("title", "description", "assigned_to", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class Task(ApiModel):
    id: int
    title: str
    description: str
    department: str
    assigned_by: str | None = None
    assigned_by_id: int
    assigned_to: str | None = None
    assigned_to_id: int
    deadline: datetime
    priority: str
    status: str
    points: int
    assigned_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TaskEnvelope(ApiModel):
    message: str
    task: Task


class TaskOverview(ApiModel):
    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    in_progress_tasks: int = 0
    high_priority_tasks: int = 0
