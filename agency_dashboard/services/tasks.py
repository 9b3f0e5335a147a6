"""
Task lifecycle and scoring rules.

Points are derived from priority once, when the task is created. Moving a
task into `Completed` credits the assignee (completedTasks, points, streak)
exactly once per transition; deleting a completed task takes the
completedTasks and points back but leaves the streak alone.
"""
import logging
from enum import Enum

from sqlalchemy import or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm.exc import StaleDataError

from agency_dashboard.errors import Conflict, Forbidden, NotFound, ValidationError
from agency_dashboard.models.choices import Priority, TaskStatus
from agency_dashboard.models.tasks import Task
from agency_dashboard.models.user import User
from agency_dashboard.schemas.task import TaskCreate, TaskUpdate
from agency_dashboard.utils.dates import as_utc, utcnow

logger = logging.getLogger(__name__)

PRIORITY_POINTS = {
    Priority.HIGH.value: 30,
    Priority.MEDIUM.value: 20,
    Priority.LOW.value: 10,
}
DEFAULT_POINTS = 10

_DATETIME_FIELDS = ("deadline", "assigned_at")


def _plain(value):
    return value.value if isinstance(value, Enum) else value


def points_for_priority(priority) -> int:
    return PRIORITY_POINTS.get(_plain(priority), DEFAULT_POINTS)


def can_view(caller: User, task: Task) -> bool:
    return caller.is_admin or task.department == caller.department or task.assigned_to_id == caller.id


def can_modify(caller: User, task: Task) -> bool:
    return caller.is_admin or task.assigned_to_id == caller.id


def can_delete(caller: User, task: Task) -> bool:
    return caller.is_admin or task.assigned_by_id == caller.id


def stamp_lifecycle(task: Task, now=None) -> None:
    """Set startedAt / completedAt on the first entry into each state only."""
    now = now or utcnow()
    if task.status == TaskStatus.IN_PROGRESS.value and task.started_at is None:
        task.started_at = now
    if task.status == TaskStatus.COMPLETED.value and task.completed_at is None:
        task.completed_at = now


async def resolve_assignee(db: AsyncSession, name: str | None = None, user_id: int | None = None) -> User:
    if user_id is not None:
        user = await db.get(User, user_id)
    else:
        result = await db.execute(select(User).filter(User.name == name).order_by(User.id))
        user = result.scalars().first()
    if user is None:
        raise ValidationError("Assigned user not found")
    # the admin profile keeps zero stats, so it never receives tasks
    if user.is_admin:
        raise ValidationError("Tasks cannot be assigned to the admin account")
    return user


async def get_task_by_id(db: AsyncSession, task_id: int) -> Task:
    result = await db.execute(
        select(Task)
        .filter(Task.id == task_id)
        .execution_options(populate_existing=True)
    )
    task = result.scalars().first()
    if not task:
        raise NotFound("Task not found")
    return task


async def get_visible_task(db: AsyncSession, task_id: int, caller: User) -> Task:
    task = await get_task_by_id(db, task_id)
    if not can_view(caller, task):
        raise NotFound("Task not found")
    return task


async def create_task(db: AsyncSession, task_data: TaskCreate, caller: User) -> Task:
    assignee = await resolve_assignee(db, task_data.assigned_to, task_data.assigned_to_id)

    new_task = Task(
        title=task_data.title,
        description=task_data.description,
        department=_plain(task_data.department),
        assigned_by_id=caller.id,
        assigned_to_id=assignee.id,
        deadline=as_utc(task_data.deadline),
        priority=_plain(task_data.priority),
        status=_plain(task_data.status),
        points=points_for_priority(task_data.priority),
        assigned_at=as_utc(task_data.assigned_at) or utcnow(),
    )
    stamp_lifecycle(new_task)

    db.add(new_task)
    await db.commit()
    logger.info("Task %s created by user %s for user %s", new_task.id, caller.id, assignee.id)
    return await get_task_by_id(db, new_task.id)


async def record_completion(db: AsyncSession, user_id: int, points: int) -> None:
    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(
            completed_tasks=User.completed_tasks + 1,
            points=User.points + points,
            streak=User.streak + 1,
        )
        .execution_options(synchronize_session=False)
    )


async def revert_completion(db: AsyncSession, user_id: int, points: int) -> None:
    # streak is intentionally left untouched
    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(
            completed_tasks=User.completed_tasks - 1,
            points=User.points - points,
        )
        .execution_options(synchronize_session=False)
    )


async def update_task(db: AsyncSession, task_id: int, update_data: TaskUpdate, caller: User) -> Task:
    task = await get_task_by_id(db, task_id)

    if not can_modify(caller, task):
        raise Forbidden("Not authorized to update this task")

    old_status = task.status
    changes = update_data.model_dump(exclude_unset=True, exclude_none=True)

    assigned_to = changes.pop("assigned_to", None)
    assigned_to_id = changes.pop("assigned_to_id", None)
    if assigned_to is not None or assigned_to_id is not None:
        assignee = await resolve_assignee(db, assigned_to, assigned_to_id)
        task.assigned_to_id = assignee.id

    for key, value in changes.items():
        if key in _DATETIME_FIELDS:
            value = as_utc(value)
        setattr(task, key, _plain(value))

    if "status" in changes:
        stamp_lifecycle(task)

    try:
        await db.flush()
    except StaleDataError:
        await db.rollback()
        logger.warning("Concurrent update rejected for task %s", task_id)
        raise Conflict()

    if old_status != TaskStatus.COMPLETED.value and task.status == TaskStatus.COMPLETED.value:
        await record_completion(db, task.assigned_to_id, task.points)
        logger.info("Task %s completed; credited %s points to user %s", task.id, task.points, task.assigned_to_id)

    await db.commit()
    return await get_task_by_id(db, task_id)


async def delete_task(db: AsyncSession, task_id: int, caller: User) -> None:
    task = await get_task_by_id(db, task_id)

    if not can_delete(caller, task):
        raise Forbidden(
            "Not authorized to delete this task. Only the person who assigned the task or an admin can delete it."
        )

    if task.status == TaskStatus.COMPLETED.value:
        await revert_completion(db, task.assigned_to_id, task.points)

    await db.delete(task)
    try:
        await db.commit()
    except StaleDataError:
        await db.rollback()
        raise Conflict()
    logger.info("Task %s deleted by user %s", task_id, caller.id)


async def list_tasks(
    db: AsyncSession,
    caller: User,
    department: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    assigned_to: str | None = None,
) -> list[Task]:
    query = select(Task)

    # Non-admins see their department plus whatever is assigned to them
    if not caller.is_admin:
        query = query.filter(or_(Task.department == caller.department, Task.assigned_to_id == caller.id))

    if department:
        query = query.filter(Task.department == _plain(department))
    if status:
        query = query.filter(Task.status == _plain(status))
    if priority:
        query = query.filter(Task.priority == _plain(priority))
    if assigned_to:
        query = query.filter(Task.assignee.has(User.name == assigned_to))

    result = await db.execute(query.order_by(Task.created_at.desc(), Task.id.desc()))
    return result.scalars().all()
