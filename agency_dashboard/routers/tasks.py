from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from agency_dashboard.dependencies import get_db, get_current_user
from agency_dashboard.models.choices import Department, Priority, TaskStatus
from agency_dashboard.models.user import User as UserModel
from agency_dashboard.schemas.base import Message
from agency_dashboard.schemas.task import Task as TaskSchema, TaskCreate, TaskEnvelope, TaskOverview, TaskUpdate
from agency_dashboard.services import analysis
from agency_dashboard.services import tasks as task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskSchema])
async def list_tasks(
    department: Department | None = None,
    status: TaskStatus | None = None,
    priority: Priority | None = None,
    assigned_to: str | None = Query(None, alias="assignedTo"),
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return await task_service.list_tasks(
        db,
        current_user,
        department=department,
        status=status,
        priority=priority,
        assigned_to=assigned_to,
    )


@router.post("", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    task = await task_service.create_task(db, task_data, current_user)
    return {"message": "Task created successfully", "task": task}


@router.get("/stats/overview", response_model=TaskOverview)
async def get_task_overview(
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return await analysis.task_overview(db, current_user)


@router.get("/{task_id}", response_model=TaskSchema)
async def get_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return await task_service.get_visible_task(db, task_id, current_user)


@router.put("/{task_id}", response_model=TaskEnvelope)
async def update_task(
    task_id: int,
    update_data: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    task = await task_service.update_task(db, task_id, update_data, current_user)
    return {"message": "Task updated successfully", "task": task}


@router.delete("/{task_id}", response_model=Message)
async def delete_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    await task_service.delete_task(db, task_id, current_user)
    return {"message": "Task deleted successfully"}
