from fastapi import APIRouter, Depends, status
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from agency_dashboard.dependencies import get_db, get_current_user, require_admin
from agency_dashboard.errors import NotFound
from agency_dashboard.models.announcement import Announcement as AnnouncementModel
from agency_dashboard.models.user import User as UserModel
from agency_dashboard.schemas.announcement import (
    Announcement,
    AnnouncementCreate,
    AnnouncementEnvelope,
    AnnouncementUpdate,
)
from agency_dashboard.schemas.base import Message
from agency_dashboard.utils.dates import as_utc, utcnow

router = APIRouter(prefix="/announcements", tags=["announcements"])

FEED_LIMIT = 20


async def _get_or_404(db: AsyncSession, announcement_id: int) -> AnnouncementModel:
    announcement = await db.get(AnnouncementModel, announcement_id)
    if not announcement:
        raise NotFound("Announcement not found")
    return announcement


@router.get("", response_model=list[Announcement])
async def list_announcements(
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    result = await db.execute(
        select(AnnouncementModel)
        .filter(
            AnnouncementModel.is_active == True,
            or_(AnnouncementModel.expires_at.is_(None), AnnouncementModel.expires_at > utcnow()),
        )
        .order_by(AnnouncementModel.created_at.desc(), AnnouncementModel.id.desc())
        .limit(FEED_LIMIT)
    )
    return result.scalars().all()


@router.post("", response_model=AnnouncementEnvelope, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    data: AnnouncementCreate,
    db: AsyncSession = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    announcement = AnnouncementModel(
        title=data.title,
        message=data.message,
        author=admin.name,
        priority=data.priority,
        is_active=data.is_active,
        expires_at=as_utc(data.expires_at),
    )
    db.add(announcement)
    await db.commit()
    await db.refresh(announcement)
    return {"message": "Announcement created successfully", "announcement": announcement}


@router.put("/{announcement_id}", response_model=AnnouncementEnvelope)
async def update_announcement(
    announcement_id: int,
    data: AnnouncementUpdate,
    db: AsyncSession = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    announcement = await _get_or_404(db, announcement_id)

    update_data = data.model_dump(exclude_unset=True)
    if "expires_at" in update_data:
        update_data["expires_at"] = as_utc(update_data["expires_at"])
    for key, value in update_data.items():
        if value is None and key != "expires_at":
            continue
        setattr(announcement, key, value)

    await db.commit()
    await db.refresh(announcement)
    return {"message": "Announcement updated successfully", "announcement": announcement}


@router.delete("/{announcement_id}", response_model=Message)
async def delete_announcement(
    announcement_id: int,
    db: AsyncSession = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    announcement = await _get_or_404(db, announcement_id)
    await db.delete(announcement)
    await db.commit()
    return {"message": "Announcement deleted successfully"}
