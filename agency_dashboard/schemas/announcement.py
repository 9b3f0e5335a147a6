from datetime import datetime
from pydantic import Field, field_validator
from agency_dashboard.models.choices import Priority
from agency_dashboard.schemas.base import ApiModel
from agency_dashboard.utils.sanitization import sanitize_string


class AnnouncementCreate(ApiModel):
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=1000)
    priority: Priority = Priority.MEDIUM
    is_active: bool = True
    expires_at: datetime | None = None

    @field_validator("title", "message", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class AnnouncementUpdate(ApiModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    message: str | None = Field(None, min_length=1, max_length=1000)
    priority: Priority | None = None
    is_active: bool | None = None
    expires_at: datetime | None = None

    @field_validator("title", "message", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class Announcement(ApiModel):
    id: int
    title: str
    message: str
    author: str
    priority: str
    is_active: bool
    expires_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AnnouncementEnvelope(ApiModel):
    message: str
    announcement: Announcement
