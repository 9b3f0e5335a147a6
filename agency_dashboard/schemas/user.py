from datetime import datetime
from pydantic import Field, field_validator
from agency_dashboard.models.choices import Department, Role
from agency_dashboard.schemas.base import ApiModel
from agency_dashboard.utils.sanitization import sanitize_string


class RegisterRequest(ApiModel):
    name: str = Field(..., min_length=2, max_length=50)
    phone: str = Field(..., min_length=1, max_length=20)
    department: Department
    password: str = Field(..., min_length=6)

    @field_validator("name", "phone", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)

    @field_validator("department")
    @classmethod
    def not_reserved(cls, v):
        if v == Department.ADMIN:
            raise ValueError("Admin department is reserved")
        return v


class LoginRequest(ApiModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ProfileUpdate(ApiModel):
    name: str | None = Field(None, min_length=2, max_length=50)
    department: Department | None = None

    @field_validator("name", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class ProfilePictureUpdate(ApiModel):
    profile_picture: str


class UserResponse(ApiModel):
    id: int
    name: str
    phone: str | None = None
    department: str
    role: Role
    completed_tasks: int = 0
    points: int = 0
    streak: int = 0
    last_login: datetime | None = None
    profile_picture: str = ""
    created_at: datetime | None = None


class EmployeeSummary(ApiModel):
    id: int
    name: str
    department: str


class CurrentUser(ApiModel):
    user: UserResponse


class UserEnvelope(ApiModel):
    message: str
    user: UserResponse


class AuthResponse(ApiModel):
    message: str
    token: str
    user: UserResponse
