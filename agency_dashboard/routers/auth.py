from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from agency_dashboard.dependencies import get_db, get_current_user
from agency_dashboard.errors import ValidationError
from agency_dashboard.models.user import User as UserModel
from agency_dashboard.schemas.user import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    ProfilePictureUpdate,
    ProfileUpdate,
    RegisterRequest,
    UserEnvelope,
)
from agency_dashboard.services import accounts
from agency_dashboard.utils.sanitization import is_image_data_url

router = APIRouter(prefix="/auth", tags=["auth"])

# ~5MB once base64-decoded
MAX_PICTURE_LENGTH = 6_670_000


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    user = await accounts.register_employee(db, data)
    return {
        "message": "User registered successfully",
        "token": accounts.issue_token(user),
        "user": user,
    }


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await accounts.authenticate(db, data.username, data.password)
    return {
        "message": "Admin login successful" if user.is_admin else "Login successful",
        "token": accounts.issue_token(user),
        "user": user,
    }


@router.get("/me", response_model=CurrentUser)
async def get_me(current_user: UserModel = Depends(get_current_user)):
    return {"user": current_user}


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    if data.name:
        current_user.name = data.name
    # Department changes from non-admins are ignored
    if data.department and current_user.is_admin:
        current_user.department = data.department

    await db.commit()
    await db.refresh(current_user)
    return {"message": "Profile updated successfully", "user": current_user}


@router.put("/profile-picture", response_model=UserEnvelope)
async def update_profile_picture(
    data: ProfilePictureUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    if not data.profile_picture:
        raise ValidationError("Profile picture data is required")
    if not is_image_data_url(data.profile_picture):
        raise ValidationError("Invalid image format. Must be a base64 encoded image")
    if len(data.profile_picture) > MAX_PICTURE_LENGTH:
        raise ValidationError("Image too large. Maximum size is 5MB")

    current_user.profile_picture = data.profile_picture
    await db.commit()
    await db.refresh(current_user)
    return {"message": "Profile picture updated successfully", "user": current_user}
