import logging
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from agency_dashboard.config import settings
from agency_dashboard.dependencies import get_admin_account
from agency_dashboard.errors import InvalidCredentials, ValidationError
from agency_dashboard.models.choices import Department, Role
from agency_dashboard.models.user import User
from agency_dashboard.schemas.user import RegisterRequest
from agency_dashboard.utils.dates import utcnow
from agency_dashboard.utils.security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)

DUPLICATE_PHONE = "User already exists with this phone number"


def issue_token(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "role": user.role})


async def ensure_admin_account(db: AsyncSession) -> User:
    """
    Provision the configured admin account into the user table if it is missing.

    The row is keyed on the unique admin username, so concurrent workers
    starting up together end with exactly one admin. An existing row gets
    the configured password re-applied when it no longer matches.
    """
    admin = await get_admin_account(db)
    if admin is None:
        admin = User(
            name=settings.ADMIN_DISPLAY_NAME,
            username=settings.ADMIN_USERNAME.lower(),
            department=Department.ADMIN.value,
            role=Role.ADMIN.value,
            hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
        )
        db.add(admin)
        try:
            await db.commit()
        except IntegrityError:
            # another worker provisioned it first
            await db.rollback()
            admin = await get_admin_account(db)
        else:
            await db.refresh(admin)
            logger.info("Provisioned admin account '%s' (id=%s)", admin.name, admin.id)
            return admin

    if not verify_password(settings.ADMIN_PASSWORD, admin.hashed_password):
        admin.hashed_password = get_password_hash(settings.ADMIN_PASSWORD)
        await db.commit()
        await db.refresh(admin)
        logger.info("Re-applied configured password to admin account %s", admin.id)
    return admin


async def register_employee(db: AsyncSession, data: RegisterRequest) -> User:
    result = await db.execute(select(User).filter(User.phone == data.phone))
    if result.scalars().first():
        raise ValidationError(DUPLICATE_PHONE)

    user = User(
        name=data.name,
        phone=data.phone,
        department=data.department,
        role=Role.EMPLOYEE.value,
        hashed_password=get_password_hash(data.password),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # lost a race against another registration with the same phone
        await db.rollback()
        raise ValidationError(DUPLICATE_PHONE)
    await db.refresh(user)
    logger.info("Registered employee %s in %s", user.id, user.department)
    return user


async def authenticate(db: AsyncSession, username: str, password: str) -> User:
    if username.lower() == settings.ADMIN_USERNAME.lower():
        user = await get_admin_account(db)
    else:
        result = await db.execute(
            select(User).filter(or_(User.name == username, User.phone == username)).order_by(User.id)
        )
        user = result.scalars().first()

    if not user or not verify_password(password, user.hashed_password):
        raise InvalidCredentials()

    user.last_login = utcnow()
    await db.commit()
    await db.refresh(user)
    return user
