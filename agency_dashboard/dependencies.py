from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from agency_dashboard.config import settings
from agency_dashboard.database import get_db as db_session
from agency_dashboard.errors import Forbidden, InvalidToken, Unauthenticated, UnknownPrincipal
from agency_dashboard.models.choices import Role
from agency_dashboard.models.user import User as UserModel
from agency_dashboard.utils.security import decode_access_token

# auto_error is off so a missing header raises our own Unauthenticated
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

def get_db(db: AsyncSession = Depends(db_session)):
    return db


async def get_admin_account(db: AsyncSession) -> UserModel | None:
    result = await db.execute(
        select(UserModel)
        .filter(UserModel.role == Role.ADMIN.value, UserModel.username == settings.ADMIN_USERNAME.lower())
    )
    return result.scalars().first()


async def resolve_principal(db: AsyncSession, subject: str) -> UserModel:
    if subject == settings.ADMIN_LEGACY_SUBJECT:
        user = await get_admin_account(db)
    else:
        try:
            user_id = int(subject)
        except (TypeError, ValueError):
            raise InvalidToken()
        user = await db.get(UserModel, user_id)

    if user is None:
        raise UnknownPrincipal()
    return user


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: str | None = Depends(oauth2_scheme)
) -> UserModel:
    if not token:
        raise Unauthenticated("Access denied. No token provided.")

    payload = decode_access_token(token)
    subject = payload.get("sub")
    if subject is None:
        raise InvalidToken()
    return await resolve_principal(db, str(subject))


async def require_admin(current_user: UserModel = Depends(get_current_user)) -> UserModel:
    if not current_user.is_admin:
        raise Forbidden()
    return current_user
