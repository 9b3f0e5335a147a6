import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from agency_dashboard.dependencies import get_db, get_current_user, require_admin
from agency_dashboard.errors import NotFound, ValidationError
from agency_dashboard.models.choices import ClientStatus
from agency_dashboard.models.client import Client as ClientModel
from agency_dashboard.models.user import User as UserModel
from agency_dashboard.schemas.client import (
    Client,
    ClientApproval,
    ClientCreate,
    ClientProfile,
    ClientUpdate,
    OnboardingResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["clients"])


async def _check_employee(db: AsyncSession, user_id: int | None) -> None:
    if user_id is not None and await db.get(UserModel, user_id) is None:
        raise ValidationError("Assigned employee not found")


async def _get_client(db: AsyncSession, client_id: int) -> ClientModel:
    result = await db.execute(
        select(ClientModel)
        .filter(ClientModel.id == client_id)
        .execution_options(populate_existing=True)
    )
    client = result.scalars().first()
    if not client:
        raise NotFound("Client not found")
    return client


def _newest_first(query):
    return query.order_by(ClientModel.created_at.desc(), ClientModel.id.desc())


@router.post("/onboard", response_model=OnboardingResponse, status_code=status.HTTP_201_CREATED)
async def onboard_client(data: ClientProfile, db: AsyncSession = Depends(get_db)):
    client = ClientModel(**data.model_dump(), status=ClientStatus.PENDING.value)
    db.add(client)
    await db.commit()
    await db.refresh(client)
    logger.info("Client onboarding submitted: %s (id=%s)", client.name, client.id)
    return {
        "message": "Thank you for submitting your information! Our team will review and get back to you soon.",
        "client": client,
    }


@router.post("", response_model=Client, status_code=status.HTTP_201_CREATED)
async def create_client(
    data: ClientCreate,
    db: AsyncSession = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    await _check_employee(db, data.assigned_employee_id)
    client = ClientModel(**data.model_dump())
    db.add(client)
    await db.commit()
    return await _get_client(db, client.id)


@router.get("", response_model=list[Client])
async def list_clients(
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    result = await db.execute(_newest_first(select(ClientModel)))
    return result.scalars().all()


@router.get("/pending", response_model=list[Client])
async def list_pending_clients(
    db: AsyncSession = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    result = await db.execute(
        _newest_first(select(ClientModel).filter(ClientModel.status == ClientStatus.PENDING.value))
    )
    return result.scalars().all()


@router.get("/employee/{employee_id}", response_model=list[Client])
async def list_employee_clients(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    result = await db.execute(
        _newest_first(select(ClientModel).filter(ClientModel.assigned_employee_id == employee_id))
    )
    return result.scalars().all()


@router.patch("/{client_id}", response_model=Client)
async def update_client(
    client_id: int,
    data: ClientUpdate,
    db: AsyncSession = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    client = await _get_client(db, client_id)

    update_data = data.model_dump(exclude_unset=True)
    if "assigned_employee_id" in update_data:
        await _check_employee(db, update_data["assigned_employee_id"])
    for key, value in update_data.items():
        if value is None and key in ("name", "status"):
            continue
        setattr(client, key, value)

    await db.commit()
    return await _get_client(db, client_id)


@router.patch("/{client_id}/approve", response_model=Client)
async def approve_client(
    client_id: int,
    data: ClientApproval | None = None,
    db: AsyncSession = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    client = await _get_client(db, client_id)
    employee_id = data.assigned_employee_id if data else None
    await _check_employee(db, employee_id)

    client.status = ClientStatus.APPROVED.value
    client.assigned_employee_id = employee_id
    await db.commit()
    return await _get_client(db, client_id)


@router.patch("/{client_id}/reject", response_model=Client)
async def reject_client(
    client_id: int,
    db: AsyncSession = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    client = await _get_client(db, client_id)
    client.status = ClientStatus.REJECTED.value
    await db.commit()
    return await _get_client(db, client_id)
