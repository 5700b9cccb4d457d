"""Hall inventory endpoints."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hallbook.api.deps import get_db, require_hall_manager
from hallbook.core.exceptions import HallInUse, ValidationError
from hallbook.models.hall import Hall
from hallbook.models.user import User
from hallbook.schemas.hall import HallCreate, HallResponse, HallType, HallUpdate
from hallbook.services.booking_service import booking_service

logger = logging.getLogger(__name__)

router = APIRouter()


async def _ensure_unique(
    db: AsyncSession, name: str | None, hall_number: str | None, exclude_id: UUID | None = None
) -> None:
    """Reject a name or hall number already used by another hall."""
    conditions = []
    if name:
        conditions.append(Hall.name == name)
    if hall_number:
        conditions.append(Hall.hall_number == hall_number)
    if not conditions:
        return

    query = select(Hall).where(or_(*conditions))
    if exclude_id is not None:
        query = query.where(Hall.id != exclude_id)
    result = await db.execute(query.limit(1))
    if result.scalar_one_or_none():
        raise ValidationError("Hall with this name or hall number already exists")


@router.get("/", response_model=list[HallResponse])
async def list_halls(
    db: Annotated[AsyncSession, Depends(get_db)],
    is_available: bool | None = Query(default=None),
    hall_type: HallType | None = Query(default=None, alias="type"),
    building: str | None = Query(default=None, max_length=100),
    min_capacity: int | None = Query(default=None, ge=1),
) -> list[Hall]:
    """List halls, optionally filtered."""
    query = select(Hall)
    if is_available is not None:
        query = query.where(Hall.is_available == is_available)
    if hall_type:
        query = query.where(Hall.type == hall_type)
    if building:
        query = query.where(Hall.building.ilike(f"%{building}%"))
    if min_capacity:
        query = query.where(Hall.capacity >= min_capacity)

    query = query.order_by(Hall.building, Hall.floor, Hall.hall_number)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.get("/{hall_id}", response_model=HallResponse)
async def get_hall(
    hall_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Hall:
    """Get a hall by ID."""
    return await booking_service.get_hall(db, hall_id)


@router.post("/", response_model=HallResponse, status_code=status.HTTP_201_CREATED)
async def create_hall(
    hall_data: HallCreate,
    current_user: Annotated[User, Depends(require_hall_manager)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Hall:
    """Create a hall (admin only)."""
    await _ensure_unique(db, hall_data.name, hall_data.hall_number)

    hall = Hall(**hall_data.model_dump())
    db.add(hall)
    await db.flush()
    await db.refresh(hall)

    logger.info(f"Hall {hall.id} ({hall.name}) created by {current_user.id}")
    return hall


@router.put("/{hall_id}", response_model=HallResponse)
async def update_hall(
    hall_id: UUID,
    hall_data: HallUpdate,
    current_user: Annotated[User, Depends(require_hall_manager)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Hall:
    """Update a hall (admin only)."""
    hall = await booking_service.get_hall(db, hall_id)

    # Only description may be cleared with an explicit null
    changes = {
        k: v
        for k, v in hall_data.model_dump(exclude_unset=True).items()
        if v is not None or k == "description"
    }
    await _ensure_unique(db, changes.get("name"), changes.get("hall_number"), exclude_id=hall.id)

    for field, value in changes.items():
        setattr(hall, field, value)

    await db.flush()
    await db.refresh(hall)

    logger.info(f"Hall {hall.id} updated by {current_user.id}: {sorted(changes)}")
    return hall


@router.delete("/{hall_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_hall(
    hall_id: UUID,
    current_user: Annotated[User, Depends(require_hall_manager)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    """Delete a hall (admin only).

    Refused while pending or approved bookings remain for today or later;
    otherwise the hall goes together with its historical bookings.
    """
    hall = await booking_service.get_hall(db, hall_id)

    active = await booking_service.count_upcoming_active(db, hall.id)
    if active:
        raise HallInUse(active)

    await db.delete(hall)
    await db.flush()

    logger.info(f"Hall {hall_id} deleted by {current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
