"""Booking endpoints."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core.config import get_settings
from app.schemas.booking import BookingCreate, BookingRead
from app.services import booking_service
from app.services.errors import BookingError, NotFoundError

settings = get_settings()

router = APIRouter(prefix="/bookings", tags=["bookings"])

_BOOKING_RATE_DEP = deps.rate_limit(settings.rate_limit_booking, fallback=(20, 60))


@router.post(
    "",
    response_model=BookingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create booking",
    dependencies=[_BOOKING_RATE_DEP],
)
async def create_booking(
    payload: BookingCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> BookingRead:
    """Re-price the order server-side and persist it."""
    try:
        booking = await booking_service.create_booking(session, payload)
    except BookingError as exc:
        raise deps.booking_http_error(exc) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return BookingRead.model_validate(booking)


@router.get("", response_model=list[BookingRead], summary="List bookings")
async def list_bookings(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    showtime_id: UUID | None = None,
    member_id: UUID | None = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> list[BookingRead]:
    bookings = await booking_service.list_bookings(
        session, showtime_id=showtime_id, member_id=member_id, limit=limit
    )
    return [BookingRead.model_validate(booking) for booking in bookings]


@router.get("/{booking_id}", response_model=BookingRead, summary="Get booking")
async def get_booking(
    booking_id: UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> BookingRead:
    booking = await booking_service.get_booking(session, booking_id)
    if booking is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found"
        )
    return BookingRead.model_validate(booking)
