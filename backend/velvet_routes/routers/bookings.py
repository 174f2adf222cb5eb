from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from velvet_routes.database import get_db
from velvet_routes.dependencies import get_current_user
from velvet_routes.models.user import User
from velvet_routes.schemas.booking import BookingResponse
from velvet_routes.schemas.common import DataResponse
from velvet_routes.services.booking_service import booking_service

router = APIRouter()


@router.get("", response_model=DataResponse[list[BookingResponse]])
async def list_bookings(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """List the caller's bookings, newest first."""
    bookings = await booking_service.list_bookings(db, user.id)
    return DataResponse(data=[BookingResponse.model_validate(b) for b in bookings])


@router.get("/{booking_id}", response_model=DataResponse[BookingResponse])
async def get_booking(
    booking_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    booking = await booking_service.get_booking(db, user.id, booking_id)
    return DataResponse(data=BookingResponse.model_validate(booking))
