"""Hotel booking router: finalizes the selected hotel into a booking."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from velvet_routes.database import get_db
from velvet_routes.dependencies import get_current_user
from velvet_routes.models.user import User
from velvet_routes.schemas.booking import BookHotelRequest, BookingConfirmation
from velvet_routes.schemas.common import DataResponse
from velvet_routes.services.booking_service import booking_service

router = APIRouter()


@router.post("/book", response_model=DataResponse[BookingConfirmation])
async def book_hotel(
    req: BookHotelRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    booking = await booking_service.finalize_booking(
        db,
        user,
        hotel_id=req.hotel_id,
        hotel_name=req.hotel_name,
        destination=req.destination,
        check_in=req.check_in,
        check_out=req.check_out,
        guests=req.guests,
        traveler_info=req.traveler_info,
        total_cost=req.total_cost,
    )
    return DataResponse(data=BookingConfirmation(booking_id=booking.booking_id, status=booking.status))
