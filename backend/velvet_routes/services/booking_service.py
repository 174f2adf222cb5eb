"""Booking finalizer: turns a hotel selection into an immutable booking record."""

import logging
import secrets
import string
import time
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from velvet_routes.config import settings
from velvet_routes.database import utcnow
from velvet_routes.exceptions import BookingIdCollisionError, NotFoundError
from velvet_routes.models.booking import Booking
from velvet_routes.models.user import User

logger = logging.getLogger(__name__)

_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits
_SUFFIX_LENGTH = 5


def generate_booking_id() -> str:
    """e.g. 'VR1718000000000K3Q9Z': prefix, epoch millis, random suffix."""
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{settings.booking_id_prefix}{int(time.time() * 1000)}{suffix}"


class BookingService:
    """Creates bookings and keeps the user's denormalized booking list.

    Bookings are confirmed and marked paid on creation; confirmation is not
    gated on a succeeded payment.
    """

    async def _free_booking_id(self, db: AsyncSession) -> str:
        for attempt in range(settings.booking_id_max_attempts):
            candidate = generate_booking_id()
            existing = await db.execute(select(Booking.id).where(Booking.booking_id == candidate))
            if existing.scalar_one_or_none() is None:
                return candidate
            logger.warning(f"Booking id {candidate} already taken (attempt {attempt + 1})")
        raise BookingIdCollisionError("Could not allocate a booking id, please retry")

    async def finalize_booking(
        self,
        db: AsyncSession,
        user: User,
        *,
        hotel_id: str,
        hotel_name: str | None = None,
        destination: str | None = None,
        check_in: date | None = None,
        check_out: date | None = None,
        guests: dict | None = None,
        traveler_info: dict | None = None,
        total_cost: float | None = None,
    ) -> Booking:
        booking_id = await self._free_booking_id(db)
        now = utcnow()

        booking = Booking(
            user_id=user.id,
            booking_id=booking_id,
            hotel_id=hotel_id,
            hotel_name=hotel_name,
            destination=destination,
            check_in=check_in,
            check_out=check_out,
            guests=guests,
            traveler_info=traveler_info,
            total_cost=Decimal(str(total_cost)) if total_cost is not None else None,
            status="confirmed",
            payment_status="completed",
            created_at=now,
        )
        db.add(booking)

        summary = {
            "bookingId": booking_id,
            "destination": destination,
            "dates": {
                "checkIn": check_in.isoformat() if check_in else None,
                "checkOut": check_out.isoformat() if check_out else None,
            },
            "hotel": {"hotelId": hotel_id, "hotelName": hotel_name},
            "totalCost": total_cost,
            "status": booking.status,
            "createdAt": now.isoformat(),
        }
        # JSON columns only persist on reassignment
        user.bookings = [*(user.bookings or []), summary]

        # Booking row and profile summary commit together
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.error(f"Booking insert failed for user {user.id}: {e}")
            raise BookingIdCollisionError("Booking could not be saved, please retry")

        logger.info(f"Booking {booking_id} confirmed for user {user.id} at hotel {hotel_id}")
        return booking

    async def list_bookings(self, db: AsyncSession, user_id: uuid.UUID) -> list[Booking]:
        result = await db.execute(
            select(Booking).where(Booking.user_id == user_id).order_by(Booking.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_booking(self, db: AsyncSession, user_id: uuid.UUID, booking_id: str) -> Booking:
        result = await db.execute(
            select(Booking).where(Booking.booking_id == booking_id, Booking.user_id == user_id)
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking not found")
        return booking


booking_service = BookingService()
