"""Sharing service: expiring trip snapshots and their comments."""

import logging
import uuid
from datetime import timedelta

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from velvet_routes.config import settings
from velvet_routes.database import utcnow
from velvet_routes.exceptions import NotFoundError
from velvet_routes.models.sharing import SharedTrip, TripComment
from velvet_routes.models.user import User

logger = logging.getLogger(__name__)


class SharingService:
    """Publishes read-only trip snapshots under random share ids."""

    def share_link(self, share_id: str) -> str:
        return f"{settings.share_base_url.rstrip('/')}/pages/itinerary-planner.html?share={share_id}"

    async def share_trip(self, db: AsyncSession, user_id: uuid.UUID, trip_data: dict) -> SharedTrip:
        now = utcnow()
        shared = SharedTrip(
            id=f"trip_{uuid.uuid4().hex}",
            user_id=user_id,
            trip_data=trip_data,
            created_at=now,
            expires_at=now + timedelta(days=settings.share_expiry_days),
        )
        db.add(shared)
        await db.commit()

        logger.info(f"User {user_id} shared trip {shared.id}")
        return shared

    async def get_shared_trip(self, db: AsyncSession, share_id: str) -> SharedTrip:
        result = await db.execute(
            select(SharedTrip).where(
                SharedTrip.id == share_id,
                or_(SharedTrip.expires_at.is_(None), SharedTrip.expires_at > utcnow()),
            )
        )
        shared = result.scalar_one_or_none()
        if not shared:
            raise NotFoundError("Trip not found or expired")
        return shared

    async def add_comment(
        self, db: AsyncSession, share_id: str, user_id: uuid.UUID, comment: str
    ) -> TripComment:
        await self.get_shared_trip(db, share_id)

        entry = TripComment(share_id=share_id, user_id=user_id, comment=comment)
        db.add(entry)
        await db.commit()
        return entry

    async def list_comments(self, db: AsyncSession, share_id: str) -> list[dict]:
        result = await db.execute(
            select(TripComment.comment, TripComment.created_at, User.name)
            .join(User, TripComment.user_id == User.id)
            .where(TripComment.share_id == share_id)
            .order_by(TripComment.created_at.desc(), TripComment.id.desc())
        )
        return [
            {"comment": comment, "user_name": name, "created_at": created_at}
            for comment, created_at, name in result.all()
        ]

    async def purge_expired(self, db: AsyncSession) -> int:
        """Delete expired shares and their comments. Returns the number of shares removed."""
        now = utcnow()
        expired = select(SharedTrip.id).where(SharedTrip.expires_at.is_not(None), SharedTrip.expires_at <= now)
        await db.execute(delete(TripComment).where(TripComment.share_id.in_(expired)))
        result = await db.execute(
            delete(SharedTrip).where(SharedTrip.expires_at.is_not(None), SharedTrip.expires_at <= now)
        )
        await db.commit()
        return result.rowcount or 0


sharing_service = SharingService()
