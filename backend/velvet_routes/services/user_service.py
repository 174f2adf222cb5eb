"""User accounts and search history."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from velvet_routes.config import settings
from velvet_routes.database import utcnow
from velvet_routes.exceptions import AuthError, ValidationError
from velvet_routes.models.user import User
from velvet_routes.security import hash_password, verify_password

logger = logging.getLogger(__name__)


class UserService:

    async def get_by_email(self, db: AsyncSession, email: str) -> User | None:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def register(self, db: AsyncSession, name: str, email: str, password: str) -> User:
        if await self.get_by_email(db, email):
            raise ValidationError("User already exists")

        user = User(
            name=name,
            email=email.lower(),
            password_hash=hash_password(password),
            search_history=[],
            bookings=[],
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)

        logger.info(f"Registered user {user.id}")
        return user

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> User:
        user = await self.get_by_email(db, email)
        if not user or not verify_password(password, user.password_hash):
            raise AuthError("Invalid credentials")
        return user

    async def add_search(
        self, db: AsyncSession, user: User, destination: str, details: dict | None = None
    ) -> list[dict]:
        """Prepend a search entry, keeping only the newest entries."""
        entry = {
            "destination": destination,
            "details": details,
            "timestamp": utcnow().isoformat(),
        }
        history = [entry, *(user.search_history or [])]
        user.search_history = history[: settings.search_history_limit]
        await db.commit()
        return user.search_history

    async def get_search_history(self, db: AsyncSession, user_id: uuid.UUID) -> list[dict]:
        result = await db.execute(select(User.search_history).where(User.id == user_id))
        return result.scalar_one_or_none() or []


user_service = UserService()
