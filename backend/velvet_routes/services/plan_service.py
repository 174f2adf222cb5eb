"""Plan reconciler: keeps exactly one current travel plan per user and merges wizard updates into it."""

import logging
import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from velvet_routes.database import utcnow
from velvet_routes.exceptions import NotFoundError, ValidationError
from velvet_routes.models.plan import TravelPlan

logger = logging.getLogger(__name__)

# Columns that cannot hold NULL fall back to these when the client clears them
TRAVELER_DEFAULTS = {"adults": 2, "children": 0, "infants": 0}


class PlanService:
    """Upserts and reads the single in-progress plan of each user.

    Merge policy is partial: only the fields present in ``fields`` are written,
    absent fields keep their stored value and an explicit ``None`` clears one.
    Concurrent upserts for the same user are last-write-wins.
    """

    async def _current_rows(self, db: AsyncSession, user_id: uuid.UUID) -> list[TravelPlan]:
        result = await db.execute(
            select(TravelPlan)
            .where(TravelPlan.user_id == user_id, TravelPlan.is_current.is_(True))
            .order_by(TravelPlan.updated_at.desc())
        )
        return list(result.scalars().all())

    async def upsert_current_plan(
        self, db: AsyncSession, user_id: uuid.UUID, fields: dict
    ) -> tuple[TravelPlan, bool]:
        """Merge ``fields`` into the user's current plan, creating it if needed.

        Returns the plan and whether it was newly created.
        """
        rows = await self._current_rows(db, user_id)
        now = utcnow()

        # A race between two first saves can leave two current rows; keep the newest
        for stale in rows[1:]:
            stale.is_current = False
            stale.updated_at = now
            logger.warning(f"Demoted duplicate current plan {stale.id} for user {user_id}")

        plan = rows[0] if rows else None
        created = plan is None
        if created:
            plan = TravelPlan(user_id=user_id, is_current=True, created_at=now, **TRAVELER_DEFAULTS)
            db.add(plan)

        for key, value in fields.items():
            if value is None and key in TRAVELER_DEFAULTS:
                value = TRAVELER_DEFAULTS[key]
            elif key == "total_cost" and value is not None:
                value = Decimal(str(value))
            setattr(plan, key, value)

        if plan.departure_date and plan.return_date and plan.return_date < plan.departure_date:
            await db.rollback()
            raise ValidationError("Return date must be after departure date")

        plan.updated_at = now
        await db.commit()
        await db.refresh(plan)

        logger.info(f"{'Created' if created else 'Updated'} current plan {plan.id} for user {user_id}")
        return plan, created

    async def get_current_plan(self, db: AsyncSession, user_id: uuid.UUID) -> TravelPlan | None:
        rows = await self._current_rows(db, user_id)
        return rows[0] if rows else None

    async def list_plans(self, db: AsyncSession, user_id: uuid.UUID) -> list[TravelPlan]:
        result = await db.execute(
            select(TravelPlan)
            .where(TravelPlan.user_id == user_id)
            .order_by(TravelPlan.updated_at.desc())
        )
        return list(result.scalars().all())

    async def get_plan(self, db: AsyncSession, user_id: uuid.UUID, plan_id: uuid.UUID) -> TravelPlan:
        result = await db.execute(
            select(TravelPlan).where(TravelPlan.id == plan_id, TravelPlan.user_id == user_id)
        )
        plan = result.scalar_one_or_none()
        if not plan:
            raise NotFoundError("Plan not found")
        return plan

    async def archive_current_plan(self, db: AsyncSession, user_id: uuid.UUID) -> TravelPlan | None:
        """Retire the current plan so the next save starts a fresh one."""
        rows = await self._current_rows(db, user_id)
        if not rows:
            return None

        now = utcnow()
        for plan in rows:
            plan.is_current = False
            plan.updated_at = now
        await db.commit()
        await db.refresh(rows[0])

        logger.info(f"Archived plan {rows[0].id} for user {user_id}")
        return rows[0]


plan_service = PlanService()
