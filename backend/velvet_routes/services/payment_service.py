"""Payment gate: demo payment intents with a one-way pending to succeeded lifecycle."""

import logging
import secrets
import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from velvet_routes.config import settings
from velvet_routes.database import utcnow
from velvet_routes.exceptions import NotFoundError
from velvet_routes.models.payment import Payment
from velvet_routes.models.plan import TravelPlan

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
STATUS_SUCCEEDED = "succeeded"
PLAN_PAID = "completed"


class PaymentService:
    """Creates and confirms payments; optionally stamps the paid plan."""

    def client_secret(self) -> str:
        return f"secret_demo_{secrets.token_hex(12)}"

    @staticmethod
    def _parse_plan_id(plan_id: str | uuid.UUID) -> uuid.UUID | None:
        if isinstance(plan_id, uuid.UUID):
            return plan_id
        try:
            return uuid.UUID(str(plan_id))
        except ValueError:
            return None

    async def create_payment(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        amount: float,
        currency: str | None = None,
        metadata: dict | None = None,
    ) -> Payment:
        payment = Payment(
            user_id=user_id,
            payment_id=f"pi_{uuid.uuid4().hex}",
            amount=Decimal(str(amount)),
            currency=currency or settings.default_currency,
            status=STATUS_PENDING,
            payment_metadata=metadata,
        )
        db.add(payment)
        await db.commit()
        await db.refresh(payment)

        logger.info(f"Payment {payment.payment_id} created for user {user_id}: {payment.amount} {payment.currency}")
        return payment

    async def confirm_payment(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        payment_id: str,
        plan_id: str | uuid.UUID | None = None,
    ) -> tuple[Payment, bool | None]:
        """Mark a payment succeeded. Safe to call repeatedly.

        Returns the payment and, when ``plan_id`` was given, whether that plan
        was found and stamped. A missing or malformed plan id does not fail
        the confirmation.
        """
        result = await db.execute(
            select(Payment).where(Payment.payment_id == payment_id, Payment.user_id == user_id)
        )
        payment = result.scalar_one_or_none()
        if not payment:
            raise NotFoundError("Payment not found")

        payment.status = STATUS_SUCCEEDED

        plan_updated = None
        if plan_id is not None:
            plan = None
            plan_uuid = self._parse_plan_id(plan_id)
            if plan_uuid is not None:
                plan_result = await db.execute(
                    select(TravelPlan).where(TravelPlan.id == plan_uuid, TravelPlan.user_id == user_id)
                )
                plan = plan_result.scalar_one_or_none()
            if plan:
                plan.payment_status = PLAN_PAID
                if plan.paid_at is None:
                    plan.paid_at = utcnow()
                plan_updated = True
            else:
                logger.warning(f"Payment {payment_id} confirmed but plan {plan_id} not found for user {user_id}")
                plan_updated = False

        await db.commit()
        await db.refresh(payment)

        logger.info(f"Payment {payment_id} succeeded for user {user_id}")
        return payment, plan_updated


payment_service = PaymentService()
