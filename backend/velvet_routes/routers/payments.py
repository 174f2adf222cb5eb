"""Payment router: demo payment intents and their confirmation."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from velvet_routes.database import get_db
from velvet_routes.dependencies import get_current_user
from velvet_routes.models.user import User
from velvet_routes.schemas.payment import (
    ConfirmPaymentRequest,
    ConfirmPaymentResponse,
    CreatePaymentRequest,
    PaymentIntent,
    PaymentIntentResponse,
    PaymentResponse,
)
from velvet_routes.services.payment_service import payment_service

router = APIRouter()


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    req: CreatePaymentRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    payment = await payment_service.create_payment(db, user.id, req.amount, req.currency, req.metadata)
    return PaymentIntentResponse(
        client_secret=payment_service.client_secret(),
        payment_intent=PaymentIntent(
            payment_id=payment.payment_id,
            amount=payment.amount,
            currency=payment.currency,
        ),
    )


@router.post("/confirm-payment", response_model=ConfirmPaymentResponse)
async def confirm_payment(
    req: ConfirmPaymentRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Mark a payment succeeded and, if a plan id is given, stamp that plan as paid."""
    payment, plan_updated = await payment_service.confirm_payment(
        db, user.id, req.payment_intent_id, req.plan_id
    )
    return ConfirmPaymentResponse(
        payment=PaymentResponse.model_validate(payment),
        plan_updated=plan_updated,
    )
