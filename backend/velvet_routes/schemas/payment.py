from datetime import datetime

from pydantic import Field, field_validator

from velvet_routes.schemas.common import CamelModel, blank_to_none


class CreatePaymentRequest(CamelModel):
    amount: float = Field(gt=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    metadata: dict | None = None

    @field_validator("currency", mode="before")
    @classmethod
    def normalize_currency(cls, v):
        v = blank_to_none(v)
        return v.upper() if isinstance(v, str) else v


class ConfirmPaymentRequest(CamelModel):
    payment_intent_id: str = Field(min_length=1)
    # Parsed by the payment service; an unknown id only skips the plan stamp
    plan_id: str | None = None

    @field_validator("plan_id", mode="before")
    @classmethod
    def plan_id_as_text(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return blank_to_none(v)


class PaymentIntent(CamelModel):
    payment_id: str
    amount: float
    currency: str


class PaymentIntentResponse(CamelModel):
    success: bool = True
    client_secret: str
    payment_intent: PaymentIntent


class PaymentResponse(CamelModel):
    payment_id: str
    amount: float
    currency: str
    status: str
    metadata: dict | None = Field(default=None, validation_alias="payment_metadata")
    created_at: datetime


class ConfirmPaymentResponse(CamelModel):
    success: bool = True
    payment: PaymentResponse
    plan_updated: bool | None = None
