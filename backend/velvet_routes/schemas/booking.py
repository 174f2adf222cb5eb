import uuid
from datetime import date, datetime
from typing import Any

from pydantic import Field, field_validator, model_validator

from velvet_routes.schemas.common import CamelModel, blank_to_none


class BookHotelRequest(CamelModel):
    hotel_id: str = Field(min_length=1)
    hotel_name: str | None = None
    destination: str | None = None
    check_in: date | None = None
    check_out: date | None = None
    guests: dict[str, Any] | None = None
    traveler_info: dict[str, Any] | None = None
    total_cost: float | None = Field(default=None, ge=0)

    @field_validator("hotel_name", "destination", "check_in", "check_out", mode="before")
    @classmethod
    def blanks_are_null(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def stay_in_order(self):
        if self.check_in and self.check_out and self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class BookingConfirmation(CamelModel):
    booking_id: str
    status: str


class BookingResponse(CamelModel):
    booking_id: str
    user_id: uuid.UUID
    hotel_id: str | None
    hotel_name: str | None
    destination: str | None
    check_in: date | None
    check_out: date | None
    guests: dict | None
    traveler_info: dict | None
    total_cost: float | None
    status: str
    payment_status: str
    created_at: datetime
