import uuid
from datetime import date, datetime

from pydantic import Field, field_validator, model_validator

from velvet_routes.schemas.common import CamelModel, blank_to_none


class CostRange(CamelModel):
    min: float = Field(ge=0)
    max: float = Field(ge=0)


class PlanFields(CamelModel):
    """Wizard state pushed by the client. Only the keys actually sent are merged."""

    destination: str | None = None
    budget: str | None = None
    departure_date: date | None = None
    return_date: date | None = None
    duration: int | None = Field(default=None, ge=0)
    adults: int | None = Field(default=None, ge=1)
    children: int | None = Field(default=None, ge=0)
    infants: int | None = Field(default=None, ge=0)
    flight_class: str | None = None
    local_transport: str | None = None
    hotel: str | None = None
    selected_hotel: dict | None = None
    total_cost: float | None = Field(default=None, ge=0)
    budget_range: CostRange | None = None
    transport_cost: dict[str, CostRange] | None = None
    hotel_cost: CostRange | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blanks_are_null(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def dates_in_order(self):
        if self.departure_date and self.return_date and self.return_date < self.departure_date:
            raise ValueError("Return date must be after departure date")
        return self


class PlanResponse(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    destination: str | None
    budget: str | None
    departure_date: date | None
    return_date: date | None
    duration: int | None
    adults: int
    children: int
    infants: int
    flight_class: str | None
    local_transport: str | None
    hotel: str | None
    selected_hotel: dict | None
    total_cost: float | None
    budget_range: dict | None
    transport_cost: dict | None
    hotel_cost: dict | None
    is_current: bool
    payment_status: str | None
    paid_at: datetime | None
    created_at: datetime
    updated_at: datetime
