import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import JSON, Boolean, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from velvet_routes.database import Base, utcnow


class TravelPlan(Base):
    __tablename__ = "travel_plans"
    __table_args__ = (Index("idx_travel_plans_user_current", "user_id", "is_current"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    destination: Mapped[str | None] = mapped_column(String(255))
    budget: Mapped[str | None] = mapped_column(String(100))
    departure_date: Mapped[date | None] = mapped_column(Date)
    return_date: Mapped[date | None] = mapped_column(Date)
    duration: Mapped[int | None] = mapped_column(Integer)
    adults: Mapped[int] = mapped_column(Integer, default=2)
    children: Mapped[int] = mapped_column(Integer, default=0)
    infants: Mapped[int] = mapped_column(Integer, default=0)
    flight_class: Mapped[str | None] = mapped_column(String(100))
    local_transport: Mapped[str | None] = mapped_column(String(100))
    hotel: Mapped[str | None] = mapped_column(String(255))
    selected_hotel: Mapped[dict | None] = mapped_column(JSON)
    total_cost: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    budget_range: Mapped[dict | None] = mapped_column(JSON)
    transport_cost: Mapped[dict | None] = mapped_column(JSON)
    hotel_cost: Mapped[dict | None] = mapped_column(JSON)
    # At most one current plan per user
    is_current: Mapped[bool] = mapped_column(Boolean, default=False)
    # Written only by the payment gate
    payment_status: Mapped[str | None] = mapped_column(String(50))
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
