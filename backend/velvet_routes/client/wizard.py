"""Planner wizard state and its pure step functions.

Every step takes the current ``WizardState`` and returns a new one; nothing is
mutated in place. ``PlanCache`` persists the result of each transition.
"""

import math
from dataclasses import asdict, dataclass, replace
from datetime import date

TOTAL_STEPS = 5


@dataclass(frozen=True)
class CostRange:
    min: float
    max: float

    @property
    def mean(self) -> float:
        return (self.min + self.max) / 2

    @classmethod
    def from_dict(cls, data: dict | None) -> "CostRange | None":
        if not data:
            return None
        return cls(min=float(data.get("min", 0)), max=float(data.get("max", 0)))


@dataclass(frozen=True)
class WizardState:
    destination: str = ""
    budget: str = ""
    departure_date: str = ""
    return_date: str = ""
    duration: int = 0
    adults: int = 2
    children: int = 0
    infants: int = 0
    flight_class: str = ""
    local_transport: str = ""
    hotel: str = ""
    selected_hotel: dict | None = None
    total_cost: int = 0
    budget_range: CostRange | None = None
    flight_cost: CostRange | None = None
    local_transport_cost: CostRange | None = None
    hotel_cost: CostRange | None = None


def calculate_total_cost(state: WizardState) -> int:
    """Mean flight fare plus mean nightly hotel and daily transport costs over the stay."""
    total = 0.0
    if state.flight_cost:
        total += state.flight_cost.mean
    if state.hotel_cost and state.duration:
        total += state.hotel_cost.mean * state.duration
    if state.local_transport_cost and state.duration:
        total += state.local_transport_cost.mean * state.duration
    return int(math.floor(total + 0.5))


def _priced(state: WizardState) -> WizardState:
    return replace(state, total_cost=calculate_total_cost(state))


def select_destination(state: WizardState, destination: str, budget: str = "") -> WizardState:
    return replace(state, destination=destination, budget=budget or state.budget)


def set_dates(state: WizardState, departure: date, return_: date) -> WizardState:
    days = (return_ - departure).days
    if days <= 0:
        raise ValueError("Return date must be after departure date")
    return _priced(
        replace(
            state,
            departure_date=departure.isoformat(),
            return_date=return_.isoformat(),
            duration=days,
        )
    )


def select_budget(state: WizardState, budget: str, min_cost: float, max_cost: float) -> WizardState:
    return replace(state, budget=budget, budget_range=CostRange(min_cost, max_cost))


def select_flight(state: WizardState, flight_class: str, min_cost: float, max_cost: float) -> WizardState:
    return _priced(replace(state, flight_class=flight_class, flight_cost=CostRange(min_cost, max_cost)))


def select_local_transport(
    state: WizardState, transport: str, min_cost: float, max_cost: float
) -> WizardState:
    return _priced(
        replace(state, local_transport=transport, local_transport_cost=CostRange(min_cost, max_cost))
    )


def select_accommodation(state: WizardState, hotel_type: str, min_cost: float, max_cost: float) -> WizardState:
    return _priced(replace(state, hotel=hotel_type, hotel_cost=CostRange(min_cost, max_cost)))


def set_travelers(state: WizardState, adults: int, children: int = 0, infants: int = 0) -> WizardState:
    if adults < 1 or children < 0 or infants < 0:
        raise ValueError("At least one adult is required and counts cannot be negative")
    return replace(state, adults=adults, children=children, infants=infants)


def select_hotel(state: WizardState, hotel: dict) -> WizardState:
    return replace(state, selected_hotel=dict(hotel))


def completed_steps(state: WizardState) -> int:
    steps = [
        bool(state.destination),
        bool(state.departure_date and state.return_date and state.budget),
        bool(state.flight_class and state.local_transport),
        bool(state.hotel),
        state.selected_hotel is not None,
    ]
    return sum(steps)


def _range_dict(value: CostRange | None) -> dict | None:
    return asdict(value) if value else None


def to_plan_fields(state: WizardState) -> dict:
    """Serialize to the camelCase body accepted by ``POST /api/plans/save-current``."""
    transport_cost = {}
    if state.flight_cost:
        transport_cost["flight"] = _range_dict(state.flight_cost)
    if state.local_transport_cost:
        transport_cost["local"] = _range_dict(state.local_transport_cost)

    return {
        "destination": state.destination,
        "budget": state.budget,
        "departureDate": state.departure_date,
        "returnDate": state.return_date,
        "duration": state.duration,
        "adults": state.adults,
        "children": state.children,
        "infants": state.infants,
        "flightClass": state.flight_class,
        "localTransport": state.local_transport,
        "hotel": state.hotel,
        "selectedHotel": state.selected_hotel,
        "totalCost": state.total_cost,
        "budgetRange": _range_dict(state.budget_range),
        "transportCost": transport_cost or None,
        "hotelCost": _range_dict(state.hotel_cost),
    }


def from_plan(data: dict) -> WizardState:
    """Rebuild a state from a plan in wire format; missing or null keys take defaults."""
    defaults = WizardState()
    transport_cost = data.get("transportCost") or {}

    def text(key: str) -> str:
        return data.get(key) or ""

    return WizardState(
        destination=text("destination"),
        budget=text("budget"),
        departure_date=text("departureDate"),
        return_date=text("returnDate"),
        duration=int(data.get("duration") or 0),
        adults=int(data.get("adults") or defaults.adults),
        children=int(data.get("children") or 0),
        infants=int(data.get("infants") or 0),
        flight_class=text("flightClass"),
        local_transport=text("localTransport"),
        hotel=text("hotel"),
        selected_hotel=data.get("selectedHotel"),
        total_cost=int(round(float(data.get("totalCost") or 0))),
        budget_range=CostRange.from_dict(data.get("budgetRange")),
        flight_cost=CostRange.from_dict(transport_cost.get("flight") or data.get("flightCost")),
        local_transport_cost=CostRange.from_dict(
            transport_cost.get("local") or data.get("localTransportCost")
        ),
        hotel_cost=CostRange.from_dict(data.get("hotelCost")),
    )
