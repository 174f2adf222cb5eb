from velvet_routes.models.user import User
from velvet_routes.models.plan import TravelPlan
from velvet_routes.models.booking import Booking
from velvet_routes.models.payment import Payment
from velvet_routes.models.sharing import SharedTrip, TripComment

__all__ = [
    "Booking",
    "Payment",
    "SharedTrip",
    "TravelPlan",
    "TripComment",
    "User",
]
