"""Domain errors raised by the service layer and rendered by the app's exception handlers."""


class VelvetError(Exception):
    """Base error carrying the HTTP status and a message safe to show clients."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(VelvetError):
    status_code = 400
    default_message = "Invalid request"


class AuthError(VelvetError):
    status_code = 401
    default_message = "Access token required"


class InvalidTokenError(AuthError):
    status_code = 403
    default_message = "Invalid token"


class NotFoundError(VelvetError):
    status_code = 404
    default_message = "Not found"


class StoreError(VelvetError):
    """Persistence failure. The public message never carries driver detail."""

    status_code = 500
    default_message = "Server error"


class BookingIdCollisionError(StoreError):
    """No free booking id could be generated within the configured attempts."""
