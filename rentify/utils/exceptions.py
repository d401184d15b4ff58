class BookingError(Exception):
    """Base class for errors raised by the booking services."""

    status_code = 500
    code = "internal_server_error"
    default_message = "Unexpected booking error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BookingError):
    status_code = 400
    code = "bad_request"
    default_message = "Validation failed"


class NotFoundError(BookingError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class ForbiddenError(BookingError):
    status_code = 403
    code = "forbidden"
    default_message = "Access denied"


class ConflictError(BookingError):
    status_code = 409
    code = "conflict"
    default_message = "Property is not available for the selected dates"


class InvalidTransitionError(BookingError):
    status_code = 400
    code = "invalid_transition"
    default_message = "Invalid status transition"
