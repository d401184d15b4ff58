from fastapi import status

from rentify.config import DEBUG
from rentify.utils.exceptions import BookingError
from .base import build_response


def bad_request_error(error: str = "Bad request", errors: list = None):
    return build_response(
        status.HTTP_400_BAD_REQUEST,
        False,
        error="bad_request",
        message=error,
        errors=errors,
    )


def internal_server_error(error: str = "Internal server error", detail: str = None):
    # Exception text only leaves the process in debug mode
    return build_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        False,
        error=detail if DEBUG and detail else "internal_server_error",
        message=error,
    )


def booking_error_response(exc: BookingError):
    """Map a service-level booking error onto its HTTP envelope."""
    return build_response(
        exc.status_code,
        False,
        error=exc.code,
        message=exc.message,
    )
