from fastapi import status

from rentify.schemas.booking_schema import AvailabilityResponse
from .base import build_response


def success_response(message: str = None, data=None):
    return build_response(status.HTTP_200_OK, True, message=message, data=data)


def created_response(message: str = None, data=None):
    return build_response(status.HTTP_201_CREATED, True, message=message, data=data)


def data_response(data=None):
    return build_response(status.HTTP_200_OK, True, data=data)


def availability_response(available: bool):
    return build_response(
        status.HTTP_200_OK,
        True,
        data=AvailabilityResponse(available=available),
        extra={"available": available},
    )
