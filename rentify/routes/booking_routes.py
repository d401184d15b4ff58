import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rentify.database.init import get_db
from rentify.database.models.user_model import User
from rentify.schemas.booking_schema import (
    AvailabilityRequest,
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
    CancelRequest,
)
from rentify.services.booking_service import BookingService
from rentify.utils.dependencies import get_current_user, get_optional_user
from rentify.utils.exceptions import BookingError
from rentify.responses.success import (
    availability_response,
    created_response,
    data_response,
    success_response,
)
from rentify.responses.error import booking_error_response, internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])
booking_service = BookingService()


@router.get("")
async def get_bookings(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Returns bookings visible to the caller:
    - Admins see every booking
    - Everyone else sees the bookings they made as a guest
    """
    try:
        bookings = booking_service.get_user_bookings(db, current_user)
        return data_response([BookingResponse.model_validate(b) for b in bookings])
    except BookingError as e:
        return booking_error_response(e)
    except Exception as e:
        logger.exception("Get bookings error")
        return internal_server_error("Server error while fetching bookings", str(e))


@router.get("/host/bookings")
async def get_host_bookings(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Returns bookings on the caller's listings. Admins see all bookings."""
    try:
        bookings = booking_service.get_host_bookings(db, current_user)
        return data_response([BookingResponse.model_validate(b) for b in bookings])
    except BookingError as e:
        return booking_error_response(e)
    except Exception as e:
        logger.exception("Get host bookings error")
        return internal_server_error("Server error while fetching host bookings", str(e))


@router.post("/check-availability")
async def check_availability(
    availability_in: AvailabilityRequest,
    db: Session = Depends(get_db),
):
    try:
        available = booking_service.check_availability(
            db,
            availability_in.listing_id,
            availability_in.check_in,
            availability_in.check_out,
        )
        return availability_response(available)
    except BookingError as e:
        return booking_error_response(e)
    except Exception as e:
        logger.exception("Check availability error")
        return internal_server_error("Server error while checking availability", str(e))


@router.get("/{booking_id}")
async def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Visible to the booking's guest, the listing's host and admins."""
    try:
        booking = booking_service.get_for_viewer(db, booking_id, current_user)
        return data_response(BookingResponse.model_validate(booking))
    except BookingError as e:
        return booking_error_response(e)
    except Exception as e:
        logger.exception("Get booking error")
        return internal_server_error("Server error while fetching booking", str(e))


@router.post("")
async def create_booking(
    booking_in: BookingCreate,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """
    Creates a pending booking. Open to anonymous callers; when a token is
    sent the booking is linked to that user as its guest.
    """
    try:
        booking = booking_service.create(db, booking_in, current_user)
        return created_response(
            "Booking created successfully", BookingResponse.model_validate(booking)
        )
    except BookingError as e:
        return booking_error_response(e)
    except Exception as e:
        logger.exception("Create booking error")
        return internal_server_error("Server error while creating booking", str(e))


@router.put("/{booking_id}")
async def update_booking(
    booking_id: int,
    booking_in: BookingStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Updates booking status and/or payment status."""
    try:
        booking = booking_service.update(db, booking_id, booking_in, current_user)
        return success_response(
            "Booking updated successfully", BookingResponse.model_validate(booking)
        )
    except BookingError as e:
        return booking_error_response(e)
    except Exception as e:
        logger.exception("Update booking error")
        return internal_server_error("Server error while updating booking", str(e))


@router.put("/{booking_id}/cancel")
async def cancel_booking(
    booking_id: int,
    cancel_in: Optional[CancelRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        reason = cancel_in.reason if cancel_in else None
        booking = booking_service.cancel(db, booking_id, current_user, reason)
        return success_response(
            "Booking cancelled successfully", BookingResponse.model_validate(booking)
        )
    except BookingError as e:
        return booking_error_response(e)
    except Exception as e:
        logger.exception("Cancel booking error")
        return internal_server_error("Server error while cancelling booking", str(e))


@router.post("/{booking_id}/request-cancel")
async def request_cancel(
    booking_id: int,
    cancel_in: Optional[CancelRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Lets a host ask the admins to cancel a booking on their listing."""
    try:
        reason = cancel_in.reason if cancel_in else None
        notified = booking_service.request_cancellation(db, booking_id, current_user, reason)
        return success_response(
            "Cancellation request sent to admin.", {"notifiedAdmins": notified}
        )
    except BookingError as e:
        return booking_error_response(e)
    except Exception as e:
        logger.exception("Request cancellation error")
        return internal_server_error("Server error while requesting cancellation", str(e))


@router.delete("/{booking_id}/delete")
async def delete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Admin only. An active booking is cancelled first; calling again on the
    cancelled booking removes it permanently.
    """
    try:
        outcome = booking_service.delete(db, booking_id, current_user)
        if outcome.deleted:
            return success_response(
                "Booking permanently deleted", {"deleted": True}
            )
        return success_response(
            "Booking cancelled. Call delete again to remove it permanently.",
            {
                "deleted": False,
                "booking": BookingResponse.model_validate(outcome.booking),
            },
        )
    except BookingError as e:
        return booking_error_response(e)
    except Exception as e:
        logger.exception("Delete booking error")
        return internal_server_error("Server error while deleting booking", str(e))
