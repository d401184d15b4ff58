"""Role and ownership checks gating every booking operation.

A booking's ``host_id`` is copied from its listing at creation time, so the
checks below never need to load the listing.
"""
from typing import Optional

from rentify.database.models.booking_model import Booking
from rentify.database.models.user_model import User
from rentify.utils.exceptions import ForbiddenError


def is_booking_host(user: Optional[User], booking: Booking) -> bool:
    return user is not None and booking.host_id == user.id


def is_booking_guest(user: Optional[User], booking: Booking) -> bool:
    return (
        user is not None
        and booking.guest_id is not None
        and booking.guest_id == user.id
    )


def is_admin(user: Optional[User]) -> bool:
    return user is not None and user.is_admin


def can_view_booking(user: Optional[User], booking: Booking) -> bool:
    return (
        is_admin(user)
        or is_booking_host(user, booking)
        or is_booking_guest(user, booking)
    )


def can_manage_booking(user: Optional[User], booking: Booking) -> bool:
    """Confirm, complete, refund or mark as paid."""
    return is_admin(user) or is_booking_host(user, booking)


def can_cancel_booking(user: Optional[User], booking: Booking) -> bool:
    return can_manage_booking(user, booking) or is_booking_guest(user, booking)


def ensure_can_view(user: Optional[User], booking: Booking):
    if not can_view_booking(user, booking):
        raise ForbiddenError("Not authorized to view this booking")


def ensure_can_manage(user: Optional[User], booking: Booking):
    if not can_manage_booking(user, booking):
        raise ForbiddenError("Not authorized to update this booking")


def ensure_can_cancel(user: Optional[User], booking: Booking):
    if not can_cancel_booking(user, booking):
        raise ForbiddenError("Not authorized to cancel this booking")


def ensure_can_request_cancellation(user: Optional[User], booking: Booking):
    if not is_booking_host(user, booking):
        raise ForbiddenError("Only the listing's host can request a cancellation")


def ensure_admin(user: Optional[User]):
    if not is_admin(user):
        raise ForbiddenError("Only admins can permanently delete bookings")
