from enum import Enum


class BookingEvent(str, Enum):
    """Lifecycle events that produce notifications"""

    BOOKED = "booked"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    CANCEL_REQUESTED = "cancel-request"

    def __str__(self):
        return self.value
