from enum import Enum


class NotificationType(str, Enum):
    BOOKING = "booking"
    CONFIRMATION = "confirmation"
    CANCELLATION = "cancellation"
    SYSTEM = "system"
    CANCEL_REQUEST = "cancel-request"

    def __str__(self):
        return self.value
