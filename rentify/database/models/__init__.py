from .user_model import User
from .listing_model import Listing, ListingImage
from .booking_model import Booking
from .notification_model import Notification

__all__ = ["User", "Listing", "ListingImage", "Booking", "Notification"]
