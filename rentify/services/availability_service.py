from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from rentify.database.models.booking_model import Booking
from rentify.enums.booking_status import BLOCKING_STATUSES


class AvailabilityService:
    def conflicting_bookings_query(
        self,
        db: Session,
        listing_id: int,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[int] = None,
        lock: bool = False,
    ):
        """
        Bookings on the listing that hold any night of [check_in, check_out).

        Ranges are half-open, so a stay ending on the day another begins does
        not conflict with it.
        """
        query = db.query(Booking).filter(
            Booking.listing_id == listing_id,
            Booking.status.in_([status.value for status in BLOCKING_STATUSES]),
            Booking.check_in < check_out,
            Booking.check_out > check_in,
        )
        if exclude_booking_id is not None:
            query = query.filter(Booking.id != exclude_booking_id)
        if lock:
            # Locking read, so it sees rows committed after the transaction began
            query = query.with_for_update()
        return query

    def get_conflicts(
        self,
        db: Session,
        listing_id: int,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[int] = None,
    ) -> List[Booking]:
        return self.conflicting_bookings_query(
            db, listing_id, check_in, check_out, exclude_booking_id
        ).all()

    def is_available(
        self,
        db: Session,
        listing_id: int,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[int] = None,
        lock: bool = False,
    ) -> bool:
        """Checks if the listing is free for the given period, excluding a specific booking (for updates)."""
        conflicting_booking = self.conflicting_bookings_query(
            db, listing_id, check_in, check_out, exclude_booking_id, lock=lock
        ).first()
        return conflicting_booking is None
