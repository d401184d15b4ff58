import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, joinedload, selectinload

from rentify.database.models.booking_model import Booking
from rentify.database.models.listing_model import Listing
from rentify.database.models.user_model import User
from rentify.enums.booking_event import BookingEvent
from rentify.enums.booking_status import BLOCKING_STATUSES, BookingStatus, can_transition
from rentify.enums.notification_type import NotificationType
from rentify.enums.payment_status import PaymentStatus
from rentify.schemas.booking_schema import BookingCreate, BookingStatusUpdate
from rentify.services.availability_service import AvailabilityService
from rentify.services.notification_service import NotificationService
from rentify.utils.exceptions import (
    BookingError,
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from rentify.utils.permissions import (
    ensure_admin,
    ensure_can_cancel,
    ensure_can_manage,
    ensure_can_request_cancellation,
    ensure_can_view,
    is_admin,
    is_booking_host,
)

logger = logging.getLogger(__name__)


@dataclass
class DeleteOutcome:
    deleted: bool
    booking: Optional[Booking] = None


class BookingService:
    def __init__(self):
        self.availability_service = AvailabilityService()
        self.notification_service = NotificationService()

    def _query(self, db: Session):
        return db.query(Booking).options(
            joinedload(Booking.listing).selectinload(Listing.images),
            joinedload(Booking.guest),
        )

    def get(self, db: Session, booking_id: int) -> Optional[Booking]:
        return self._query(db).filter(Booking.id == booking_id).first()

    def get_or_404(self, db: Session, booking_id: int) -> Booking:
        booking = self.get(db, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    def get_for_viewer(self, db: Session, booking_id: int, current_user: User) -> Booking:
        booking = self.get_or_404(db, booking_id)
        ensure_can_view(current_user, booking)
        return booking

    def get_user_bookings(self, db: Session, current_user: User) -> List[Booking]:
        """Admins see every booking, everyone else only the ones they made."""
        query = self._query(db)
        if not is_admin(current_user):
            query = query.filter(Booking.guest_id == current_user.id)
        return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    def get_host_bookings(self, db: Session, current_user: User) -> List[Booking]:
        """Bookings on listings the caller hosts; admins see all of them."""
        if not (current_user.is_host or is_admin(current_user)):
            raise ForbiddenError("Only hosts can view host bookings")

        query = self._query(db)
        if not is_admin(current_user):
            query = query.join(Listing, Booking.listing_id == Listing.id).filter(
                Listing.host_id == current_user.id
            )
        return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    def get_listing(self, db: Session, listing_id: int, lock: bool = False) -> Listing:
        query = db.query(Listing).filter(Listing.id == listing_id)
        if lock:
            # Serialises concurrent bookings of the same listing until commit
            query = query.with_for_update()
        listing = query.first()
        if not listing:
            raise NotFoundError("Listing not found")
        return listing

    def get_bookable_listing(self, db: Session, listing_id: int, lock: bool = False) -> Listing:
        listing = self.get_listing(db, listing_id, lock=lock)
        if not listing.is_bookable:
            raise NotFoundError("Listing is not active")
        return listing

    def check_availability(
        self, db: Session, listing_id: int, check_in: date, check_out: date
    ) -> bool:
        if check_out <= check_in:
            raise ValidationError("Check-out date must be after check-in date")
        self.get_listing(db, listing_id)
        return self.availability_service.is_available(db, listing_id, check_in, check_out)

    def create(
        self, db: Session, booking_in: BookingCreate, current_user: Optional[User] = None
    ) -> Booking:
        """
        Create a pending booking after capacity and availability checks.

        The listing row stays locked from the availability check until the
        insert commits, so two overlapping requests cannot both succeed.
        Notifying the host and admins happens afterwards and never affects
        the result.
        """
        if booking_in.check_out <= booking_in.check_in:
            raise ValidationError("Check-out date must be after check-in date")

        try:
            listing = self.get_bookable_listing(db, booking_in.listing_id, lock=True)

            if booking_in.guests > listing.max_guests:
                raise ValidationError(f"Maximum {listing.max_guests} guests allowed")

            if not self.availability_service.is_available(
                db, listing.id, booking_in.check_in, booking_in.check_out, lock=True
            ):
                raise ConflictError("Property is not available for the selected dates")

            booking = Booking(
                listing_id=listing.id,
                host_id=listing.host_id,
                guest_id=current_user.id if current_user else None,
                guest_name=booking_in.guest_name,
                guest_email=booking_in.guest_email,
                guest_phone=booking_in.guest_phone,
                check_in=booking_in.check_in,
                check_out=booking_in.check_out,
                guests=booking_in.guests,
                total_price=booking_in.total_price,
                special_requests=booking_in.special_requests,
                status=BookingStatus.PENDING.value,
                payment_status=PaymentStatus.PENDING.value,
            )
            db.add(booking)
            db.commit()
        except BookingError:
            db.rollback()
            raise
        except (IntegrityError, OperationalError):
            logger.exception("Booking insert for listing %s rejected by the database", booking_in.listing_id)
            db.rollback()
            raise ConflictError("Property is not available for the selected dates")

        db.refresh(booking)
        logger.info(
            "Booking %s created for listing %s (%s to %s)",
            booking.id,
            booking.listing_id,
            booking.check_in,
            booking.check_out,
        )

        self.notification_service.send_booking_notification(
            db, booking, BookingEvent.BOOKED, current_user
        )
        self.notification_service.notify_admins(
            db,
            f'{booking.guest_name} booked listing "{listing.title}".',
            sender_id=current_user.id if current_user else None,
            type=NotificationType.BOOKING,
        )
        return booking

    def _prepare_status_change(
        self, booking: Booking, new_status: BookingStatus, current_user: User
    ) -> bool:
        """
        Authorise and validate moving a booking to new_status without writing.
        Returns False when the booking already has that status.
        """
        if new_status == BookingStatus.CANCELLED:
            ensure_can_cancel(current_user, booking)
        else:
            ensure_can_manage(current_user, booking)

        current_status = BookingStatus(booking.status)
        if new_status == current_status:
            return False

        if not can_transition(current_status, new_status):
            if new_status == BookingStatus.CANCELLED:
                raise InvalidTransitionError(f"Cannot cancel a {current_status} booking")
            raise InvalidTransitionError(
                f"Cannot change booking status from {current_status} to {new_status}"
            )
        return True

    def _notify_status_change(
        self,
        db: Session,
        booking: Booking,
        new_status: BookingStatus,
        current_user: User,
        reason: Optional[str] = None,
    ):
        if new_status == BookingStatus.CONFIRMED:
            self.notification_service.send_booking_notification(
                db, booking, BookingEvent.CONFIRMED, current_user
            )
            return

        if new_status != BookingStatus.CANCELLED:
            return

        self.notification_service.send_booking_notification(
            db, booking, BookingEvent.CANCELLED, current_user, reason
        )

        # Host and guest cancellations are also reported to every admin
        if not is_admin(current_user):
            party = "Host" if is_booking_host(current_user, booking) else "Guest"
            title = booking.listing.title if booking.listing else f"listing {booking.listing_id}"
            message = f'{party} {current_user.name} cancelled booking #{booking.id} for "{title}".'
            if reason:
                message += f" Reason: {reason}"
            self.notification_service.notify_admins(
                db, message, sender_id=current_user.id, type=NotificationType.CANCELLATION
            )

    def update(
        self,
        db: Session,
        booking_id: int,
        booking_in: BookingStatusUpdate,
        current_user: User,
        reason: Optional[str] = None,
    ) -> Booking:
        """
        Apply a status and/or payment status change in one commit.

        Every permission and transition check runs before anything is
        written, so a rejected request leaves the booking untouched.
        Notifications for the new status go out after the commit.
        """
        booking = self.get_or_404(db, booking_id)
        new_status = booking_in.status
        payment_status = booking_in.payment_status

        status_changed = False
        if new_status is not None:
            status_changed = self._prepare_status_change(booking, new_status, current_user)
        if payment_status is not None:
            ensure_can_manage(current_user, booking)
        payment_changed = (
            payment_status is not None and booking.payment_status != payment_status.value
        )

        if not (status_changed or payment_changed):
            return booking

        previous_status = booking.status
        if status_changed:
            booking.status = new_status.value
        if payment_changed:
            booking.payment_status = payment_status.value
        db.commit()
        db.refresh(booking)

        if payment_changed:
            logger.info(
                "Booking %s payment status set to %s by user %s",
                booking.id,
                payment_status,
                current_user.id,
            )
        if status_changed:
            logger.info(
                "Booking %s moved from %s to %s by user %s",
                booking.id,
                previous_status,
                new_status,
                current_user.id,
            )
            self._notify_status_change(db, booking, new_status, current_user, reason)
        return booking

    def update_status(
        self,
        db: Session,
        booking_id: int,
        new_status: BookingStatus,
        current_user: User,
    ) -> Booking:
        return self.update(db, booking_id, BookingStatusUpdate(status=new_status), current_user)

    def cancel(
        self,
        db: Session,
        booking_id: int,
        current_user: User,
        reason: Optional[str] = None,
    ) -> Booking:
        """
        Cancel a booking and tell the parties who did not cancel it.

        Admin cancellations reach both guest and host. Host and guest
        cancellations reach the other party directly plus every admin.
        Cancelling an already cancelled booking changes nothing.
        """
        return self.update(
            db,
            booking_id,
            BookingStatusUpdate(status=BookingStatus.CANCELLED),
            current_user,
            reason,
        )

    def update_payment_status(
        self,
        db: Session,
        booking_id: int,
        payment_status: PaymentStatus,
        current_user: User,
    ) -> Booking:
        return self.update(
            db, booking_id, BookingStatusUpdate(payment_status=payment_status), current_user
        )

    def request_cancellation(
        self,
        db: Session,
        booking_id: int,
        current_user: User,
        reason: Optional[str] = None,
    ) -> int:
        """Ask every admin to cancel the booking; its status is left alone."""
        booking = self.get_or_404(db, booking_id)
        ensure_can_request_cancellation(current_user, booking)

        if BookingStatus(booking.status) not in BLOCKING_STATUSES:
            raise InvalidTransitionError("Only pending or confirmed bookings can be cancelled")

        count = self.notification_service.request_cancellation_notice(
            db, booking, current_user, reason
        )
        logger.info(
            "Host %s requested cancellation of booking %s (%d admins notified)",
            current_user.id,
            booking.id,
            count,
        )
        return count

    def delete(self, db: Session, booking_id: int, current_user: User) -> DeleteOutcome:
        """
        Two-step admin removal: an active booking is cancelled first and only
        a booking that is already cancelled gets deleted.
        """
        ensure_admin(current_user)
        booking = self.get_or_404(db, booking_id)

        current_status = BookingStatus(booking.status)
        if current_status in (BookingStatus.COMPLETED, BookingStatus.REFUNDED):
            raise InvalidTransitionError(
                f"{current_status.value.capitalize()} bookings cannot be deleted"
            )

        if current_status != BookingStatus.CANCELLED:
            booking = self.cancel(db, booking_id, current_user)
            return DeleteOutcome(deleted=False, booking=booking)

        db.delete(booking)
        db.commit()
        logger.info("Booking %s permanently deleted by admin %s", booking_id, current_user.id)
        return DeleteOutcome(deleted=True)
