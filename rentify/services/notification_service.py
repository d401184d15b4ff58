import logging
from typing import List, Optional

from sqlalchemy import insert
from sqlalchemy.orm import Session, joinedload

from rentify.database.models.booking_model import Booking
from rentify.database.models.notification_model import Notification
from rentify.database.models.user_model import User
from rentify.enums.booking_event import BookingEvent
from rentify.enums.notification_type import NotificationType
from rentify.enums.user_role import UserRole
from rentify.utils.exceptions import ForbiddenError, NotFoundError
from rentify.utils.permissions import is_admin, is_booking_host

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Persists notification records for booking lifecycle events.

    Every write here is best-effort: failures are logged and rolled back but
    never raised, so the lifecycle operation that triggered them still
    succeeds.
    """

    def __init__(self):
        self.model = Notification

    def get(self, db: Session, notification_id: int) -> Optional[Notification]:
        return db.query(Notification).filter(Notification.id == notification_id).first()

    def get_for_recipient(self, db: Session, user_id: int) -> List[Notification]:
        return (
            db.query(Notification)
            .options(joinedload(Notification.sender))
            .filter(Notification.recipient_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .all()
        )

    def mark_as_read(
        self, db: Session, notification_id: int, current_user: User
    ) -> Notification:
        notification = self.get(db, notification_id)
        if not notification:
            raise NotFoundError("Notification not found")
        if notification.recipient_id != current_user.id:
            raise ForbiddenError("Not authorized")

        if not notification.is_read:
            notification.is_read = True
            db.commit()
            db.refresh(notification)
        return notification

    def notify_role(
        self,
        db: Session,
        role: UserRole,
        message: str,
        sender_id: Optional[int] = None,
        type: NotificationType = NotificationType.SYSTEM,
    ) -> int:
        """Create one notification per user holding ``role`` in a single insert."""
        try:
            recipient_ids = [
                user_id
                for (user_id,) in db.query(User.id).filter(User.role == role.value).all()
            ]
            if not recipient_ids:
                return 0

            rows = [
                {
                    "recipient_id": recipient_id,
                    "sender_id": sender_id,
                    "message": message,
                    "type": type.value,
                    "is_read": False,
                }
                for recipient_id in recipient_ids
            ]
            db.execute(insert(Notification), rows)
            db.commit()
            logger.info("Notification sent to %d %s users", len(rows), role.value)
            return len(rows)
        except Exception:
            logger.exception("Failed to notify %s users", role.value)
            db.rollback()
            return 0

    def notify_admins(
        self,
        db: Session,
        message: str,
        sender_id: Optional[int] = None,
        type: NotificationType = NotificationType.SYSTEM,
    ) -> int:
        return self.notify_role(db, UserRole.ADMIN, message, sender_id, type)

    def build_booking_notifications(
        self,
        booking: Booking,
        event: BookingEvent,
        actor: Optional[User] = None,
        reason: Optional[str] = None,
    ) -> List[dict]:
        """Work out who hears about ``event`` and what they are told."""
        title = booking.listing.title if booking.listing else "your listing"
        suffix = f" Reason: {reason}" if reason else ""

        if event == BookingEvent.BOOKED:
            candidates = [
                {
                    "recipient_id": booking.host_id,
                    "message": f'{booking.guest_name} booked your listing "{title}".',
                    "type": NotificationType.BOOKING,
                }
            ]
        elif event == BookingEvent.CONFIRMED:
            candidates = [
                {
                    "recipient_id": booking.guest_id,
                    "message": f'Your booking for "{title}" has been confirmed.',
                    "type": NotificationType.CONFIRMATION,
                }
            ]
        elif event == BookingEvent.CANCELLED:
            candidates = self._cancellation_notifications(booking, title, actor, suffix)
        else:
            # Cancellation requests are broadcast to admins, see request_cancellation_notice
            return []

        actor_id = actor.id if actor else None
        return [
            notification
            for notification in candidates
            if notification["recipient_id"] is not None
            and notification["recipient_id"] != actor_id
        ]

    def _cancellation_notifications(
        self, booking: Booking, title: str, actor: Optional[User], suffix: str
    ) -> List[dict]:
        if actor is None or is_admin(actor):
            return [
                {
                    "recipient_id": booking.guest_id,
                    "message": f'Your booking for "{title}" was cancelled by an admin.{suffix}',
                    "type": NotificationType.CANCELLATION,
                },
                {
                    "recipient_id": booking.host_id,
                    "message": f'An admin cancelled a booking for your listing "{title}".{suffix}',
                    "type": NotificationType.CANCELLATION,
                },
            ]

        if is_booking_host(actor, booking):
            return [
                {
                    "recipient_id": booking.guest_id,
                    "message": f'Your booking for "{title}" was cancelled by the host.{suffix}',
                    "type": NotificationType.CANCELLATION,
                }
            ]

        return [
            {
                "recipient_id": booking.host_id,
                "message": f'{booking.guest_name} cancelled their booking for your listing "{title}".{suffix}',
                "type": NotificationType.CANCELLATION,
            }
        ]

    def send_booking_notification(
        self,
        db: Session,
        booking: Booking,
        event: BookingEvent,
        actor: Optional[User] = None,
        reason: Optional[str] = None,
    ) -> List[Notification]:
        try:
            notifications = [
                Notification(
                    recipient_id=data["recipient_id"],
                    sender_id=actor.id if actor else None,
                    message=data["message"],
                    type=data["type"].value,
                )
                for data in self.build_booking_notifications(booking, event, actor, reason)
            ]
            if not notifications:
                return []

            db.add_all(notifications)
            db.commit()
            for notification in notifications:
                logger.info(
                    "Sent %s notification for booking %s to user %s",
                    event.value,
                    booking.id,
                    notification.recipient_id,
                )
            return notifications
        except Exception:
            logger.exception("Failed to send %s notification for booking %s", event.value, booking.id)
            db.rollback()
            return []

    def request_cancellation_notice(
        self,
        db: Session,
        booking: Booking,
        actor: User,
        reason: Optional[str] = None,
    ) -> int:
        title = booking.listing.title if booking.listing else f"listing {booking.listing_id}"
        message = f'{actor.name} requested cancellation of booking #{booking.id} for "{title}".'
        if reason:
            message += f" Reason: {reason}"
        return self.notify_admins(
            db, message, sender_id=actor.id, type=NotificationType.CANCEL_REQUEST
        )
