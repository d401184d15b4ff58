import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rentify.database.init import get_db
from rentify.database.models.user_model import User
from rentify.schemas.notification_schema import NotificationResponse
from rentify.services.notification_service import NotificationService
from rentify.utils.dependencies import get_current_user
from rentify.utils.exceptions import BookingError
from rentify.responses.success import data_response
from rentify.responses.error import booking_error_response, internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])
notification_service = NotificationService()


@router.get("")
async def get_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        notifications = notification_service.get_for_recipient(db, current_user.id)
        return data_response(
            [NotificationResponse.model_validate(n) for n in notifications]
        )
    except Exception as e:
        logger.exception("Fetch notifications error")
        return internal_server_error("Server error fetching notifications", str(e))


@router.put("/{notification_id}/read")
async def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Only the recipient may mark a notification as read."""
    try:
        notification = notification_service.mark_as_read(db, notification_id, current_user)
        return data_response(NotificationResponse.model_validate(notification))
    except BookingError as e:
        return booking_error_response(e)
    except Exception as e:
        logger.exception("Mark notification as read error")
        return internal_server_error("Server error", str(e))
