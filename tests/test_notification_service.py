import pytest

from rentify.database.models import Notification
from rentify.enums.booking_event import BookingEvent
from rentify.enums.notification_type import NotificationType
from rentify.enums.user_role import UserRole
from rentify.services.notification_service import NotificationService
from rentify.utils.exceptions import ForbiddenError, NotFoundError


@pytest.fixture
def notifications():
    return NotificationService()


def recipients(built):
    return sorted(n["recipient_id"] for n in built)


def test_booked_goes_to_host(notifications, listing, host, guest, make_booking):
    booking = make_booking(listing, guest=guest)

    built = notifications.build_booking_notifications(booking, BookingEvent.BOOKED, guest)

    assert recipients(built) == [host.id]
    assert built[0]["type"] == NotificationType.BOOKING
    assert listing.title in built[0]["message"]


def test_confirmed_goes_to_guest(notifications, listing, host, guest, make_booking):
    booking = make_booking(listing, guest=guest)

    built = notifications.build_booking_notifications(booking, BookingEvent.CONFIRMED, host)

    assert recipients(built) == [guest.id]
    assert built[0]["type"] == NotificationType.CONFIRMATION


def test_confirmed_without_guest_goes_nowhere(notifications, listing, host, make_booking):
    booking = make_booking(listing)

    assert notifications.build_booking_notifications(booking, BookingEvent.CONFIRMED, host) == []


def test_cancelled_by_admin_reaches_both_parties(notifications, listing, host, guest, admin, make_booking):
    booking = make_booking(listing, guest=guest)

    built = notifications.build_booking_notifications(booking, BookingEvent.CANCELLED, admin)

    assert recipients(built) == sorted([host.id, guest.id])


def test_cancelled_by_host_reaches_guest(notifications, listing, host, guest, make_booking):
    booking = make_booking(listing, guest=guest)

    built = notifications.build_booking_notifications(booking, BookingEvent.CANCELLED, host)

    assert recipients(built) == [guest.id]


def test_cancelled_by_guest_reaches_host(notifications, listing, host, guest, make_booking):
    booking = make_booking(listing, guest=guest)

    built = notifications.build_booking_notifications(
        booking, BookingEvent.CANCELLED, guest, reason="Change of plans"
    )

    assert recipients(built) == [host.id]
    assert "Change of plans" in built[0]["message"]


def test_cancel_request_is_not_a_direct_notification(notifications, listing, host, make_booking):
    booking = make_booking(listing)

    assert notifications.build_booking_notifications(booking, BookingEvent.CANCEL_REQUESTED, host) == []


def test_send_booking_notification_persists_rows(db_session, notifications, listing, host, guest, make_booking):
    booking = make_booking(listing, guest=guest)

    created = notifications.send_booking_notification(db_session, booking, BookingEvent.BOOKED, guest)

    assert len(created) == 1
    stored = db_session.query(Notification).one()
    assert stored.recipient_id == host.id
    assert stored.sender_id == guest.id
    assert stored.is_read is False


def test_notify_role_inserts_one_row_per_admin(db_session, notifications, make_user, host):
    admins = [make_user(UserRole.ADMIN) for _ in range(3)]

    count = notifications.notify_admins(db_session, "Heads up", sender_id=host.id)

    assert count == 3
    rows = db_session.query(Notification).all()
    assert sorted(n.recipient_id for n in rows) == sorted(a.id for a in admins)
    assert {n.type for n in rows} == {NotificationType.SYSTEM.value}


def test_notify_role_without_recipients(db_session, notifications):
    assert notifications.notify_role(db_session, UserRole.ADMIN, "Nobody home") == 0
    assert db_session.query(Notification).count() == 0


def test_notify_role_failure_is_swallowed(db_session, notifications, admin, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("insert failed")

    monkeypatch.setattr(db_session, "execute", explode)

    assert notifications.notify_admins(db_session, "Lost") == 0


def test_mark_as_read_by_recipient(db_session, notifications, admin):
    notifications.notify_admins(db_session, "Read me")
    notification = db_session.query(Notification).one()

    updated = notifications.mark_as_read(db_session, notification.id, admin)

    assert updated.is_read is True


def test_mark_as_read_by_someone_else(db_session, notifications, admin, guest):
    notifications.notify_admins(db_session, "Not yours")
    notification = db_session.query(Notification).one()

    with pytest.raises(ForbiddenError):
        notifications.mark_as_read(db_session, notification.id, guest)


def test_mark_as_read_missing(db_session, notifications, guest):
    with pytest.raises(NotFoundError):
        notifications.mark_as_read(db_session, 42, guest)
