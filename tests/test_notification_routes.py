from rentify.database.models import Notification
from rentify.services.notification_service import NotificationService


def test_list_notifications_for_recipient(client, db_session, admin, guest, auth_headers):
    NotificationService().notify_admins(db_session, "New booking", sender_id=guest.id)

    response = client.get("/api/notifications", headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data) == 1
    assert data[0]["message"] == "New booking"
    assert data[0]["isRead"] is False
    assert data[0]["sender"]["id"] == guest.id


def test_list_notifications_excludes_others(client, db_session, admin, guest, auth_headers):
    NotificationService().notify_admins(db_session, "Admins only")

    response = client.get("/api/notifications", headers=auth_headers(guest))

    assert response.json()["data"] == []


def test_mark_notification_read(client, db_session, admin, auth_headers):
    NotificationService().notify_admins(db_session, "Read me")
    notification = db_session.query(Notification).one()

    response = client.put(f"/api/notifications/{notification.id}/read", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json()["data"]["isRead"] is True


def test_mark_notification_read_forbidden(client, db_session, admin, guest, auth_headers):
    NotificationService().notify_admins(db_session, "Not yours")
    notification = db_session.query(Notification).one()

    response = client.put(f"/api/notifications/{notification.id}/read", headers=auth_headers(guest))

    assert response.status_code == 403
    assert response.json()["success"] is False


def test_mark_missing_notification(client, guest, auth_headers):
    response = client.put("/api/notifications/77/read", headers=auth_headers(guest))

    assert response.status_code == 404
