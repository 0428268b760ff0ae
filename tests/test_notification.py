from conftest import auth_headers

from app.models.notification_model import NotificationType
from app.services import notification_service


def _notify(db, user, title="Thông báo"):
    return notification_service.send_notification(
        db, user.id, title, "Nội dung thông báo", NotificationType.system
    )


def test_list_notifications_with_unread_count(client, db, student, student_headers):
    first = _notify(db, student, "Thứ nhất")
    _notify(db, student, "Thứ hai")

    client.put(f"/api/v1/notifications/{first.id}/read", headers=student_headers)

    data = client.get("/api/v1/notifications", headers=student_headers).json()["data"]
    assert data["pagination"]["total"] == 2
    assert data["unread_count"] == 1

    data = client.get("/api/v1/notifications", params={"unread_only": True}, headers=student_headers).json()["data"]
    assert [n["title"] for n in data["notifications"]] == ["Thứ hai"]


def test_mark_read_of_other_user_is_404(client, db, student, make_user):
    notification = _notify(db, student)
    other = make_user("other")
    response = client.put(f"/api/v1/notifications/{notification.id}/read", headers=auth_headers(other))
    assert response.status_code == 404
    assert response.json()["code"] == "NOTIFICATION_NOT_FOUND"


def test_mark_all_read(client, db, student, student_headers):
    for index in range(3):
        _notify(db, student, f"Thông báo {index}")

    response = client.put("/api/v1/notifications/read-all", headers=student_headers)
    assert response.status_code == 200
    assert "3" in response.json()["message"]

    data = client.get("/api/v1/notifications", headers=student_headers).json()["data"]
    assert data["unread_count"] == 0
