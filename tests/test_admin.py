from conftest import auth_headers

from app.models.course_model import CourseStatus
from app.models.notification_model import Notification, NotificationType
from app.models.role_model import RoleEnum, UserRole
from app.models.teacher_model import ApplicationStatus


def _roles(db, user_id):
    return {row.role for row in db.query(UserRole).filter_by(user_id=user_id, is_active=True)}


def test_admin_login_and_profile(client, admin):
    response = client.post("/api/v1/admin/login", json={"username": "admin", "password": "Admin@123456"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["expires_in"] > 0
    assert data["admin"]["role"] == "super_admin"

    headers = {"Authorization": f"Bearer {data['access_token']}"}
    profile = client.get("/api/v1/admin/profile", headers=headers).json()["data"]
    assert profile["username"] == "admin"
    assert profile["last_login_at"] is not None

    assert client.post("/api/v1/admin/logout", headers=headers).status_code == 200


def test_admin_login_wrong_password(client, admin):
    response = client.post("/api/v1/admin/login", json={"username": "admin", "password": "sai-mat-khau"})
    assert response.status_code == 401
    assert response.json()["code"] == "ADMIN_INVALID_CREDENTIALS"


def test_admin_login_inactive_account(client, db, admin):
    admin.is_active = False
    db.commit()
    response = client.post("/api/v1/admin/login", json={"username": "admin", "password": "Admin@123456"})
    assert response.status_code == 403


def test_user_token_cannot_access_admin(client, student_headers):
    response = client.get("/api/v1/admin/teacher-applications", headers=student_headers)
    assert response.status_code == 401


def test_admin_token_cannot_access_user_routes(client, admin_headers):
    assert client.get("/api/v1/auth/profile", headers=admin_headers).status_code == 401


# ---------------------------------------------------------
# DUYỆT GIÁO VIÊN
# ---------------------------------------------------------

def test_list_pending_teacher_applications(client, make_teacher, admin_headers):
    make_teacher("pending_one", status=ApplicationStatus.pending)
    make_teacher("approved_one")

    data = client.get(
        "/api/v1/admin/teacher-applications", params={"status": "pending"}, headers=admin_headers
    ).json()["data"]
    assert data["pagination"]["total"] == 1
    assert data["applications"][0]["user"]["nick_name"] == "pending_one"


def test_approve_teacher_grants_role(client, db, admin, make_teacher, admin_headers):
    teacher = make_teacher("applicant", status=ApplicationStatus.pending)

    response = client.post(
        f"/api/v1/admin/teacher-applications/{teacher.id}/approve",
        json={"notes": "Hồ sơ đầy đủ"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["application_status"] == "approved"

    db.refresh(teacher)
    assert teacher.reviewer_id == admin.id
    roles = _roles(db, teacher.user_id)
    assert RoleEnum.teacher in roles
    assert RoleEnum.teacher_pending not in roles

    notification = db.query(Notification).filter_by(receiver_id=teacher.user_id).one()
    assert notification.type == NotificationType.teacher_application

    # Người dùng giờ đã vào được trang giáo viên
    assert client.get("/api/v1/teachers/profile", headers=auth_headers(teacher.user)).status_code == 200


def test_reject_teacher_requires_reason(client, db, make_teacher, admin_headers):
    teacher = make_teacher("applicant", status=ApplicationStatus.pending)
    url = f"/api/v1/admin/teacher-applications/{teacher.id}/reject"

    assert client.post(url, json={}, headers=admin_headers).status_code == 400

    response = client.post(url, json={"reason": "Thiếu chứng chỉ"}, headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["application_status"] == "rejected"
    assert data["review_notes"] == "Thiếu chứng chỉ"
    assert RoleEnum.teacher not in _roles(db, teacher.user_id)


def test_decide_non_pending_application(client, teacher, admin_headers):
    response = client.post(f"/api/v1/admin/teacher-applications/{teacher.id}/approve", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "APPLICATION_NOT_PENDING"

    response = client.post("/api/v1/admin/teacher-applications/999/approve", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "APPLICATION_NOT_FOUND"


# ---------------------------------------------------------
# DUYỆT KHÓA HỌC
# ---------------------------------------------------------

def test_approve_course_then_teacher_publishes(client, db, teacher, teacher_headers, make_course, admin_headers):
    course = make_course(teacher, status=CourseStatus.draft)
    client.post(f"/api/v1/courses/{course.id}/submit", headers=teacher_headers)

    data = client.get("/api/v1/admin/course-applications", headers=admin_headers).json()["data"]
    assert [c["id"] for c in data["courses"]] == [course.id]

    response = client.post(f"/api/v1/admin/course-applications/{course.id}/approve", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["application_status"] == "approved"
    assert db.query(Notification).filter_by(
        receiver_id=teacher.user_id, type=NotificationType.course_review
    ).count() == 1

    response = client.post(f"/api/v1/courses/{course.id}/publish", headers=teacher_headers)
    assert response.json()["data"]["status"] == "published"


def test_reject_course(client, teacher, teacher_headers, make_course, admin_headers):
    course = make_course(teacher, status=CourseStatus.draft)
    client.post(f"/api/v1/courses/{course.id}/submit", headers=teacher_headers)

    response = client.post(
        f"/api/v1/admin/course-applications/{course.id}/reject",
        json={"reason": "Nội dung chưa rõ ràng"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["application_status"] == "rejected"
    assert data["review_notes"] == "Nội dung chưa rõ ràng"

    # Khóa học bị từ chối có thể gửi lại
    response = client.post(f"/api/v1/courses/{course.id}/resubmit", headers=teacher_headers)
    assert response.json()["data"]["application_status"] == "pending"


def test_decide_course_not_pending(client, course, admin_headers):
    response = client.post(f"/api/v1/admin/course-applications/{course.id}/approve", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "APPLICATION_NOT_PENDING"
