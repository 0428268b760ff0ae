from conftest import auth_headers

from app.models.course_model import CourseStatus
from app.models.teacher_model import ApplicationStatus


def _application(category, **overrides):
    payload = {
        "city": "Taipei",
        "district": "Xinyi",
        "address": "No. 7, Xinyi Road",
        "main_category_id": category["main"].id,
        "sub_category_ids": [category["sub"].id],
        "introduction": "Tôi có nhiều năm kinh nghiệm giảng dạy lập trình. " * 3,
    }
    payload.update(overrides)
    return payload


def test_apply_grants_pending_role(client, category, student, student_headers):
    response = client.post("/api/v1/teachers/apply", json=_application(category), headers=student_headers)
    assert response.status_code == 201
    assert response.json()["data"]["application_status"] == "pending"

    profile = client.get("/api/v1/auth/profile", headers=student_headers).json()["data"]
    assert "teacher_pending" in profile["roles"]


def test_apply_twice_is_409(client, category, student_headers):
    client.post("/api/v1/teachers/apply", json=_application(category), headers=student_headers)
    response = client.post("/api/v1/teachers/apply", json=_application(category), headers=student_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "APPLICATION_EXISTS"


def test_apply_sub_category_must_belong_to_main(client, category, student_headers):
    payload = _application(category, sub_category_ids=[category["other_sub"].id])
    response = client.post("/api/v1/teachers/apply", json=payload, headers=student_headers)
    assert response.status_code == 400
    assert "sub_category_ids" in response.json()["errors"]


def test_apply_introduction_too_short(client, category, student_headers):
    response = client.post(
        "/api/v1/teachers/apply", json=_application(category, introduction="ngắn"), headers=student_headers
    )
    assert response.status_code == 400
    assert "introduction" in response.json()["errors"]


def test_update_and_resubmit_rejected_application(client, db, make_teacher):
    teacher = make_teacher("applicant", status=ApplicationStatus.rejected)
    headers = auth_headers(teacher.user)

    response = client.put("/api/v1/teachers/application", json={"district": "Songshan"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["district"] == "Songshan"

    response = client.post("/api/v1/teachers/resubmit", headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["application_status"] == "pending"


def test_resubmit_pending_application_fails(client, make_teacher):
    teacher = make_teacher("applicant", status=ApplicationStatus.pending)
    response = client.post("/api/v1/teachers/resubmit", headers=auth_headers(teacher.user))
    assert response.status_code == 400
    assert response.json()["code"] == "APPLICATION_NOT_REJECTED"


def test_approved_application_not_editable(client, teacher, teacher_headers):
    response = client.put("/api/v1/teachers/application", json={"district": "Songshan"}, headers=teacher_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "APPLICATION_NOT_EDITABLE"


def test_application_update_rejects_null_fields(client, make_teacher):
    teacher = make_teacher("applicant", status=ApplicationStatus.rejected)
    response = client.put(
        "/api/v1/teachers/application", json={"city": None, "district": "Songshan"}, headers=auth_headers(teacher.user)
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert "city" in response.json()["errors"]


def test_changing_main_category_checks_existing_sub_categories(client, category, teacher, teacher_headers):
    response = client.put(
        "/api/v1/teachers/profile", json={"main_category_id": category["other_main"].id}, headers=teacher_headers
    )
    assert response.status_code == 400
    assert "sub_category_ids" in response.json()["errors"]

    response = client.put(
        "/api/v1/teachers/profile",
        json={"main_category_id": category["other_main"].id, "sub_category_ids": [category["other_sub"].id]},
        headers=teacher_headers,
    )
    assert response.status_code == 200


def test_teacher_profile_requires_teacher_role(client, student_headers, teacher_headers):
    assert client.get("/api/v1/teachers/profile", headers=student_headers).status_code == 403

    response = client.get("/api/v1/teachers/profile", headers=teacher_headers)
    assert response.status_code == 200
    assert response.json()["data"]["average_rating"] == 0.0


def test_public_teacher_and_published_courses(client, teacher, make_course):
    make_course(teacher, name="Khóa đã xuất bản")
    make_course(teacher, status=CourseStatus.draft, name="Khóa nháp")

    response = client.get(f"/api/v1/teachers/public/{teacher.id}")
    assert response.status_code == 200
    assert response.json()["data"]["user"]["nick_name"] == "teacher"

    response = client.get(f"/api/v1/teachers/public/{teacher.id}/courses")
    courses = response.json()["data"]["courses"]
    assert [c["name"] for c in courses] == ["Khóa đã xuất bản"]


def test_public_teacher_not_approved_is_404(client, make_teacher):
    teacher = make_teacher("applicant", status=ApplicationStatus.pending)
    response = client.get(f"/api/v1/teachers/public/{teacher.id}")
    assert response.status_code == 404
