from conftest import auth_headers

from app.models.course_model import CourseStatus
from app.models.teacher_model import ApplicationStatus


def _course_payload(category, city, **overrides):
    payload = {
        "name": "FastAPI thực chiến",
        "content": "Xây dựng REST API với FastAPI",
        "main_category_id": category["main"].id,
        "sub_category_id": category["sub"].id,
        "city_id": city.id,
        "price_options": [{"price": 1500, "quantity": 10}, {"price": 800, "quantity": 5}],
    }
    payload.update(overrides)
    return payload


def test_create_course_with_price_options(client, category, city, teacher_headers):
    response = client.post("/api/v1/courses", json=_course_payload(category, city), headers=teacher_headers)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == "draft"
    assert data["application_status"] is None
    # Phương án giá sắp xếp theo giá tăng dần
    assert [option["price"] for option in data["price_options"]] == [800.0, 1500.0]


def test_create_course_rejects_mismatched_sub_category(client, category, city, teacher_headers):
    payload = _course_payload(category, city, sub_category_id=category["other_sub"].id)
    response = client.post("/api/v1/courses", json=payload, headers=teacher_headers)
    assert response.status_code == 400
    assert "sub_category_id" in response.json()["errors"]


def test_create_course_rejects_duplicate_inline_options(client, category, city, teacher_headers):
    payload = _course_payload(category, city, price_options=[
        {"price": 1000, "quantity": 10}, {"price": 1000, "quantity": 10},
    ])
    response = client.post("/api/v1/courses", json=payload, headers=teacher_headers)
    assert response.status_code == 400
    assert "price_options[1]" in response.json()["errors"]


def test_student_cannot_create_course(client, category, city, student_headers):
    response = client.post("/api/v1/courses", json=_course_payload(category, city), headers=student_headers)
    assert response.status_code == 403


def test_list_my_courses_filters_by_status(client, teacher, teacher_headers, make_course):
    make_course(teacher, status=CourseStatus.draft, name="Nháp")
    make_course(teacher, name="Đã xuất bản")

    response = client.get("/api/v1/courses", params={"status": "draft"}, headers=teacher_headers)
    data = response.json()["data"]
    assert [c["name"] for c in data["courses"]] == ["Nháp"]
    assert data["pagination"]["total"] == 1


def test_other_teacher_cannot_touch_course(client, course, make_teacher):
    other = make_teacher("other_teacher")
    response = client.put(f"/api/v1/courses/{course.id}", json={"name": "Đổi tên"}, headers=auth_headers(other.user))
    assert response.status_code == 403
    assert response.json()["code"] == "COURSE_NOT_OWNER"


def test_course_lifecycle(client, db, teacher, teacher_headers, make_course):
    course = make_course(teacher, status=CourseStatus.draft)
    base = f"/api/v1/courses/{course.id}"

    # Chưa duyệt thì không thể xuất bản
    response = client.post(f"{base}/publish", headers=teacher_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "COURSE_NOT_APPROVED"

    response = client.post(f"{base}/submit", json={"submission_notes": "Nhờ duyệt"}, headers=teacher_headers)
    assert response.status_code == 200
    assert response.json()["data"]["application_status"] == "pending"

    # Đang chờ duyệt thì không được sửa
    response = client.put(base, json={"name": "Tên mới"}, headers=teacher_headers)
    assert response.json()["code"] == "COURSE_ALREADY_PENDING"

    course.application_status = ApplicationStatus.approved
    db.commit()

    response = client.post(f"{base}/publish", headers=teacher_headers)
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "published"
    db.refresh(teacher)
    assert teacher.total_courses == 1

    response = client.delete(base, headers=teacher_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "COURSE_PUBLISHED_CANNOT_DELETE"

    response = client.post(f"{base}/archive", json={"archive_reason": "Tạm ngưng"}, headers=teacher_headers)
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "archived"
    db.refresh(teacher)
    assert teacher.total_courses == 0


def test_resubmit_only_after_rejection(client, db, teacher, teacher_headers, make_course):
    course = make_course(teacher, status=CourseStatus.draft)
    response = client.post(f"/api/v1/courses/{course.id}/resubmit", headers=teacher_headers)
    assert response.status_code == 400

    course.application_status = ApplicationStatus.rejected
    db.commit()
    response = client.post(f"/api/v1/courses/{course.id}/resubmit", headers=teacher_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["application_status"] == "pending"
    assert data["status"] == "draft"


def test_delete_draft_course_is_soft(client, db, teacher, teacher_headers, make_course):
    course = make_course(teacher, status=CourseStatus.draft)
    response = client.delete(f"/api/v1/courses/{course.id}", headers=teacher_headers)
    assert response.status_code == 200
    db.refresh(course)
    assert course.deleted_at is not None
    assert client.get(f"/api/v1/courses/{course.id}", headers=teacher_headers).status_code == 404


def test_public_search_and_sort(client, teacher, make_course):
    make_course(teacher, name="Python nâng cao", options=((2000, 10),))
    make_course(teacher, name="Guitar cơ bản", options=((500, 4), (900, 8)))
    make_course(teacher, status=CourseStatus.draft, name="Python nháp")

    response = client.get("/api/v1/courses/public", params={"keyword": "python"})
    assert response.status_code == 200
    names = [c["name"] for c in response.json()["data"]["courses"]]
    assert names == ["Python nâng cao"]

    courses = client.get("/api/v1/courses/public", params={"sort": "price_low"}).json()["data"]["courses"]
    assert [c["min_price"] for c in courses] == [500.0, 2000.0]
    assert courses[0]["teacher_name"] == "teacher"


def test_public_detail_counts_views(client, db, course):
    response = client.get(f"/api/v1/courses/public/{course.id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["teacher"]["id"] == course.teacher_id
    assert len(data["price_options"]) == 1

    db.refresh(course)
    assert course.view_count == 1


def test_public_detail_hides_drafts(client, teacher, make_course):
    draft = make_course(teacher, status=CourseStatus.draft)
    assert client.get(f"/api/v1/courses/public/{draft.id}").status_code == 404


def test_price_option_limit_and_duplicates(client, course, teacher_headers):
    base = f"/api/v1/courses/{course.id}/price-options"

    response = client.post(base, json={"price": 1000, "quantity": 10}, headers=teacher_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "PRICE_OPTION_DUPLICATE"

    assert client.post(base, json={"price": 1800, "quantity": 20}, headers=teacher_headers).status_code == 201
    assert client.post(base, json={"price": 2500, "quantity": 30}, headers=teacher_headers).status_code == 201

    response = client.post(base, json={"price": 3000, "quantity": 40}, headers=teacher_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "PRICE_OPTION_LIMIT_EXCEEDED"


def test_update_and_delete_price_option(client, course, teacher_headers):
    base = f"/api/v1/courses/{course.id}/price-options"
    option_id = client.get(base, headers=teacher_headers).json()["data"][0]["id"]

    response = client.put(f"{base}/{option_id}", json={"price": 1200}, headers=teacher_headers)
    assert response.status_code == 200
    assert response.json()["data"]["price"] == 1200.0

    assert client.delete(f"{base}/{option_id}", headers=teacher_headers).status_code == 200
    assert client.get(base, headers=teacher_headers).json()["data"] == []
    assert client.put(f"{base}/{option_id}", json={"price": 1300}, headers=teacher_headers).status_code == 404


def test_update_course_rejects_null_name(client, teacher, teacher_headers, make_course):
    course = make_course(teacher, status=CourseStatus.draft)
    response = client.put(f"/api/v1/courses/{course.id}", json={"name": None}, headers=teacher_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert "name" in response.json()["errors"]
