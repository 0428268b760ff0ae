from app.models.course_model import CourseStatus

URL = "/api/v1/favorites"


def test_add_list_and_remove_favorite(client, course, student_headers):
    response = client.post(URL, json={"course_id": course.id}, headers=student_headers)
    assert response.status_code == 201
    assert response.json()["data"]["course_id"] == course.id

    data = client.get(URL, headers=student_headers).json()["data"]
    assert data["pagination"]["total"] == 1
    assert data["favorites"][0]["course"]["name"] == course.name

    status = client.get(f"{URL}/status/{course.id}", headers=student_headers).json()["data"]
    assert status == {"course_id": course.id, "is_favorited": True}

    assert client.delete(f"{URL}/{course.id}", headers=student_headers).status_code == 200
    response = client.delete(f"{URL}/{course.id}", headers=student_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "FAVORITE_NOT_FOUND"


def test_favorite_twice_is_409(client, course, student_headers):
    client.post(URL, json={"course_id": course.id}, headers=student_headers)
    response = client.post(URL, json={"course_id": course.id}, headers=student_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "FAVORITE_ALREADY_EXISTS"


def test_cannot_favorite_own_or_unpublished_course(client, teacher, course, teacher_headers, student_headers,
                                                   make_course):
    response = client.post(URL, json={"course_id": course.id}, headers=teacher_headers)
    assert response.status_code == 403
    assert response.json()["code"] == "CANNOT_FAVORITE_OWN_COURSE"

    draft = make_course(teacher, status=CourseStatus.draft)
    response = client.post(URL, json={"course_id": draft.id}, headers=student_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "COURSE_NOT_FOUND"


def test_archived_course_leaves_favorite_list(client, db, course, student_headers):
    client.post(URL, json={"course_id": course.id}, headers=student_headers)
    course.status = CourseStatus.archived
    db.commit()

    data = client.get(URL, headers=student_headers).json()["data"]
    assert data["favorites"] == []
    assert data["pagination"]["total"] == 0
