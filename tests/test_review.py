from datetime import timedelta

from conftest import auth_headers

from app.models.course_model import CourseStatus
from app.models.reservation_model import Reservation, ReservationStatus
from app.services.service_helper import utc_now


def _finished_lesson(db, course, student, status=ReservationStatus.completed, hours_ago=2):
    reservation = Reservation(
        course_id=course.id,
        teacher_id=course.teacher_id,
        student_id=student.id,
        reserve_time=utc_now() - timedelta(hours=hours_ago),
        teacher_status=ReservationStatus.completed,
        student_status=status,
    )
    db.add(reservation)
    db.commit()
    db.refresh(reservation)
    return reservation


def _review(client, headers, reservation, rate=5, comment="Giáo viên dạy rất dễ hiểu"):
    return client.post(
        "/api/v1/reviews",
        json={"reservation_uuid": reservation.uuid, "rate": rate, "comment": comment},
        headers=headers,
    )


def test_submit_review_updates_ratings(client, db, course, teacher, student, student_headers, make_user):
    response = _review(client, student_headers, _finished_lesson(db, course, student), rate=5)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["rate"] == 5
    assert data["user"]["nick_name"] == "student"

    other = make_user("classmate")
    _review(client, auth_headers(other), _finished_lesson(db, course, other, hours_ago=3), rate=4)

    db.refresh(course)
    db.refresh(teacher)
    assert float(course.rate) == 4.5
    assert course.review_count == 2
    assert float(teacher.average_rating) == 4.5


def test_review_requires_completed_lesson(client, db, course, student, student_headers):
    reservation = _finished_lesson(db, course, student, status=ReservationStatus.reserved)
    response = _review(client, student_headers, reservation)
    assert response.status_code == 400
    assert response.json()["code"] == "REVIEW_RESERVATION_NOT_COMPLETED"


def test_overdue_lesson_can_be_reviewed(client, db, course, student, student_headers):
    reservation = _finished_lesson(db, course, student, status=ReservationStatus.overdue)
    assert _review(client, student_headers, reservation).status_code == 201
    db.refresh(reservation)
    assert reservation.student_status == ReservationStatus.completed


def test_review_only_once(client, db, course, student, student_headers):
    reservation = _finished_lesson(db, course, student)
    _review(client, student_headers, reservation)
    response = _review(client, student_headers, reservation)
    assert response.status_code == 409
    assert response.json()["code"] == "REVIEW_ALREADY_EXISTS"


def test_cannot_review_someone_elses_lesson(client, db, course, student, make_user):
    reservation = _finished_lesson(db, course, student)
    response = _review(client, auth_headers(make_user("stranger")), reservation)
    assert response.status_code == 404
    assert response.json()["code"] == "RESERVATION_NOT_FOUND"


def test_review_comment_validation(client, db, course, student, student_headers):
    reservation = _finished_lesson(db, course, student)
    response = _review(client, student_headers, reservation, rate=6, comment="   ")
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert "rate" in errors
    assert "comment" in errors


def test_course_reviews_with_stats(client, db, course, student, student_headers):
    _review(client, student_headers, _finished_lesson(db, course, student), rate=4)
    _review(client, student_headers, _finished_lesson(db, course, student, hours_ago=30), rate=1)

    data = client.get(f"/api/v1/reviews/courses/{course.uuid}").json()["data"]
    assert data["rating_stats"]["average_rating"] == 2.5
    assert data["rating_stats"]["total_reviews"] == 2
    assert data["rating_stats"]["rating_distribution"] == {"5": 0, "4": 1, "3": 0, "2": 0, "1": 1}

    data = client.get(
        f"/api/v1/reviews/courses/{course.uuid}", params={"sort_by": "rating", "sort_order": "asc"}
    ).json()["data"]
    assert [r["rate"] for r in data["reviews"]] == [1, 4]

    data = client.get(f"/api/v1/reviews/courses/{course.uuid}", params={"rating": 4}).json()["data"]
    assert data["pagination"]["total"] == 1


def test_course_reviews_hidden_for_unpublished(client, db, course):
    course.status = CourseStatus.archived
    db.commit()
    response = client.get(f"/api/v1/reviews/courses/{course.uuid}")
    assert response.status_code == 404


def test_my_and_received_reviews(client, db, course, student, student_headers, teacher_headers):
    _review(client, student_headers, _finished_lesson(db, course, student))

    data = client.get("/api/v1/reviews/my-reviews", headers=student_headers).json()["data"]
    assert data["reviews"][0]["course"]["id"] == course.id

    data = client.get("/api/v1/reviews/received", headers=teacher_headers).json()["data"]
    assert data["pagination"]["total"] == 1

    assert client.get("/api/v1/reviews/received", headers=student_headers).status_code == 403
