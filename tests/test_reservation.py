from datetime import datetime, timedelta

from conftest import auth_headers

from app.models.notification_model import Notification
from app.models.reservation_model import Reservation, ReservationStatus
from app.services import reservation_service
from app.services.service_helper import utc_now


def _reserve(client, headers, course, reserve_date, reserve_time="10:00"):
    return client.post(
        "/api/v1/reservations",
        json={
            "course_id": course.id,
            "teacher_id": course.teacher_id,
            "reserve_date": reserve_date.isoformat(),
            "reserve_time": reserve_time,
        },
        headers=headers,
    )


def _add_reservation(db, course, student, reserve_time, teacher_status=ReservationStatus.reserved, **fields):
    reservation = Reservation(
        course_id=course.id,
        teacher_id=course.teacher_id,
        student_id=student.id,
        reserve_time=reserve_time,
        teacher_status=teacher_status,
        student_status=ReservationStatus.reserved,
        **fields,
    )
    db.add(reservation)
    db.commit()
    db.refresh(reservation)
    return reservation


# ---------------------------------------------------------
# ĐẶT LỊCH
# ---------------------------------------------------------

def test_create_reservation_waits_for_teacher(client, db, teacher, course, purchase, open_slots, student_headers,
                                              future_date):
    response = _reserve(client, student_headers, course, future_date)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["reservation"]["teacher_status"] == "pending"
    assert data["reservation"]["student_status"] == "reserved"
    assert data["reservation"]["response_deadline"] is not None
    assert data["remaining_lessons"] == {"total": 5, "used": 0, "reserved": 1, "remaining": 4}

    # Giáo viên nhận được thông báo
    assert db.query(Notification).filter_by(receiver_id=teacher.user_id).count() == 1


def test_reservation_requires_purchase(client, course, open_slots, student_headers, future_date):
    response = _reserve(client, student_headers, course, future_date)
    assert response.status_code == 400
    assert response.json()["code"] == "RESERVATION_COURSE_NOT_PURCHASED"


def test_pending_reservations_count_against_lessons(client, db, course, purchase, open_slots, student_headers,
                                                    future_date):
    purchase.quantity_total = 1
    db.commit()

    assert _reserve(client, student_headers, course, future_date, "10:00").status_code == 201
    response = _reserve(client, student_headers, course, future_date, "11:00")
    assert response.status_code == 400
    assert response.json()["code"] == "RESERVATION_INSUFFICIENT_LESSONS"


def test_reservation_outside_available_slots(client, course, purchase, open_slots, student_headers, future_date):
    response = _reserve(client, student_headers, course, future_date, "20:00")
    assert response.status_code == 400
    assert response.json()["code"] == "RESERVATION_TEACHER_UNAVAILABLE"


def test_reservation_in_the_past(client, course, purchase, open_slots, student_headers):
    yesterday = (utc_now() - timedelta(days=1)).date()
    response = _reserve(client, student_headers, course, yesterday)
    assert response.status_code == 400
    assert response.json()["code"] == "RESERVATION_PAST_TIME"


def test_reservation_conflict_is_409(client, db, course, purchase, open_slots, student_headers, make_user,
                                     future_date):
    other = make_user("other_student")
    _add_reservation(db, course, other, datetime.combine(future_date, datetime.min.time()).replace(hour=10))

    response = _reserve(client, student_headers, course, future_date)
    assert response.status_code == 409
    assert response.json()["code"] == "RESERVATION_CONFLICT"


def test_list_reservations_by_role(client, db, course, student, purchase, open_slots, student_headers,
                                   teacher_headers, future_date):
    _reserve(client, student_headers, course, future_date)

    data = client.get("/api/v1/reservations", headers=student_headers).json()["data"]
    assert data["pagination"]["total"] == 1
    data = client.get("/api/v1/reservations", params={"role": "teacher"}, headers=teacher_headers).json()["data"]
    assert data["reservations"][0]["student"]["id"] == student.id

    # Học viên không có hồ sơ giáo viên
    response = client.get("/api/v1/reservations", params={"role": "teacher"}, headers=student_headers)
    assert response.status_code == 404


# ---------------------------------------------------------
# XÁC NHẬN / TỪ CHỐI / HỦY
# ---------------------------------------------------------

def test_confirm_consumes_and_cancel_refunds(client, db, student, course, purchase, open_slots, student_headers,
                                             teacher_headers, future_date):
    reservation_id = _reserve(client, student_headers, course, future_date).json()["data"]["reservation"]["id"]

    response = client.post(f"/api/v1/reservations/{reservation_id}/confirm", headers=teacher_headers)
    assert response.status_code == 200
    assert response.json()["data"]["teacher_status"] == "reserved"
    db.refresh(purchase)
    assert purchase.quantity_used == 1
    assert db.query(Notification).filter_by(receiver_id=student.id).count() == 1

    response = client.post(
        f"/api/v1/reservations/{reservation_id}/cancel", json={"reason": "Bận việc"}, headers=student_headers
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["refunded_lessons"] == 1
    assert data["reservation"]["cancel_reason"] == "Bận việc"
    db.refresh(purchase)
    assert purchase.quantity_used == 0


def test_cancel_pending_reservation_refunds_nothing(client, course, purchase, open_slots, student_headers,
                                                    future_date):
    reservation_id = _reserve(client, student_headers, course, future_date).json()["data"]["reservation"]["id"]
    response = client.post(f"/api/v1/reservations/{reservation_id}/cancel", headers=student_headers)
    assert response.json()["data"]["refunded_lessons"] == 0

    response = client.post(f"/api/v1/reservations/{reservation_id}/cancel", headers=student_headers)
    assert response.json()["code"] == "RESERVATION_INVALID_STATUS"


def test_cancel_too_late(client, db, student, course, student_headers):
    reservation = _add_reservation(db, course, student, utc_now() + timedelta(hours=5))
    response = client.post(f"/api/v1/reservations/{reservation.id}/cancel", headers=student_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "RESERVATION_CANCEL_TOO_LATE"


def test_stranger_cannot_cancel(client, db, student, course, make_user, future_date):
    reservation = _add_reservation(db, course, student, datetime.combine(future_date, datetime.min.time()))
    stranger = make_user("stranger")
    response = client.post(f"/api/v1/reservations/{reservation.id}/cancel", headers=auth_headers(stranger))
    assert response.status_code == 403
    assert response.json()["code"] == "RESERVATION_FORBIDDEN"


def test_reject_reservation(client, course, student, purchase, open_slots, student_headers, teacher_headers,
                            future_date):
    reservation_id = _reserve(client, student_headers, course, future_date).json()["data"]["reservation"]["id"]
    response = client.post(
        f"/api/v1/reservations/{reservation_id}/reject", json={"reason": "Trùng lịch"}, headers=teacher_headers
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["teacher_status"] == "cancelled"
    assert data["rejection_reason"] == "Trùng lịch"

    response = client.post(f"/api/v1/reservations/{reservation_id}/confirm", headers=teacher_headers)
    assert response.json()["code"] == "RESERVATION_INVALID_STATUS"


def test_confirm_after_deadline_is_rejected(client, db, student, course, purchase, teacher_headers, future_date):
    reservation = _add_reservation(
        db, course, student, datetime.combine(future_date, datetime.min.time()),
        teacher_status=ReservationStatus.pending,
        response_deadline=utc_now() - timedelta(minutes=1),
    )
    response = client.post(f"/api/v1/reservations/{reservation.id}/confirm", headers=teacher_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "RESERVATION_RESPONSE_EXPIRED"


# ---------------------------------------------------------
# HOÀN THÀNH / LỊCH
# ---------------------------------------------------------

def test_both_sides_complete(client, db, student, course, student_headers, teacher_headers):
    reservation = _add_reservation(db, course, student, utc_now() - timedelta(hours=2))
    url = f"/api/v1/reservations/{reservation.id}/status"

    data = client.put(url, json={"status_type": "teacher-complete"}, headers=teacher_headers).json()["data"]
    assert data["is_fully_completed"] is False

    data = client.put(url, json={"status_type": "student-complete"}, headers=student_headers).json()["data"]
    assert data["is_fully_completed"] is True

    # Học viên không thể đánh dấu thay giáo viên
    response = client.put(url, json={"status_type": "teacher-complete"}, headers=student_headers)
    assert response.status_code == 403


def test_teacher_cannot_complete_pending(client, db, student, course, teacher_headers, future_date):
    reservation = _add_reservation(
        db, course, student, datetime.combine(future_date, datetime.min.time()),
        teacher_status=ReservationStatus.pending,
    )
    response = client.put(
        f"/api/v1/reservations/{reservation.id}/status",
        json={"status_type": "teacher-complete"},
        headers=teacher_headers,
    )
    assert response.json()["code"] == "RESERVATION_INVALID_STATUS"


def test_student_cannot_complete_unconfirmed_or_future_lesson(client, db, student, course, student_headers,
                                                               future_date):
    pending = _add_reservation(
        db, course, student, datetime.combine(future_date, datetime.min.time()),
        teacher_status=ReservationStatus.pending,
    )
    response = client.put(
        f"/api/v1/reservations/{pending.id}/status",
        json={"status_type": "student-complete"},
        headers=student_headers,
    )
    assert response.status_code == 400
    assert response.json()["code"] == "RESERVATION_INVALID_STATUS"

    upcoming = _add_reservation(db, course, student, datetime.combine(future_date, datetime.min.time()).replace(hour=9))
    response = client.put(
        f"/api/v1/reservations/{upcoming.id}/status",
        json={"status_type": "student-complete"},
        headers=student_headers,
    )
    assert response.status_code == 400
    db.refresh(upcoming)
    assert upcoming.student_status == ReservationStatus.reserved

    # Chưa hoàn thành thì chưa được đánh giá
    response = client.post(
        "/api/v1/reviews",
        json={"reservation_uuid": upcoming.uuid, "rate": 5, "comment": "Rất tốt"},
        headers=student_headers,
    )
    assert response.json()["code"] == "REVIEW_RESERVATION_NOT_COMPLETED"


def test_calendar_week_and_month(client, db, student, course, student_headers, teacher_headers, future_date):
    _add_reservation(db, course, student, datetime.combine(future_date, datetime.min.time()).replace(hour=14))

    data = client.get(
        "/api/v1/reservations/calendar", params={"date": future_date.isoformat()}, headers=student_headers
    ).json()["data"]
    assert len(data["calendar_data"]) == 7
    day = next(d for d in data["calendar_data"] if d["date"] == future_date.isoformat())
    assert day["reservations"][0]["time"] == "14:00"
    assert day["reservations"][0]["participant_name"] == "teacher"
    assert data["summary"] is None

    data = client.get(
        "/api/v1/reservations/calendar",
        params={"view": "month", "date": future_date.isoformat(), "role": "teacher"},
        headers=teacher_headers,
    ).json()["data"]
    assert data["period"]["month"] == future_date.month
    assert data["summary"]["upcoming_reservations"] == 1


# ---------------------------------------------------------
# JOB ĐỊNH KỲ
# ---------------------------------------------------------

def test_expire_overdue_cancels_unanswered(db, student, course, future_date):
    reserve_time = datetime.combine(future_date, datetime.min.time())
    overdue = _add_reservation(
        db, course, student, reserve_time,
        teacher_status=ReservationStatus.pending,
        response_deadline=utc_now() - timedelta(hours=1),
    )
    waiting = _add_reservation(
        db, course, student, reserve_time.replace(hour=9),
        teacher_status=ReservationStatus.pending,
        response_deadline=utc_now() + timedelta(hours=1),
    )

    assert reservation_service.expire_overdue(db) == 1
    db.refresh(overdue)
    db.refresh(waiting)
    assert overdue.teacher_status == ReservationStatus.cancelled
    assert overdue.response_deadline is None
    assert waiting.teacher_status == ReservationStatus.pending
    assert db.query(Notification).filter_by(receiver_id=student.id).count() == 1
    assert reservation_service.expire_overdue(db) == 0


def test_response_deadline_is_shorter_for_urgent_lessons():
    now = datetime(2026, 10, 18, 8, 0)
    urgent = reservation_service.calculate_response_deadline(datetime(2026, 10, 19, 10, 0), now)
    normal = reservation_service.calculate_response_deadline(datetime(2026, 10, 25, 10, 0), now)
    assert urgent == now + timedelta(hours=12)
    assert normal == now + timedelta(hours=24)
