from datetime import datetime, timedelta

from app.models.reservation_model import Reservation, ReservationStatus
from app.services.service_helper import js_weekday, utc_now


def test_replace_schedule(client, teacher, teacher_headers):
    payload = {"available_slots": [
        {"weekday": 1, "start_time": "09:00", "end_time": "10:00"},
        {"weekday": 3, "start_time": "14:00", "end_time": "16:00"},
    ]}
    response = client.put("/api/v1/teachers/schedule", json=payload, headers=teacher_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["created_count"] == 2
    assert data["deleted_count"] == 0

    payload = {"available_slots": [{"weekday": 0, "start_time": "19:00", "end_time": "20:00"}]}
    data = client.put("/api/v1/teachers/schedule", json=payload, headers=teacher_headers).json()["data"]
    assert data["deleted_count"] == 2
    assert data["total_slots"] == 1

    response = client.get("/api/v1/teachers/schedule", headers=teacher_headers)
    slots = response.json()["data"]["available_slots"]
    assert [(s["weekday"], s["start_time"], s["end_time"]) for s in slots] == [(0, "19:00", "20:00")]


def test_schedule_rejects_bad_slots(client, teacher_headers):
    payload = {"available_slots": [
        {"weekday": 7, "start_time": "09:00", "end_time": "10:00"},
        {"weekday": 1, "start_time": "11:00", "end_time": "10:00"},
        {"weekday": 2, "start_time": "9h", "end_time": "10:00"},
    ]}
    response = client.put("/api/v1/teachers/schedule", json=payload, headers=teacher_headers)
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert "available_slots[0].weekday" in body["errors"]
    assert "available_slots[1].end_time" in body["errors"]
    assert "available_slots[2].start_time" in body["errors"]


def test_schedule_rejects_duplicates(client, teacher_headers):
    slot = {"weekday": 1, "start_time": "09:00", "end_time": "10:00"}
    response = client.put("/api/v1/teachers/schedule", json={"available_slots": [slot, slot]}, headers=teacher_headers)
    assert response.status_code == 400
    assert "available_slots" in response.json()["errors"]


def test_schedule_duplicates_compare_normalized_times(client, teacher_headers):
    payload = {"available_slots": [
        {"weekday": 1, "start_time": "9:00", "end_time": "10:00"},
        {"weekday": 1, "start_time": "09:00", "end_time": "10:00"},
    ]}
    response = client.put("/api/v1/teachers/schedule", json=payload, headers=teacher_headers)
    assert response.status_code == 400

    payload = {"available_slots": [{"weekday": 1, "start_time": "9:00", "end_time": "10:00"}]}
    data = client.put("/api/v1/teachers/schedule", json=payload, headers=teacher_headers).json()["data"]
    assert data["available_slots"][0]["start_time"] == "09:00"


def test_weekly_schedule_round_trip(client, teacher, teacher_headers):
    payload = {"weekly_schedule": {"1": ["09:00", "10:00"], "7": ["19:00"]}}
    response = client.put("/api/v1/teachers/schedule/weekly", json=payload, headers=teacher_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_slots"] == 3
    assert data["slots_by_day"]["1"] == 2

    slots = client.get("/api/v1/teachers/schedule", headers=teacher_headers).json()["data"]["available_slots"]
    # "7" là Chủ nhật -> weekday 0, mỗi khung kéo dài một tiếng
    assert {"weekday": 0, "start_time": "19:00", "end_time": "20:00"}.items() <= slots[0].items()

    weekly = client.get("/api/v1/teachers/schedule/weekly", headers=teacher_headers).json()["data"]
    assert weekly["weekly_schedule"]["1"] == ["09:00", "10:00"]
    assert weekly["weekly_schedule"]["2"] == []


def test_weekly_schedule_rejects_non_standard_time(client, teacher_headers):
    payload = {"weekly_schedule": {"1": ["12:00"]}}
    response = client.put("/api/v1/teachers/schedule/weekly", json=payload, headers=teacher_headers)
    assert response.status_code == 400


def test_conflict_check_finds_reserved_lessons(client, db, teacher, teacher_headers, student, course, open_slots):
    reserve_time = datetime.combine((utc_now() + timedelta(days=2)).date(), datetime.min.time()).replace(hour=10)
    db.add(Reservation(
        course_id=course.id,
        teacher_id=teacher.id,
        student_id=student.id,
        reserve_time=reserve_time,
        teacher_status=ReservationStatus.reserved,
        student_status=ReservationStatus.reserved,
    ))
    db.commit()

    response = client.get("/api/v1/teachers/schedule/conflicts", headers=teacher_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["has_conflicts"] is True
    assert data["total_conflicts"] == 1
    assert data["conflicts"][0]["student_id"] == student.id


def test_conflict_check_invalid_range(client, teacher_headers):
    response = client.get(
        "/api/v1/teachers/schedule/conflicts",
        params={"from_date": "2026-05-10", "to_date": "2026-05-01"},
        headers=teacher_headers,
    )
    assert response.status_code == 400
    assert response.json()["code"] == "SCHEDULE_INVALID_DATE_RANGE"


def test_public_schedule_lists_active_slots(client, teacher, open_slots):
    response = client.get(f"/api/v1/teachers/public/{teacher.id}/schedule")
    assert response.status_code == 200
    assert len(response.json()["data"]) == 7


def test_js_weekday_sunday_is_zero():
    assert js_weekday(datetime(2026, 10, 18).date()) == 0
    assert js_weekday(datetime(2026, 10, 19).date()) == 1
