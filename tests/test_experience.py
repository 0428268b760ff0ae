from conftest import auth_headers

from app.models.teacher_model import ApplicationStatus

WORK_URL = "/api/v1/teachers/work-experiences"
LEARNING_URL = "/api/v1/teachers/learning-experiences"
CERTIFICATE_URL = "/api/v1/teachers/certificates"


def _work(**overrides):
    payload = {
        "is_working": False,
        "company_name": "  Công ty ABC  ",
        "workplace": "Taipei",
        "job_category": "Giáo dục",
        "job_title": "Giảng viên",
        "start_year": 2018,
        "start_month": 3,
        "end_year": 2021,
        "end_month": 6,
    }
    payload.update(overrides)
    return payload


def _certificate(**overrides):
    payload = {
        "verifying_institution": "IELTS",
        "license_name": "IELTS Academic",
        "holder_name": "Nguyễn Văn A",
        "license_number": "IE-2024-001",
        "file_path": "/uploads/certificates/ielts.pdf",
        "category_id": "language",
        "subject": "Tiếng Anh",
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------
# KINH NGHIỆM LÀM VIỆC
# ---------------------------------------------------------

def test_create_and_list_work_experiences(client, teacher_headers):
    response = client.post(WORK_URL, json=_work(), headers=teacher_headers)
    assert response.status_code == 201
    assert response.json()["data"]["company_name"] == "Công ty ABC"

    # Đang làm việc thì bỏ qua thời điểm kết thúc
    response = client.post(WORK_URL, json=_work(is_working=True, start_year=2022), headers=teacher_headers)
    data = response.json()["data"]
    assert data["end_year"] is None and data["end_month"] is None

    data = client.get(WORK_URL, headers=teacher_headers).json()["data"]
    assert [item["start_year"] for item in data] == [2022, 2018]


def test_work_experience_requires_valid_end(client, teacher_headers):
    response = client.post(WORK_URL, json=_work(end_year=None, end_month=None), headers=teacher_headers)
    assert response.status_code == 400
    assert {"end_year", "end_month"} <= response.json()["errors"].keys()

    response = client.post(WORK_URL, json=_work(end_year=2018, end_month=1), headers=teacher_headers)
    assert response.status_code == 400
    assert "end_date" in response.json()["errors"]

    response = client.post(WORK_URL, json=_work(start_year=1960, company_name=" "), headers=teacher_headers)
    assert response.status_code == 400
    assert {"start_year", "company_name"} <= response.json()["errors"].keys()


def test_update_work_experience_checks_merged_period(client, teacher_headers):
    record_id = client.post(WORK_URL, json=_work(), headers=teacher_headers).json()["data"]["id"]
    url = f"{WORK_URL}/{record_id}"

    response = client.put(url, json={"end_year": 2017}, headers=teacher_headers)
    assert response.status_code == 400
    assert "end_date" in response.json()["errors"]

    response = client.put(url, json={"is_working": True, "job_title": "Trưởng nhóm"}, headers=teacher_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["job_title"] == "Trưởng nhóm"
    assert data["end_year"] is None

    response = client.put(url, json={"start_year": None}, headers=teacher_headers)
    assert response.status_code == 400


def test_work_experience_of_other_teacher(client, teacher_headers, make_teacher):
    record_id = client.post(WORK_URL, json=_work(), headers=teacher_headers).json()["data"]["id"]
    other = make_teacher("other_teacher")

    response = client.delete(f"{WORK_URL}/{record_id}", headers=auth_headers(other.user))
    assert response.status_code == 403
    assert response.json()["code"] == "TEACHER_RECORD_FORBIDDEN"

    assert client.delete(f"{WORK_URL}/{record_id}", headers=teacher_headers).status_code == 200
    response = client.delete(f"{WORK_URL}/{record_id}", headers=teacher_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "WORK_EXPERIENCE_NOT_FOUND"


def test_student_without_teacher_profile(client, student_headers):
    response = client.get(WORK_URL, headers=student_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "TEACHER_NOT_FOUND"


# ---------------------------------------------------------
# QUÁ TRÌNH HỌC TẬP
# ---------------------------------------------------------

def test_pending_applicant_adds_learning_experience(client, make_teacher):
    applicant = make_teacher("applicant", status=ApplicationStatus.pending)
    headers = auth_headers(applicant.user)
    payload = {
        "is_in_school": True,
        "degree": "Thạc sĩ",
        "school_name": "Đại học Quốc gia Đài Loan",
        "department": "Khoa học máy tính",
        "region": False,
        "start_year": 2023,
        "start_month": 9,
    }
    response = client.post(LEARNING_URL, json=payload, headers=headers)
    assert response.status_code == 201
    record_id = response.json()["data"]["id"]

    # Tốt nghiệp thì phải có thời điểm kết thúc
    response = client.put(f"{LEARNING_URL}/{record_id}", json={"is_in_school": False}, headers=headers)
    assert response.status_code == 400

    response = client.put(
        f"{LEARNING_URL}/{record_id}",
        json={"is_in_school": False, "end_year": 2025, "end_month": 6},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["end_year"] == 2025

    data = client.get(LEARNING_URL, headers=headers).json()["data"]
    assert len(data) == 1


# ---------------------------------------------------------
# CHỨNG CHỈ
# ---------------------------------------------------------

def test_certificate_crud(client, teacher_headers):
    response = client.post(CERTIFICATE_URL, json=_certificate(), headers=teacher_headers)
    assert response.status_code == 201
    certificate_id = response.json()["data"]["id"]

    response = client.put(
        f"{CERTIFICATE_URL}/{certificate_id}", json={"subject": "Anh văn học thuật"}, headers=teacher_headers
    )
    assert response.json()["data"]["subject"] == "Anh văn học thuật"
    assert response.json()["data"]["license_name"] == "IELTS Academic"

    response = client.put(f"{CERTIFICATE_URL}/{certificate_id}", json={"holder_name": None}, headers=teacher_headers)
    assert response.status_code == 400

    assert len(client.get(CERTIFICATE_URL, headers=teacher_headers).json()["data"]) == 1
    assert client.delete(f"{CERTIFICATE_URL}/{certificate_id}", headers=teacher_headers).status_code == 200
    assert client.get(CERTIFICATE_URL, headers=teacher_headers).json()["data"] == []


def test_certificate_requires_all_fields(client, teacher_headers):
    response = client.post(CERTIFICATE_URL, json=_certificate(license_number="   "), headers=teacher_headers)
    assert response.status_code == 400
    assert "license_number" in response.json()["errors"]

    response = client.put(f"{CERTIFICATE_URL}/999", json={"subject": "Toán"}, headers=teacher_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "CERTIFICATE_NOT_FOUND"
