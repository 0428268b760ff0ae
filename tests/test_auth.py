from conftest import PASSWORD, auth_headers

from app.models.user_model import AccountStatus


def _register(client, nick_name="newbie", email="newbie@mail.com", password="Secret123"):
    return client.post(
        "/api/v1/auth/register",
        json={"nick_name": nick_name, "email": email, "password": password},
    )


def test_register_returns_tokens_and_student_role(client):
    response = _register(client)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["access_token"]
    assert data["refresh_token"]
    assert data["user"]["roles"] == ["student"]
    assert "refresh_token" in response.cookies


def test_register_duplicate_email_is_409(client):
    _register(client)
    response = _register(client, nick_name="other")
    assert response.status_code == 409
    assert response.json()["code"] == "EMAIL_EXISTS"


def test_register_duplicate_nick_name_is_409(client):
    _register(client)
    response = _register(client, email="other@mail.com")
    assert response.status_code == 409
    assert response.json()["code"] == "NICKNAME_EXISTS"


def test_register_weak_password_is_rejected(client):
    response = _register(client, password="onlyletters")
    assert response.status_code == 400
    assert "password" in response.json()["errors"]


def test_login_success_and_wrong_password(client, student):
    response = client.post("/api/v1/auth/login", json={"email": student.email, "password": PASSWORD})
    assert response.status_code == 200
    assert response.json()["data"]["user"]["id"] == student.id

    response = client.post("/api/v1/auth/login", json={"email": student.email, "password": "Wrong12345"})
    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_CREDENTIALS"


def test_login_suspended_account_is_403(client, db, student):
    student.account_status = AccountStatus.suspended
    db.commit()
    response = client.post("/api/v1/auth/login", json={"email": student.email, "password": PASSWORD})
    assert response.status_code == 403


def test_refresh_token_can_only_be_used_once(client):
    refresh_token = _register(client).json()["data"]["refresh_token"]

    response = client.post("/api/v1/auth/refresh-token", json={"refresh_token": refresh_token})
    assert response.status_code == 200
    assert response.json()["data"]["refresh_token"] != refresh_token

    response = client.post("/api/v1/auth/refresh-token", json={"refresh_token": refresh_token})
    assert response.status_code == 401


def test_profile_update_and_soft_delete(client, student, student_headers):
    response = client.put("/api/v1/auth/profile", json={"name": "Nguyễn Văn A"}, headers=student_headers)
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Nguyễn Văn A"

    response = client.delete("/api/v1/auth/profile", headers=student_headers)
    assert response.status_code == 200

    response = client.get("/api/v1/auth/profile", headers=auth_headers(student))
    assert response.status_code == 401


def test_profile_update_rejects_null_nick_name(client, student_headers):
    response = client.put("/api/v1/auth/profile", json={"nick_name": None}, headers=student_headers)
    assert response.status_code == 400
    assert "nick_name" in response.json()["errors"]

    # name có thể xóa trống
    response = client.put("/api/v1/auth/profile", json={"name": None}, headers=student_headers)
    assert response.status_code == 200


def test_forgot_and_reset_password(client, db, student):
    response = client.post("/api/v1/auth/forgot-password", json={"email": student.email})
    assert response.status_code == 200
    db.refresh(student)
    token = student.password_reset_token
    assert token

    response = client.post("/api/v1/auth/reset-password", json={"token": token, "new_password": "NewPass123"})
    assert response.status_code == 200

    response = client.post("/api/v1/auth/login", json={"email": student.email, "password": "NewPass123"})
    assert response.status_code == 200


def test_forgot_password_unknown_email_still_succeeds(client):
    response = client.post("/api/v1/auth/forgot-password", json={"email": "ghost@mail.com"})
    assert response.status_code == 200
