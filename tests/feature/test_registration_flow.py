from bakery.core.config.settings import settings

from fakes import STRONG_PASSWORD

REGISTRATION = {
    "firstName": "María",
    "lastName": "Gómez",
    "email": "Maria@Example.com",
    "phone": "3001234567",
    "password": STRONG_PASSWORD,
}


def _register(client, **overrides):
    return client.post("/api/auth/register", json={**REGISTRATION, **overrides})


def test_register_verify_and_login(client, csrf_headers, email_service):
    response = _register(client)
    assert response.status_code == 201
    body = response.json()
    assert body["user"]["email"] == "maria@example.com"
    assert body["user"]["emailVerified"] is False
    assert body["user"]["role"] == "customer"
    assert "verificationCode" not in body

    login = client.post("/api/auth/login", json={"email": "maria@example.com", "password": STRONG_PASSWORD})
    assert login.status_code == 401
    assert login.json()["needsVerification"] is True

    code = email_service.last_code("verification")
    verified = client.post(
        "/api/auth/verify-email", json={"email": "maria@example.com", "code": code}, headers=csrf_headers
    )
    assert verified.status_code == 200
    assert verified.json()["token"]
    assert verified.json()["user"]["emailVerified"] is True

    again = client.post(
        "/api/auth/verify-email", json={"email": "maria@example.com", "code": code}, headers=csrf_headers
    )
    assert again.status_code == 400
    assert again.json()["detail"] == "Email is already verified"

    login = client.post("/api/auth/login", json={"email": "maria@example.com", "password": STRONG_PASSWORD})
    assert login.status_code == 200


def test_snake_case_payload_is_accepted(client):
    payload = {
        "first_name": "Ana",
        "last_name": "Ruiz",
        "email": "ana@example.com",
        "phone": "3109876543",
        "password": STRONG_PASSWORD,
    }

    assert client.post("/api/auth/register", json=payload).status_code == 201


def test_wrong_verification_code(client, csrf_headers, email_service):
    _register(client)
    code = email_service.last_code("verification")
    wrong = "000000" if code != "000000" else "111111"

    response = client.post(
        "/api/auth/verify-email", json={"email": "maria@example.com", "code": wrong}, headers=csrf_headers
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid or expired code"


def test_verify_and_resend_for_unknown_user(client, csrf_headers):
    verify = client.post(
        "/api/auth/verify-email", json={"email": "ghost@example.com", "code": "123456"}, headers=csrf_headers
    )
    resend = client.post("/api/auth/resend-verification", json={"email": "ghost@example.com"}, headers=csrf_headers)

    assert verify.status_code == resend.status_code == 404
    assert resend.json() == {"detail": "User not found"}


def test_resend_verification_sends_a_new_code(client, csrf_headers, email_service):
    _register(client)

    response = client.post(
        "/api/auth/resend-verification", json={"email": "maria@example.com"}, headers=csrf_headers
    )

    assert response.status_code == 200
    assert len([m for m in email_service.sent if m["kind"] == "verification"]) == 2


def test_duplicate_email_is_rejected(client):
    _register(client)

    response = _register(client, email="MARIA@example.com")

    assert response.status_code == 400
    assert response.json()["detail"] == "Email is already registered"


def test_weak_password_lists_requirements(client):
    response = _register(client, password="password")

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Password must contain")
    assert "one uppercase letter" in response.json()["detail"]


def test_invalid_fields_are_reported_together(client):
    response = _register(client, firstName="M", phone="123")

    assert response.status_code == 400
    assert response.json()["detail"] == "Validation failed"
    assert len(response.json()["errors"]) == 2


def test_registration_survives_email_outage(client, email_service, user_repository):
    email_service.fail = True

    response = _register(client)

    assert response.status_code == 201
    assert "could not be sent" in response.json()["message"]


def test_code_is_echoed_in_development(client, email_service, monkeypatch):
    monkeypatch.setattr(settings, "APP_ENV", "development")

    response = _register(client)

    assert response.json()["verificationCode"] == email_service.last_code("verification")
