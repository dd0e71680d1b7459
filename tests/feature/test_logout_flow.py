from datetime import datetime, timedelta, timezone

import jwt

from bakery.core.config.settings import settings

from fakes import STRONG_PASSWORD


def _login(client):
    response = client.post("/api/auth/login", json={"email": "maria@example.com", "password": STRONG_PASSWORD})
    assert response.status_code == 200
    return response.json()["token"]


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_logout_revokes_token_and_csrf_token(client, csrf_headers, make_user):
    make_user()
    token = _login(client)

    profile = client.get("/api/auth/profile", headers=_bearer(token))
    assert profile.status_code == 200
    assert profile.json()["user"]["email"] == "maria@example.com"

    logout = client.post("/api/auth/logout", headers={**_bearer(token), **csrf_headers})
    assert logout.status_code == 200
    assert logout.json() == {"message": "Logged out successfully"}

    revoked = client.get("/api/auth/profile", headers=_bearer(token))
    assert revoked.status_code == 401
    assert revoked.json() == {"detail": "Session expired. Please sign in again."}
    assert revoked.headers["WWW-Authenticate"] == "Bearer"

    again = client.post("/api/auth/logout", headers={**_bearer(token), **csrf_headers})
    assert again.status_code == 403


def test_new_login_after_logout_gets_working_token(client, csrf_headers, make_user):
    make_user()
    old_token = _login(client)
    client.post("/api/auth/logout", headers={**_bearer(old_token), **csrf_headers})

    new_token = _login(client)

    assert new_token != old_token
    assert client.get("/api/auth/profile", headers=_bearer(new_token)).status_code == 200


def test_logout_requires_bearer_token(client, csrf_headers):
    response = client.post("/api/auth/logout", headers=csrf_headers)

    assert response.status_code == 401
    assert response.json()["detail"] == "Authentication token missing"


def test_profile_rejects_bad_tokens(client, make_user):
    user = make_user()
    now = datetime.now(timezone.utc)
    expired = jwt.encode(
        {"sub": str(user.id), "iat": now - timedelta(days=8), "exp": now - timedelta(days=1), "jti": "x"},
        settings.JWT_SECRET.get_secret_value(),
        algorithm="HS256",
    )

    garbage = client.get("/api/auth/profile", headers=_bearer("not-a-jwt"))
    stale = client.get("/api/auth/profile", headers=_bearer(expired))

    assert garbage.status_code == 401
    assert garbage.json()["detail"] == "Invalid token"
    assert stale.status_code == 401
    assert stale.json()["detail"] == "Token expired"


def test_deactivated_user_token_stops_working(client, make_user):
    user = make_user()
    token = _login(client)

    user.is_active = False

    response = client.get("/api/auth/profile", headers=_bearer(token))
    assert response.status_code == 401
    assert response.json()["detail"] == "User not found or inactive"
