"""
Tests for authentication endpoints.
"""
from app.core.config import settings
from app.core.sessions import session_manager

VALID_PASSWORD = "Secret123"


def test_register(client):
    """Test user registration starts a session."""
    response = client.post(
        "/api/auth/register",
        json={"username": "testuser", "password": VALID_PASSWORD}
    )
    assert response.status_code == 200
    body = response.json()
    assert isinstance(body["userId"], int)
    assert settings.SESSION_COOKIE_NAME in response.cookies

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json() == {"user": {"id": body["userId"], "username": "testuser"}}


def test_session_cookie_flags(client):
    """Test cookie is HttpOnly and SameSite=Strict."""
    response = client.post(
        "/api/auth/register",
        json={"username": "cookieuser", "password": VALID_PASSWORD}
    )
    set_cookie = response.headers["set-cookie"].lower()
    assert "httponly" in set_cookie
    assert "samesite=strict" in set_cookie
    assert "max-age=86400" in set_cookie


def test_session_cookie_secure_only_in_production(client, monkeypatch):
    """Test the cookie is marked Secure in production and not in development."""
    response = client.post(
        "/api/auth/register",
        json={"username": "devuser", "password": VALID_PASSWORD}
    )
    assert "; secure" not in response.headers["set-cookie"].lower()

    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    response = client.post(
        "/api/auth/register",
        json={"username": "produser", "password": VALID_PASSWORD}
    )
    assert response.status_code == 200
    assert "; secure" in response.headers["set-cookie"].lower()


def test_register_duplicate_username(client, register):
    """Test second registration with the same username is a conflict."""
    register("dupe")
    response = client.post(
        "/api/auth/register",
        json={"username": "dupe", "password": "Another123"}
    )
    assert response.status_code == 409
    assert response.json() == {"error": "Username already exists"}


def test_register_usernames_are_case_sensitive(register):
    """Test that usernames differing only by case are distinct."""
    first = register("Casey")
    second = register("casey")
    assert first["userId"] != second["userId"]


def test_register_password_without_uppercase(client):
    """Test validation failure leaves no user behind."""
    response = client.post(
        "/api/auth/register",
        json={"username": "weakling", "password": "lowercase123"}
    )
    assert response.status_code == 400
    assert "uppercase" in response.json()["error"]

    login = client.post(
        "/api/auth/login",
        json={"username": "weakling", "password": "lowercase123"}
    )
    assert login.status_code == 401


def test_register_reports_first_failing_field(client):
    """Test that username errors win over password errors."""
    response = client.post(
        "/api/auth/register",
        json={"username": "a!", "password": "short"}
    )
    assert response.status_code == 400
    assert "Username" in response.json()["error"]


def test_register_trims_username(client):
    """Test surrounding whitespace is stripped before storage."""
    response = client.post(
        "/api/auth/register",
        json={"username": "  spaced  ", "password": VALID_PASSWORD}
    )
    assert response.status_code == 200
    assert client.get("/api/auth/me").json()["user"]["username"] == "spaced"


def test_register_malformed_body(client):
    """Test a non-object body is rejected with 400."""
    response = client.post("/api/auth/register", json=["alice", VALID_PASSWORD])
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body"}


def test_login(client, register):
    """Test user login."""
    register("loginuser")
    client.post("/api/auth/logout")

    response = client.post(
        "/api/auth/login",
        json={"username": "loginuser", "password": VALID_PASSWORD}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["username"] == "loginuser"
    assert client.get("/api/auth/me").status_code == 200


def test_login_invalid_credentials_are_indistinguishable(client, register):
    """Test unknown user and wrong password produce the same response."""
    register("known")
    client.post("/api/auth/logout")

    wrong_password = client.post(
        "/api/auth/login",
        json={"username": "known", "password": "Wrong1234"}
    )
    unknown_user = client.post(
        "/api/auth/login",
        json={"username": "nonexistent", "password": "Wrong1234"}
    )
    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()
    assert client.get("/api/auth/me").status_code == 401


def test_login_requires_both_fields(client):
    """Test empty credentials are a validation error."""
    response = client.post("/api/auth/login", json={"username": "  ", "password": ""})
    assert response.status_code == 400
    assert response.json() == {"error": "Username and password are required"}


def test_logout(client, register):
    """Test logout destroys the session."""
    register("leaving")
    response = client.post("/api/auth/logout")
    assert response.status_code == 200

    me = client.get("/api/auth/me")
    assert me.status_code == 401
    assert me.json() == {"user": None}


def test_logout_without_session(client):
    """Test logout is harmless when anonymous."""
    response = client.post("/api/auth/logout")
    assert response.status_code == 200


def test_stale_cookie_rejected_after_logout(client, register):
    """Test a token is useless once its session is destroyed."""
    register("replayer")
    token = client.cookies.get(settings.SESSION_COOKIE_NAME)
    assert token
    client.post("/api/auth/logout")

    response = client.get(
        "/api/auth/me",
        headers={"Cookie": f"{settings.SESSION_COOKIE_NAME}={token}"}
    )
    assert response.status_code == 401


def test_change_password(client, register):
    """Test password change replaces the stored hash."""
    register("changer")
    response = client.post(
        "/api/auth/change-password",
        json={"currentPassword": VALID_PASSWORD, "newPassword": "Fresh4567"}
    )
    assert response.status_code == 200

    client.post("/api/auth/logout")
    old = client.post(
        "/api/auth/login",
        json={"username": "changer", "password": VALID_PASSWORD}
    )
    assert old.status_code == 401
    new = client.post(
        "/api/auth/login",
        json={"username": "changer", "password": "Fresh4567"}
    )
    assert new.status_code == 200


def test_change_password_wrong_current(client, register):
    """Test wrong current password fails and keeps the old password."""
    register("careful")
    response = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "NotMine123", "newPassword": "Fresh4567"}
    )
    assert response.status_code == 401
    assert response.json() == {"error": "Current password is incorrect"}

    client.post("/api/auth/logout")
    login = client.post(
        "/api/auth/login",
        json={"username": "careful", "password": VALID_PASSWORD}
    )
    assert login.status_code == 200


def test_change_password_requires_session(client):
    """Test anonymous password change is unauthorized."""
    response = client.post(
        "/api/auth/change-password",
        json={"currentPassword": VALID_PASSWORD, "newPassword": "Fresh4567"}
    )
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_change_password_validates_new_password(client, register):
    """Test weak new password is rejected."""
    register("picky")
    response = client.post(
        "/api/auth/change-password",
        json={"currentPassword": VALID_PASSWORD, "newPassword": "nodigits"}
    )
    assert response.status_code == 400


def test_change_password_user_deleted(client, register, db):
    """Test 404 when the session outlives its user row."""
    from app.models.user import User

    register("ghost")
    db.query(User).filter(User.username == "ghost").delete()
    db.commit()

    response = client.post(
        "/api/auth/change-password",
        json={"currentPassword": VALID_PASSWORD, "newPassword": "Fresh4567"}
    )
    assert response.status_code == 404


def test_login_replaces_existing_session(client, register):
    """Test logging in again retires the previous server-side session."""
    register("twice")
    old_token = client.cookies.get(settings.SESSION_COOKIE_NAME)
    assert old_token

    response = client.post(
        "/api/auth/login",
        json={"username": "twice", "password": VALID_PASSWORD}
    )
    assert response.status_code == 200
    assert len(session_manager.store) == 1
    assert client.get("/api/auth/me").status_code == 200

    stale = client.get(
        "/api/auth/me",
        headers={"Cookie": f"{settings.SESSION_COOKIE_NAME}={old_token}"}
    )
    assert stale.status_code == 401
