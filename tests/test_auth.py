# =============================================================================
# INTEGRATION TESTS - signup, login and the bearer-token gate
# =============================================================================

from datetime import timedelta

import pytest

from app.core.database import generate_id
from app.core.security import SecurityUtils
from app.models import User, UserRole
from conftest import API, PASSWORD, auth_headers


def signup(client, **overrides):
    payload = {"username": "alice", "useremail": "alice@example.com", "password": "secret123"}
    payload.update(overrides)
    return client.post(f"{API}/auth/signup", json=payload)


class TestSignup:
    """POST /auth/signup"""

    def test_creates_reader_account(self, client, db_session):
        response = signup(client, useremail="  Alice@Example.COM ")

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["user"]["username"] == "alice"
        assert data["user"]["useremail"] == "alice@example.com"
        assert data["user"]["role"] == "reader"
        assert "password" not in response.text
        assert "hashed" not in response.text

        stored = db_session.get(User, data["user"]["id"])
        assert stored.hashed_password != "secret123"
        assert SecurityUtils.verify_password("secret123", stored.hashed_password)

    def test_duplicate_email_conflicts(self, client):
        assert signup(client).status_code == 201

        response = signup(client, username="alice2", useremail="ALICE@example.com")

        assert response.status_code == 409
        assert response.json()["message"] == "Email already exists"
        assert response.json()["error"]["code"] == "DUPLICATE_ERROR"

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"username": "al"}, "Username must be at least 3 characters long"),
            ({"username": "   ab   "}, "Username must be at least 3 characters long"),
            ({"useremail": "not-an-email"}, "Please enter a valid email address"),
            ({"useremail": "a@b"}, "Please enter a valid email address"),
            ({"password": "12345"}, "Password must be at least 6 characters long"),
        ],
    )
    def test_rejects_invalid_fields(self, client, overrides, message):
        response = signup(client, **overrides)

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["message"] == message

    def test_rejects_missing_fields(self, client):
        response = client.post(f"{API}/auth/signup", json={"username": "alice"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_cannot_sign_up_as_admin(self, client):
        response = signup(client, role="admin")

        assert response.status_code == 201
        assert response.json()["user"]["role"] == "reader"


class TestLogin:
    """POST /auth/login"""

    def test_returns_token_for_valid_credentials(self, client, reader):
        response = client.post(
            f"{API}/auth/login", json={"useremail": reader.email.upper(), "password": PASSWORD}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == reader.id
        assert data["tokenType"] == "bearer"
        assert data["expiresIn"] == 240 * 60
        assert SecurityUtils.decode_token(data["token"])["sub"] == reader.id

    @pytest.mark.parametrize(
        "email,password",
        [("reader-missing@example.com", PASSWORD), (None, "wrong-password")],
    )
    def test_bad_credentials_share_one_message(self, client, reader, email, password):
        response = client.post(
            f"{API}/auth/login", json={"useremail": email or reader.email, "password": password}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_missing_password_is_invalid_input(self, client):
        response = client.post(f"{API}/auth/login", json={"useremail": "a@example.com", "password": ""})

        assert response.status_code == 400


class TestAuthenticationGate:
    """Bearer token checks on GET /auth/me"""

    def test_valid_token_resolves_user(self, client, reader, reader_headers):
        response = client.get(f"{API}/auth/me", headers=reader_headers)

        assert response.status_code == 200
        assert response.json()["user"]["id"] == reader.id

    def test_missing_token(self, client):
        response = client.get(f"{API}/auth/me")

        assert response.status_code == 401
        assert response.json()["message"] == "Access denied. No token provided."

    def test_garbage_token(self, client):
        response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_expired_token_is_told_apart(self, client, reader):
        token = SecurityUtils.create_access_token({"sub": reader.id}, expires_delta=timedelta(seconds=-10))

        response = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["message"] == "Token expired. Please login again."

    def test_token_for_deleted_user(self, client):
        token = SecurityUtils.create_access_token({"sub": generate_id()})

        response = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["message"] == "User not found. Token may be invalid."

    def test_token_without_subject(self, client):
        token = SecurityUtils.create_access_token({"name": "nobody"})

        response = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token payload"

    def test_subject_with_trailing_newline_is_rejected(self, client, reader):
        token = SecurityUtils.create_access_token({"sub": reader.id + "\n"})

        response = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token payload"

    def test_reader_is_not_admin(self, client, reader_headers):
        response = client.get(f"{API}/admin/quizzes", headers=reader_headers)

        assert response.status_code == 403
        assert response.json()["message"] == "Access denied. Admin privileges required."

    def test_role_is_read_from_the_store(self, client, make_user, db_session):
        user = make_user(UserRole.READER)
        headers = auth_headers(user)
        user.role = UserRole.ADMIN
        db_session.commit()

        assert client.get(f"{API}/admin/quizzes", headers=headers).status_code == 200


class TestLogout:
    def test_logout_acknowledges(self, client, reader_headers):
        response = client.post(f"{API}/auth/logout", headers=reader_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Logged out successfully"}

    def test_logout_requires_token(self, client):
        assert client.post(f"{API}/auth/logout").status_code == 401
