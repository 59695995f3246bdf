"""Integration tests for authentication API."""

from datetime import datetime, timedelta, timezone

from app.core.auth.entities import AuthResult
from app.core.domain.enums import UserType

CREATED = datetime(2025, 9, 6, 15, 0, 0, tzinfo=timezone.utc)

REGISTRATION = {
    "username": "newuser",
    "email": "new@example.com",
    "password": "secret1",
    "confirmPassword": "secret1",
    "userType": "EndUser",
    "acceptTerms": True,
}


class TestAuthAPI:
    """Test authentication API endpoints."""

    def test_login_success(self, client, override_auth_dependency, mock_user):
        """Test successful login with camelCase payload."""
        override_auth_dependency.login.return_value = AuthResult.succeeded(
            "Login successful",
            user=mock_user,
            token="access.token.value",
            refresh_token="opaque-refresh",
            expires_at=CREATED + timedelta(hours=1),
        )

        response = client.post(
            "/api/v1/auth/login",
            json={"usernameOrEmail": "testuser", "password": "password123", "rememberMe": True},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Login successful"
        assert data["token"] == "access.token.value"
        assert data["refreshToken"] == "opaque-refresh"
        assert data["expiresAt"].startswith("2025-09-06T16:00:00")
        assert data["user"]["userType"] == "EndUser"
        assert data["user"]["isActive"] is True
        assert "passwordHash" not in data["user"]
        assert "refreshToken" not in data["user"]

        override_auth_dependency.login.assert_called_once_with(
            username_or_email="testuser",
            password="password123",
            remember_me=True,
        )

    def test_login_invalid_credentials(self, client, override_auth_dependency):
        """Test login with wrong credentials."""
        override_auth_dependency.login.return_value = AuthResult.failed(
            "Invalid username/email or password"
        )

        response = client.post(
            "/api/v1/auth/login",
            json={"usernameOrEmail": "testuser", "password": "wrong"},
        )

        assert response.status_code == 401
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "Invalid username/email or password"
        assert data["token"] is None
        assert data["user"] is None
        assert override_auth_dependency.login.call_args.kwargs["remember_me"] is False

    def test_login_missing_fields(self, client, override_auth_dependency):
        """Test malformed login body is rejected before the core runs."""
        response = client.post("/api/v1/auth/login", json={"usernameOrEmail": "testuser"})

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "Invalid input data"
        assert any(error["field"] == "password" for error in data["errors"])
        override_auth_dependency.login.assert_not_called()

    def test_register_success(self, client, override_auth_dependency, mock_user):
        """Test successful user registration."""
        override_auth_dependency.register.return_value = AuthResult.succeeded(
            "Registration successful",
            user=mock_user,
            token="access.token.value",
            expires_at=CREATED + timedelta(hours=1),
        )

        response = client.post("/api/v1/auth/register", json=REGISTRATION)

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Registration successful"
        assert data["refreshToken"] is None
        override_auth_dependency.register.assert_called_once_with(
            username="newuser",
            email="new@example.com",
            password="secret1",
            user_type=UserType.END_USER,
        )

    def test_register_user_already_exists(self, client, override_auth_dependency):
        """Test registration with existing username."""
        override_auth_dependency.register.return_value = AuthResult.failed(
            "Username already exists"
        )

        response = client.post("/api/v1/auth/register", json=REGISTRATION)

        assert response.status_code == 400
        assert response.json()["message"] == "Username already exists"

    def test_register_password_mismatch(self, client, override_auth_dependency):
        response = client.post(
            "/api/v1/auth/register",
            json={**REGISTRATION, "confirmPassword": "different"},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Invalid input data"
        assert "do not match" in data["errors"][0]["message"]
        override_auth_dependency.register.assert_not_called()

    def test_register_terms_not_accepted(self, client, override_auth_dependency):
        response = client.post(
            "/api/v1/auth/register",
            json={**REGISTRATION, "acceptTerms": False},
        )

        assert response.status_code == 400
        assert "terms and conditions" in response.json()["errors"][0]["message"]

    def test_register_short_password(self, client, override_auth_dependency):
        response = client.post(
            "/api/v1/auth/register",
            json={**REGISTRATION, "password": "abc", "confirmPassword": "abc"},
        )

        assert response.status_code == 400
        override_auth_dependency.register.assert_not_called()

    def test_register_unknown_user_type(self, client, override_auth_dependency):
        response = client.post(
            "/api/v1/auth/register",
            json={**REGISTRATION, "userType": "Superuser"},
        )

        assert response.status_code == 400

    def test_validate_token(self, client, override_auth_dependency, mock_user):
        override_auth_dependency.validate_token.return_value = AuthResult.succeeded(
            "Token is valid", user=mock_user
        )

        response = client.post("/api/v1/auth/validate", json={"token": "access.token.value"})

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Token is valid"
        assert data["user"]["username"] == "testuser"
        override_auth_dependency.validate_token.assert_called_once_with("access.token.value")

    def test_validate_invalid_token(self, client, override_auth_dependency):
        override_auth_dependency.validate_token.return_value = AuthResult.failed("Invalid token")

        response = client.post("/api/v1/auth/validate", json={"token": "garbage"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_validate_empty_token(self, client, override_auth_dependency):
        response = client.post("/api/v1/auth/validate", json={"token": ""})

        assert response.status_code == 400
        override_auth_dependency.validate_token.assert_not_called()

    def test_refresh_token(self, client, override_auth_dependency, mock_user):
        override_auth_dependency.refresh_token.return_value = AuthResult.succeeded(
            "Token refreshed successfully",
            user=mock_user,
            token="new.access.token",
            refresh_token="rotated-refresh",
            expires_at=CREATED + timedelta(hours=1),
        )

        response = client.post("/api/v1/auth/refresh", json={"refreshToken": "old-refresh"})

        assert response.status_code == 200
        assert response.json()["refreshToken"] == "rotated-refresh"
        override_auth_dependency.refresh_token.assert_called_once_with("old-refresh")

    def test_refresh_expired_token(self, client, override_auth_dependency):
        override_auth_dependency.refresh_token.return_value = AuthResult.failed(
            "Refresh token has expired"
        )

        response = client.post("/api/v1/auth/refresh", json={"refreshToken": "old-refresh"})

        assert response.status_code == 401
        assert response.json()["message"] == "Refresh token has expired"

    def test_logout(self, client, override_auth_dependency):
        response = client.post("/api/v1/auth/logout", json={"token": ""})

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Logout successful"}
        override_auth_dependency.logout.assert_called_once_with("")

    def test_get_current_user(self, client, override_auth_dependency, mock_user, auth_headers):
        override_auth_dependency.validate_token.return_value = AuthResult.succeeded(
            "Token is valid", user=mock_user
        )

        response = client.get("/api/v1/auth/me", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == 1
        assert data["email"] == "test@example.com"
        assert data["userType"] == "EndUser"
        assert "passwordHash" not in data

    def test_get_current_user_without_token(self, client, override_auth_dependency):
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["error"] == "Authentication required"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_get_current_user_inactive(self, client, override_auth_dependency, auth_headers):
        override_auth_dependency.validate_token.return_value = AuthResult.failed(
            "User not found or inactive"
        )

        response = client.get("/api/v1/auth/me", headers=auth_headers)

        assert response.status_code == 401
        assert response.json()["error"] == "User not found or inactive"

    def test_security_headers(self, client, override_auth_dependency):
        response = client.post("/api/v1/auth/logout", json={})

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["Cache-Control"] == "no-store"

    def test_request_id_echoed(self, client, override_auth_dependency):
        supplied = client.post(
            "/api/v1/auth/logout", json={}, headers={"X-Request-ID": "req-123"}
        )
        generated = client.post("/api/v1/auth/logout", json={})

        assert supplied.headers["X-Request-ID"] == "req-123"
        assert len(generated.headers["X-Request-ID"]) == 32
