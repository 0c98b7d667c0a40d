"""Tests for authentication endpoints."""

import pytest
from fastapi import status

from app.services.user_service import UserService


class TestAuthEndpoints:
    """Test authentication flow."""

    def test_register(self, client, test_user_data):
        """Test user registration."""
        response = client.post("/api/v1/auth/register", json=test_user_data)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["token_type"] == "bearer"
        assert data["username"] == "alice"
        assert data["email"] == "alice@x.com"
        assert data["role"] == "USER"
        assert data["expires_in"] == 86400

    def test_register_duplicate_username(self, client, test_user_data):
        client.post("/api/v1/auth/register", json=test_user_data)

        response = client.post(
            "/api/v1/auth/register",
            json={**test_user_data, "email": "someone@x.com"},
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["message"] == "Username already exists"

    def test_register_duplicate_email(self, client, test_user_data):
        client.post("/api/v1/auth/register", json=test_user_data)

        response = client.post(
            "/api/v1/auth/register",
            json={**test_user_data, "username": "alice2"},
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        data = response.json()
        assert data["message"] == "Email already exists"
        assert data["error"] == "CONFLICT"

    def test_register_username_taken_after_existence_check(self, client, test_user_data, monkeypatch):
        """A username claimed between the check and the insert is still a 409."""
        client.post("/api/v1/auth/register", json=test_user_data)
        monkeypatch.setattr(UserService, "user_exists", staticmethod(lambda db, username: False))

        response = client.post(
            "/api/v1/auth/register",
            json={**test_user_data, "email": "someone@x.com"},
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["message"] == "Username already exists"

    def test_register_email_taken_after_existence_check(self, client, test_user_data, monkeypatch):
        client.post("/api/v1/auth/register", json=test_user_data)
        monkeypatch.setattr(UserService, "user_exists_by_email", staticmethod(lambda db, email: False))

        response = client.post(
            "/api/v1/auth/register",
            json={**test_user_data, "username": "alice2"},
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["message"] == "Email already exists"

    def test_register_email_with_ampersand(self, client, test_user_data):
        response = client.post(
            "/api/v1/auth/register",
            json={**test_user_data, "email": "A&B@x.com"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["email"] == "a&b@x.com"

    @pytest.mark.parametrize(
        "override",
        [
            {"username": "al"},
            {"email": "not-an-email"},
            {"password": "123"},
            {"first_name": ""},
        ],
    )
    def test_register_invalid_body(self, client, test_user_data, override):
        response = client.post("/api/v1/auth/register", json={**test_user_data, **override})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "message" in response.json()

    def test_register_rejects_bad_username_characters(self, client, test_user_data):
        response = client.post(
            "/api/v1/auth/register",
            json={**test_user_data, "username": "<b>alice</b>"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_login_success(self, client, test_user_data, test_user_credentials):
        client.post("/api/v1/auth/register", json=test_user_data)

        response = client.post("/api/v1/auth/login", json=test_user_credentials)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["username"] == "alice"

    def test_login_invalid_credentials(self, client, test_user_data):
        client.post("/api/v1/auth/register", json=test_user_data)

        response = client.post(
            "/api/v1/auth/login",
            json={"username": "alice", "password": "wrongpassword"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Invalid username or password"

    def test_login_nonexistent_user(self, client):
        response = client.post(
            "/api/v1/auth/login",
            json={"username": "nobody", "password": "password"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_get_profile(self, client, test_user_data):
        token = client.post("/api/v1/auth/register", json=test_user_data).json()["access_token"]

        response = client.get(
            "/api/v1/auth/profile",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["username"] == "alice"
        assert data["email"] == "alice@x.com"
        assert data["first_name"] == "Alice"
        assert data["last_name"] == "Smith"
        assert data["role"] == "USER"
        assert "created_at" in data

    def test_get_profile_no_token(self, client):
        response = client.get("/api/v1/auth/profile")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_get_profile_invalid_token(self, client):
        response = client.get(
            "/api/v1/auth/profile",
            headers={"Authorization": "Bearer invalid_token"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_token(self, client, test_user_data):
        refresh_token = client.post("/api/v1/auth/register", json=test_user_data).json()["refresh_token"]

        response = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["refresh_token"] != refresh_token

    def test_refresh_with_garbage_token(self, client):
        response = client.post("/api/v1/auth/refresh", json={"refresh_token": "garbage"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestLogoutEndpoint:
    """Logout revokes the presented access token."""

    def test_logout_revokes_token(self, client, test_user_data):
        token = client.post("/api/v1/auth/register", json=test_user_data).json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}
        assert client.get("/api/v1/auth/profile", headers=headers).status_code == 200

        response = client.post("/api/v1/auth/logout", headers=headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Logout successful"
        assert client.app.state.token_blacklist.is_revoked(token)
        assert client.get("/api/v1/auth/profile", headers=headers).status_code == 401

    def test_logout_leaves_other_sessions_alone(self, client, test_user_data, test_user_credentials):
        first = client.post("/api/v1/auth/register", json=test_user_data).json()["access_token"]
        second = client.post("/api/v1/auth/login", json=test_user_credentials).json()["access_token"]

        client.post("/api/v1/auth/logout", headers={"Authorization": f"Bearer {first}"})

        response = client.get("/api/v1/auth/profile", headers={"Authorization": f"Bearer {second}"})
        assert response.status_code == status.HTTP_200_OK

    def test_logout_without_header_succeeds(self, client):
        response = client.post("/api/v1/auth/logout")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Logout successful"

    def test_logout_with_invalid_token_succeeds(self, client):
        response = client.post(
            "/api/v1/auth/logout",
            headers={"Authorization": "Bearer invalid.token.here"},
        )

        assert response.status_code == status.HTTP_200_OK

    def test_refresh_after_refresh_token_logout(self, client, test_user_data):
        refresh_token = client.post("/api/v1/auth/register", json=test_user_data).json()["refresh_token"]
        client.post("/api/v1/auth/logout", headers={"Authorization": f"Bearer {refresh_token}"})

        response = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Invalid refresh token"


class TestHealth:
    def test_root(self, client):
        assert client.get("/").json()["message"] == "Welcome to Contact Search API"

    def test_unknown_route_has_message(self, client):
        response = client.get("/api/v1/nope")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "message" in response.json()
