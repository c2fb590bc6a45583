"""
Tests for Auth API
==================

Tests auth endpoints against a mocked auth platform.
"""

import importlib
import json
import pytest
import httpx
from fastapi import status
from fastapi.testclient import TestClient

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from services.auth_service import AuthService
from tests import TEST_USER_ID, TEST_USER_EMAIL, TEST_TOKEN


USER_PAYLOAD = {
    "id": TEST_USER_ID,
    "email": TEST_USER_EMAIL,
    "email_confirmed_at": "2024-01-01T00:00:00Z",
    "created_at": "2024-01-01T00:00:00Z",
    "user_metadata": {"first_name": "Test"},
}


@pytest.fixture
def platform_calls():
    return []


@pytest.fixture
def mock_auth_platform(monkeypatch, platform_calls):
    """Route the auth service through an in-process fake platform"""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else {}
        platform_calls.append((request.method, request.url.path, body))
        path = request.url.path

        if path.endswith("/signup"):
            if body["email"] == "taken@example.com":
                return httpx.Response(422, json={"msg": "User already registered"})
            return httpx.Response(200, json={"access_token": "new-token", "user": {**USER_PAYLOAD, "email": body["email"]}})
        if path.endswith("/token"):
            if body["password"] != "correct-horse":
                return httpx.Response(400, json={"error_description": "Invalid login credentials"})
            return httpx.Response(200, json={"access_token": "session-token", "expires_in": 3600, "user": USER_PAYLOAD})
        if path.endswith("/user") and request.method == "PUT":
            return httpx.Response(200, json={**USER_PAYLOAD, "user_metadata": body.get("data", {})})
        if path.endswith("/recover"):
            return httpx.Response(200, json={})
        return httpx.Response(404, json={"msg": "not found"})

    service = AuthService(
        base_url="http://auth.test",
        api_key="anon-key",
        transport=httpx.MockTransport(handler)
    )
    monkeypatch.setattr(importlib.import_module("services.auth_service"), "auth_service", service)
    return service


class TestRegister:

    @pytest.mark.api
    def test_register(self, client: TestClient, mock_auth_platform, platform_calls):
        response = client.post("/api/auth/register", json={
            "email": "New.User@Example.com",
            "password": "secret1",
            "first_name": "New",
            "last_name": "User"
        })

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["session"]["access_token"] == "new-token"
        assert data["requires_email_verification"] is False
        sent = platform_calls[0][2]
        assert sent["email"] == "new.user@example.com"
        assert sent["data"]["full_name"] == "New User"

    @pytest.mark.api
    def test_register_existing_email(self, client: TestClient, mock_auth_platform):
        response = client.post("/api/auth/register", json={"email": "taken@example.com", "password": "secret1"})

        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.api
    def test_short_password_is_400(self, client: TestClient, mock_auth_platform, platform_calls):
        response = client.post("/api/auth/register", json={"email": "a@example.com", "password": "123"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert platform_calls == []


class TestLogin:

    @pytest.mark.api
    def test_login(self, client: TestClient, mock_auth_platform):
        response = client.post("/api/auth/login", json={"email": TEST_USER_EMAIL, "password": "correct-horse"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["session"]["access_token"] == "session-token"

    @pytest.mark.api
    def test_bad_credentials(self, client: TestClient, mock_auth_platform):
        response = client.post("/api/auth/login", json={"email": TEST_USER_EMAIL, "password": "nope"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"] is True


class TestUserProfile:

    @pytest.mark.api
    def test_get_user(self, client: TestClient):
        response = client.get("/api/auth/user", headers={"Authorization": f"Bearer {TEST_TOKEN}"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["email"] == TEST_USER_EMAIL

    @pytest.mark.api
    def test_update_user_merges_metadata(self, client: TestClient, mock_auth_platform, platform_calls):
        response = client.put(
            "/api/auth/user",
            json={"last_name": "Person"},
            headers={"Authorization": f"Bearer {TEST_TOKEN}"}
        )

        assert response.status_code == status.HTTP_200_OK
        metadata = response.json()["user"]["metadata"]
        assert metadata["first_name"] == "Test"
        assert metadata["last_name"] == "Person"
        assert metadata["full_name"] == "Test Person"


class TestPasswordRecovery:

    @pytest.mark.api
    def test_forgot_password_always_succeeds(self, client: TestClient, mock_auth_platform):
        response = client.post("/api/auth/forgot-password", json={"email": "unknown@example.com"})

        assert response.status_code == status.HTTP_200_OK
        assert "If an account with that email exists" in response.json()["message"]
