"""
Tests for Auth Service
Exercises the auth platform client against a mocked HTTP transport
"""

import json
import pytest
import httpx

from services.auth_service import AuthService, AuthenticatedUser
from services.errors import AuthError


USER_PAYLOAD = {
    "id": "11111111-1111-1111-1111-111111111111",
    "email": "test.user@example.com",
    "email_confirmed_at": "2024-01-01T00:00:00Z",
    "created_at": "2024-01-01T00:00:00Z",
    "user_metadata": {"first_name": "Test"},
}


def make_service(handler) -> AuthService:
    return AuthService(
        base_url="http://auth.test",
        api_key="anon-key",
        transport=httpx.MockTransport(handler)
    )


class TestGetUser:
    """Token verification"""

    @pytest.mark.asyncio
    async def test_valid_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["auth"] = request.headers.get("Authorization")
            seen["apikey"] = request.headers.get("apikey")
            return httpx.Response(200, json=USER_PAYLOAD)

        service = make_service(handler)
        user = await service.get_user("good-token")
        await service.close()

        assert isinstance(user, AuthenticatedUser)
        assert user.id == USER_PAYLOAD["id"]
        assert user.email_verified is True
        assert user.token == "good-token"
        assert seen == {"path": "/auth/v1/user", "auth": "Bearer good-token", "apikey": "anon-key"}

    @pytest.mark.asyncio
    async def test_rejected_token(self):
        service = make_service(lambda request: httpx.Response(401, json={"msg": "invalid JWT"}))

        with pytest.raises(AuthError) as exc_info:
            await service.get_user("bad-token")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_transport_failure_is_503(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        service = make_service(handler)

        with pytest.raises(AuthError) as exc_info:
            await service.get_user("token")

        assert exc_info.value.status_code == 503


class TestSignUpAndSignIn:

    @pytest.mark.asyncio
    async def test_sign_up_sends_metadata(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["path"] = request.url.path
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=USER_PAYLOAD)

        service = make_service(handler)
        result = await service.sign_up("new@example.com", "secret1", {"first_name": "New"})

        assert captured["path"] == "/auth/v1/signup"
        assert captured["body"]["data"] == {"first_name": "New"}
        assert result["session"] is None
        assert result["user"]["id"] == USER_PAYLOAD["id"]

    @pytest.mark.asyncio
    async def test_sign_up_existing_email_is_conflict(self):
        service = make_service(lambda request: httpx.Response(422, json={"msg": "User already registered"}))

        with pytest.raises(AuthError) as exc_info:
            await service.sign_up("dup@example.com", "secret1")

        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_sign_in_uses_password_grant(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["grant"] = request.url.params.get("grant_type")
            return httpx.Response(200, json={"access_token": "abc", "user": USER_PAYLOAD})

        service = make_service(handler)
        session = await service.sign_in("test.user@example.com", "secret1")

        assert captured["grant"] == "password"
        assert session["access_token"] == "abc"

    @pytest.mark.asyncio
    async def test_bad_credentials(self):
        service = make_service(
            lambda request: httpx.Response(400, json={"error_description": "Invalid login credentials"})
        )

        with pytest.raises(AuthError) as exc_info:
            await service.sign_in("test.user@example.com", "wrong")

        assert exc_info.value.status_code == 401


class TestPasswordRecovery:

    @pytest.mark.asyncio
    async def test_reset_verifies_then_updates_password(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append((request.method, request.url.path))
            if request.url.path.endswith("/verify"):
                return httpx.Response(200, json={"access_token": "recovery-session", "user": USER_PAYLOAD})
            return httpx.Response(200, json=USER_PAYLOAD)

        service = make_service(handler)
        await service.reset_password("hash", "newsecret")

        assert calls == [("POST", "/auth/v1/verify"), ("PUT", "/auth/v1/user")]

    @pytest.mark.asyncio
    async def test_invalid_recovery_token(self):
        service = make_service(lambda request: httpx.Response(403, json={"msg": "Token has expired"}))

        with pytest.raises(AuthError) as exc_info:
            await service.reset_password("stale", "newsecret")

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_forgot_password_never_raises_on_platform_error(self):
        service = make_service(lambda request: httpx.Response(429, json={"msg": "rate limited"}))

        await service.request_password_reset("someone@example.com")
