"""
Auth Service
Client for the hosted auth platform (GoTrue-compatible REST API)
"""

import logging
from typing import Dict, Optional, Any
from dataclasses import dataclass, field
import httpx

from config import settings
from services.errors import AuthError


logger = logging.getLogger(__name__)


@dataclass
class AuthenticatedUser:
    """The user behind a verified access token"""
    id: str
    email: Optional[str] = None
    email_verified: bool = False
    created_at: Optional[str] = None
    last_sign_in: Optional[str] = None
    user_metadata: Dict[str, Any] = field(default_factory=dict)
    app_metadata: Dict[str, Any] = field(default_factory=dict)
    token: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], token: Optional[str] = None) -> "AuthenticatedUser":
        return cls(
            id=payload["id"],
            email=payload.get("email"),
            email_verified=payload.get("email_confirmed_at") is not None,
            created_at=payload.get("created_at"),
            last_sign_in=payload.get("last_sign_in_at"),
            user_metadata=payload.get("user_metadata") or {},
            app_metadata=payload.get("app_metadata") or {},
            token=token
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "email_verified": self.email_verified,
            "created_at": self.created_at,
            "last_sign_in": self.last_sign_in,
            "metadata": self.user_metadata,
        }


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase


class AuthService:
    """
    Thin async wrapper over the auth platform's REST endpoints
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.AUTH_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.AUTH_ANON_KEY
        self.timeout = timeout or settings.AUTH_TIMEOUT_SECONDS
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.base_url}/auth/v1",
                timeout=self.timeout,
                headers={"apikey": self.api_key} if self.api_key else None,
                transport=self._transport
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        **kwargs
    ) -> httpx.Response:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        try:
            return await self._get_client().request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Auth platform request {method} {path} failed: {e}")
            raise AuthError(503, "Authentication service is unavailable")

    # ==================== ACCOUNT ====================

    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Register a new account

        Returns:
            {"user": {...}, "session": {...} or None}
        """
        response = await self._request(
            "POST",
            "/signup",
            json={"email": email, "password": password, "data": metadata or {}}
        )

        if response.is_error:
            message = _error_message(response)
            logger.warning(f"Registration failed for {email}: {message}")
            if "already registered" in message.lower():
                raise AuthError(
                    409,
                    "An account with this email address already exists. Please try logging in instead."
                )
            raise AuthError(400, message or "Failed to create user account")

        body = response.json()
        # Without email confirmation the platform returns the session at top level
        if "access_token" in body:
            return {"user": body.get("user") or {}, "session": body}
        return {"user": body.get("user") or body, "session": None}

    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """Exchange credentials for a session"""
        response = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password}
        )

        if response.is_error:
            message = _error_message(response)
            logger.info(f"Login failed for {email}: {message}")
            if "email not confirmed" in message.lower():
                raise AuthError(401, "Please verify your email address before logging in.")
            raise AuthError(401, "Invalid email or password. Please check your credentials and try again.")

        return response.json()

    async def sign_out(self, token: str) -> None:
        response = await self._request("POST", "/logout", token=token)
        if response.is_error:
            logger.error(f"Logout failed: {_error_message(response)}")
            raise AuthError(500, "Failed to log out")

    # ==================== USER ====================

    async def get_user(self, token: str) -> AuthenticatedUser:
        """Verify an access token and return its user"""
        response = await self._request("GET", "/user", token=token)

        if response.is_error:
            logger.info(f"Token verification failed: {_error_message(response)}")
            raise AuthError(401, "The provided token is invalid or expired. Please log in again.")

        payload = response.json()
        if not payload or not payload.get("id"):
            raise AuthError(401, "No user associated with this token. Please log in again.")

        return AuthenticatedUser.from_payload(payload, token=token)

    async def update_user(self, token: str, attributes: Dict[str, Any]) -> AuthenticatedUser:
        """Update password, email or metadata (`data`) of the token's user"""
        response = await self._request("PUT", "/user", token=token, json=attributes)

        if response.is_error:
            message = _error_message(response)
            logger.warning(f"User update failed: {message}")
            raise AuthError(400, message or "Failed to update user")

        return AuthenticatedUser.from_payload(response.json(), token=token)

    # ==================== PASSWORD RECOVERY ====================

    async def request_password_reset(self, email: str, redirect_to: Optional[str] = None) -> None:
        """Send a recovery email; failures are logged, never reported to the caller"""
        params = {"redirect_to": redirect_to} if redirect_to else None
        response = await self._request("POST", "/recover", params=params, json={"email": email})

        if response.is_error:
            logger.warning(f"Password reset request failed for {email}: {_error_message(response)}")

    async def reset_password(self, token_hash: str, password: str) -> None:
        """Verify a recovery token and set a new password"""
        response = await self._request(
            "POST",
            "/verify",
            json={"type": "recovery", "token_hash": token_hash}
        )

        if response.is_error:
            logger.info(f"Recovery token rejected: {_error_message(response)}")
            raise AuthError(
                400,
                "The password reset token is invalid or has expired. Please request a new reset link."
            )

        session = response.json()
        await self.update_user(session["access_token"], {"password": password})
        logger.info("Password reset completed")


# Singleton instance
auth_service = AuthService()
