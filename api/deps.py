"""
API Dependencies
Common dependencies for FastAPI endpoints
"""

from typing import Optional
from fastapi import Depends, Header, Query

from database import get_db
from services.auth_service import AuthenticatedUser
from services.errors import AuthError


def get_bearer_token(
    authorization: Optional[str] = Header(None)
) -> str:
    """
    Extract the access token from `Authorization: Bearer <token>`
    Raises AuthError(401) if missing
    """
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError(
            401,
            "No access token provided. Please include a Bearer token in the Authorization header."
        )
    return token.strip()


async def get_current_user(
    token: str = Depends(get_bearer_token)
) -> AuthenticatedUser:
    """
    Verify the bearer token with the auth platform
    Returns the authenticated user
    """
    auth_service = services.get_auth_service()
    return await auth_service.get_user(token)


def pagination_params(
    page: int = Query(1, description="Page number, starting at 1"),
    limit: int = Query(20, description="Items per page (max 100)")
) -> dict:
    """
    Common pagination parameters
    """
    if page < 1:
        page = 1
    if limit < 1:
        limit = 20
    if limit > 100:
        limit = 100

    return {
        "page": page,
        "limit": limit,
        "offset": (page - 1) * limit
    }


class ServiceDependency:
    """
    Dependency injection for services
    """

    @staticmethod
    def get_medicine_service():
        from services.medicine_service import medicine_service
        return medicine_service

    @staticmethod
    def get_medicine_log_service():
        from services.medicine_log_service import medicine_log_service
        return medicine_log_service

    @staticmethod
    def get_weight_service():
        from services.weight_service import weight_service
        return weight_service

    @staticmethod
    def get_auth_service():
        from services.auth_service import auth_service
        return auth_service


# Service dependency instances
services = ServiceDependency()


__all__ = [
    "get_db",
    "get_bearer_token",
    "get_current_user",
    "pagination_params",
    "services",
]
