"""
Auth API Router
Registration, login and account endpoints backed by the auth platform
"""

from fastapi import APIRouter, Depends, status

from config import settings
from api.deps import get_bearer_token, get_current_user, services
from api.schemas.common import MessageResponse
from api.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    UserUpdateRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    UserResponse,
    SessionResponse,
    AuthResponse,
    UserEnvelope,
)
from services.auth_service import AuthenticatedUser


router = APIRouter(prefix="/auth", tags=["auth"])


def _user_response(payload: dict) -> UserResponse:
    return UserResponse(**AuthenticatedUser.from_payload(payload).to_dict())


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest):
    """
    Create an account

    - **email**: Unique email address
    - **password**: At least 6 characters
    """
    auth_service = services.get_auth_service()

    metadata = {}
    if request.first_name:
        metadata["first_name"] = request.first_name.strip()
    if request.last_name:
        metadata["last_name"] = request.last_name.strip()
    if metadata:
        metadata["full_name"] = " ".join(
            part for part in (metadata.get("first_name"), metadata.get("last_name")) if part
        )

    result = await auth_service.sign_up(
        request.email.lower().strip(),
        request.password,
        metadata
    )
    session = SessionResponse.from_payload(result["session"])

    return AuthResponse(
        message="User registered successfully",
        user=_user_response(result["user"]),
        session=session,
        requires_email_verification=session is None
    )


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest):
    auth_service = services.get_auth_service()

    result = await auth_service.sign_in(request.email.lower().strip(), request.password)

    return AuthResponse(
        message="Login successful",
        user=_user_response(result.get("user") or {}),
        session=SessionResponse.from_payload(result)
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: str = Depends(get_bearer_token),
    user: AuthenticatedUser = Depends(get_current_user)
):
    auth_service = services.get_auth_service()

    await auth_service.sign_out(token)
    return MessageResponse(message="Logout successful")


@router.get("/user", response_model=UserEnvelope)
async def get_user(user: AuthenticatedUser = Depends(get_current_user)):
    """
    Profile of the signed-in user
    """
    return UserEnvelope(user=UserResponse(**user.to_dict()))


@router.put("/user", response_model=UserEnvelope)
async def update_user(
    request: UserUpdateRequest,
    user: AuthenticatedUser = Depends(get_current_user)
):
    """
    Update profile metadata; name fields also refresh full_name
    """
    auth_service = services.get_auth_service()

    metadata = dict(user.user_metadata)
    metadata.update(request.metadata or {})
    if request.first_name is not None:
        metadata["first_name"] = request.first_name.strip()
    if request.last_name is not None:
        metadata["last_name"] = request.last_name.strip()
    if request.first_name is not None or request.last_name is not None:
        metadata["full_name"] = " ".join(
            part for part in (metadata.get("first_name"), metadata.get("last_name")) if part
        )

    updated = await auth_service.update_user(user.token, {"data": metadata})
    return UserEnvelope(
        message="User profile updated successfully",
        user=UserResponse(**updated.to_dict())
    )


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(request: ForgotPasswordRequest):
    """
    Send a reset link; the response never reveals whether the email exists
    """
    auth_service = services.get_auth_service()

    await auth_service.request_password_reset(
        request.email.lower().strip(),
        redirect_to=settings.PASSWORD_RESET_REDIRECT_URL
    )
    return MessageResponse(
        message="If an account with that email exists, a password reset link has been sent."
    )


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(request: ResetPasswordRequest):
    auth_service = services.get_auth_service()

    await auth_service.reset_password(request.token, request.password)
    return MessageResponse(message="Password has been reset successfully")
