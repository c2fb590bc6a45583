"""
Auth Schemas
Pydantic models for registration, login and account endpoints
"""

from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, EmailStr


# ==================== REQUEST SCHEMAS ====================

class RegisterRequest(BaseModel):
    """Schema for creating an account"""
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdateRequest(BaseModel):
    """Schema for updating the signed-in user's profile"""
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    metadata: Optional[Dict[str, Any]] = None


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Recovery token from the reset email plus the new password"""
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)


# ==================== RESPONSE SCHEMAS ====================

class UserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    email_verified: bool = False
    created_at: Optional[str] = None
    last_sign_in: Optional[str] = None
    metadata: Dict[str, Any] = {}


class SessionResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    expires_at: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]]) -> Optional["SessionResponse"]:
        if not payload or not payload.get("access_token"):
            return None
        return cls(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            expires_in=payload.get("expires_in"),
            expires_at=payload.get("expires_at")
        )


class AuthResponse(BaseModel):
    """Result of register and login"""
    message: str
    user: UserResponse
    session: Optional[SessionResponse] = None
    requires_email_verification: bool = False


class UserEnvelope(BaseModel):
    user: UserResponse
    message: Optional[str] = None
