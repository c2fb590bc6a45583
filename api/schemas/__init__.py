"""
API Schemas
Pydantic request and response models
"""

from api.schemas.common import PaginationInfo, MessageResponse, ErrorResponse
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
from api.schemas.medicine import (
    MedicineCreate,
    MedicineUpdate,
    MedicineResponse,
    MedicineEnvelope,
    MedicineList,
    NextDoseResponse,
)
from api.schemas.medicine_log import (
    MedicineLogCreate,
    MedicineLogUpdate,
    MedicineLogResponse,
    MedicineLogEnvelope,
    MedicineLogList,
    AdherenceResponse,
)
from api.schemas.weight import (
    WeightLogCreate,
    WeightLogUpdate,
    WeightLogResponse,
    WeightLogEnvelope,
    WeightLogList,
    TrendsResponse,
)


__all__ = [
    # Common
    "PaginationInfo",
    "MessageResponse",
    "ErrorResponse",
    # Auth
    "RegisterRequest",
    "LoginRequest",
    "UserUpdateRequest",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "UserResponse",
    "SessionResponse",
    "AuthResponse",
    "UserEnvelope",
    # Medicines
    "MedicineCreate",
    "MedicineUpdate",
    "MedicineResponse",
    "MedicineEnvelope",
    "MedicineList",
    "NextDoseResponse",
    # Medicine logs
    "MedicineLogCreate",
    "MedicineLogUpdate",
    "MedicineLogResponse",
    "MedicineLogEnvelope",
    "MedicineLogList",
    "AdherenceResponse",
    # Weights
    "WeightLogCreate",
    "WeightLogUpdate",
    "WeightLogResponse",
    "WeightLogEnvelope",
    "WeightLogList",
    "TrendsResponse",
]
