"""
Services Module
Business logic layer for the MedTracker application
"""

from services.errors import ServiceError, ValidationFailed, NotFound, DuplicateEntry, AuthError
from services.medicine_service import MedicineService, medicine_service
from services.medicine_log_service import MedicineLogService, medicine_log_service
from services.weight_service import WeightService, weight_service
from services.auth_service import AuthService, AuthenticatedUser, auth_service


__all__ = [
    # Errors
    "ServiceError",
    "ValidationFailed",
    "NotFound",
    "DuplicateEntry",
    "AuthError",
    # Service classes
    "MedicineService",
    "MedicineLogService",
    "WeightService",
    "AuthService",
    "AuthenticatedUser",
    # Singleton instances
    "medicine_service",
    "medicine_log_service",
    "weight_service",
    "auth_service",
]
