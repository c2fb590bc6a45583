"""
Service Errors
Typed failures raised by the service layer and rendered by the app's exception handlers
"""

from typing import List, Optional


class ServiceError(Exception):
    """Base class for service failures that map to an HTTP status"""
    status_code: int = 500

    def __init__(self, message: str, details: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailed(ServiceError):
    """One or more field rules were violated"""
    status_code = 400

    def __init__(self, errors: List[str], message: str = "Validation failed"):
        super().__init__(message, details=list(errors))
        self.errors = list(errors)


class NotFound(ServiceError):
    status_code = 404


class DuplicateEntry(ServiceError):
    status_code = 409


class AuthError(ServiceError):
    """Failure reported by (or while reaching) the auth platform"""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
