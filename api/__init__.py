"""
API Module
FastAPI routers for the MedTracker application
"""

from config import settings
from api.auth import router as auth_router
from api.medicines import router as medicines_router
from api.medicine_logs import router as medicine_logs_router
from api.weights import router as weights_router

from api.deps import (
    get_db,
    get_bearer_token,
    get_current_user,
    pagination_params,
    services,
)


__all__ = [
    # Routers
    "auth_router",
    "medicines_router",
    "medicine_logs_router",
    "weights_router",
    # Dependencies
    "get_db",
    "get_bearer_token",
    "get_current_user",
    "pagination_params",
    "services",
]


def include_routers(app):
    """
    Include all API routers in the FastAPI app

    Usage:
        from api import include_routers
        include_routers(app)
    """
    app.include_router(auth_router, prefix=settings.API_PREFIX)
    app.include_router(medicines_router, prefix=settings.API_PREFIX)
    app.include_router(medicine_logs_router, prefix=settings.API_PREFIX)
    app.include_router(weights_router, prefix=settings.API_PREFIX)
