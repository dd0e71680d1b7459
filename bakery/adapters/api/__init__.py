"""HTTP routers.

``root_router`` serves the bare banner at ``/``; everything else hangs off
``api_router``, which the application mounts under ``/api``.
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .csrf import router as csrf_router
from .health import root_router
from .health import router as health_router

api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(csrf_router, prefix="/csrf-token", tags=["security"])
api_router.include_router(auth_router, tags=["auth"])

__all__ = ["api_router", "root_router"]
