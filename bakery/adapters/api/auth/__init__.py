from __future__ import annotations

"""Authentication router package: registration, login, recovery and Google sign-in."""

from fastapi import APIRouter

from .routes import google as google_route
from .routes import login as login_route
from .routes import logout as logout_route
from .routes import password_reset as password_reset_route
from .routes import profile as profile_route
from .routes import register as register_route
from .routes import resend_verification as resend_verification_route
from .routes import verify_email as verify_email_route

router = APIRouter(prefix="/auth", tags=["auth"])

router.include_router(register_route.router, prefix="/register")
router.include_router(verify_email_route.router, prefix="/verify-email")
router.include_router(resend_verification_route.router, prefix="/resend-verification")
router.include_router(login_route.router, prefix="/login")
router.include_router(logout_route.router, prefix="/logout")
router.include_router(profile_route.router, prefix="/profile")
router.include_router(password_reset_route.router)
router.include_router(google_route.router, prefix="/google")

__all__ = ["router"]
