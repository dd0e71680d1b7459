from __future__ import annotations

"""Subpackage aggregating individual auth route modules."""

__all__ = [
    "register",
    "verify_email",
    "resend_verification",
    "login",
    "logout",
    "profile",
    "password_reset",
    "google",
]
