"""Input sanitization and field validation for user-supplied data.

Sanitization HTML-escapes strings, strips the characters used to build
document-store operators, and drops operator-looking keys. Password fields
are never altered because escaping them would change the secret.
"""

import html
import re
from typing import Any, List, Optional

import structlog

logger = structlog.get_logger(__name__)

OPERATOR_CHARACTERS = re.compile(r"[\$\{\}\[\]]")

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARACTERS = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")

NAME_PATTERN = re.compile(r"^[a-zA-ZáéíóúÁÉÍÓÚñÑ\s]{2,50}$")
PHONE_PATTERN = re.compile(r"^\d{10}$")

XSS_PATTERNS = [
    re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"<iframe", re.IGNORECASE),
    re.compile(r"<object", re.IGNORECASE),
    re.compile(r"<embed", re.IGNORECASE),
]

NOSQL_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (r"\$where", r"\$ne", r"\$gt", r"\$lt", r"\$or", r"\$and", r"\$regex")
]


def is_password_field(key: str) -> bool:
    return "password" in key.lower()


def sanitize_input(value: Any) -> Any:
    """Escape HTML, strip operator characters and trim. Non-strings pass through."""
    if not isinstance(value, str):
        return value
    sanitized = html.escape(value, quote=True)
    sanitized = OPERATOR_CHARACTERS.sub("", sanitized)
    return sanitized.strip()


def sanitize_object(value: Any) -> Any:
    """Recursively sanitize a decoded JSON value.

    Keys starting with ``$`` are dropped along with their values. Values under
    password keys are returned untouched.
    """
    if isinstance(value, dict):
        sanitized = {}
        for key, item in value.items():
            if isinstance(key, str) and key.startswith("$"):
                logger.warning("operator_key_dropped", key=key)
                continue
            if isinstance(key, str) and is_password_field(key):
                sanitized[key] = item
            else:
                sanitized[key] = sanitize_object(item)
        return sanitized
    if isinstance(value, list):
        return [sanitize_object(item) for item in value]
    return sanitize_input(value)


def password_requirements_message(password: str) -> Optional[str]:
    """List the unmet password rules, or return ``None`` when all are met."""
    requirements: List[str] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        requirements.append(f"at least {PASSWORD_MIN_LENGTH} characters")
    if not re.search(r"[A-Z]", password):
        requirements.append("one uppercase letter")
    if not re.search(r"[a-z]", password):
        requirements.append("one lowercase letter")
    if not re.search(r"\d", password):
        requirements.append("one number")
    if not PASSWORD_SPECIAL_CHARACTERS.search(password):
        requirements.append("one special character (!@#$%^&*...)")
    if not requirements:
        return None
    return "Password must contain: " + ", ".join(requirements)


def is_strong_password(password: str) -> bool:
    return password_requirements_message(password) is None


def is_valid_name(name: str) -> bool:
    return bool(NAME_PATTERN.fullmatch(name or ""))


def is_valid_phone(phone: str) -> bool:
    return bool(PHONE_PATTERN.fullmatch(phone or ""))


def contains_xss(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return any(pattern.search(value) for pattern in XSS_PATTERNS)


def contains_nosql_injection(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return any(pattern.search(value) for pattern in NOSQL_PATTERNS)
