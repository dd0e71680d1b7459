"""
Logging configuration module for structured logging.

This module configures the application's logging system using structlog.
It provides structured logging capabilities with JSON formatting for production
and human-readable console output for development.

The logging configuration includes:
- Timestamp formatting
- Log level inclusion
- Redaction of sensitive fields (passwords, tokens, one-time codes, secrets)
- JSON/Console output based on environment
- Logger caching
"""

import logging
from typing import Any, MutableMapping

import structlog

REDACTED = "[REDACTED]"

SENSITIVE_FIELDS = (
    "password",
    "token",
    "jwt",
    "code",
    "secret",
    "api_key",
    "apikey",
    "credit_card",
    "creditcard",
    "cvv",
    "ssn",
)

# Structlog event metadata that must survive redaction.
_RESERVED_KEYS = {"event", "level", "timestamp", "logger"}

# Status codes and error codes are safe to log even though their keys contain "code".
_SAFE_KEYS = {"status_code", "error_code"}


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    if lowered in _SAFE_KEYS:
        return False
    return any(field in lowered for field in SENSITIVE_FIELDS)


def sanitize_for_logging(value: Any) -> Any:
    """Return a copy of ``value`` with every sensitive key replaced by ``[REDACTED]``.

    Dictionaries are walked recursively, lists and tuples element by element;
    any other value is returned unchanged.
    """
    if isinstance(value, dict):
        return {
            key: REDACTED if isinstance(key, str) and _is_sensitive(key) else sanitize_for_logging(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(sanitize_for_logging(item) for item in value)
    return value


def mask_email(email: Any) -> Any:
    """Keep the first three characters of the local part and the domain."""
    if not email or not isinstance(email, str):
        return email
    local_part, sep, domain = email.partition("@")
    if not sep:
        return email
    return f"{local_part[:3]}***@{domain}"


def redact_sensitive_fields(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor that scrubs secrets from every log entry."""
    for key in list(event_dict.keys()):
        if key in _RESERVED_KEYS:
            continue
        if _is_sensitive(key):
            event_dict[key] = REDACTED
        else:
            event_dict[key] = sanitize_for_logging(event_dict[key])
    return event_dict


def configure_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configures the application's logging system.

    This function sets up structlog with:
    1. ISO format timestamps
    2. Log level inclusion
    3. Sensitive-field redaction
    4. JSON formatting for production, console formatting for development
    5. Standard library logger factory with caching
    """
    logging.basicConfig(format="%(message)s", level=getattr(logging, log_level.upper(), logging.INFO))

    processors = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        redact_sensitive_fields,
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# Create a singleton logger instance for the application
logger = structlog.get_logger()

__all__ = [
    "configure_logging",
    "logger",
    "mask_email",
    "redact_sensitive_fields",
    "sanitize_for_logging",
]

