"""
Centralized logging configuration for turnstile-guard.

This module sets up structured logging with:
- Environment-based configuration (dev vs production)
- JSON formatting for production, pretty console for development
- IP hashing for GDPR compliance in production
- Redaction of secrets and challenge tokens
"""

import os
import sys
import hashlib
import logging
from datetime import datetime, timezone

import structlog
from structlog.types import EventDict, Processor


# Environment configuration
ENV = os.getenv("ENV", "development")
IS_PRODUCTION = ENV == "production"

# Log level configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO" if IS_PRODUCTION else "DEBUG")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json" if IS_PRODUCTION else "console")

# Sensitive fields to redact from logs
REDACTED_FIELDS = {
    "password",
    "token",
    "secret",
    "secret_key",
    "cf-turnstile-response",
    "response",
    "Authorization",
    "Cookie",
}

_SENSITIVE_FRAGMENTS = ("password", "token", "secret", "key")

_PROTECTED_KEYS = {"level", "event", "timestamp", "logger"}


def hash_ip(ip_address: str) -> str:
    """
    Hash IP address for privacy in production.

    In production, returns SHA-256 hash (first 16 chars).
    In development, returns the original IP for easier debugging.
    """
    if IS_PRODUCTION and ip_address:
        return hashlib.sha256(ip_address.encode()).hexdigest()[:16]
    return ip_address


def add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO format timestamp to event dict."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def redact_sensitive_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact sensitive fields from logs."""
    for key in list(event_dict.keys()):
        if key in _PROTECTED_KEYS:
            continue
        lowered = key.lower()
        if lowered in REDACTED_FIELDS or any(
            fragment in lowered for fragment in _SENSITIVE_FRAGMENTS
        ):
            event_dict[key] = "***REDACTED***"
    return event_dict


def configure_structlog() -> None:
    """
    Configure structlog with appropriate processors for the environment.

    Production: JSON formatting for easy parsing
    Development: Pretty console formatting with colors
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_timestamp,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        redact_sensitive_fields,
        structlog.processors.format_exc_info,
    ]

    if LOG_FORMAT == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            pad_event=15,
            sort_keys=False,
        )

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_stdlib_logging() -> None:
    """
    Configure standard library logging to work with structlog.

    Sets up:
    - Log level from environment
    - Console handler for stdout
    - Format compatible with structlog
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, LOG_LEVEL.upper()),
    )

    # httpx logs every request URL at INFO; keep it quiet
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def setup_logging() -> None:
    """
    Initialize logging system for the application.

    This is the main entry point for logging configuration.
    Should be called early in application startup.
    """
    configure_stdlib_logging()
    configure_structlog()

    logger = structlog.get_logger(__name__)
    logger.info(
        "logging_initialized",
        env=ENV,
        log_level=LOG_LEVEL,
        log_format=LOG_FORMAT,
        sentry_enabled=bool(os.getenv("SENTRY_DSN")),
    )


# Initialize logging when module is imported
setup_logging()
