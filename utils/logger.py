"""
Logger factory and utility functions for turnstile-guard.

Provides:
- get_logger(): Get a configured logger instance
- hash_ip(): Hash IP addresses for privacy
"""

from typing import Optional

import structlog
from structlog.stdlib import BoundLogger

from .logging_config import hash_ip as _hash_ip


def get_logger(name: str) -> BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured structlog BoundLogger instance

    Example:
        >>> from shared.logging import get_logger
        >>> log = get_logger(__name__)
        >>> log.info("turnstile_action_blocked", surface="login")
    """
    return structlog.get_logger(name)


def hash_ip(ip_address: Optional[str]) -> Optional[str]:
    """
    Hash IP address for privacy in production.

    Convenience wrapper around logging_config.hash_ip() that handles None
    and the empty string (unknown caller address) gracefully.

    Args:
        ip_address: The IP address to hash (can be None)

    Returns:
        Hashed IP (production), original IP (development), or None
    """
    if not ip_address:
        return None
    return _hash_ip(ip_address)

