"""
Logging utilities for turnstile-guard, re-exported for application code.

Application modules import from shared.logging; the implementation lives in
utils.logger and utils.logging_config.
"""

from utils.logger import get_logger, hash_ip
from utils.logging_config import configure_structlog, setup_logging

__all__ = [
    "get_logger",
    "hash_ip",
    "configure_structlog",
    "setup_logging",
]
