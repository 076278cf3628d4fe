"""
Common utilities and shared modules.
"""

from adelia.common.config import get_settings, settings
from adelia.common.exceptions import AdeliaError, CreativeValidationError
from adelia.common.logger import get_logger, log_context, logger

__all__ = [
    "settings",
    "get_settings",
    "logger",
    "get_logger",
    "log_context",
    "AdeliaError",
    "CreativeValidationError",
]
