"""Core module exports."""

from dcilint.core.errors import (
    ConfigError,
    DciLintError,
    ErrorCode,
    InternalError,
    ParseError,
)
from dcilint.core.logging import configure_logging, get_log_file_path, get_logger

__all__ = [
    # Errors
    "ConfigError",
    "DciLintError",
    "ErrorCode",
    "InternalError",
    "ParseError",
    # Logging
    "configure_logging",
    "get_log_file_path",
    "get_logger",
]
