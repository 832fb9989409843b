"""Config module exports."""

from dcilint.config.loader import load_config
from dcilint.config.models import (
    DciConfig,
    DciLintConfig,
    LoggingConfig,
    LogOutputConfig,
)

__all__ = [
    "load_config",
    "DciConfig",
    "DciLintConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
