"""dcilint error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Parse
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Parse (3xxx)
    PARSE_GRAMMAR_UNAVAILABLE = 3001
    PARSE_UNREADABLE_FILE = 3002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001
    INTERNAL_INVARIANT = 9003


@dataclass(frozen=True, slots=True)
class DciLintError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(DciLintError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ParseError(DciLintError):
    """Source could not be turned into a token stream."""

    @classmethod
    def grammar_unavailable(cls, language: str, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_GRAMMAR_UNAVAILABLE,
            message=f"Grammar not available for {language}: {reason}",
            details={"language": language, "reason": reason},
        )

    @classmethod
    def unreadable_file(cls, path: str, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_UNREADABLE_FILE,
            message=f"Cannot read {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class InternalError(DciLintError):
    """Internal/unexpected errors.

    Raised for impossible scan states. These signal a defect in dcilint
    itself, never a problem in the analyzed source.
    """

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )

    @classmethod
    def invariant(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_INVARIANT,
            message=f"Invariant violated: {reason}",
            details=details,
        )
