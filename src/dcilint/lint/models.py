"""Lint models - diagnostics and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal


class Severity(Enum):
    """Diagnostic severity level."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A single convention violation or listing."""

    path: str
    line: int
    message: str
    code: str  # "RoleNotPrivate", "UnreferencedRoleMethod", ...
    severity: Severity = Severity.ERROR
    column: int | None = None
    pos: int | None = None  # token position in the analyzed stream

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
        }


@dataclass
class FileResult:
    """Result from checking a single file."""

    path: str
    status: Literal["clean", "dirty", "error"]
    diagnostics: list[Diagnostic] = field(default_factory=list)
    contexts_checked: list[str] = field(default_factory=list)
    exported: list[str] = field(default_factory=list)  # Graph documents written
    error_detail: str | None = None  # If status=="error"

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]


@dataclass
class LintResult:
    """Aggregated result from a check run."""

    files: list[FileResult] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def total_diagnostics(self) -> int:
        return sum(len(f.diagnostics) for f in self.files)

    @property
    def total_contexts(self) -> int:
        return sum(len(f.contexts_checked) for f in self.files)

    @property
    def has_errors(self) -> bool:
        return any(f.status == "error" or f.errors for f in self.files)

    @property
    def status(self) -> Literal["clean", "dirty", "error"]:
        if any(f.status == "error" for f in self.files):
            return "error"
        if any(f.status == "dirty" for f in self.files):
            return "dirty"
        return "clean"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "duration_seconds": round(self.duration_seconds, 3),
            "files": [
                {
                    "path": f.path,
                    "status": f.status,
                    "contexts": f.contexts_checked,
                    "exported": f.exported,
                    "error_detail": f.error_detail,
                    "diagnostics": [d.to_dict() for d in f.diagnostics],
                }
                for f in self.files
            ],
        }
