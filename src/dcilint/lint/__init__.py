"""Lint module - diagnostics and results. Run checks through dcilint.lint.ops."""

from dcilint.lint.models import Diagnostic, FileResult, LintResult, Severity

__all__ = [
    "Diagnostic",
    "FileResult",
    "LintResult",
    "Severity",
]
