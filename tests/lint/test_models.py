"""Tests for lint/models.py module.

Covers:
- Severity enum
- Diagnostic dataclass
- FileResult dataclass
- LintResult dataclass
"""

from __future__ import annotations

from dcilint.lint.models import Diagnostic, FileResult, LintResult, Severity


def make_diagnostic(severity: Severity = Severity.ERROR) -> Diagnostic:
    return Diagnostic(
        path="src/MoneyTransfer.php",
        line=12,
        column=5,
        message='Role "source" must be private.',
        code="RoleNotPrivate",
        severity=severity,
    )


class TestSeverity:
    """Tests for Severity enum."""

    def test_all_severities(self) -> None:
        """All severities exist."""
        assert {sev.value for sev in Severity} == {"error", "warning"}


class TestDiagnostic:
    """Tests for Diagnostic dataclass."""

    def test_create_minimal(self) -> None:
        """Create with minimal fields."""
        diag = Diagnostic(path="a.php", line=1, message="msg", code="RoleLeaking")
        assert diag.severity == Severity.ERROR
        assert diag.column is None
        assert diag.pos is None

    def test_to_dict(self) -> None:
        """Serializes the user-facing fields."""
        assert make_diagnostic().to_dict() == {
            "path": "src/MoneyTransfer.php",
            "line": 12,
            "column": 5,
            "severity": "error",
            "code": "RoleNotPrivate",
            "message": 'Role "source" must be private.',
        }


class TestFileResult:
    """Tests for FileResult dataclass."""

    def test_errors_and_warnings_split(self) -> None:
        """Diagnostics are partitioned by severity."""
        error = make_diagnostic()
        warning = make_diagnostic(Severity.WARNING)
        result = FileResult(path="a.php", status="dirty", diagnostics=[error, warning])

        assert result.errors == [error]
        assert result.warnings == [warning]


class TestLintResult:
    """Tests for LintResult dataclass."""

    def test_empty_is_clean(self) -> None:
        """No files means clean."""
        result = LintResult()
        assert result.status == "clean"
        assert not result.has_errors
        assert result.total_diagnostics == 0

    def test_warnings_only_is_dirty_without_errors(self) -> None:
        """Warnings make a run dirty but do not fail it."""
        result = LintResult(
            files=[
                FileResult(
                    path="a.php",
                    status="dirty",
                    diagnostics=[make_diagnostic(Severity.WARNING)],
                    contexts_checked=["MoneyTransfer"],
                )
            ]
        )

        assert result.status == "dirty"
        assert not result.has_errors
        assert result.total_contexts == 1

    def test_error_file_wins(self) -> None:
        """An unreadable file makes the whole run an error."""
        result = LintResult(
            files=[
                FileResult(path="a.php", status="dirty", diagnostics=[make_diagnostic()]),
                FileResult(path="b.php", status="error", error_detail="Cannot read b.php"),
            ]
        )

        assert result.status == "error"
        assert result.has_errors
        assert result.total_diagnostics == 1

    def test_to_dict(self) -> None:
        """Serializes files with their diagnostics."""
        result = LintResult(
            files=[
                FileResult(
                    path="a.php",
                    status="dirty",
                    diagnostics=[make_diagnostic()],
                    contexts_checked=["MoneyTransfer"],
                    exported=["/vis/MoneyTransfer.json"],
                )
            ],
            duration_seconds=0.12345,
        )

        data = result.to_dict()

        assert data["status"] == "dirty"
        assert data["duration_seconds"] == 0.123
        (file_data,) = data["files"]
        assert file_data["contexts"] == ["MoneyTransfer"]
        assert file_data["exported"] == ["/vis/MoneyTransfer.json"]
        assert file_data["diagnostics"][0]["code"] == "RoleNotPrivate"
