"""Diagnostic sink and the canonical diagnostic codes.

Checks report through a sink with a printf-style message template filled by
``data``, the shape host linters such as PHP_CodeSniffer expose.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import Protocol

from dcilint.lint.models import Diagnostic, Severity
from dcilint.parsing.tokens import TokenStream


class DiagnosticCode(StrEnum):
    # Errors
    CONTEXT_NOT_FINAL = "ContextNotFinal"
    ROLE_NOT_PRIVATE = "RoleNotPrivate"
    PUBLIC_ROLE_METHOD = "PublicRoleMethod"
    ROLE_METHOD_POSITION = "RoleMethodPosition"
    ROLES_NOT_BOUND_IN_SINGLE_METHOD = "RolesNotBoundInSingleMethod"
    ROLE_NOT_BOUND_IN_SINGLE_METHOD = "RoleNotBoundInSingleMethod"
    ROLE_ACCESSED_OUTSIDE_ITS_METHODS = "RoleAccessedOutsideItsMethods"
    INVALID_ROLE_METHOD_ACCESS = "InvalidRoleMethodAccess"
    ADJUST_ROLE_METHOD_ACCESS = "AdjustRoleMethodAccess"
    NON_EXISTING_ROLE = "NonExistingRole"
    DUPLICATE_ROLE_METHOD = "DuplicateRoleMethod"
    # Warnings
    UNREFERENCED_ROLE_METHOD = "UnreferencedRoleMethod"
    NO_EXTERNAL_ROLE_METHOD_REFERENCES = "NoExternalRoleMethodReferences"
    ROLE_LEAKING = "RoleLeaking"
    # Debug listings (warnings)
    LIST_IN_ROLE_METHODS = "ListInRoleMethods"
    LIST_ROLE_METHODS = "ListRoleMethods"
    LIST_TO_ROLE_METHODS = "ListToRoleMethods"
    LIST_ROLE_INTERFACE = "ListRoleInterface"


class DiagnosticSink(Protocol):
    """Where builder and rule checks report convention violations."""

    def add_error(
        self, message: str, pos: int, code: str, data: Sequence[object] | None = None
    ) -> None: ...

    def add_warning(
        self, message: str, pos: int, code: str, data: Sequence[object] | None = None
    ) -> None: ...


def format_message(message: str, data: Sequence[object] | None) -> str:
    if not data:
        return message
    return message % tuple(data)


class DiagnosticCollector:
    """DiagnosticSink that records Diagnostics located through a TokenStream."""

    def __init__(self, stream: TokenStream, path: str = "<source>") -> None:
        self._stream = stream
        self._path = path
        self.diagnostics: list[Diagnostic] = []

    def add_error(
        self, message: str, pos: int, code: str, data: Sequence[object] | None = None
    ) -> None:
        self._add(Severity.ERROR, message, pos, code, data)

    def add_warning(
        self, message: str, pos: int, code: str, data: Sequence[object] | None = None
    ) -> None:
        self._add(Severity.WARNING, message, pos, code, data)

    def _add(
        self,
        severity: Severity,
        message: str,
        pos: int,
        code: str,
        data: Sequence[object] | None,
    ) -> None:
        token = self._stream.get(pos)
        self.diagnostics.append(
            Diagnostic(
                path=self._path,
                line=token.line if token else 0,
                column=token.column if token else None,
                message=format_message(message, data),
                code=str(code),
                severity=severity,
                pos=pos,
            )
        )

    def codes(self) -> list[str]:
        return [d.code for d in self.diagnostics]
