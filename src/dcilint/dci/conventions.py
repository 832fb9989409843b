"""Naming conventions that tell Roles and RoleMethods apart from plain members."""

from __future__ import annotations

import re
from dataclasses import dataclass

from dcilint.config.constants import DEFAULT_ROLE_FORMAT, DEFAULT_ROLE_METHOD_FORMAT
from dcilint.config.models import DciConfig


@dataclass(frozen=True)
class NamingConvention:
    """Regex-backed naming strategy.

    ``role_method_format`` must capture the Role name in group 1 and the
    method's local name in group 2.
    """

    role_pattern: re.Pattern[str]
    role_method_pattern: re.Pattern[str]

    @classmethod
    def default(cls) -> NamingConvention:
        return cls.from_formats(DEFAULT_ROLE_FORMAT, DEFAULT_ROLE_METHOD_FORMAT)

    @classmethod
    def from_formats(cls, role_format: str, role_method_format: str) -> NamingConvention:
        return cls(re.compile(role_format), re.compile(role_method_format))

    @classmethod
    def from_config(cls, config: DciConfig) -> NamingConvention:
        return cls.from_formats(config.role_format, config.role_method_format)

    def split_role_method(self, name: str) -> tuple[str, str] | None:
        """(role, method) for a RoleMethod name, else None."""
        match = self.role_method_pattern.search(name)
        if match is None:
            return None
        role, method = match.group(1), match.group(2)
        if not role or not method:
            return None
        return role, method

    def is_role_method(self, name: str) -> bool:
        return self.split_role_method(name) is not None

    def is_role(self, name: str) -> bool:
        """Role-shaped name. A name that also reads as a RoleMethod is not a Role."""
        return self.role_pattern.search(name) is not None and not self.is_role_method(name)
