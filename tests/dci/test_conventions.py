"""Tests for dci/conventions.py module."""

from __future__ import annotations

import pytest

from dcilint.config.models import DciConfig
from dcilint.dci.conventions import NamingConvention


@pytest.fixture
def conventions() -> NamingConvention:
    return NamingConvention.default()


class TestDefaultConvention:
    """Default naming patterns."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("source_withdraw", ("source", "withdraw")),
            ("source__withdraw", ("source", "withdraw")),
            ("a1_b2", ("a1", "b2")),
            ("withdraw", None),
            ("__construct", None),
            ("source_with_draw", None),
            ("source_", None),
        ],
    )
    def test_split_role_method(
        self, conventions: NamingConvention, name: str, expected: tuple[str, str] | None
    ) -> None:
        """RoleMethod names split into Role and local name."""
        assert conventions.split_role_method(name) == expected

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("source", True), ("Source2", True), ("_amount", False), ("source_withdraw", False)],
    )
    def test_is_role(self, conventions: NamingConvention, name: str, expected: bool) -> None:
        """Role names are plain alphanumeric identifiers."""
        assert conventions.is_role(name) is expected


class TestCustomConvention:
    """Configured naming patterns."""

    def test_from_config(self) -> None:
        """Patterns come from DciConfig."""
        config = DciConfig(role_format="^r[A-Z]\\w*$", role_method_format="^(r[A-Z]\\w*)Do(\\w+)$")

        conventions = NamingConvention.from_config(config)

        assert conventions.is_role("rSource")
        assert not conventions.is_role("source")
        assert conventions.split_role_method("rSourceDoWithdraw") == ("rSource", "Withdraw")
        assert not conventions.is_role("rSourceDoWithdraw")

    def test_optional_empty_group_is_not_a_role_method(self) -> None:
        """An empty Role or method group does not make a RoleMethod."""
        conventions = NamingConvention.from_formats("^[a-z]+$", "^([a-z]*)_([a-z]*)$")

        assert conventions.split_role_method("_x") is None
        assert conventions.split_role_method("a_b") == ("a", "b")
