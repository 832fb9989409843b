"""End-to-end checks of whole Contexts.

Covers:
- A conforming Context produces no diagnostics
- Public RoleMethod
- Roles rebound outside the binding method
- Private RoleMethod called from a plain Context method
"""

from __future__ import annotations

from collections.abc import Callable


class TestConformingContext:
    """A Context that follows every convention."""

    def test_money_transfer_is_clean(self, analyze, money_transfer: str) -> None:
        """Bound once, every RoleMethod used, players only touched by their Role."""
        analysis = analyze(money_transfer)

        assert analysis.diagnostics == []
        assert analysis.context.name == "MoneyTransfer"


class TestPublicRoleMethod:
    """Public RoleMethods."""

    def test_public_role_method_reported_once(
        self, analyze, money_transfer: str, line_of: Callable[[str, str], int]
    ) -> None:
        """Making a RoleMethod public yields exactly one error."""
        source = money_transfer.replace(
            "protected function source_withdraw()", "public function source_withdraw()"
        )

        analysis = analyze(source)

        assert analysis.codes == ["PublicRoleMethod"]
        diag = analysis.diagnostics[0]
        assert diag.line == line_of(source, "public function source_withdraw")
        assert diag.message == 'RoleMethod "source->withdraw" is public, must be private or protected.'


class TestRebinding:
    """Binding Roles again in a second method."""

    def test_second_binding_method_reported_with_original_site(
        self, analyze, money_transfer: str, line_of: Callable[[str, str], int]
    ) -> None:
        """The rebinding and the original binding method are both reported."""
        source = money_transfer.replace(
            "    private Source $source;",
            "    public function swap($other) {\n"
            "        $this->source = $other;\n"
            "    }\n"
            "\n"
            "    private Source $source;",
        )

        analysis = analyze(source)

        assert analysis.codes == ["RoleNotBoundInSingleMethod", "RoleNotBoundInSingleMethod"]
        lines = sorted(d.line for d in analysis.diagnostics)
        assert lines == [
            line_of(source, "public function __construct"),
            line_of(source, "$this->source = $other;"),
        ]
        messages = {d.message for d in analysis.diagnostics}
        assert messages == {
            "All Roles must be bound inside a single method.",
            "Method where Roles are currently bound.",
        }


class TestCrossRoleAccess:
    """Calling a private RoleMethod from outside its Role."""

    def test_private_role_method_called_from_context_method(
        self, analyze, money_transfer: str, line_of: Callable[[str, str], int]
    ) -> None:
        """The call site and the declaration are both reported."""
        source = (
            money_transfer.replace(
                "        $this->_amount = $amount;\n",
                "        $this->_amount = $amount;\n        $this->destination_deposit();\n",
            )
            .replace("        $this->destination_deposit();\n    }\n\n    private Destination", "    }\n\n    private Destination")
            .replace("protected function destination_deposit()", "private function destination_deposit()")
        )

        analysis = analyze(source)

        assert sorted(analysis.codes) == ["AdjustRoleMethodAccess", "InvalidRoleMethodAccess"]
        invalid = analysis.with_code("InvalidRoleMethodAccess")[0]
        adjust = analysis.with_code("AdjustRoleMethodAccess")[0]
        assert invalid.line == line_of(source, "$this->destination_deposit();")
        assert adjust.line == line_of(source, "private function destination_deposit")
