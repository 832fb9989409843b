"""Rule engine: convention checks over a finalized Context.

Every pass is read-only over the model and reports through the sink.
Malformed input never aborts a check; a dangling edge is skipped.
"""

from __future__ import annotations

from dcilint.config.models import DciConfig
from dcilint.core.logging import get_logger
from dcilint.dci.diagnostics import DiagnosticCode, DiagnosticSink
from dcilint.dci.introspection import ContextInformation
from dcilint.dci.model import Access, Context, Method, Ref, RefKind

log = get_logger(__name__)


class RuleEngine:
    """Runs all convention passes on each Context handed to ``check``."""

    def __init__(self, sink: DiagnosticSink, config: DciConfig | None = None) -> None:
        self._sink = sink
        self._information = ContextInformation(sink, config or DciConfig())

    def check(self, context: Context) -> None:
        self._check_role_method_positions(context)
        self._check_bindings(context)
        self._check_role_access(context)
        self._check_role_method_access(context)
        self._check_liveness(context)
        self._check_leakage(context)
        self._information.report(context)
        log.debug("context_checked", name=context.name)

    def _check_role_method_positions(self, context: Context) -> None:
        """RoleMethods must sit between their Role and the next Role."""
        roles = context.roles_by_position()
        for index, role in enumerate(roles):
            low = role.pos
            high = roles[index + 1].pos if index + 1 < len(roles) else None

            for method in role.methods.values():
                if method.start < low or (high is not None and method.start >= high):
                    self._sink.add_error(
                        'RoleMethod "%s" is not positioned below its Role.',
                        method.start,
                        DiagnosticCode.ROLE_METHOD_POSITION,
                        [method.full_name],
                    )

    def _check_bindings(self, context: Context) -> None:
        """All Roles must be bound together, in exactly one method."""
        role_names = list(context.roles)
        binding_site: int | None = None

        for method in context.methods.values():
            assignments = [
                ref
                for ref in method.refs
                if ref.kind is RefKind.ROLE_ASSIGNMENT and ref.to in context.roles
            ]
            if not assignments:
                continue
            assigned = {ref.to for ref in assignments}

            if binding_site is not None:
                for ref in assignments:
                    self._sink.add_error(
                        "All Roles must be bound inside a single method.",
                        ref.pos,
                        DiagnosticCode.ROLE_NOT_BOUND_IN_SINGLE_METHOD,
                    )
                    self._sink.add_error(
                        "Method where Roles are currently bound.",
                        binding_site,
                        DiagnosticCode.ROLE_NOT_BOUND_IN_SINGLE_METHOD,
                    )
            elif len(assigned) < len(role_names):
                missing = [name for name in role_names if name not in assigned]
                self._sink.add_error(
                    "All Roles must be bound inside a single method. Missing: %s",
                    method.start,
                    DiagnosticCode.ROLES_NOT_BOUND_IN_SINGLE_METHOD,
                    [", ".join(missing)],
                )
            else:
                binding_site = method.start

    def _check_role_access(self, context: Context) -> None:
        """A Role's player may only be used from that Role's own methods."""
        for method in context.methods.values():
            for ref in method.refs:
                if ref.kind is not RefKind.ROLE or ref.excepted or ref.to not in context.roles:
                    continue
                if method.role is None or method.role.name != ref.to:
                    self._sink.add_error(
                        'Role "%s" accessed outside its RoleMethods here.',
                        ref.pos,
                        DiagnosticCode.ROLE_ACCESSED_OUTSIDE_ITS_METHODS,
                        [ref.to],
                    )

    def _check_role_method_access(self, context: Context) -> None:
        """Private RoleMethods may only be called from their own Role."""
        for method in context.methods.values():
            for ref in method.refs:
                if ref.kind is not RefKind.ROLEMETHOD or ref.excepted:
                    continue
                target = context.methods.get(ref.to)
                if target is None or target.access is not Access.PRIVATE:
                    continue
                if method.role is target.role:
                    continue
                self._sink.add_error(
                    'Private RoleMethod "%s" accessed outside its own RoleMethods here.',
                    ref.pos,
                    DiagnosticCode.INVALID_ROLE_METHOD_ACCESS,
                    [target.full_name],
                )
                self._sink.add_error(
                    'Private RoleMethod "%s" accessed outside its own RoleMethods. '
                    "Make it protected if this is intended.",
                    target.start,
                    DiagnosticCode.ADJUST_ROLE_METHOD_ACCESS,
                    [target.full_name],
                )

    def _check_liveness(self, context: Context) -> None:
        """Warn about RoleMethods nobody calls, or that could be private."""
        referenced: set[str] = set()
        external: set[str] = set()
        for method in context.methods.values():
            for ref in method.refs:
                if ref.kind is not RefKind.ROLEMETHOD:
                    continue
                referenced.add(ref.to)
                target = context.methods.get(ref.to)
                if target is not None and method.role is not target.role:
                    external.add(ref.to)

        for method in context.role_methods():
            if method.full_name not in referenced:
                self._sink.add_warning(
                    'Unreferenced RoleMethod "%s"',
                    method.start,
                    DiagnosticCode.UNREFERENCED_ROLE_METHOD,
                    [method.full_name],
                )
            elif method.access is Access.PROTECTED and method.full_name not in external:
                self._sink.add_warning(
                    'RoleMethod "%s" has no references outside its Role and can be made private.',
                    method.start,
                    DiagnosticCode.NO_EXTERNAL_ROLE_METHOD_REFERENCES,
                    [method.full_name],
                )

    def _check_leakage(self, context: Context) -> None:
        """Returning a Role's player hands it outside the Context."""
        for method in context.methods.values():
            for ref in _returned_roles(method):
                if ref.to in context.roles:
                    self._sink.add_warning(
                        'Role "%s" is returned here, leaking it outside the Context.',
                        ref.pos,
                        DiagnosticCode.ROLE_LEAKING,
                        [ref.to],
                    )


def _returned_roles(method: Method) -> list[Ref]:
    return [ref for ref in method.refs if ref.returned]
