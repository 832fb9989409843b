"""Configuration-gated listings about a Context.

None of these are correctness checks. They report, as warnings:

- the RoleMethods a given method calls (``list_calls_in_role_method``, or a
  ``@listCallsIn`` tag on the method)
- every call site of a given RoleMethod plus a count
  (``list_calls_to_role_method``, or a ``@listCallsTo`` tag)
- per Role, the distinct contract calls made on its player, an
  approximation of the interface the player must implement
  (``list_role_interfaces``)
"""

from __future__ import annotations

from dcilint.config.constants import ARRAY_MARKER, LIST_CALLS_IN_TAG, LIST_CALLS_TO_TAG
from dcilint.config.models import DciConfig
from dcilint.dci.diagnostics import DiagnosticCode, DiagnosticSink
from dcilint.dci.model import Context, Method, RefKind


class ContextInformation:
    def __init__(self, sink: DiagnosticSink, config: DciConfig) -> None:
        self._sink = sink
        self._config = config

    def _lists_calls_in(self, method: Method) -> bool:
        return (
            method.full_name == self._config.list_calls_in_role_method
            or method.has_tag(LIST_CALLS_IN_TAG)
        )

    def _lists_calls_to(self, method: Method) -> bool:
        return method.full_name == self._config.list_calls_to_role_method or (
            method.role is not None and method.has_tag(LIST_CALLS_TO_TAG)
        )

    def report(self, context: Context) -> None:
        calls_to = {m.full_name: 0 for m in context.methods.values() if self._lists_calls_to(m)}
        interfaces: dict[str, list[str]] = {}

        for method in context.methods.values():
            lists_calls_in = self._lists_calls_in(method)
            outgoing: set[str] = set()

            for ref in method.refs:
                if ref.kind is RefKind.ROLE:
                    if self._config.list_role_interfaces and ref.to in context.roles:
                        calls = interfaces.setdefault(ref.to, [])
                        call = ref.contract_call
                        if call and call != ARRAY_MARKER and call not in calls:
                            calls.append(call)

                elif ref.kind is RefKind.ROLEMETHOD:
                    if lists_calls_in:
                        self._sink.add_warning(
                            "%s", ref.pos, DiagnosticCode.LIST_IN_ROLE_METHODS, [ref.to]
                        )
                        outgoing.add(ref.to)
                    if ref.to in calls_to:
                        self._sink.add_warning(
                            '"%s" calls "%s" here',
                            ref.pos,
                            DiagnosticCode.LIST_TO_ROLE_METHODS,
                            [method.full_name, ref.to],
                        )
                        calls_to[ref.to] += 1

            if outgoing:
                self._sink.add_warning(
                    "%s calls to [%s]",
                    method.start,
                    DiagnosticCode.LIST_ROLE_METHODS,
                    [method.full_name, ", ".join(sorted(outgoing))],
                )

        for name, count in calls_to.items():
            self._sink.add_warning(
                "%d call(s) to %s",
                context.methods[name].start,
                DiagnosticCode.LIST_TO_ROLE_METHODS,
                [count, name],
            )

        for role_name, calls in interfaces.items():
            self._sink.add_warning(
                "RoleInterface for %s: [%s]",
                context.roles[role_name].pos,
                DiagnosticCode.LIST_ROLE_INTERFACE,
                [role_name, ", ".join(calls)],
            )
