"""Context builder: one forward scan over the token stream.

The builder is fed one token position at a time. While no Context is open it
only looks for a Context doc tag (``@context``, ``@dci``, ``@dcicontext``)
in front of a class. Once a Context is open it records Role fields, Methods
and the ``$this->...`` references inside method bodies. At the class's
closing brace it attaches RoleMethods to their Roles and hands the finished
Context to its handlers (normally the rule engine, then the exporter).

Only one Context is open at a time; nested Context classes are not
recognized.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from dcilint.config.constants import ARRAY_MARKER, CONTEXT_TAGS, IGNORE_ROLE_TAGS
from dcilint.core.logging import get_logger
from dcilint.dci.conventions import NamingConvention
from dcilint.dci.diagnostics import DiagnosticCode, DiagnosticSink
from dcilint.dci.model import Access, Context, Method, Ref, RefKind, Role
from dcilint.parsing.tokens import (
    COMMENT_KINDS,
    VISIBILITY_KINDS,
    Token,
    TokenKind,
    TokenStream,
)

log = get_logger(__name__)

ContextHandler = Callable[[Context], object]

# Tokens that may precede a visibility keyword within the same declaration
_DECLARATION_PREFIX_KINDS: frozenset[TokenKind] = frozenset(
    {TokenKind.MODIFIER, TokenKind.FINAL, *VISIBILITY_KINDS}
)
_CLASS_MODIFIER_KINDS: frozenset[TokenKind] = frozenset({TokenKind.MODIFIER, TokenKind.FINAL})


def tag_name(text: str) -> str:
    """Normalized doc tag: lowercase, without the leading "@"."""
    return text.lstrip("@").lower()


@dataclass
class PendingAttachment:
    """A RoleMethod waiting for its Role to be looked up at finalization."""

    method: Method
    role_name: str
    local_name: str


@dataclass
class ContextScope:
    """Builder state for the single open Context."""

    context: Context
    method: Method | None = None
    method_body: int = 0  # position of the current method's opening brace
    ignored: set[str] = field(default_factory=set)
    pending: list[PendingAttachment] = field(default_factory=list)
    ignore_next: bool = False

    def consume_ignore(self) -> bool:
        ignore, self.ignore_next = self.ignore_next, False
        return ignore

    def enter_method(self, method: Method, body: int) -> None:
        self.method = method
        self.method_body = body

    def leave_method(self) -> None:
        self.method = None
        self.method_body = 0


class ContextBuilder:
    """Builds Context models from a token stream.

    Args:
        stream: Tokens of one source file.
        sink: Receives builder-level diagnostics (RoleNotPrivate,
            PublicRoleMethod, NonExistingRole, ContextNotFinal).
        conventions: Naming strategy for Roles and RoleMethods.
        handlers: Called in order with each finalized Context.
    """

    def __init__(
        self,
        stream: TokenStream,
        sink: DiagnosticSink,
        conventions: NamingConvention | None = None,
        handlers: Sequence[ContextHandler] = (),
    ) -> None:
        self._stream = stream
        self._sink = sink
        self._conventions = conventions or NamingConvention.default()
        self._handlers = list(handlers)
        self._scope: ContextScope | None = None
        self.contexts_checked: list[str] = []

    @property
    def scope(self) -> ContextScope | None:
        return self._scope

    def run(self) -> list[str]:
        """Process every token; returns the names of the finalized Contexts."""
        for pos in range(len(self._stream)):
            self.process(pos)
        return self.contexts_checked

    def process(self, pos: int) -> None:
        token = self._stream[pos]
        scope = self._scope

        if scope is None:
            if token.kind is TokenKind.DOC_COMMENT_TAG and tag_name(token.text) in CONTEXT_TAGS:
                self._open_context(pos)
            return

        kind = token.kind
        if kind is TokenKind.DOC_COMMENT_TAG:
            if tag_name(token.text) in IGNORE_ROLE_TAGS:
                scope.ignore_next = True
        elif kind is TokenKind.CLOSE_CURLY:
            if pos == scope.context.end:
                self._finalize()
            elif scope.method is not None and pos == scope.method.end:
                scope.leave_method()
        elif kind in VISIBILITY_KINDS:
            # Inside a method only promoted constructor parameters declare fields
            if scope.method is None or pos < scope.method_body:
                self._declaration(pos, Access.from_token(kind))
        elif kind is TokenKind.VARIABLE and token.text == "$this" and scope.method is not None:
            self._reference(pos)

    # -- Context ------------------------------------------------------------

    def _open_context(self, tag_pos: int) -> None:
        stream = self._stream
        class_pos = stream.find_next(TokenKind.CLASS, tag_pos, local=True)
        if class_pos is None:
            return

        name_pos = stream.find_next(TokenKind.IDENTIFIER, class_pos, local=True)
        opener = stream.find_next(TokenKind.OPEN_CURLY, class_pos)
        closer = stream.match(opener) if opener is not None else None
        if name_pos is None or opener is None or closer is None:
            log.debug("context_unmatched", pos=class_pos)
            return

        context = Context(name=stream[name_pos].text, start=opener, end=closer)
        self._scope = ContextScope(context=context)
        log.debug("context_opened", name=context.name, start=opener, end=closer)

        modifiers = stream.lookbehind(class_pos, lambda t: t.kind not in _CLASS_MODIFIER_KINDS)
        if not any(token.kind is TokenKind.FINAL for _, token in modifiers):
            self._sink.add_error(
                "A DCI Context must be final.", class_pos, DiagnosticCode.CONTEXT_NOT_FINAL
            )

    def _finalize(self) -> None:
        scope = self._scope
        assert scope is not None
        context = scope.context

        for pending in scope.pending:
            role = context.roles.get(pending.role_name)
            if role is not None and pending.local_name in role.methods:
                self._sink.add_error(
                    'RoleMethod "%s" clashes with "%s"; both are "%s" in Role "%s".',
                    pending.method.start,
                    DiagnosticCode.DUPLICATE_ROLE_METHOD,
                    [
                        pending.method.full_name,
                        role.methods[pending.local_name].full_name,
                        pending.local_name,
                        role.name,
                    ],
                )
            elif role is not None:
                role.attach(pending.local_name, pending.method)
            elif pending.role_name not in scope.ignored:
                log.debug(
                    "pending_attachment_dangling",
                    method=pending.method.full_name,
                    role=pending.role_name,
                )
                self._sink.add_error(
                    'Role "%s" does not exist. Add it as "private $%s;" above its RoleMethods.',
                    pending.method.start,
                    DiagnosticCode.NON_EXISTING_ROLE,
                    [pending.role_name, pending.role_name],
                )

        self._scope = None
        log.debug(
            "context_finalized",
            name=context.name,
            roles=len(context.roles),
            methods=len(context.methods),
        )
        for handler in self._handlers:
            handler(context)
        self.contexts_checked.append(context.name)

    # -- Declarations -------------------------------------------------------

    def _declaration(self, pos: int, access: Access) -> None:
        func_pos = self._stream.find_next(TokenKind.FUNCTION, pos, local=True)
        if func_pos is not None:
            self._declare_method(pos, func_pos, access)
            return

        var_pos = self._stream.find_next(TokenKind.VARIABLE, pos, local=True)
        if var_pos is not None:
            self._declare_field(pos, var_pos, access)

    def _declare_method(self, pos: int, func_pos: int, access: Access) -> None:
        stream = self._stream
        scope = self._scope
        assert scope is not None

        name_pos = stream.find_next(TokenKind.IDENTIFIER, func_pos, local=True)
        paren = stream.find_next(TokenKind.OPEN_PAREN, func_pos, local=True)
        params_end = stream.match(paren) if paren is not None else None
        if name_pos is None or params_end is None:
            return

        body = stream.find_next({TokenKind.OPEN_CURLY, TokenKind.SEMICOLON}, params_end)
        end = stream.match(body) if body is not None else None
        name = stream[name_pos].text

        if scope.consume_ignore():
            scope.ignored.add(name)
            return
        if end is None:
            # Abstract or interface method, nothing to scan
            return

        method = Method(
            full_name=name,
            start=pos,
            end=end,
            access=access,
            tags=self._preceding_tags(pos),
        )
        scope.context.add_method(method)
        scope.enter_method(method, body)

        split = self._conventions.split_role_method(name)
        if split is None:
            return
        role_name, local_name = split
        scope.pending.append(PendingAttachment(method, role_name, local_name))
        if access is Access.PUBLIC:
            self._sink.add_error(
                'RoleMethod "%s->%s" is public, must be private or protected.',
                pos,
                DiagnosticCode.PUBLIC_ROLE_METHOD,
                [role_name, local_name],
            )

    def _declare_field(self, pos: int, var_pos: int, access: Access) -> None:
        scope = self._scope
        assert scope is not None
        name = self._stream[var_pos].text.lstrip("$")

        if scope.consume_ignore():
            scope.ignored.add(name)
            return
        if name in scope.ignored or not self._conventions.is_role(name):
            return

        if access is not Access.PRIVATE:
            self._sink.add_error(
                'Role "%s" must be private.', var_pos, DiagnosticCode.ROLE_NOT_PRIVATE, [name]
            )
        scope.context.add_role(
            Role(name=name, pos=var_pos, access=access, tags=self._preceding_tags(pos))
        )
        log.debug("role_registered", role=name, access=access.value)

    def _preceding_tags(self, pos: int) -> list[str]:
        """Doc tags directly above the declaration that contains pos."""
        start = pos
        for prev, _ in self._stream.lookbehind(
            pos, lambda t: t.kind not in _DECLARATION_PREFIX_KINDS
        ):
            start = prev

        tags = [
            token.text.lstrip("@")
            for _, token in self._stream.lookbehind(start, lambda t: t.kind not in COMMENT_KINDS)
            if token.kind is TokenKind.DOC_COMMENT_TAG
        ]
        tags.reverse()
        return tags

    # -- References ---------------------------------------------------------

    def _reference(self, this_pos: int) -> None:
        stream = self._stream
        scope = self._scope
        assert scope is not None and scope.method is not None

        name_pos = this_pos + 2
        if not (
            _is(stream.get(this_pos + 1), TokenKind.OBJECT_OPERATOR)
            and _is(stream.get(name_pos), TokenKind.IDENTIFIER)
        ):
            return

        name = stream[name_pos].text
        follow = stream.get(name_pos + 1)
        excepted = _is(stream.get(this_pos - 1), TokenKind.AT)
        conventions = self._conventions
        is_role = name not in scope.ignored and conventions.is_role(name)

        kind: RefKind | None = None
        contract_call: str | None = None
        returned = False

        if _is(follow, TokenKind.OPEN_SQUARE):
            if is_role:
                kind, contract_call = RefKind.ROLE, ARRAY_MARKER
        elif _is(follow, TokenKind.OBJECT_OPERATOR):
            if is_role:
                kind = RefKind.ROLE
                called = stream.get(name_pos + 2)
                if called is not None and called.kind is TokenKind.IDENTIFIER:
                    contract_call = called.text
        elif _is(follow, TokenKind.OPEN_PAREN):
            if name not in scope.ignored and conventions.is_role_method(name):
                kind = RefKind.ROLEMETHOD
            else:
                kind = RefKind.METHOD
        elif _is(follow, TokenKind.ASSIGNMENT):
            if is_role:
                kind = RefKind.ROLE_ASSIGNMENT
        elif is_role:
            kind = RefKind.ROLE
            returned = _is(follow, TokenKind.SEMICOLON) and self._after_return(
                this_pos - 1 if excepted else this_pos
            )

        if kind is None:
            return
        scope.method.add_ref(
            Ref(
                to=name,
                pos=name_pos,
                kind=kind,
                excepted=excepted,
                contract_call=contract_call,
                returned=returned,
            )
        )

    def _after_return(self, pos: int) -> bool:
        prev = self._stream.previous_significant(pos)
        return prev is not None and self._stream[prev].kind is TokenKind.RETURN


def _is(token: Token | None, kind: TokenKind) -> bool:
    return token is not None and token.kind is kind
