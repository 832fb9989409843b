"""Semantic model of one DCI Context.

A Context owns its Roles and Methods; a Method owns its Refs. A Role only
holds non-owning links to the Methods attached to it, and each such Method
links back to that Role exactly once.

Constructors validate their invariants and raise InternalError: a failure
here means the builder reached an impossible scan state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from dcilint.core.errors import InternalError
from dcilint.parsing.tokens import TokenKind


class Access(Enum):
    """Declared visibility of a Role field or a Method."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"

    @classmethod
    def from_token(cls, kind: TokenKind) -> Access:
        try:
            return _ACCESS_BY_KIND[kind]
        except KeyError:
            raise InternalError.invariant("not a visibility token", kind=kind.value) from None


_ACCESS_BY_KIND: dict[TokenKind, Access] = {
    TokenKind.PUBLIC: Access.PUBLIC,
    TokenKind.PROTECTED: Access.PROTECTED,
    TokenKind.PRIVATE: Access.PRIVATE,
}


class RefKind(Enum):
    """What a ``$this->name`` occurrence inside a method body refers to."""

    METHOD = "method"
    PROPERTY = "property"
    ROLEMETHOD = "rolemethod"
    ROLE = "role"
    ROLE_ASSIGNMENT = "role_assignment"


@dataclass(frozen=True, slots=True)
class Ref:
    """A recorded use of a Role, RoleMethod or Context method."""

    to: str
    pos: int
    kind: RefKind
    excepted: bool = False  # "@$this->..." opts out of access checks
    contract_call: str | None = None  # only for ROLE: method or array marker used on the player
    returned: bool = False  # "return $this->role;"

    def __post_init__(self) -> None:
        if not self.to:
            raise InternalError.invariant("empty Ref target")
        if self.pos <= 0:
            raise InternalError.invariant("invalid Ref position", to=self.to, pos=self.pos)
        if self.contract_call is not None and self.kind is not RefKind.ROLE:
            raise InternalError.invariant(
                "contract call on a non-Role ref", to=self.to, kind=self.kind.value
            )
        if self.returned and (self.kind is not RefKind.ROLE or self.contract_call is not None):
            raise InternalError.invariant("only a bare Role ref can be returned", to=self.to)


@dataclass(eq=False)
class Method:
    """A visibility-qualified function of the Context class."""

    full_name: str
    start: int
    end: int
    access: Access
    tags: list[str] = field(default_factory=list)
    refs: list[Ref] = field(default_factory=list)
    local_name: str | None = field(default=None, init=False)  # name within its Role
    _role: Role | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.full_name:
            raise InternalError.invariant("empty Method name")
        if self.start <= 0:
            raise InternalError.invariant("invalid start pos", method=self.full_name)
        if self.end <= self.start:
            raise InternalError.invariant("invalid end pos", method=self.full_name)

    @property
    def role(self) -> Role | None:
        return self._role

    @property
    def is_role_method(self) -> bool:
        return self._role is not None

    def bind_role(self, role: Role, local_name: str) -> None:
        """Set the owning Role and the name this method has inside it. Write-once."""
        if self._role is not None:
            raise InternalError.invariant(
                "Role already bound", method=self.full_name, role=self._role.name
            )
        self._role = role
        self.local_name = local_name

    def add_ref(self, ref: Ref) -> None:
        if ref.kind is RefKind.PROPERTY:
            raise InternalError.invariant("property refs are not retained", to=ref.to)
        self.refs.append(ref)

    def has_tag(self, tag: str) -> bool:
        return any(t.lower() == tag for t in self.tags)


@dataclass(eq=False)
class Role:
    """A named slot bound at runtime to a player object."""

    name: str
    pos: int
    access: Access
    tags: list[str] = field(default_factory=list)
    methods: dict[str, Method] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            raise InternalError.invariant("empty Role name")
        if self.pos <= 0:
            raise InternalError.invariant("invalid Role position", role=self.name)

    def attach(self, local_name: str, method: Method) -> None:
        """Attach a RoleMethod under its local name and link it back here."""
        if local_name in self.methods:
            raise InternalError.invariant(
                "RoleMethod name taken",
                role=self.name,
                name=local_name,
                method=self.methods[local_name].full_name,
            )
        method.bind_role(self, local_name)
        self.methods[local_name] = method


@dataclass(eq=False)
class Context:
    """A class modeling one use case, with its Roles and Methods."""

    name: str
    start: int
    end: int
    roles: dict[str, Role] = field(default_factory=dict)
    methods: dict[str, Method] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.start <= 0:
            raise InternalError.invariant("invalid start pos", context=self.name)
        if self.end <= self.start:
            raise InternalError.invariant("invalid end pos", context=self.name)

    def add_role(self, role: Role) -> None:
        self.roles[role.name] = role

    def add_method(self, method: Method) -> None:
        self.methods[method.full_name] = method

    def roles_by_position(self) -> list[Role]:
        return sorted(self.roles.values(), key=lambda r: r.pos)

    def role_methods(self) -> list[Method]:
        """Methods attached to a Role, in declaration order."""
        return [m for m in self.methods.values() if m.role is not None]
