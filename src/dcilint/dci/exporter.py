"""Context exporter: a finalized Context as a node/edge document.

The document feeds a graph renderer::

    {"nodes": [{"id", "label", "group"}], "edges": [{"from", "to"}]}

Nodes are RoleMethods (grouped by Role), plain Context methods that call
something (group ``__CONTEXT``), and one role-interface node per contract
call made on a Role's player. Building the document never mutates the
Context and never reports diagnostics.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from dcilint.config.constants import ARRAY_MARKER, CONTEXT_GROUP, ROLE_INTERFACE_SUFFIX
from dcilint.core.logging import get_logger
from dcilint.dci.model import Access, Context, Method, Ref, RefKind

log = get_logger(__name__)


class GraphNode(BaseModel):
    id: str
    label: str
    group: str


class GraphEdge(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str


class GraphDocument(BaseModel):
    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)

    def edge_set(self) -> set[tuple[str, str]]:
        return {(edge.from_, edge.to) for edge in self.edges}


def role_interface_id(role: str, contract_call: str) -> str:
    return f"{role}_{contract_call}{ROLE_INTERFACE_SUFFIX}"


def _role_method_label(method: Method) -> str:
    role = method.role
    local = method.local_name
    assert role is not None and local is not None
    if method.access is Access.PRIVATE:
        return f"<i>{role.name}</i>\n<i>{local}</i>"
    return f"{role.name}\n{local}"


def _edge_target(context: Context, ref: Ref) -> str | None:
    if ref.kind in (RefKind.METHOD, RefKind.ROLEMETHOD):
        return ref.to
    if ref.kind is RefKind.ROLE and ref.contract_call and ref.to in context.roles:
        return role_interface_id(ref.to, ref.contract_call)
    return None


def build_graph(context: Context) -> GraphDocument:
    """Project a Context into its graph document."""
    document = GraphDocument()
    interface_ids: set[str] = set()
    edges: set[tuple[str, str]] = set()

    for method in context.methods.values():
        if method.role is not None:
            document.nodes.append(
                GraphNode(
                    id=method.full_name,
                    label=_role_method_label(method),
                    group=method.role.name,
                )
            )
        elif any(ref.kind is not RefKind.ROLE_ASSIGNMENT for ref in method.refs):
            document.nodes.append(
                GraphNode(id=method.full_name, label=method.full_name, group=CONTEXT_GROUP)
            )

    for method in context.methods.values():
        for ref in method.refs:
            target = _edge_target(context, ref)
            if target is None:
                continue

            if ref.kind is RefKind.ROLE and target not in interface_ids:
                interface_ids.add(target)
                label = f"{ref.to}[]" if ref.contract_call == ARRAY_MARKER else ref.contract_call
                document.nodes.append(GraphNode(id=target, label=label or ref.to, group=ref.to))

            if (method.full_name, target) not in edges:
                edges.add((method.full_name, target))
                document.edges.append(GraphEdge(from_=method.full_name, to=target))

    return document


def load_graph(path: Path) -> GraphDocument:
    """Read back a document written by ContextExporter."""
    return GraphDocument.model_validate_json(path.read_text())


class ContextExporter:
    """Writes <ContextName>.json into a directory, overwriting earlier runs."""

    def __init__(self, directory: Path) -> None:
        self._directory = directory
        self.written: list[Path] = []

    def export(self, context: Context) -> Path:
        document = build_graph(context)
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._directory / f"{context.name}.json"
        path.write_text(document.model_dump_json(by_alias=True, indent=2))
        self.written.append(path)
        log.debug("context_exported", name=context.name, path=str(path), nodes=len(document.nodes))
        return path
