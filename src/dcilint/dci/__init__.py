"""DCI module - Context model, builder, rule engine and exporter."""

from dcilint.dci.builder import ContextBuilder, ContextScope, PendingAttachment
from dcilint.dci.conventions import NamingConvention
from dcilint.dci.diagnostics import DiagnosticCode, DiagnosticCollector, DiagnosticSink
from dcilint.dci.exporter import ContextExporter, GraphDocument, build_graph, load_graph
from dcilint.dci.model import Access, Context, Method, Ref, RefKind, Role
from dcilint.dci.rules import RuleEngine

__all__ = [
    "Access",
    "Context",
    "ContextBuilder",
    "ContextExporter",
    "ContextScope",
    "DiagnosticCode",
    "DiagnosticCollector",
    "DiagnosticSink",
    "GraphDocument",
    "Method",
    "NamingConvention",
    "PendingAttachment",
    "Ref",
    "RefKind",
    "Role",
    "RuleEngine",
    "build_graph",
    "load_graph",
]
