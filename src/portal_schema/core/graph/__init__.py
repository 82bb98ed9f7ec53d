"""Schema dependency graph and closure resolution."""

from portal_schema.core.graph.resolver import ClosureCache, SchemaGraphResolver, resolve_closure
from portal_schema.core.graph.schema_graph import TRAVERSAL_ORDER, SchemaGraph

__all__ = [
    "TRAVERSAL_ORDER",
    "ClosureCache",
    "SchemaGraph",
    "SchemaGraphResolver",
    "resolve_closure",
]
