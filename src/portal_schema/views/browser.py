# src/portal_schema/views/browser.py
"""SchemaBrowser: the data behind each browser view.

Binds one SchemaGraph, a memoized resolver and the override tables, and
answers "what does view X show" for a ViewState. Switching back and forth
between views re-reads cached closures instead of re-walking the graph.
"""

from __future__ import annotations

from dataclasses import dataclass

from portal_schema.contracts import Attribute, AttributeID, IdentityKey, ProvenancePolicy, ResolvedAttribute, UnknownViewError
from portal_schema.core.graph import ClosureCache, SchemaGraph, SchemaGraphResolver
from portal_schema.core.overrides import OverrideTables
from portal_schema.core.schema_map import DEFAULT_COMPONENT_ID
from portal_schema.views.rows import (
    ALL_ATTRIBUTES_COLUMNS,
    MANIFEST_ATTRIBUTES_COLUMNS,
    MANIFEST_LIST_COLUMNS,
    AttributeRow,
    ColumnName,
    build_row,
    build_rows,
)
from portal_schema.views.state import ATTRIBUTES_VIEW, MANIFEST_VIEW, ViewState


@dataclass(frozen=True, slots=True)
class ViewTable:
    """Title, columns and rows of one rendered view."""

    view_id: str
    title: str
    columns: tuple[ColumnName, ...]
    rows: tuple[AttributeRow, ...]


class SchemaBrowser:
    """Per-schema view data provider."""

    def __init__(
        self,
        graph: SchemaGraph,
        *,
        overrides: OverrideTables | None = None,
        component_id: str = DEFAULT_COMPONENT_ID,
        identity_key: IdentityKey = IdentityKey.ID,
        provenance: ProvenancePolicy = ProvenancePolicy.MERGE,
    ) -> None:
        self._graph = graph
        self._overrides = overrides if overrides is not None else OverrideTables()
        self._component_id = component_id
        self._cache = ClosureCache(SchemaGraphResolver(graph, identity_key=identity_key, provenance=provenance))

    @property
    def graph(self) -> SchemaGraph:
        return self._graph

    @property
    def overrides(self) -> OverrideTables:
        return self._overrides

    @property
    def cache(self) -> ClosureCache:
        return self._cache

    def manifests(self) -> tuple[Attribute, ...]:
        return self._graph.schema_map.manifests(self._component_id)

    def closure(self, root_ids: tuple[AttributeID, ...]) -> tuple[ResolvedAttribute, ...]:
        return self._cache.get(root_ids)

    def all_attributes(self) -> tuple[ResolvedAttribute, ...]:
        """Closure across every manifest, each attribute tagged with all its manifests."""
        return self._cache.get(tuple(m.id for m in self.manifests()))

    def view_title(self, view_id: str) -> str:
        """Tab name: fixed for default views, the overridden manifest name otherwise.

        An id missing from the schema map yields an empty title.
        """
        if view_id == MANIFEST_VIEW:
            return "Manifest"
        if view_id == ATTRIBUTES_VIEW:
            return "All Attributes"
        attr = self._graph.schema_map.get(AttributeID(view_id))
        if attr is None:
            return ""
        return self._overrides.display_attribute(attr.attribute)

    def table(self, view_id: str) -> ViewTable:
        """Columns and rows for one view id."""
        title = self.view_title(view_id)
        if view_id == MANIFEST_VIEW:
            rows = tuple(build_row(m, self._graph, self._overrides) for m in self.manifests())
            return ViewTable(view_id, title, MANIFEST_LIST_COLUMNS, rows)
        if view_id == ATTRIBUTES_VIEW:
            rows = tuple(build_rows(self.all_attributes(), self._graph, self._overrides))
            return ViewTable(view_id, title, ALL_ATTRIBUTES_COLUMNS, rows)
        if AttributeID(view_id) not in self._graph.schema_map:
            raise UnknownViewError(view_id, f"Manifest '{view_id}' is not in the schema")
        rows = tuple(build_rows(self.closure((AttributeID(view_id),)), self._graph, self._overrides))
        return ViewTable(view_id, title, MANIFEST_ATTRIBUTES_COLUMNS, rows)

    def active_table(self, state: ViewState) -> ViewTable:
        return self.table(state.active)
