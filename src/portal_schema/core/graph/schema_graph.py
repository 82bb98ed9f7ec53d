# src/portal_schema/core/graph/schema_graph.py
"""SchemaGraph: typed dependency edges over an immutable SchemaMap.

Wraps a NetworkX MultiDiGraph keyed by EdgeKind so the same pair of
attributes can be linked by several relations at once (an attribute can be
both a required and a conditional dependency of another). The reverse
conditional index is built once here; a changed schema means a new graph.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

import networkx as nx
from networkx import MultiDiGraph

from portal_schema.contracts import Attribute, AttributeID, EdgeKind
from portal_schema.core.logging import get_logger
from portal_schema.core.schema_map import FORWARD_EDGE_KINDS, SchemaMap

logger = get_logger(__name__)

# Traversal order for closure resolution.
TRAVERSAL_ORDER: tuple[EdgeKind, ...] = (*FORWARD_EDGE_KINDS, EdgeKind.CONDITIONAL_IF)


class SchemaGraph:
    """Dependency graph for one loaded schema.

    Nodes are AttributeIDs present in the schema map. Edges carry their
    EdgeKind as the multigraph key. Dangling references never become
    edges; they are reported by dangling_references() and otherwise ignored.
    """

    def __init__(self, schema_map: SchemaMap) -> None:
        self._schema_map = schema_map
        self._graph: MultiDiGraph[str] = nx.MultiDiGraph()
        self._graph.add_nodes_from(schema_map)

        reverse: dict[AttributeID, list[AttributeID]] = {}
        for attr in schema_map.values():
            for kind in FORWARD_EDGE_KINDS:
                for target in attr.edges(kind):
                    if target not in schema_map:
                        continue
                    self._graph.add_edge(attr.id, target, key=kind)
                    if kind == EdgeKind.CONDITIONAL:
                        sources = reverse.setdefault(target, [])
                        if attr.id not in sources:
                            sources.append(attr.id)

        # Reverse edges point from the conditional target back to the
        # attributes that make it mandatory, so descendants() covers them.
        for target, sources in reverse.items():
            for source in sources:
                self._graph.add_edge(target, source, key=EdgeKind.CONDITIONAL_IF)

        self._reverse_index: Mapping[AttributeID, tuple[AttributeID, ...]] = MappingProxyType(
            {target: tuple(sources) for target, sources in reverse.items()}
        )

        dangling = schema_map.dangling_references()
        if dangling:
            logger.warning(
                "schema_dangling_references",
                attributes=len(dangling),
                references=sum(len(ids) for ids in dangling.values()),
            )

    @property
    def schema_map(self) -> SchemaMap:
        return self._schema_map

    @property
    def node_count(self) -> int:
        """Number of attributes in the graph."""
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        """Number of typed edges, reverse conditional edges included."""
        return self._graph.number_of_edges()

    def get_nx_graph(self) -> MultiDiGraph[str]:
        """Return a frozen copy of the underlying NetworkX graph."""
        return nx.freeze(self._graph.copy())  # type: ignore[no-any-return]

    def reverse_index(self) -> Mapping[AttributeID, tuple[AttributeID, ...]]:
        """Conditional target id → ids of attributes listing it as a conditional dependency.

        Targets nobody conditionally depends on are absent.
        """
        return self._reverse_index

    def conditional_if(self, attr_id: AttributeID) -> tuple[AttributeID, ...]:
        """Ids of attributes whose conditional dependencies include attr_id, in map order."""
        return self._reverse_index.get(attr_id, ())

    def conditional_if_names(self, attr_id: AttributeID) -> tuple[str, ...]:
        """Raw display names for the "Conditional If" column."""
        return tuple(attr.attribute for attr in self._schema_map.lookup(self.conditional_if(attr_id)))

    def neighbours(self, attr: Attribute) -> tuple[Attribute, ...]:
        """Attributes adjacent to attr, grouped by kind in traversal order.

        Forward edges are read from attr itself, so an independently built
        copy of a mapped attribute sees its own edge lists. Dangling ids are
        dropped. Duplicates across kinds are kept; the resolver deduplicates.
        """
        neighbours: list[Attribute] = []
        for kind in TRAVERSAL_ORDER:
            if kind == EdgeKind.CONDITIONAL_IF:
                ids: Iterable[AttributeID] = self.conditional_if(attr.id)
            else:
                ids = attr.edges(kind)
            neighbours.extend(self._schema_map.lookup(ids))
        return tuple(neighbours)

    def reachable_ids(self, root_ids: Iterable[AttributeID]) -> frozenset[AttributeID]:
        """Every mapped id reachable from root_ids (roots included) over all edge kinds."""
        reachable: set[AttributeID] = set()
        for root_id in root_ids:
            if root_id not in self._schema_map or root_id in reachable:
                continue
            reachable.add(root_id)
            reachable.update(nx.descendants(self._graph, root_id))
        return frozenset(reachable)

    def edges_of(self, attr_id: AttributeID, kind: EdgeKind) -> tuple[AttributeID, ...]:
        """Targets of attr_id's outgoing edges of one kind, as stored in the graph."""
        return tuple(target for _, target, key in self._graph.out_edges(attr_id, keys=True) if key == kind)

    def dangling_references(self) -> dict[AttributeID, tuple[AttributeID, ...]]:
        return self._schema_map.dangling_references()
