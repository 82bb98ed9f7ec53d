# src/portal_schema/core/graph/resolver.py
"""Closure resolution: every attribute a set of manifests pulls in.

Starting from root attributes (usually manifests), walk required,
conditional, exclusive-conditional, valid-value and conditional-if edges
depth-first, recording each attribute once and stamping it with the names
of the root manifests that reached it.

Invariants:
    - Output order is discovery order (recursive pre-order over roots in the
      order given, neighbours in TRAVERSAL_ORDER).
    - An attribute appears once per identity key, whatever number of paths
      or roots reach it.
    - Descent into an attribute happens at most once per (attribute id,
      manifest) pair, so cycles terminate and a second manifest still stamps
      the whole shared subtree.
    - The originating root's raw name propagates unchanged down its subtree.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TypeAlias

from portal_schema.contracts import (
    Attribute,
    AttributeID,
    IdentityKey,
    ManifestName,
    ProvenancePolicy,
    ResolvedAttribute,
)
from portal_schema.core.graph.schema_graph import SchemaGraph
from portal_schema.core.logging import get_logger
from portal_schema.core.schema_map import SchemaMap

logger = get_logger(__name__)

RootRef: TypeAlias = Attribute | str


@dataclass(slots=True)
class _Record:
    """Mutable accumulator for one output entry during a single resolve() call."""

    attribute: Attribute
    manifest_names: list[ManifestName] = field(default_factory=list)

    def freeze(self) -> ResolvedAttribute:
        return ResolvedAttribute(attribute=self.attribute, manifest_names=tuple(self.manifest_names))


class SchemaGraphResolver:
    """Computes attribute closures over one SchemaGraph.

    Stateless between calls: resolve() is idempotent and side-effect free.
    """

    def __init__(
        self,
        graph: SchemaGraph,
        *,
        identity_key: IdentityKey = IdentityKey.ID,
        provenance: ProvenancePolicy = ProvenancePolicy.MERGE,
    ) -> None:
        self._graph = graph
        self._identity_key = identity_key
        self._provenance = provenance

    @property
    def graph(self) -> SchemaGraph:
        return self._graph

    @property
    def identity_key(self) -> IdentityKey:
        return self._identity_key

    @property
    def provenance(self) -> ProvenancePolicy:
        return self._provenance

    def _root_attributes(self, roots: Iterable[RootRef]) -> list[Attribute]:
        schema_map = self._graph.schema_map
        attributes: list[Attribute] = []
        for root in roots:
            if isinstance(root, Attribute):
                attributes.append(root)
            elif root in schema_map:
                attributes.append(schema_map[AttributeID(root)])
            else:
                logger.debug("closure_root_not_found", root=root)
        return attributes

    def resolve(self, roots: Iterable[RootRef]) -> list[ResolvedAttribute]:
        """Resolve the closure of roots.

        Args:
            roots: Attributes, or attribute ids looked up in the schema map.
                Unknown ids are skipped.

        Returns:
            One ResolvedAttribute per distinct identity, in discovery order.
            Manifest names are each root's raw display name
            (``Attribute.attribute``), not its label and not an override.
        """
        merge = self._provenance == ProvenancePolicy.MERGE
        records: dict[str, _Record] = {}
        descended: set[tuple[AttributeID, str]] = set()
        root_attributes = self._root_attributes(roots)

        for root in root_attributes:
            manifest = ManifestName(root.attribute)
            # Explicit stack instead of recursion: schemas can nest deeper
            # than the interpreter recursion limit.
            stack: list[Attribute] = [root]
            while stack:
                attr = stack.pop()
                identity = attr.identity(self._identity_key)
                record = records.get(identity)
                if record is None:
                    records[identity] = _Record(attribute=attr, manifest_names=[manifest])
                elif merge and manifest not in record.manifest_names:
                    record.manifest_names.append(manifest)

                descent_key = (attr.id, manifest if merge else "")
                if descent_key in descended:
                    continue
                descended.add(descent_key)
                # Reversed so the first neighbour is popped (visited) first.
                stack.extend(reversed(self._graph.neighbours(attr)))

        resolved = [record.freeze() for record in records.values()]
        logger.debug(
            "closure_resolved",
            roots=len(root_attributes),
            attributes=len(resolved),
            identity_key=self._identity_key.value,
            provenance=self._provenance.value,
        )
        return resolved


class ClosureCache:
    """Memoizes closures keyed on the ordered tuple of root ids.

    Safe without invalidation because the graph is immutable. Root order is
    part of the key since it determines output order. Attribute roots are
    reduced to their ids and looked up in the schema map. Results are
    returned as tuples so cached values cannot be mutated by callers.
    """

    def __init__(self, resolver: SchemaGraphResolver, *, maxsize: int = 128) -> None:
        self._resolver = resolver
        self._cached = lru_cache(maxsize=maxsize)(self._resolve_ids)

    def _resolve_ids(self, root_ids: tuple[AttributeID, ...]) -> tuple[ResolvedAttribute, ...]:
        return tuple(self._resolver.resolve(root_ids))

    def get(self, roots: Sequence[RootRef]) -> tuple[ResolvedAttribute, ...]:
        """Closure of roots, from the cache when the roots are mapped.

        An Attribute root that is not the schema map's own record (unmapped,
        or an independent copy with its own edge lists) bypasses the cache.
        """
        schema_map = self._resolver.graph.schema_map
        for root in roots:
            if isinstance(root, Attribute) and schema_map.get(root.id) is not root:
                return tuple(self._resolver.resolve(roots))
        root_ids = tuple(root.id if isinstance(root, Attribute) else AttributeID(root) for root in roots)
        return self._cached(root_ids)

    @property
    def hits(self) -> int:
        return self._cached.cache_info().hits

    @property
    def misses(self) -> int:
        return self._cached.cache_info().misses

    def clear(self) -> None:
        self._cached.cache_clear()


def resolve_closure(
    roots: Iterable[RootRef],
    schema_map: SchemaMap,
    *,
    identity_key: IdentityKey = IdentityKey.ID,
    provenance: ProvenancePolicy = ProvenancePolicy.MERGE,
) -> list[ResolvedAttribute]:
    """One-shot closure over a schema map.

    Builds a SchemaGraph per call; hold a SchemaGraphResolver (or a
    ClosureCache) when resolving repeatedly against the same map.
    """
    resolver = SchemaGraphResolver(SchemaGraph(schema_map), identity_key=identity_key, provenance=provenance)
    return resolver.resolve(roots)
