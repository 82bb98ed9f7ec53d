# tests/property/core/test_closure_properties.py
"""Property-based tests for closure resolution.

These tests verify the guarantees users rely on when reading a manifest's
attribute table:
- Completeness: every attribute reachable over any edge kind is listed
- Exactly once: no attribute is listed twice, whatever the number of paths
- Determinism: same schema and roots, same rows in the same order
- Provenance: each attribute names exactly the manifests that reach it
- Termination: cycles, self-loops and dangling references are harmless
"""

from __future__ import annotations

from typing import TypeAlias

from hypothesis import given

from portal_schema.contracts import AttributeID, IdentityKey, ProvenancePolicy
from portal_schema.core.graph import ClosureCache, SchemaGraph, SchemaGraphResolver
from portal_schema.core.schema_map import SchemaMap
from tests.property.conftest import schema_with_roots
from tests.property.settings import DETERMINISM_SETTINGS, STANDARD_SETTINGS

SchemaAndRoots: TypeAlias = tuple[SchemaMap, tuple[AttributeID, ...]]


def _resolver(schema_map: SchemaMap, **kwargs: object) -> SchemaGraphResolver:
    return SchemaGraphResolver(SchemaGraph(schema_map), **kwargs)  # type: ignore[arg-type]


class TestClosureCompleteness:
    """Output ids are exactly the ids reachable from the roots."""

    @given(data=schema_with_roots())
    @STANDARD_SETTINGS
    def test_output_matches_reachable_set(self, data: SchemaAndRoots) -> None:
        schema_map, roots = data
        resolver = _resolver(schema_map)

        resolved = resolver.resolve(roots)

        assert {item.id for item in resolved} == resolver.graph.reachable_ids(roots)

    @given(data=schema_with_roots())
    @STANDARD_SETTINGS
    def test_first_policy_reaches_same_set(self, data: SchemaAndRoots) -> None:
        schema_map, roots = data
        merged = _resolver(schema_map).resolve(roots)
        first = _resolver(schema_map, provenance=ProvenancePolicy.FIRST).resolve(roots)

        assert [item.id for item in first] == [item.id for item in merged]

    @given(data=schema_with_roots())
    @STANDARD_SETTINGS
    def test_no_dangling_ids_in_output(self, data: SchemaAndRoots) -> None:
        schema_map, roots = data

        resolved = _resolver(schema_map).resolve(roots)

        assert all(item.id in schema_map for item in resolved)


class TestExactlyOnce:
    @given(data=schema_with_roots())
    @STANDARD_SETTINGS
    def test_ids_unique(self, data: SchemaAndRoots) -> None:
        schema_map, roots = data

        ids = [item.id for item in _resolver(schema_map).resolve(roots)]

        assert len(ids) == len(set(ids))

    @given(data=schema_with_roots(unique_names=False))
    @STANDARD_SETTINGS
    def test_names_unique_under_attribute_identity(self, data: SchemaAndRoots) -> None:
        schema_map, roots = data
        resolver = _resolver(schema_map, identity_key=IdentityKey.ATTRIBUTE)

        names = [item.attribute.attribute for item in resolver.resolve(roots)]

        assert len(names) == len(set(names))
        assert set(names) == {schema_map[i].attribute for i in resolver.graph.reachable_ids(roots)}


class TestOrdering:
    @given(data=schema_with_roots())
    @DETERMINISM_SETTINGS
    def test_deterministic(self, data: SchemaAndRoots) -> None:
        schema_map, roots = data

        first = _resolver(schema_map).resolve(roots)
        second = _resolver(schema_map).resolve(roots)

        assert first == second

    @given(data=schema_with_roots())
    @STANDARD_SETTINGS
    def test_first_root_leads(self, data: SchemaAndRoots) -> None:
        schema_map, roots = data

        resolved = _resolver(schema_map).resolve(roots)

        assert resolved[0].id == roots[0]

    @given(data=schema_with_roots())
    @STANDARD_SETTINGS
    def test_first_root_closure_is_prefix(self, data: SchemaAndRoots) -> None:
        schema_map, roots = data
        resolver = _resolver(schema_map)

        single = [item.id for item in resolver.resolve(roots[:1])]
        combined = [item.id for item in resolver.resolve(roots)]

        assert combined[: len(single)] == single


class TestProvenance:
    @given(data=schema_with_roots())
    @STANDARD_SETTINGS
    def test_merge_names_every_reaching_root_in_root_order(self, data: SchemaAndRoots) -> None:
        schema_map, roots = data
        resolver = _resolver(schema_map)
        reach = {root: resolver.graph.reachable_ids([root]) for root in roots}

        for item in resolver.resolve(roots):
            expected = tuple(schema_map[root].attribute for root in roots if item.id in reach[root])
            assert item.manifest_names == expected

    @given(data=schema_with_roots())
    @STANDARD_SETTINGS
    def test_first_policy_names_first_reaching_root(self, data: SchemaAndRoots) -> None:
        schema_map, roots = data
        resolver = _resolver(schema_map, provenance=ProvenancePolicy.FIRST)
        reach = {root: resolver.graph.reachable_ids([root]) for root in roots}

        for item in resolver.resolve(roots):
            first_root = next(root for root in roots if item.id in reach[root])
            assert item.manifest_names == (schema_map[first_root].attribute,)


@given(data=schema_with_roots())
@STANDARD_SETTINGS
def test_cache_returns_resolver_result(data: SchemaAndRoots) -> None:
    schema_map, roots = data
    resolver = _resolver(schema_map)
    cache = ClosureCache(resolver)

    assert list(cache.get(roots)) == resolver.resolve(roots)
    assert cache.get(roots) is cache.get(roots)
