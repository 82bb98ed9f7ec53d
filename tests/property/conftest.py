# tests/property/conftest.py
"""Shared Hypothesis strategies for property-based tests.

Strategy Categories:
- Attribute ids (small alphabet so random edges collide and form cycles)
- Schema maps (random typed edges, dangling references, self-loops)
- Root selections (ids drawn from a generated map, possibly unknown)

Usage:
    from tests.property.conftest import schema_maps, schema_with_roots

    @given(data=schema_with_roots())
    def test_closure_is_complete(data) -> None:
        ...
"""

# =============================================================================
# Hypothesis Settings
# =============================================================================
#
# For standardized @settings decorators, import from tests.property.settings:
#   from tests.property.settings import STANDARD_SETTINGS, DETERMINISM_SETTINGS
#
# Tiers: DETERMINISM (500), STATE_MACHINE (200), STANDARD (100), QUICK (20)
# =============================================================================

from __future__ import annotations

from hypothesis import strategies as st

from portal_schema.contracts import Attribute, AttributeID
from portal_schema.core.schema_map import SchemaMap

# Pool of ids; a few extra ids never get nodes so edges can dangle.
ID_POOL: tuple[str, ...] = tuple(f"bts:N{i}" for i in range(12))
DANGLING_POOL: tuple[str, ...] = ("bts:Ghost1", "bts:Ghost2")

# Display names collide on purpose so identity by name can merge nodes.
NAME_POOL: tuple[str, ...] = ("Alpha", "Beta", "Gamma", "Delta", "Epsilon", "Zeta", "Eta", "Theta")


def _edge_lists(pool: tuple[str, ...]) -> st.SearchStrategy[tuple[AttributeID, ...]]:
    return st.lists(st.sampled_from(pool), max_size=4, unique=True).map(lambda ids: tuple(AttributeID(i) for i in ids))


@st.composite
def schema_maps(draw: st.DrawFn, *, min_size: int = 1, unique_names: bool = True) -> SchemaMap:
    """Random schema map over a prefix of ID_POOL.

    Edges may point at any pooled id (self-loops and cycles included) or at
    ids with no node. With unique_names=False display names repeat.
    """
    size = draw(st.integers(min_value=min_size, max_value=len(ID_POOL)))
    node_ids = ID_POOL[:size]
    targets = node_ids + DANGLING_POOL
    attributes: list[Attribute] = []
    for index, node_id in enumerate(node_ids):
        name = f"Attr {index}" if unique_names else draw(st.sampled_from(NAME_POOL))
        attributes.append(
            Attribute(
                id=AttributeID(node_id),
                attribute=name,
                label=node_id.removeprefix("bts:"),
                required=draw(st.booleans()),
                required_dependencies=draw(_edge_lists(targets)),
                conditional_dependencies=draw(_edge_lists(targets)),
                exclusive_conditional_dependencies=draw(_edge_lists(targets)),
                valid_values=draw(_edge_lists(targets)),
            )
        )
    return SchemaMap.from_attributes(attributes)


@st.composite
def schema_with_roots(
    draw: st.DrawFn, *, unique_names: bool = True
) -> tuple[SchemaMap, tuple[AttributeID, ...]]:
    """A schema map plus an ordered, duplicate-free selection of its ids as roots."""
    schema_map = draw(schema_maps(unique_names=unique_names))
    roots = draw(st.lists(st.sampled_from(list(schema_map)), min_size=1, max_size=4, unique=True))
    return schema_map, tuple(roots)
