# src/portal_schema/core/schema_map.py
"""Read-only id → Attribute mapping with the lookups the browser needs.

A SchemaMap is built once per loaded data model and never changes. All
lookups skip ids that have no entry (dangling references): a schema that
references attributes it does not define degrades to fewer results, never
to an exception.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from portal_schema.contracts import Attribute, AttributeID, EdgeKind, SchemaLoadError

# Forward edge kinds stored on Attribute (CONDITIONAL_IF is derived).
FORWARD_EDGE_KINDS: tuple[EdgeKind, ...] = (
    EdgeKind.REQUIRED,
    EdgeKind.CONDITIONAL,
    EdgeKind.EXCLUSIVE_CONDITIONAL,
    EdgeKind.VALID_VALUE,
)

DEFAULT_COMPONENT_ID = AttributeID("bts:Component")


class SchemaMap(Mapping[AttributeID, Attribute]):
    """Immutable mapping from AttributeID to Attribute.

    Iteration order is the order attributes were supplied (document order
    for loaded schemas). Reverse-index and manifest listings follow it.
    """

    def __init__(self, attributes: Mapping[AttributeID, Attribute]) -> None:
        for attr_id, attr in attributes.items():
            if attr_id != attr.id:
                raise SchemaLoadError(f"SchemaMap key '{attr_id}' does not match attribute id '{attr.id}'")
        self._attributes: Mapping[AttributeID, Attribute] = MappingProxyType(dict(attributes))

    @classmethod
    def from_attributes(cls, attributes: Iterable[Attribute]) -> SchemaMap:
        """Build a map from records, rejecting duplicate ids."""
        by_id: dict[AttributeID, Attribute] = {}
        for attr in attributes:
            if attr.id in by_id:
                raise SchemaLoadError(f"Duplicate attribute id '{attr.id}'")
            by_id[attr.id] = attr
        return cls(by_id)

    def __getitem__(self, attr_id: AttributeID) -> Attribute:
        return self._attributes[attr_id]

    def __iter__(self) -> Iterator[AttributeID]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __repr__(self) -> str:
        return f"SchemaMap({len(self)} attributes)"

    def lookup(self, ids: Iterable[AttributeID]) -> tuple[Attribute, ...]:
        """Resolve ids to attributes in order, dropping dangling ids."""
        return tuple(self._attributes[attr_id] for attr_id in ids if attr_id in self._attributes)

    def valid_values(self, attr: Attribute) -> tuple[Attribute, ...]:
        """Attributes representing the enumerated valid values of attr."""
        return self.lookup(attr.valid_values)

    def required_dependencies(self, attr: Attribute) -> tuple[Attribute, ...]:
        return self.lookup(attr.required_dependencies)

    def find(self, key: str) -> Attribute | None:
        """Find an attribute by id, then by raw display name, then by label.

        Returns the first match in map order, or None.
        """
        if key in self._attributes:
            return self._attributes[AttributeID(key)]
        for attr in self._attributes.values():
            if attr.attribute == key:
                return attr
        for attr in self._attributes.values():
            if attr.label == key:
                return attr
        return None

    def manifests(self, component_id: str = DEFAULT_COMPONENT_ID) -> tuple[Attribute, ...]:
        """Root manifests: attributes declared as subclasses of the component class."""
        return tuple(attr for attr in self._attributes.values() if component_id in attr.parent_ids)

    def dangling_references(self) -> dict[AttributeID, tuple[AttributeID, ...]]:
        """Map each attribute to the forward-edge ids it references but the map lacks.

        Attributes with no dangling references are omitted.
        """
        dangling: dict[AttributeID, tuple[AttributeID, ...]] = {}
        for attr in self._attributes.values():
            missing: list[AttributeID] = []
            for kind in FORWARD_EDGE_KINDS:
                for target in attr.edges(kind):
                    if target not in self._attributes and target not in missing:
                        missing.append(target)
            if missing:
                dangling[attr.id] = tuple(missing)
        return dangling
