"""Schema attribute records.

Leaf module: imports nothing outside contracts.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from portal_schema.contracts.enums import EdgeKind, IdentityKey
from portal_schema.contracts.types import AttributeID, ManifestName


@dataclass(frozen=True, slots=True)
class Attribute:
    """One node of the data-submission schema.

    Frozen after construction: the schema map is loaded once and must not
    change while closures are being computed from it.

    Edge lists hold AttributeIDs, not Attribute objects. An id that has no
    entry in the schema map is a dangling reference and is ignored by every
    lookup.
    """

    id: AttributeID
    attribute: str
    label: str = ""
    description: str = ""
    required: bool = False
    data_type: str = "string"
    required_dependencies: tuple[AttributeID, ...] = ()
    conditional_dependencies: tuple[AttributeID, ...] = ()
    exclusive_conditional_dependencies: tuple[AttributeID, ...] = ()
    valid_values: tuple[AttributeID, ...] = ()
    parent_ids: tuple[AttributeID, ...] = ()
    validation_rules: tuple[str, ...] = ()

    def edges(self, kind: EdgeKind) -> tuple[AttributeID, ...]:
        """Forward edge targets of one kind.

        CONDITIONAL_IF has no forward list; it is answered by the graph's
        reverse index.
        """
        match kind:
            case EdgeKind.REQUIRED:
                return self.required_dependencies
            case EdgeKind.CONDITIONAL:
                return self.conditional_dependencies
            case EdgeKind.EXCLUSIVE_CONDITIONAL:
                return self.exclusive_conditional_dependencies
            case EdgeKind.VALID_VALUE:
                return self.valid_values
            case EdgeKind.CONDITIONAL_IF:
                raise ValueError("conditional_if edges are derived by SchemaGraph, not stored on Attribute")

    def identity(self, key: IdentityKey) -> str:
        """Deduplication key: the raw id or the raw (un-overridden) name."""
        if key == IdentityKey.ID:
            return self.id
        return self.attribute


@dataclass(frozen=True, slots=True)
class ResolvedAttribute:
    """An attribute reached by closure resolution, with its provenance.

    manifest_names lists every root manifest that reached the attribute,
    in the order they first reached it, without duplicates.
    """

    attribute: Attribute
    manifest_names: tuple[ManifestName, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.manifest_names:
            raise ValueError(f"ResolvedAttribute '{self.attribute.id}' must carry at least one manifest name")
        if len(set(self.manifest_names)) != len(self.manifest_names):
            raise ValueError(f"ResolvedAttribute '{self.attribute.id}' has duplicate manifest names: {self.manifest_names}")

    @property
    def id(self) -> AttributeID:
        return self.attribute.id

    @property
    def manifest_name(self) -> ManifestName:
        """The manifest that reached this attribute first."""
        return self.manifest_names[0]
