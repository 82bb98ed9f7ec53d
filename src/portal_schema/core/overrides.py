"""Display-name override tables.

Historical schema names that the portal shows under their current names.
Overrides are presentation-only: closure identity is always computed on the
raw names, so two attributes never merge because of an override.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

# Bulk WES manifests were renamed to Bulk DNA; the data model still carries
# the legacy names.
DEFAULT_ATTRIBUTE_OVERRIDES: Mapping[str, str] = MappingProxyType(
    {
        "Bulk WES Level 1": "Bulk DNA Level 1",
        "Bulk WES Level 2": "Bulk DNA Level 2",
        "Bulk WES Level 3": "Bulk DNA Level 3",
    }
)

DEFAULT_LABEL_OVERRIDES: Mapping[str, str] = MappingProxyType(
    {
        "BulkWESLevel1": "BulkDNALevel1",
        "BulkWESLevel2": "BulkDNALevel2",
        "BulkWESLevel3": "BulkDNALevel3",
    }
)


def _freeze(table: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(table))


@dataclass(frozen=True)
class OverrideTables:
    """Immutable legacy-name → current-name lookups.

    Tables are copied and wrapped in MappingProxyType on construction, so
    later mutation of the caller's dicts has no effect.
    """

    attribute: Mapping[str, str] = field(default_factory=lambda: DEFAULT_ATTRIBUTE_OVERRIDES)
    label: Mapping[str, str] = field(default_factory=lambda: DEFAULT_LABEL_OVERRIDES)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attribute", _freeze(self.attribute))
        object.__setattr__(self, "label", _freeze(self.label))

    @classmethod
    def with_defaults(
        cls,
        *,
        attribute: Mapping[str, str] | None = None,
        label: Mapping[str, str] | None = None,
    ) -> OverrideTables:
        """Build tables from the defaults with extra entries layered on top."""
        return cls(
            attribute={**DEFAULT_ATTRIBUTE_OVERRIDES, **(attribute or {})},
            label={**DEFAULT_LABEL_OVERRIDES, **(label or {})},
        )

    @classmethod
    def empty(cls) -> OverrideTables:
        return cls(attribute={}, label={})

    def display_attribute(self, name: str) -> str:
        return self.attribute.get(name, name)

    def display_label(self, label: str) -> str:
        return self.label.get(label, label)
