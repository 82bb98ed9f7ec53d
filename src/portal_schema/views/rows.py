# src/portal_schema/views/rows.py
"""Table rows and column sets for the schema browser views.

Rows are the presentation boundary: display-name overrides are applied
here and only here, after closure identity has been settled on raw names.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from portal_schema.contracts import Attribute, ResolvedAttribute
from portal_schema.core.graph import SchemaGraph
from portal_schema.core.overrides import OverrideTables


class ColumnName(StrEnum):
    MANIFEST = "Manifest"
    ATTRIBUTE = "Attribute"
    LABEL = "Label"
    DESCRIPTION = "Description"
    REQUIRED = "Required"
    CONDITIONAL_IF = "Conditional If"
    DATA_TYPE = "Data Type"
    VALID_VALUES = "Valid Values"
    MANIFEST_NAME = "Manifest Name"


MANIFEST_LIST_COLUMNS: tuple[ColumnName, ...] = (ColumnName.MANIFEST, ColumnName.DESCRIPTION)

ALL_ATTRIBUTES_COLUMNS: tuple[ColumnName, ...] = (
    ColumnName.ATTRIBUTE,
    ColumnName.MANIFEST_NAME,
    ColumnName.DESCRIPTION,
    ColumnName.REQUIRED,
    ColumnName.CONDITIONAL_IF,
    ColumnName.DATA_TYPE,
    ColumnName.VALID_VALUES,
)

MANIFEST_ATTRIBUTES_COLUMNS: tuple[ColumnName, ...] = (
    ColumnName.ATTRIBUTE,
    ColumnName.DESCRIPTION,
    ColumnName.REQUIRED,
    ColumnName.CONDITIONAL_IF,
    ColumnName.DATA_TYPE,
    ColumnName.VALID_VALUES,
)


@dataclass(frozen=True, slots=True)
class AttributeRow:
    """One table row, every field already formatted for display."""

    id: str
    attribute: str
    label: str
    description: str
    required: str
    data_type: str
    valid_values: tuple[str, ...]
    conditional_if: tuple[str, ...]
    manifest_names: tuple[str, ...]

    def cell(self, column: ColumnName) -> str:
        """Text for one column; list-valued columns are comma-joined."""
        match column:
            case ColumnName.MANIFEST | ColumnName.ATTRIBUTE:
                return self.attribute
            case ColumnName.LABEL:
                return self.label
            case ColumnName.DESCRIPTION:
                return self.description
            case ColumnName.REQUIRED:
                return self.required
            case ColumnName.CONDITIONAL_IF:
                return ", ".join(self.conditional_if)
            case ColumnName.DATA_TYPE:
                return self.data_type
            case ColumnName.VALID_VALUES:
                return ", ".join(self.valid_values)
            case ColumnName.MANIFEST_NAME:
                return ", ".join(self.manifest_names)

    def search_text(self, column: ColumnName) -> str:
        """Value matched by table search (space-joined, like the cell but unformatted)."""
        match column:
            case ColumnName.CONDITIONAL_IF:
                return " ".join(self.conditional_if)
            case ColumnName.VALID_VALUES:
                return " ".join(self.valid_values)
            case ColumnName.MANIFEST_NAME:
                return " ".join(self.manifest_names)
            case _:
                return self.cell(column)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "attribute": self.attribute,
            "label": self.label,
            "description": self.description,
            "required": self.required,
            "data_type": self.data_type,
            "valid_values": list(self.valid_values),
            "conditional_if": list(self.conditional_if),
            "manifest_names": list(self.manifest_names),
        }


def build_row(
    attr: Attribute,
    graph: SchemaGraph,
    overrides: OverrideTables,
    manifest_names: Iterable[str] = (),
) -> AttributeRow:
    """Project one attribute into a display row.

    Manifest names come from raw root names and get the attribute override
    too, so a renamed manifest reads the same in every column.
    """
    schema_map = graph.schema_map
    return AttributeRow(
        id=attr.id,
        attribute=overrides.display_attribute(attr.attribute),
        label=overrides.display_label(attr.label),
        description=attr.description,
        required="True" if attr.required else "False",
        data_type=attr.data_type,
        valid_values=tuple(value.attribute.lower() for value in schema_map.valid_values(attr)),
        conditional_if=graph.conditional_if_names(attr.id),
        manifest_names=tuple(overrides.display_attribute(name) for name in manifest_names),
    )


def build_rows(
    resolved: Iterable[ResolvedAttribute],
    graph: SchemaGraph,
    overrides: OverrideTables,
) -> list[AttributeRow]:
    return [build_row(item.attribute, graph, overrides, item.manifest_names) for item in resolved]
