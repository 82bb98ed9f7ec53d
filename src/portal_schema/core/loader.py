# src/portal_schema/core/loader.py
"""JSON-LD data model ingestion.

Turns a schematic-style JSON-LD document (a top-level ``@graph`` list of
class and value nodes) into a SchemaMap. This is the only place schema input
is validated; the resolver trusts whatever shape it is handed.

Node fields read:
    @id                    -> Attribute.id
    sms:displayName        -> Attribute.attribute (falls back to rdfs:label)
    rdfs:label             -> Attribute.label
    rdfs:comment           -> Attribute.description
    sms:required           -> Attribute.required ("sms:true" or a JSON bool)
    sms:requiresDependency -> Attribute.required_dependencies
    schema:rangeIncludes   -> Attribute.valid_values
    rdfs:subClassOf        -> Attribute.parent_ids
    sms:validationRules    -> Attribute.validation_rules / data_type

Conditional dependencies are derived, not read: an attribute's conditional
dependencies are the required dependencies of its valid values, i.e. the
attributes that become required only once a particular value is chosen.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from portal_schema.contracts import Attribute, AttributeID, SchemaLoadError
from portal_schema.core.logging import get_logger
from portal_schema.core.schema_map import SchemaMap

logger = get_logger(__name__)

# First matching rule keyword wins. Rules look like "int", "regex search ^\d+$",
# "list like", "inRange 0 100"; only the leading keyword is inspected.
_RULE_DATA_TYPES: Mapping[str, str] = {
    "int": "integer",
    "num": "number",
    "float": "number",
    "date": "date",
    "list": "list",
    "url": "url",
    "str": "string",
    "regex": "string",
}

ENUM_DATA_TYPE = "enum"
DEFAULT_DATA_TYPE = "string"


def _ref_ids(value: Any) -> list[str]:
    """Normalise a JSON-LD reference or list of references to bare ids."""
    if value is None:
        return []
    items = value if isinstance(value, list) else [value]
    ids: list[str] = []
    for item in items:
        if isinstance(item, Mapping):
            if "@id" not in item:
                raise ValueError(f"reference {dict(item)!r} has no '@id'")
            ids.append(str(item["@id"]))
        else:
            ids.append(str(item))
    return ids


class _GraphNode(BaseModel):
    """One ``@graph`` entry, as much of it as the browser uses."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: str = Field(alias="@id", min_length=1)
    label: str = Field(default="", alias="rdfs:label")
    display_name: str | None = Field(default=None, alias="sms:displayName")
    comment: str = Field(default="", alias="rdfs:comment")
    required: bool = Field(default=False, alias="sms:required")
    requires_dependency: list[str] = Field(default_factory=list, alias="sms:requiresDependency")
    range_includes: list[str] = Field(default_factory=list, alias="schema:rangeIncludes")
    sub_class_of: list[str] = Field(default_factory=list, alias="rdfs:subClassOf")
    validation_rules: list[str] = Field(default_factory=list, alias="sms:validationRules")

    @field_validator("label", "comment", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("required", mode="before")
    @classmethod
    def _parse_required(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower() in {"sms:true", "true"}
        return v

    @field_validator("requires_dependency", "range_includes", "sub_class_of", mode="before")
    @classmethod
    def _parse_refs(cls, v: Any) -> list[str]:
        return _ref_ids(v)

    @field_validator("validation_rules", mode="before")
    @classmethod
    def _parse_rules(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


def infer_data_type(valid_values: tuple[AttributeID, ...], validation_rules: tuple[str, ...]) -> str:
    """Data type shown for an attribute.

    Enumerated attributes are "enum"; otherwise the first validation rule
    with a known leading keyword decides; otherwise "string".
    """
    if valid_values:
        return ENUM_DATA_TYPE
    for rule in validation_rules:
        keyword = rule.strip().split(" ", 1)[0].lower()
        if keyword in _RULE_DATA_TYPES:
            return _RULE_DATA_TYPES[keyword]
    return DEFAULT_DATA_TYPE


def _derive_conditional(
    node: _GraphNode,
    nodes_by_id: Mapping[str, _GraphNode],
) -> tuple[tuple[AttributeID, ...], tuple[AttributeID, ...]]:
    """Derive (conditional, exclusive_conditional) dependency ids for node.

    conditional: ordered union of the valid values' required dependencies,
    minus the node itself and its own unconditional dependencies.
    exclusive: the conditional ids contributed by exactly one valid value.
    """
    unconditional = set(node.requires_dependency)
    conditional: list[AttributeID] = []
    contributors: dict[str, int] = {}
    for value_id in node.range_includes:
        value_node = nodes_by_id.get(value_id)
        if value_node is None:
            continue
        for dep_id in dict.fromkeys(value_node.requires_dependency):
            if dep_id == node.id or dep_id in unconditional:
                continue
            if dep_id not in contributors:
                conditional.append(AttributeID(dep_id))
                contributors[dep_id] = 0
            contributors[dep_id] += 1
    exclusive = tuple(dep_id for dep_id in conditional if contributors[dep_id] == 1)
    return tuple(conditional), exclusive


def _to_attribute(node: _GraphNode, nodes_by_id: Mapping[str, _GraphNode]) -> Attribute:
    valid_values = tuple(AttributeID(v) for v in node.range_includes)
    rules = tuple(node.validation_rules)
    conditional, exclusive = _derive_conditional(node, nodes_by_id)
    return Attribute(
        id=AttributeID(node.id),
        attribute=node.display_name or node.label or node.id,
        label=node.label,
        description=node.comment,
        required=node.required,
        data_type=infer_data_type(valid_values, rules),
        required_dependencies=tuple(AttributeID(d) for d in node.requires_dependency),
        conditional_dependencies=conditional,
        exclusive_conditional_dependencies=exclusive,
        valid_values=valid_values,
        parent_ids=tuple(AttributeID(p) for p in node.sub_class_of),
        validation_rules=rules,
    )


def parse_schema(document: Mapping[str, Any]) -> SchemaMap:
    """Build a SchemaMap from an already-decoded JSON-LD document.

    Raises:
        SchemaLoadError: If @graph is missing or a node is malformed or duplicated.
    """
    if not isinstance(document, Mapping):
        raise SchemaLoadError(f"Data model must be a JSON object, got {type(document).__name__}")
    graph = document.get("@graph")
    if not isinstance(graph, list):
        raise SchemaLoadError("Data model has no '@graph' list")

    nodes_by_id: dict[str, _GraphNode] = {}
    for index, raw in enumerate(graph):
        if not isinstance(raw, Mapping):
            raise SchemaLoadError(f"@graph[{index}] is not an object")
        try:
            node = _GraphNode.model_validate(dict(raw))
        except ValidationError as e:
            details = "; ".join(f"{'.'.join(str(x) for x in err['loc'])}: {err['msg']}" for err in e.errors())
            raise SchemaLoadError(f"@graph[{index}] is malformed: {details}") from e
        if node.id in nodes_by_id:
            raise SchemaLoadError(f"@graph[{index}] duplicates attribute id '{node.id}'")
        nodes_by_id[node.id] = node

    return SchemaMap.from_attributes(_to_attribute(node, nodes_by_id) for node in nodes_by_id.values())


def load_schema(path: Path) -> SchemaMap:
    """Load a JSON-LD data model file.

    Raises:
        FileNotFoundError: If the file does not exist.
        SchemaLoadError: If the file is not valid JSON or not a usable data model.
    """
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SchemaLoadError(f"Schema file {path.name} is not valid JSON: {e}") from e

    schema_map = parse_schema(document)
    logger.debug("schema_loaded", path=str(path), attributes=len(schema_map))
    return schema_map
