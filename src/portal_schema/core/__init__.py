# src/portal_schema/core/__init__.py
"""Core infrastructure: Configuration, Logging, Schema loading, Graph, Overrides."""

from portal_schema.core.config import (
    LoggingSettings,
    OverrideSettings,
    PortalSchemaSettings,
    load_settings,
)
from portal_schema.core.graph import (
    TRAVERSAL_ORDER,
    ClosureCache,
    SchemaGraph,
    SchemaGraphResolver,
    resolve_closure,
)
from portal_schema.core.loader import infer_data_type, load_schema, parse_schema
from portal_schema.core.logging import (
    configure_logging,
    get_logger,
)
from portal_schema.core.overrides import (
    DEFAULT_ATTRIBUTE_OVERRIDES,
    DEFAULT_LABEL_OVERRIDES,
    OverrideTables,
)
from portal_schema.core.schema_map import DEFAULT_COMPONENT_ID, FORWARD_EDGE_KINDS, SchemaMap

__all__ = [
    "DEFAULT_ATTRIBUTE_OVERRIDES",
    "DEFAULT_COMPONENT_ID",
    "DEFAULT_LABEL_OVERRIDES",
    "FORWARD_EDGE_KINDS",
    "TRAVERSAL_ORDER",
    "ClosureCache",
    "LoggingSettings",
    "OverrideSettings",
    "OverrideTables",
    "PortalSchemaSettings",
    "SchemaGraph",
    "SchemaGraphResolver",
    "SchemaMap",
    "configure_logging",
    "get_logger",
    "infer_data_type",
    "load_schema",
    "load_settings",
    "parse_schema",
    "resolve_closure",
]
