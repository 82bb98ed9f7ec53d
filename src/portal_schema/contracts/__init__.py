"""Shared contracts for portal-schema.

Leaf package: types, enums, records and exceptions used by core, views and
the CLI. Nothing here imports from other portal_schema packages.
"""

from portal_schema.contracts.attributes import Attribute, ResolvedAttribute
from portal_schema.contracts.enums import EdgeKind, IdentityKey, OutputFormat, ProvenancePolicy
from portal_schema.contracts.errors import SchemaLoadError, UnknownViewError
from portal_schema.contracts.types import AttributeID, ManifestName, ViewID

__all__ = [
    "Attribute",
    "AttributeID",
    "EdgeKind",
    "IdentityKey",
    "ManifestName",
    "OutputFormat",
    "ProvenancePolicy",
    "ResolvedAttribute",
    "SchemaLoadError",
    "UnknownViewError",
    "ViewID",
]
