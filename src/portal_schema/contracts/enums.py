"""Modes and kinds used across subsystem boundaries."""

from enum import StrEnum


class EdgeKind(StrEnum):
    """Kind of dependency edge between two schema attributes.

    Declaration order is the traversal order used by the closure resolver.
    CONDITIONAL_IF is the reverse of CONDITIONAL and is derived by the
    graph, never stored on an Attribute.
    """

    REQUIRED = "required"
    CONDITIONAL = "conditional"
    EXCLUSIVE_CONDITIONAL = "exclusive_conditional"
    VALID_VALUE = "valid_value"
    CONDITIONAL_IF = "conditional_if"


class IdentityKey(StrEnum):
    """Which attribute field deduplicates resolved attributes."""

    ID = "id"
    ATTRIBUTE = "attribute"


class ProvenancePolicy(StrEnum):
    """What a revisit of an already-resolved attribute contributes.

    MERGE: the revisiting manifest is added to the attribute's manifest names.
    FIRST: the revisit is dropped; only the first manifest is recorded.
    """

    MERGE = "merge"
    FIRST = "first"


class OutputFormat(StrEnum):
    """CLI output format."""

    CONSOLE = "console"
    JSON = "json"
