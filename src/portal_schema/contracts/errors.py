"""Exceptions raised at the schema-ingestion and view-state boundaries.

The closure resolver itself raises nothing: dangling references and cycles
are normal, bounded outcomes, not errors.
"""


class SchemaLoadError(ValueError):
    """Raised when a data model document cannot be turned into a SchemaMap.

    Covers unreadable JSON, a missing or non-list ``@graph`` and nodes that
    are not objects or lack an ``@id``.
    """

    pass


class UnknownViewError(KeyError):
    """Raised when a view transition names a view that is not available.

    Attributes:
        view_id: The offending view identifier.
    """

    def __init__(self, view_id: str, message: str) -> None:
        super().__init__(message)
        self.view_id = view_id
        self.message = message

    def __str__(self) -> str:
        return self.message
