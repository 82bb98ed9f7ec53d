"""Schema browser views: view state machine, row projection and per-view tables."""

from portal_schema.views.browser import SchemaBrowser, ViewTable
from portal_schema.views.rows import (
    ALL_ATTRIBUTES_COLUMNS,
    MANIFEST_ATTRIBUTES_COLUMNS,
    MANIFEST_LIST_COLUMNS,
    AttributeRow,
    ColumnName,
    build_row,
    build_rows,
)
from portal_schema.views.state import ATTRIBUTES_VIEW, DEFAULT_VIEWS, MANIFEST_VIEW, ViewState

__all__ = [
    "ALL_ATTRIBUTES_COLUMNS",
    "ATTRIBUTES_VIEW",
    "DEFAULT_VIEWS",
    "MANIFEST_ATTRIBUTES_COLUMNS",
    "MANIFEST_LIST_COLUMNS",
    "MANIFEST_VIEW",
    "AttributeRow",
    "ColumnName",
    "SchemaBrowser",
    "ViewState",
    "ViewTable",
    "build_row",
    "build_rows",
]
