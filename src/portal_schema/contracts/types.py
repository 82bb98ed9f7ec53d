"""Semantic type aliases for compile-time type safety.

NewType creates distinct types that mypy treats as incompatible,
preventing accidental misuse of semantically different string values.
"""

from typing import NewType

AttributeID = NewType("AttributeID", str)
"""Unique schema node identifier (e.g., 'bts:Biospecimen')"""

ManifestName = NewType("ManifestName", str)
"""Raw, un-overridden display name of a root manifest (e.g., 'BulkWESLevel1')"""

ViewID = NewType("ViewID", str)
"""Browser view identifier: a default view constant or a manifest AttributeID"""
