"""
portal-schema: dependency closure and browsing for data-submission schemas.

Loads a JSON-LD data model, resolves the transitive set of attributes each
manifest pulls in, and projects the result into the rows a schema browser
displays.
"""

__version__ = "0.1.0"
