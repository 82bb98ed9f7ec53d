# src/portal_schema/views/state.py
"""Schema browser view state.

The browser always offers two default views (the manifest list and the
all-attributes table) plus any number of manifest views the user has
opened. ViewState is an immutable value; every transition returns a new
state and leaves the old one untouched.

Transitions:
    open_view(id)   -> append id if not already open, make it active
    select_view(id) -> make a default view or an open manifest view active
    close_view(id)  -> remove an open manifest view; if it was active, fall
                       back to the most recently opened remaining view, or
                       to the manifest list when none remain
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from portal_schema.contracts import UnknownViewError, ViewID

MANIFEST_VIEW = ViewID("_manifest_")
ATTRIBUTES_VIEW = ViewID("_attributes_")
DEFAULT_VIEWS: tuple[ViewID, ...] = (MANIFEST_VIEW, ATTRIBUTES_VIEW)


@dataclass(frozen=True, slots=True)
class ViewState:
    """Active view plus the ordered, duplicate-free set of open manifest views."""

    active: ViewID = MANIFEST_VIEW
    open_views: tuple[ViewID, ...] = ()

    def __post_init__(self) -> None:
        if len(set(self.open_views)) != len(self.open_views):
            raise ValueError(f"open_views contains duplicates: {self.open_views}")
        for view_id in self.open_views:
            if view_id in DEFAULT_VIEWS:
                raise ValueError(f"Default view '{view_id}' cannot be opened as a manifest view")
        if self.active not in DEFAULT_VIEWS and self.active not in self.open_views:
            raise ValueError(f"Active view '{self.active}' is neither a default view nor open")

    @property
    def available_views(self) -> tuple[ViewID, ...]:
        """Views in tab order: defaults first, then manifest views in opening order."""
        return (*DEFAULT_VIEWS, *self.open_views)

    def is_open(self, view_id: str) -> bool:
        return view_id in self.open_views

    def open_view(self, view_id: str) -> ViewState:
        if view_id in DEFAULT_VIEWS:
            raise UnknownViewError(view_id, f"Cannot open default view '{view_id}' as a manifest view; select it instead")
        vid = ViewID(view_id)
        open_views = self.open_views if vid in self.open_views else (*self.open_views, vid)
        return replace(self, active=vid, open_views=open_views)

    def select_view(self, view_id: str) -> ViewState:
        if view_id not in self.available_views:
            raise UnknownViewError(view_id, f"View '{view_id}' is not open")
        return replace(self, active=ViewID(view_id))

    def close_view(self, view_id: str) -> ViewState:
        if view_id not in self.open_views:
            raise UnknownViewError(view_id, f"View '{view_id}' is not an open manifest view")
        remaining = tuple(v for v in self.open_views if v != view_id)
        if self.active != view_id:
            return replace(self, open_views=remaining)
        fallback = remaining[-1] if remaining else MANIFEST_VIEW
        return replace(self, active=fallback, open_views=remaining)
