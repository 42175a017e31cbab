from .selection import (
    SelectionState,
    facility_type_label,
    matches_search_term,
    toggle_member,
    visible_facilities,
)

__all__ = [
    "SelectionState",
    "facility_type_label",
    "matches_search_term",
    "toggle_member",
    "visible_facilities",
]
