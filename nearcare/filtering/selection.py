# nearcare/filtering/selection.py
from dataclasses import dataclass, field, replace
from typing import AbstractSet, FrozenSet, Iterable, List, Optional, Sequence

from nearcare.core.models import Facility
from nearcare.discovery.seed import FACILITY_TYPES, TYPE_LABELS


def facility_type_label(type_: str) -> str:
    """Display label for a facility type ("PHC" -> "Health Centers")."""
    return TYPE_LABELS.get(type_, type_)


def toggle_member(members: AbstractSet, item) -> FrozenSet:
    """Flip membership of `item`; applying it twice gives back `members`."""
    if item in members:
        return frozenset(m for m in members if m != item)
    return frozenset(members) | {item}


def matches_search_term(facility: Facility, term: str) -> bool:
    term = term.strip().lower()
    if not term:
        return True
    if term in facility.name.lower():
        return True
    if facility.address and term in facility.address.lower():
        return True
    return any(term in s.lower() for s in facility.services)


def visible_facilities(
    candidates: Sequence[Facility],
    selected_types: AbstractSet[str],
    type_universe: Optional[Sequence[str]] = None,
    search_term: str = "",
) -> List[Facility]:
    """
    Narrow `candidates` to what the type filter and search box allow.

    Nothing selected shows nothing. Every known type selected shows every
    candidate, including types outside the universe (live results such as
    "Dentist"). Otherwise a facility is kept when its label matches the label
    of one of the selected types.
    """
    universe = FACILITY_TYPES if type_universe is None else type_universe
    if not selected_types:
        return []

    if set(universe) <= set(selected_types):
        shown = list(candidates)
    else:
        labels = {facility_type_label(t) for t in selected_types}
        shown = [f for f in candidates if facility_type_label(f.type) in labels]

    if search_term:
        shown = [f for f in shown if matches_search_term(f, search_term)]
    return shown


@dataclass(frozen=True)
class SelectionState:
    """Type filter and highlighted facilities. Every change returns a new state."""
    selected_types: FrozenSet[str] = field(default_factory=lambda: frozenset(FACILITY_TYPES))
    selected_facilities: FrozenSet[str] = frozenset()
    type_universe: tuple = field(default_factory=lambda: tuple(FACILITY_TYPES))

    def toggle_type(self, type_: str) -> "SelectionState":
        return replace(self, selected_types=toggle_member(self.selected_types, type_))

    def select_all_types(self) -> "SelectionState":
        return replace(self, selected_types=frozenset(self.type_universe))

    def clear_types(self) -> "SelectionState":
        return replace(self, selected_types=frozenset())

    def toggle_facility(self, facility_id: str) -> "SelectionState":
        return replace(self, selected_facilities=toggle_member(self.selected_facilities, facility_id))

    def prune_facilities(self, ids: Iterable[str]) -> "SelectionState":
        keep = set(ids)
        return replace(self, selected_facilities=frozenset(i for i in self.selected_facilities if i in keep))

    def is_selected(self, facility_id: str) -> bool:
        return facility_id in self.selected_facilities

    def visible(self, candidates: Sequence[Facility], search_term: str = "") -> List[Facility]:
        return visible_facilities(candidates, self.selected_types, self.type_universe, search_term)
