# nearcare/finder.py
"""
FacilityFinder: state and actions of the nearby-facility screen.

Holds the candidate list, user location, map center and pin, the type filter
and selection, the searching flag and the notices shown to the user. Errors
from the components below are turned into notices here; none escape.
"""
from typing import List, Optional, Sequence, Tuple

from nearcare.core.config import settings
from nearcare.core.errors import (
    DirectoryFetchFailed,
    GeocodeError,
    GeocodeNotFound,
    GeolocationError,
    LiveSearchFailed,
)
from nearcare.core.models import Facility, MarkerSpec, Notice, UserLocation
from nearcare.core.store import LocalStore
from nearcare.discovery.catalog import FacilityCatalog
from nearcare.discovery.seed import OVERPASS_CATEGORIES
from nearcare.filtering import SelectionState
from nearcare.geocode import NominatimGeocoder
from nearcare.geolocation import BaseLocator, GeolocationProvider, default_locator
from nearcare.ranking import nearest, rank
from nearcare.visualize.visualize import DEFAULT_CENTER, generate_map, marker_specs


class FacilityFinder:
    def __init__(
        self,
        catalog: FacilityCatalog,
        geolocation: GeolocationProvider,
        geocoder: Optional[NominatimGeocoder] = None,
        radius_m: Optional[int] = None,
        categories: Optional[Sequence[str]] = None,
        verbose: bool = False,
    ):
        self.catalog = catalog
        self.geolocation = geolocation
        self.geocoder = geocoder or NominatimGeocoder()
        self.radius_m = radius_m or settings.search_radius_m
        self.categories = list(categories or OVERPASS_CATEGORIES)
        self.verbose = verbose or settings.debug

        cached = catalog.cached()
        if cached is not None:
            # distances belong to an earlier session's origin
            cached = [f.model_copy(update={"distance": None}) for f in cached]
        self.candidates: List[Facility] = cached if cached is not None else catalog.seed()
        self.user_location: Optional[UserLocation] = None
        self.map_center: Tuple[float, float] = DEFAULT_CENTER
        self.pinned_location: Optional[Tuple[float, float]] = None
        self.selection = SelectionState()
        self.search_term = ""
        self.searching = False
        self.notices: List[Notice] = []

        self._seq = 0
        self._closed = False

    # ------------------------------------------------------------------
    # Notices
    # ------------------------------------------------------------------
    def notify(self, title: str, description: str = "", variant: str = "default") -> Notice:
        notice = Notice(title=title, description=description, variant=variant)
        self.notices.append(notice)
        if self.verbose:
            print(f"[finder] {title}: {description}")
        return notice

    def _replace_candidates(self, facilities: List[Facility]) -> None:
        self.candidates = list(facilities)
        self.selection = self.selection.prune_facilities(f.id for f in self.candidates)

    def _is_current(self, seq: int) -> bool:
        return not self._closed and seq == self._seq

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------
    async def load_directory(self) -> List[Facility]:
        """Load the same-origin listing; fall back to the bundled list on failure."""
        try:
            facilities = await self.catalog.fetch_facility_directory()
        except DirectoryFetchFailed as e:
            self.notify("Could not load health centers", f"{e}. Showing the bundled list.", "destructive")
            facilities = self.catalog.seed()

        if self._closed:
            return facilities
        self._replace_candidates(rank(facilities, self.user_location))
        return self.candidates

    async def use_current_location(self) -> Optional[UserLocation]:
        try:
            location = await self.geolocation.acquire_location()
        except GeolocationError as e:
            self.notify("Location Error", str(e) or "Could not retrieve your location.", "destructive")
            return None

        if self._closed:
            return location
        self.user_location = location
        self.map_center = (location.lat, location.lng)
        self.candidates = rank(self.candidates, location)
        self.notify("Location Found!", f"Latitude: {location.lat:.4f}, Longitude: {location.lng:.4f}")
        return location

    async def find_nearby(self) -> Optional[List[Facility]]:
        """
        Live search around the user's location.

        Returns the new candidate list, or None when the search did not run
        (no location, already searching) or its result arrived too late to
        be applied.
        """
        if self.user_location is None:
            self.notify("Location needed", "Use your current location before searching nearby.", "destructive")
            return None
        if self.searching:
            return None

        self._seq += 1
        seq = self._seq
        origin = self.user_location
        self.searching = True
        try:
            results = await self.catalog.search_nearby(origin, self.radius_m, self.categories)
        except LiveSearchFailed as e:
            if not self._is_current(seq):
                return None
            self._replace_candidates([])
            self.catalog.discard_live()
            self.notify("Nearby search failed", str(e), "destructive")
            return []
        finally:
            if self._is_current(seq):
                self.searching = False

        if not self._is_current(seq):
            if self.verbose:
                print(f"[finder] dropping stale search #{seq}")
            return None

        ranked = rank(results, origin)
        self._replace_candidates(ranked)
        self.catalog.commit_live(ranked)
        if ranked:
            self.map_center = (origin.lat, origin.lng)
        self.notify("Nearby search complete", f"Found {len(ranked)} facilities within {self.radius_m / 1000:g} km.")
        return self.candidates

    async def search_place(self, query: str) -> Optional[Tuple[float, float]]:
        """Geocode free text and recenter the map on the first hit."""
        try:
            lat, lon = await self.geocoder.geocode(query)
        except GeocodeNotFound as e:
            self.notify("Place not found", str(e), "destructive")
            return None
        except GeocodeError as e:
            self.notify("Search failed", str(e), "destructive")
            return None

        if not self._closed:
            self.map_center = (lat, lon)
        return lat, lon

    # ------------------------------------------------------------------
    # Map pin
    # ------------------------------------------------------------------
    def pin_location(self, lat: float, lng: float) -> None:
        self.pinned_location = (lat, lng)

    def clear_pin(self) -> None:
        self.pinned_location = None

    # ------------------------------------------------------------------
    # Filters and selection
    # ------------------------------------------------------------------
    def toggle_type(self, type_: str) -> None:
        self.selection = self.selection.toggle_type(type_)

    def select_all_types(self) -> None:
        self.selection = self.selection.select_all_types()

    def clear_types(self) -> None:
        self.selection = self.selection.clear_types()

    def toggle_facility(self, facility_id: str) -> None:
        self.selection = self.selection.toggle_facility(facility_id)

    def set_search_term(self, term: str) -> None:
        self.search_term = term

    @property
    def visible(self) -> List[Facility]:
        return self.selection.visible(self.candidates, self.search_term)

    def nearest(self, limit: Optional[int] = None) -> List[Facility]:
        return nearest(self.visible, self.user_location, limit)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def markers(self) -> List[MarkerSpec]:
        return marker_specs(
            self.visible,
            self.selection.selected_facilities,
            self.user_location,
            self.pinned_location,
        )

    def render_map(self, path: str = "map.html") -> str:
        return generate_map(self.markers(), self.map_center, path)

    def close(self) -> None:
        """Tear down: any in-flight completion is ignored from now on."""
        self._closed = True
        self._seq += 1
        self.searching = False


# -------------------------
# Convenience factory
# -------------------------
def default_finder(
    store: Optional[LocalStore] = None,
    locator: Optional[BaseLocator] = None,
    locator_name: Optional[str] = None,
    verbose: bool = False,
    **kwargs,
) -> FacilityFinder:
    store = store or LocalStore()
    if locator is None:
        locator = default_locator(locator_name, verbose=verbose)
    catalog = FacilityCatalog(store)
    catalog.overpass.verbose = catalog.overpass.verbose or verbose
    geolocation = GeolocationProvider(locator, store, verbose=verbose)
    return FacilityFinder(catalog, geolocation, verbose=verbose, **kwargs)
