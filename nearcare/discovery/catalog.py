# nearcare/discovery/catalog.py
from typing import List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from nearcare.core.models import Facility, UserLocation
from nearcare.core.store import ALL_FACILITIES_KEY, LocalStore
from nearcare.discovery.directory import DirectoryClient
from nearcare.discovery.overpass import OverpassClient
from nearcare.discovery.seed import seed_facilities

_facility_list = TypeAdapter(List[Facility])


class FacilityCatalog:
    """
    The three ways of getting candidate facilities, plus the durable cache of
    the last successful live search.

    Live results are not cached by ``search_nearby`` itself; the caller
    decides whether a completion is still current and then calls
    ``commit_live`` or ``discard_live``.
    """

    def __init__(
        self,
        store: LocalStore,
        directory: Optional[DirectoryClient] = None,
        overpass: Optional[OverpassClient] = None,
    ):
        self.store = store
        self.directory = directory or DirectoryClient()
        self.overpass = overpass or OverpassClient()

    def seed(self) -> List[Facility]:
        return seed_facilities()

    async def fetch_facility_directory(self) -> List[Facility]:
        return await self.directory.fetch()

    async def search_nearby(self, center: UserLocation, radius_m: int,
                            categories: Sequence[str]) -> List[Facility]:
        return await self.overpass.search_nearby(center, radius_m, categories)

    # -- cache ---------------------------------------------------------------
    def cached(self) -> Optional[List[Facility]]:
        raw = self.store.get(ALL_FACILITIES_KEY)
        if raw is None:
            return None
        try:
            return _facility_list.validate_python(raw)
        except ValidationError:
            # unreadable cache is treated as absent
            self.store.remove(ALL_FACILITIES_KEY)
            return None

    def commit_live(self, facilities: List[Facility]) -> None:
        self.store.set(ALL_FACILITIES_KEY, _facility_list.dump_python(facilities, mode="json"))

    def discard_live(self) -> None:
        self.store.remove(ALL_FACILITIES_KEY)
