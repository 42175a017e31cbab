# tests/test_catalog.py
import asyncio

import httpx
import pytest

from nearcare.core.errors import DirectoryFetchFailed
from nearcare.core.models import UserLocation
from nearcare.core.store import ALL_FACILITIES_KEY
from nearcare.discovery.catalog import FacilityCatalog
from nearcare.discovery.directory import DirectoryClient
from nearcare.discovery.seed import seed_facilities
from nearcare.ranking import rank


def test_seed_returns_fresh_copies(store):
    catalog = FacilityCatalog(store)
    first = catalog.seed()
    first[0].name = "changed"
    assert catalog.seed()[0].name == "City General Hospital"
    assert len(catalog.seed()) == 5


def test_cache_round_trip(store):
    catalog = FacilityCatalog(store)
    facilities = rank(seed_facilities(), UserLocation(lat=12.97, lng=77.59))
    catalog.commit_live(facilities)
    assert catalog.cached() == facilities


def test_commit_overwrites_and_discard_clears(store):
    catalog = FacilityCatalog(store)
    catalog.commit_live(seed_facilities())
    catalog.commit_live(seed_facilities()[:1])
    assert [f.id for f in catalog.cached()] == ["1"]

    catalog.discard_live()
    assert catalog.cached() is None
    assert ALL_FACILITIES_KEY not in store


def test_unreadable_cache_is_dropped(store):
    store.set(ALL_FACILITIES_KEY, [{"id": "1", "name": "no coordinates", "type": "Clinic"}])
    catalog = FacilityCatalog(store)
    assert catalog.cached() is None
    assert ALL_FACILITIES_KEY not in store


def test_directory_success(store, make_transport):
    payload = [f.model_dump(mode="json") for f in seed_facilities()]
    transport = make_transport(payload)
    catalog = FacilityCatalog(store, directory=DirectoryClient(url="http://app.test/api/health-centers",
                                                               transport=transport))
    facilities = asyncio.run(catalog.fetch_facility_directory())
    assert facilities == seed_facilities()
    assert transport.requests[0].url.path == "/api/health-centers"


@pytest.mark.parametrize("kwargs", [
    {"payload": {"error": "Failed to fetch health centers"}, "status": 500},
    {"error": httpx.ConnectError},
    {"text": "not json"},
    {"payload": {"facilities": []}},
])
def test_directory_failures(store, make_transport, kwargs):
    catalog = FacilityCatalog(store, directory=DirectoryClient(transport=make_transport(**kwargs)))
    with pytest.raises(DirectoryFetchFailed):
        asyncio.run(catalog.fetch_facility_directory())


def test_directory_skips_entries_without_coordinates(store, make_transport):
    payload = [f.model_dump(mode="json") for f in seed_facilities()]
    del payload[4]["lat"]
    payload.append({"id": "6", "name": "no type", "lat": 12.9, "lng": 77.6})
    catalog = FacilityCatalog(store, directory=DirectoryClient(transport=make_transport(payload)))
    facilities = asyncio.run(catalog.fetch_facility_directory())
    assert [f.id for f in facilities] == ["1", "2", "3", "4"]


def test_directory_empty_list_is_not_a_failure(store, make_transport):
    catalog = FacilityCatalog(store, directory=DirectoryClient(transport=make_transport([])))
    assert asyncio.run(catalog.fetch_facility_directory()) == []
