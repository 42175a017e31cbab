# scripts/check_sources.py
# Ad-hoc check that the external services answer: directory listing,
# Overpass live search and Nominatim place search. Not used by the CLI.
import asyncio

from nearcare.core.errors import NearcareError
from nearcare.core.models import UserLocation
from nearcare.discovery.directory import DirectoryClient
from nearcare.discovery.overpass import OverpassClient
from nearcare.discovery.seed import OVERPASS_CATEGORIES
from nearcare.geocode import NominatimGeocoder

BANGALORE = UserLocation(lat=12.9716, lng=77.5946)


async def main():
    try:
        listing = await DirectoryClient().fetch()
        print(f"OK: [directory] {len(listing)} facilities")
    except NearcareError as e:
        print(f"FAIL: [directory] {e}")

    try:
        found = await OverpassClient(verbose=True).search_nearby(BANGALORE, 2000, OVERPASS_CATEGORIES)
        print(f"OK: [overpass] {len(found)} facilities within 2 km")
    except NearcareError as e:
        print(f"FAIL: [overpass] {e}")

    for place in ["MG Road, Bangalore", "Koramangala"]:
        try:
            lat, lon = await NominatimGeocoder().geocode(place)
            print(f"OK: [nominatim] {place} -> {lat:.6f},{lon:.6f}")
        except NearcareError as e:
            print(f"FAIL: [nominatim] '{place}': {e}")

if __name__ == "__main__":
    asyncio.run(main())
