# nearcare/discovery/overpass.py
"""
Live nearby search against an Overpass API endpoint.

Elements come back in two shapes: point features (nodes) carry ``lat``/``lon``
directly, area features (ways, relations) carry a ``center`` object because
the query ends with ``out center;``. Each element is validated into one of the
two variants and converted to a Facility; anything else is dropped.
"""
from typing import Dict, List, Optional, Sequence, Union

import httpx
from geopy.distance import geodesic
from pydantic import BaseModel, FiniteFloat, ValidationError

from nearcare.core.config import settings
from nearcare.core.errors import LiveSearchFailed
from nearcare.core.models import GENERIC_FACILITY_NAME, Facility, UserLocation
from nearcare.ranking import haversine_km


# ------------------------------------------------------------------------------
# Element variants
# ------------------------------------------------------------------------------
class Center(BaseModel):
    lat: FiniteFloat
    lon: FiniteFloat


class PointElement(BaseModel):
    id: Optional[int] = None
    type: str = "node"
    lat: FiniteFloat
    lon: FiniteFloat
    tags: Dict[str, str] = {}

    @property
    def coordinates(self):
        return self.lat, self.lon


class AreaElement(BaseModel):
    id: Optional[int] = None
    type: str = "way"
    center: Center
    tags: Dict[str, str] = {}

    @property
    def coordinates(self):
        return self.center.lat, self.center.lon


Element = Union[PointElement, AreaElement]


def classify_element(raw) -> Optional[Element]:
    """Validate a raw element as a point or an area; None when neither fits."""
    if not isinstance(raw, dict):
        return None
    for variant in (PointElement, AreaElement):
        try:
            return variant.model_validate(raw)
        except ValidationError:
            continue
    return None


# ------------------------------------------------------------------------------
# Element -> Facility
# ------------------------------------------------------------------------------
def _category_label(amenity: Optional[str]) -> str:
    if not amenity:
        return GENERIC_FACILITY_NAME
    return amenity[0].upper() + amenity[1:]


def element_to_facility(raw, index: int = 0) -> Optional[Facility]:
    element = classify_element(raw)
    if element is None:
        return None

    tags = element.tags
    lat, lng = element.coordinates
    return Facility(
        id=str(element.id) if element.id is not None else str(index),
        name=tags.get("name") or tags.get("operator") or tags.get("brand") or GENERIC_FACILITY_NAME,
        type=_category_label(tags.get("amenity")),
        address=tags.get("addr:full") or tags.get("addr:street") or None,
        lat=lat,
        lng=lng,
        phone=tags.get("phone"),
        email=tags.get("email"),
        website=tags.get("website"),
        hours=tags.get("opening_hours"),
        services=[tags["healthcare"]] if tags.get("healthcare") else [],
    )


def parse_elements(elements: Sequence) -> List[Facility]:
    facilities = []
    for idx, raw in enumerate(elements):
        fac = element_to_facility(raw, idx)
        if fac is not None:
            facilities.append(fac)
    return facilities


# ------------------------------------------------------------------------------
# Deduplication
# ------------------------------------------------------------------------------
def deduplicate_facilities(facilities: List[Facility], distance_m: float = 50.0) -> List[Facility]:
    """
    Drop repeated IDs, and facilities within `distance_m` of an earlier one
    with the same name and type (a node and the building way of one hospital).
    The earlier entry wins.
    """
    unique: List[Facility] = []
    seen_ids = set()
    for f in facilities:
        if f.id in seen_ids:
            continue
        for u in unique:
            dist = geodesic((f.lat, f.lng), (u.lat, u.lng)).meters
            same = f.name.strip().lower() == u.name.strip().lower() and f.type == u.type
            if same and dist < distance_m:
                break
        else:
            unique.append(f)
            seen_ids.add(f.id)
    return unique


def within_radius(facilities: List[Facility], center: UserLocation, radius_m: float) -> List[Facility]:
    return [
        f for f in facilities
        if haversine_km(center.lat, center.lng, f.lat, f.lng) * 1000.0 <= radius_m
    ]


# ------------------------------------------------------------------------------
# Query
# ------------------------------------------------------------------------------
def build_query(center: UserLocation, radius_m: int, categories: Sequence[str],
                timeout: int = 25) -> str:
    pattern = "|".join(categories)
    around = f"(around:{int(radius_m)},{center.lat},{center.lng})"
    clauses = "".join(
        f'{kind}["amenity"~"{pattern}"]{around};' for kind in ("node", "way", "relation")
    )
    return f"[out:json][timeout:{timeout}];({clauses});out center;"


class OverpassClient:
    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        enforce_radius: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        verbose: bool = False,
    ):
        self.url = url or settings.overpass_url
        self.timeout = timeout or settings.timeout
        self.enforce_radius = settings.enforce_search_radius if enforce_radius is None else enforce_radius
        self._transport = transport
        self.verbose = verbose or settings.debug

    async def search_nearby(
        self,
        center: UserLocation,
        radius_m: int,
        categories: Sequence[str],
    ) -> List[Facility]:
        query = build_query(center, radius_m, categories, settings.overpass_query_timeout)
        if self.verbose:
            print(f"[overpass] searching {len(categories)} categories within {radius_m} m of {center.lat},{center.lng}")

        headers = {"User-Agent": settings.user_agent}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(self.url, params={"data": query}, headers=headers)
        except httpx.HTTPError as e:
            raise LiveSearchFailed(f"Overpass network error: {e}") from e

        if resp.status_code != 200:
            raise LiveSearchFailed(f"Overpass HTTP {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as e:
            raise LiveSearchFailed("Overpass returned a malformed body") from e

        elements = data.get("elements", []) if isinstance(data, dict) else None
        if not isinstance(elements, list):
            raise LiveSearchFailed("Overpass reply has no element list")

        facilities = parse_elements(elements)
        dropped = len(elements) - len(facilities)
        facilities = deduplicate_facilities(facilities, settings.dedup_distance_m)
        if self.enforce_radius:
            facilities = within_radius(facilities, center, radius_m)

        if self.verbose:
            print(f"[overpass] {len(elements)} elements -> {len(facilities)} facilities ({dropped} unparsable)")
        return facilities
