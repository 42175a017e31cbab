# nearcare/ranking/distance.py
import math
from typing import List, Optional

from nearcare.core.config import settings
from nearcare.core.models import Facility, UserLocation

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points, in kilometers."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def rank(facilities: List[Facility], origin: Optional[UserLocation]) -> List[Facility]:
    """
    Annotate each facility with its distance from `origin` and sort ascending.

    Returns new Facility copies; the input list and its records are left
    untouched. Ties keep their input order. Without an origin the list is
    passed through unchanged. No radius filtering happens here.
    """
    if origin is None:
        return list(facilities)

    annotated = [
        f.model_copy(update={"distance": haversine_km(origin.lat, origin.lng, f.lat, f.lng)})
        for f in facilities
    ]
    annotated.sort(key=lambda f: f.distance)
    return annotated


def nearest(
    facilities: List[Facility],
    origin: Optional[UserLocation],
    limit: Optional[int] = None,
) -> List[Facility]:
    """The `limit` closest facilities; input order is kept when there is no origin."""
    limit = settings.nearest_limit if limit is None else limit
    return rank(facilities, origin)[:limit]
