# nearcare/geolocation/locators.py
from dataclasses import dataclass
from typing import Optional, Tuple

import httpx

from nearcare.core.config import settings
from nearcare.core.errors import GeolocationDenied, GeolocationTimeout, GeolocationUnavailable


@dataclass
class PositionOptions:
    enable_high_accuracy: bool = True
    timeout: float = 10.0      # seconds
    maximum_age: int = 0       # ms; 0 forces a fresh reading

    @classmethod
    def from_settings(cls):
        return cls(
            enable_high_accuracy=settings.geolocation_high_accuracy,
            timeout=settings.geolocation_timeout,
            maximum_age=settings.geolocation_maximum_age,
        )


# -------------------------
# Locator base class (async)
# -------------------------
class BaseLocator:
    async def locate(self, options: PositionOptions) -> Tuple[float, float]:
        raise NotImplementedError


# -------------------------
# Fixed coordinates (configuration or CLI flags)
# -------------------------
class FixedLocator(BaseLocator):
    def __init__(self, lat: Optional[float] = None, lng: Optional[float] = None):
        self.lat = settings.fixed_lat if lat is None else lat
        self.lng = settings.fixed_lng if lng is None else lng
        if self.lat is None or self.lng is None:
            raise RuntimeError("Fixed location not configured (NEARCARE_FIXED_LAT / NEARCARE_FIXED_LNG)")

    async def locate(self, options: PositionOptions) -> Tuple[float, float]:
        return float(self.lat), float(self.lng)


# -------------------------
# IP-based position service
# -------------------------
class IPLocator(BaseLocator):
    def __init__(self, url: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url or settings.ip_locator_url
        self._transport = transport

    async def locate(self, options: PositionOptions) -> Tuple[float, float]:
        headers = {"User-Agent": settings.user_agent}
        if options.maximum_age <= 0:
            headers["Cache-Control"] = "no-cache"
        try:
            async with httpx.AsyncClient(timeout=options.timeout, transport=self._transport) as client:
                resp = await client.get(self.url, headers=headers)
        except httpx.TimeoutException as e:
            raise GeolocationTimeout("Timed out waiting for a position") from e
        except httpx.HTTPError as e:
            raise GeolocationUnavailable(f"Position service unreachable: {e}") from e

        if resp.status_code in (401, 403, 429):
            raise GeolocationDenied(f"Position service refused the request (HTTP {resp.status_code})")
        if resp.status_code != 200:
            raise GeolocationUnavailable(f"Position service HTTP {resp.status_code}")

        try:
            data = resp.json()
            return float(data["latitude"]), float(data["longitude"])
        except (ValueError, KeyError, TypeError) as e:
            raise GeolocationUnavailable("Position service returned no coordinates") from e


# -------------------------
# Convenience factory
# -------------------------
def default_locator(name: Optional[str] = None, verbose: bool = False) -> Optional[BaseLocator]:
    """Locator named by NEARCARE_LOCATOR; None means geolocation is unavailable."""
    name = (name or settings.locator).strip().lower()
    try:
        if name == "ip":
            return IPLocator()
        if name == "fixed":
            return FixedLocator()
    except RuntimeError as e:
        if verbose:
            print(f"[geolocation.factory] locator {name} unavailable: {e}")
        return None
    return None
