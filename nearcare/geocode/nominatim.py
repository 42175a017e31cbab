# nearcare/geocode/nominatim.py
import asyncio
import time
from typing import Optional, Tuple

import httpx

from nearcare.core.config import settings
from nearcare.core.errors import GeocodeError, GeocodeNotFound


class NominatimGeocoder:
    """Free-text place search; enforces 1s between calls (public instance policy)."""

    def __init__(self, base_url: Optional[str] = None, user_agent: Optional[str] = None,
                 min_interval: float = 1.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = (base_url or settings.nominatim_url).rstrip("/")
        self.user_agent = user_agent or settings.user_agent
        self.min_interval = min_interval
        self._transport = transport
        # rate limit state (per-process)
        self._lock = asyncio.Lock()
        self._last_ts = 0.0

    async def _wait_rate(self):
        async with self._lock:
            now = time.time()
            wait = self.min_interval - (now - self._last_ts)
            if wait > 0:
                await asyncio.sleep(wait)
            self._last_ts = time.time()

    async def geocode(self, query: str) -> Tuple[float, float]:
        query = query.strip()
        if not query:
            raise GeocodeNotFound("Empty search")

        await self._wait_rate()
        url = f"{self.base_url}/search"
        params = {"q": query, "format": "json", "limit": 1}
        headers = {"User-Agent": self.user_agent}
        try:
            async with httpx.AsyncClient(timeout=10, transport=self._transport) as client:
                resp = await client.get(url, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise GeocodeError(f"Nominatim network error: {e}") from e

        if resp.status_code == 200:
            try:
                data = resp.json()
            except ValueError as e:
                raise GeocodeError("Nominatim returned a malformed body") from e
            if not data:
                raise GeocodeNotFound(f"No place found for '{query}'")
            try:
                return float(data[0]["lat"]), float(data[0]["lon"])
            except (KeyError, TypeError, ValueError) as e:
                raise GeocodeError("Nominatim result has no coordinates") from e
        elif resp.status_code in (429, 503):
            raise GeocodeError(f"Nominatim rate-limited: {resp.status_code}")
        else:
            raise GeocodeError(f"Nominatim HTTP {resp.status_code}: {resp.text}")
