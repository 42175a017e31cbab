# nearcare/discovery/directory.py
from typing import List, Optional

import httpx
from pydantic import ValidationError

from nearcare.core.config import settings
from nearcare.core.errors import DirectoryFetchFailed
from nearcare.core.models import Facility


class DirectoryClient:
    """GET the same-origin facility listing (``/api/health-centers``)."""

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None, verbose: bool = False):
        self.url = url or settings.directory_url
        self.timeout = timeout or settings.timeout
        self._transport = transport
        self.verbose = verbose or settings.debug

    async def fetch(self) -> List[Facility]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(self.url)
        except httpx.HTTPError as e:
            raise DirectoryFetchFailed(f"Directory network error: {e}") from e

        if resp.status_code != 200:
            raise DirectoryFetchFailed(f"Directory HTTP {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as e:
            raise DirectoryFetchFailed("Directory returned a malformed body") from e
        if not isinstance(data, list):
            raise DirectoryFetchFailed("Directory reply is not a list")

        facilities = []
        for item in data:
            # one bad entry (e.g. no coordinates) does not sink the listing
            try:
                facilities.append(Facility.model_validate(item))
            except ValidationError:
                continue
        if self.verbose and len(facilities) < len(data):
            print(f"[directory] skipped {len(data) - len(facilities)} invalid entries")
        return facilities
