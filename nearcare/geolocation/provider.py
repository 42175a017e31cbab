# nearcare/geolocation/provider.py
import asyncio
from typing import Optional

from pydantic import ValidationError

from nearcare.core.errors import GeolocationTimeout, GeolocationUnavailable
from nearcare.core.models import UserLocation
from nearcare.core.store import USER_LOCATION_KEY, LocalStore
from nearcare.geolocation.locators import BaseLocator, PositionOptions


class GeolocationProvider:
    """
    Single-shot location acquisition.

    A successful fix is persisted under ``userLocation``; failures raise one of
    the GeolocationError subclasses and leave the store untouched.
    """

    def __init__(self, locator: Optional[BaseLocator], store: LocalStore,
                 options: Optional[PositionOptions] = None, verbose: bool = False):
        self.locator = locator
        self.store = store
        self.options = options or PositionOptions.from_settings()
        self.verbose = verbose

    async def acquire_location(self) -> UserLocation:
        if self.locator is None:
            raise GeolocationUnavailable("Geolocation is not supported in this runtime")

        try:
            lat, lng = await asyncio.wait_for(
                self.locator.locate(self.options), timeout=self.options.timeout
            )
        except asyncio.TimeoutError as e:
            raise GeolocationTimeout(f"No position within {self.options.timeout:.0f}s") from e

        try:
            location = UserLocation(lat=lat, lng=lng)
        except ValidationError as e:
            raise GeolocationUnavailable("Locator returned non-finite coordinates") from e

        self.store.set(USER_LOCATION_KEY, location.model_dump())
        if self.verbose:
            print(f"[geolocation] {self.locator.__class__.__name__} -> {location.lat},{location.lng}")
        return location
