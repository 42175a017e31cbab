from .locators import BaseLocator, FixedLocator, IPLocator, PositionOptions, default_locator
from .provider import GeolocationProvider

__all__ = [
    "BaseLocator",
    "FixedLocator",
    "IPLocator",
    "PositionOptions",
    "default_locator",
    "GeolocationProvider",
]
