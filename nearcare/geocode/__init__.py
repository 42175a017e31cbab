# nearcare/geocode/__init__.py
from .nominatim import NominatimGeocoder

__all__ = ["NominatimGeocoder"]
