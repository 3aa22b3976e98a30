"""Location resolution services."""

from .base import AddressGeocoder, DeviceLocationProvider, ReportedPositionProvider, Suggestion
from .nominatim import NominatimGeocoder
from .resolver import LocationResolver
from .suggestions import SuggestionDebouncer

__all__ = [
    "AddressGeocoder",
    "DeviceLocationProvider",
    "LocationResolver",
    "NominatimGeocoder",
    "ReportedPositionProvider",
    "Suggestion",
    "SuggestionDebouncer",
]
