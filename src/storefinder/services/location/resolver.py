"""Resolve the user's anchor location from the device or from a typed address."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ...config import settings
from ...exceptions import GeocodeFailed, LocationUnavailable
from ...models.domain import Coordinates
from .base import AddressGeocoder, DeviceLocationProvider

logger = logging.getLogger(__name__)


class LocationResolver:
    """Awaitable, non-retrying wrappers around the location capabilities.

    Both operations either return valid coordinates or raise; fallback handling
    belongs to the caller.
    """

    def __init__(
        self,
        geocoder: AddressGeocoder,
        device: Optional[DeviceLocationProvider] = None,
        *,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.geocoder = geocoder
        self.device = device
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.geolocation_timeout_seconds

    async def resolve_device_location(self, device: Optional[DeviceLocationProvider] = None) -> Coordinates:
        provider = device or self.device
        if provider is None:
            logger.warning("Geolocation not supported: no device location provider")
            raise LocationUnavailable("Geolocation not supported")

        logger.info("Requesting user location...")
        timeout_ms = int(self.timeout_seconds * 1000)
        try:
            position = await asyncio.wait_for(provider.get_current_position(timeout_ms), self.timeout_seconds)
        except asyncio.TimeoutError as exc:
            logger.warning(f"User location timed out after {self.timeout_seconds:.0f}s")
            raise LocationUnavailable("Timed out waiting for device location") from exc
        except LocationUnavailable as exc:
            logger.warning(f"User location denied or unavailable: {exc}")
            raise
        except Exception as exc:
            logger.warning(f"User location denied or unavailable: {exc}")
            raise LocationUnavailable(str(exc)) from exc

        if not position.is_valid:
            raise LocationUnavailable(f"Device reported an invalid position ({position.lat}, {position.lng})")
        logger.info(f"User location obtained: {position.lat:.5f}, {position.lng:.5f}")
        return position

    async def resolve_address(self, text: str) -> Coordinates:
        address = (text or "").strip()
        if not address:
            raise GeocodeFailed(text or "", "Address is empty")
        try:
            coordinates = await self.geocoder.geocode(address)
        except GeocodeFailed:
            raise
        except Exception as exc:
            logger.error(f"Geocoding error for '{address}': {exc}")
            raise GeocodeFailed(address, str(exc)) from exc

        if not coordinates.is_valid:
            raise GeocodeFailed(address, "Geocoder returned invalid coordinates")
        return coordinates
