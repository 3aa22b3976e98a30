"""Capabilities the location resolver depends on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ...exceptions import LocationUnavailable
from ...models.domain import Coordinates


@dataclass(frozen=True, slots=True)
class Suggestion:
    label: str
    value: str


class DeviceLocationProvider(Protocol):
    async def get_current_position(self, timeout_ms: int) -> Coordinates:
        ...


class AddressGeocoder(Protocol):
    async def geocode(self, text: str) -> Coordinates:
        ...

    async def suggest(self, text: str) -> list[Suggestion]:
        ...


class ReportedPositionProvider:
    """Device position reported by the client platform (e.g. the browser Geolocation API).

    ``None`` means the platform could not or would not share a position.
    """

    def __init__(self, position: Optional[Coordinates]) -> None:
        self.position = position

    async def get_current_position(self, timeout_ms: int) -> Coordinates:
        if self.position is None:
            raise LocationUnavailable("Geolocation not supported or permission denied")
        return self.position
