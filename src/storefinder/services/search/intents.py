"""User-triggered requests that change the visible result set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ...models.domain import Coordinates


@dataclass(frozen=True, slots=True)
class GeolocationIntent:
    # position reported by the client platform, when it shares one
    position: Optional[Coordinates] = None
    kind: str = "geolocation"


@dataclass(frozen=True, slots=True)
class AddressIntent:
    value: str
    kind: str = "address"


@dataclass(frozen=True, slots=True)
class FilterIntent:
    services: tuple[str, ...] = ()
    open_now: bool = False
    kind: str = "filter"


SearchIntent = Union[GeolocationIntent, AddressIntent, FilterIntent]
