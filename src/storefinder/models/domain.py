"""Domain models for store records and search state."""

from dataclasses import dataclass, field, replace
from typing import Mapping, Optional


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: float
    lng: float

    @property
    def is_valid(self) -> bool:
        """Within range and not the (0, 0) "unset" marker."""
        if self.lat == 0 and self.lng == 0:
            return False
        return -90 <= self.lat <= 90 and -180 <= self.lng <= 180


@dataclass(frozen=True, slots=True)
class Address:
    street: str
    city: str
    state: str
    zip: str
    coordinates: Coordinates


@dataclass(frozen=True, slots=True)
class Contact:
    phone: str = ""
    email: str = ""


@dataclass(frozen=True, slots=True)
class DayHours:
    """Opening window for one weekday, zero-padded 24h "HH:MM" strings."""

    open: str
    close: str


@dataclass(frozen=True, slots=True)
class SpecialHours:
    """Overrides the weekly schedule for a single "YYYY-MM-DD" date."""

    date: str
    status: str


@dataclass(frozen=True, slots=True)
class Store:
    """Represents a validated store location. Shared and never mutated."""

    id: str
    name: str
    address: Address
    contact: Contact
    hours: Optional[Mapping[str, Optional[DayHours]]]
    services: frozenset[str]
    photo: str = ""
    details: tuple[str, ...] = ()
    special_hours: tuple[SpecialHours, ...] = ()
    featured: bool = False
    distance: Optional[float] = field(default=None, compare=False)

    @property
    def coordinates(self) -> Coordinates:
        return self.address.coordinates

    def with_distance(self, miles: float) -> "Store":
        return replace(self, distance=miles)


@dataclass(frozen=True, slots=True)
class StatusResult:
    state: str
    message: str
    color: str
    minutes_remaining: Optional[int] = None
