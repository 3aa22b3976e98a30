"""Error taxonomy for catalog loading, location resolution and preferences."""

from __future__ import annotations


class StoreFinderError(Exception):
    """Base class for all store finder errors."""


class RowValidationError(StoreFinderError):
    """An authored row cannot become a store. Counted by the builder, never surfaced."""

    def __init__(self, reason: str, row_index: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.row_index = row_index


class LocationUnavailable(StoreFinderError):
    """Device location could not be obtained (unsupported, denied or timed out)."""


class GeocodeFailed(StoreFinderError):
    """The geocoder returned no match for an address or failed outright."""

    def __init__(self, address: str, reason: str = "No results found for address") -> None:
        super().__init__(f"Unable to geocode '{address}': {reason}")
        self.address = address
        self.reason = reason


class PersistenceCorrupt(StoreFinderError):
    """Persisted preferences could not be decoded; defaults are used instead."""


class CatalogLoadFailed(StoreFinderError):
    """No catalog could be produced. Terminal for the session."""


class SupersededIntent(StoreFinderError):
    """A newer search intent started while this one was resolving its location."""

    def __init__(self, sequence: int, latest: int) -> None:
        super().__init__(f"Search #{sequence} superseded by #{latest}")
        self.sequence = sequence
        self.latest = latest
