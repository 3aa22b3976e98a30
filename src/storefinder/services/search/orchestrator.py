"""Search orchestration: reconcile address, geolocation and filter intents into one result set."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from ...config import settings
from ...data.catalog_repository import Catalog
from ...exceptions import GeocodeFailed, LocationUnavailable, SupersededIntent
from ...models.domain import Coordinates, Store, StatusResult
from ...persistence.preferences import PreferenceStore
from ...schemas.preferences import Preferences
from ..geospatial import distance
from ..location.base import ReportedPositionProvider
from ..location.resolver import LocationResolver
from ..pipeline import SORT_KEYS, FilterCriteria, process
from ..status import classify
from .intents import AddressIntent, FilterIntent, GeolocationIntent, SearchIntent

logger = logging.getLogger(__name__)

LOCATION_UNAVAILABLE_MESSAGE = "Unable to access your location. Please enter an address manually."


class SearchState(str, Enum):
    IDLE = "idle"
    RESOLVING_LOCATION = "resolving-location"
    APPLYING_FILTERS = "applying-filters"
    SETTLED = "settled"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ResultSet:
    stores: tuple[Store, ...]
    anchor: Optional[Coordinates]
    sequence: int
    total_matches: int
    statuses: dict[str, StatusResult] = field(default_factory=dict)
    hero: Optional[Store] = None
    message: Optional[str] = None
    center: Optional[Coordinates] = None


class SearchOrchestrator:
    """Owns the anchor, the sort key, the filter criteria and the current result set.

    One instance per session. Every intent takes a sequence number; a location
    resolution that finishes after a newer intent has started is discarded and its
    caller receives ``SupersededIntent``.
    """

    def __init__(
        self,
        catalog: Catalog,
        resolver: LocationResolver,
        preferences: PreferenceStore,
        *,
        max_results: Optional[int] = None,
        auto_detect: Optional[bool] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.catalog = catalog
        self.resolver = resolver
        self.preference_store = preferences
        self.max_results = max_results if max_results is not None else settings.max_results
        self.auto_detect = auto_detect if auto_detect is not None else settings.auto_detect_location
        self.clock = clock

        self.preferences: Preferences = preferences.get()
        self.sort_by: str = self.preferences.sortBy
        self.criteria = FilterCriteria.build(self.preferences.selectedServices, self.preferences.openNow)
        self.anchor: Optional[Coordinates] = None
        self.state = SearchState.IDLE
        self.result: Optional[ResultSet] = None
        self.last_error: Optional[str] = None
        self._sequence = 0

    # -- sequencing -------------------------------------------------------

    def _next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def _ensure_current(self, sequence: int) -> None:
        if sequence != self._sequence:
            logger.debug("Discarding stale search #%s (latest is #%s)", sequence, self._sequence)
            raise SupersededIntent(sequence, self._sequence)

    # -- public operations ------------------------------------------------

    async def start(self) -> ResultSet:
        """Initial load: restore the saved location or auto-detect, then apply saved filters."""

        sequence = self._next_sequence()
        anchor = None
        saved = self.preferences.lastLocation
        if saved is not None:
            anchor = saved.to_domain()
            logger.info(f"Using saved location: {anchor.lat:.5f}, {anchor.lng:.5f}")
        elif self.auto_detect:
            self.state = SearchState.RESOLVING_LOCATION
            try:
                anchor = await self.resolver.resolve_device_location()
            except LocationUnavailable:
                logger.info("Geolocation not available, using default view")
            self._ensure_current(sequence)
            if anchor is not None:
                self._persist({"lastLocation": _location_payload(anchor)})
        return self._apply(sequence, anchor=anchor)

    async def search(self, intent: SearchIntent) -> ResultSet:
        sequence = self._next_sequence()
        if isinstance(intent, FilterIntent):
            self.criteria = FilterCriteria.build(intent.services, intent.open_now)
            return self._apply(sequence, anchor=self.anchor)
        if isinstance(intent, GeolocationIntent):
            return await self._search_geolocation(sequence, intent)
        if isinstance(intent, AddressIntent):
            return await self._search_address(sequence, intent)
        raise ValueError(f"Unknown search intent '{getattr(intent, 'kind', intent)}'.")

    def change_sort(self, sort_by: str) -> ResultSet:
        """Re-order the current matches without resolving a new location."""

        self.sort_by = sort_by
        return self._apply(self._sequence, anchor=self.anchor)

    def status_for(self, store: Store, now: Optional[datetime] = None) -> StatusResult:
        return classify(store, now or self.clock())

    def preferred_store(self, anchor: Optional[Coordinates] = None) -> Optional[Store]:
        """The pinned store, with its own distance when an anchor is known."""

        store = self.catalog.get(self.preferences.preferredStoreId)
        if store is None:
            return None
        if anchor is not None:
            return store.with_distance(distance(anchor, store.coordinates))
        return store

    def set_preferred_store(self, store_id: str) -> Store:
        store = self.catalog.get(store_id)
        if store is None:
            raise KeyError(store_id)
        self.preferences = self.preference_store.set_preferred_store(store.id, store.name)
        logger.info(f"Preferred store set to {store.name} ({store.id})")
        return store

    def clear_preferred_store(self) -> None:
        self.preferences = self.preference_store.clear_preferred_store()

    def update_preferences(self, partial: dict[str, Any]) -> Preferences:
        """Persist a partial update and adopt any filter, sort or location change it carries."""

        self._persist(partial)
        if "sortBy" in partial:
            self.sort_by = self.preferences.sortBy
        if "selectedServices" in partial or "openNow" in partial:
            self.criteria = FilterCriteria.build(self.preferences.selectedServices, self.preferences.openNow)
        if "lastLocation" in partial:
            location = self.preferences.lastLocation
            # a new saved location is a new anchor; it supersedes in-flight resolutions
            self._apply(self._next_sequence(), anchor=location.to_domain() if location else None)
        return self.preferences

    # -- transitions ------------------------------------------------------

    async def _search_geolocation(self, sequence: int, intent: GeolocationIntent) -> ResultSet:
        self.state = SearchState.RESOLVING_LOCATION
        device = ReportedPositionProvider(intent.position) if intent.position is not None else None
        try:
            anchor = await self.resolver.resolve_device_location(device)
        except LocationUnavailable as exc:
            self._ensure_current(sequence)
            self._fail(str(exc))
            return self._apply(sequence, anchor=self.anchor, message=LOCATION_UNAVAILABLE_MESSAGE)

        self._ensure_current(sequence)
        self._persist({"lastLocation": _location_payload(anchor)})
        return self._apply(sequence, anchor=anchor)

    async def _search_address(self, sequence: int, intent: AddressIntent) -> ResultSet:
        self.state = SearchState.RESOLVING_LOCATION
        try:
            anchor = await self.resolver.resolve_address(intent.value)
        except GeocodeFailed as exc:
            self._ensure_current(sequence)
            self._fail(str(exc))
            message = f'Unable to geocode "{intent.value}". Showing all stores ({len(self.catalog)}):'
            return self._apply(sequence, anchor=None, message=message, degraded=True)

        self._ensure_current(sequence)
        self._persist({"lastLocation": _location_payload(anchor), "lastSearch": intent.value.strip()})
        return self._apply(sequence, anchor=anchor)

    def _fail(self, reason: str) -> None:
        self.state = SearchState.ERROR
        self.last_error = reason
        logger.warning(f"Location resolution failed: {reason}")

    def _apply(
        self,
        sequence: int,
        *,
        anchor: Optional[Coordinates],
        message: Optional[str] = None,
        degraded: bool = False,
    ) -> ResultSet:
        """Publish a new result set.

        A degraded result is the head of the catalog in catalog order, with no
        filter, sort or anchor applied.
        """

        self.state = SearchState.APPLYING_FILTERS
        now = self.clock()
        if degraded:
            stores = list(self.catalog.stores[: self.max_results])
            total = len(self.catalog)
        else:
            stores, total = process(
                self.catalog.stores,
                self.criteria,
                self.sort_by,
                anchor,
                self.max_results,
                now,
            )
        hero = self.preferred_store(anchor)
        statuses = {store.id: classify(store, now) for store in stores}
        if hero is not None:
            statuses.setdefault(hero.id, classify(hero, now))

        result = ResultSet(
            stores=tuple(stores),
            anchor=anchor,
            sequence=sequence,
            total_matches=total,
            statuses=statuses,
            hero=hero,
            message=message,
            center=_map_center(anchor, stores),
        )
        # publish anchor, result and state together
        self.anchor, self.result, self.state = anchor, result, SearchState.SETTLED
        if message is None:
            self.last_error = None
        self._persist_filters()
        logger.debug("Search #%s settled with %s of %s matches", sequence, len(stores), total)
        return result

    def _persist_filters(self) -> None:
        changes: dict[str, Any] = {}
        if list(self.criteria.services) != self.preferences.selectedServices:
            changes["selectedServices"] = list(self.criteria.services)
        if self.criteria.open_now != self.preferences.openNow:
            changes["openNow"] = self.criteria.open_now
        if self.sort_by in SORT_KEYS and self.sort_by != self.preferences.sortBy:
            changes["sortBy"] = self.sort_by
        if changes:
            self._persist(changes)

    def _persist(self, partial: dict[str, Any]) -> None:
        self.preferences = self.preference_store.merge(partial)


def _map_center(anchor: Optional[Coordinates], stores: list[Store]) -> Coordinates:
    if anchor is not None:
        return anchor
    if stores:
        return stores[0].coordinates
    return Coordinates(*settings.fallback_center)


def _location_payload(anchor: Coordinates) -> dict[str, float]:
    return {"lat": anchor.lat, "lng": anchor.lng}
