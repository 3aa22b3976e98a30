"""Filter, distance, sort and truncate stages for the visible store list."""

from __future__ import annotations

import locale
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..models.domain import Coordinates, Store
from .geospatial import distance
from .status import is_open

SORT_DISTANCE = "distance"
SORT_NAME = "name"
SORT_RECENT = "recent"
SORT_KEYS = (SORT_DISTANCE, SORT_NAME, SORT_RECENT)


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    services: tuple[str, ...] = ()
    open_now: bool = False

    @classmethod
    def build(cls, services: Iterable[str] = (), open_now: bool = False) -> "FilterCriteria":
        normalized = tuple(dict.fromkeys(s.strip().lower() for s in services if s and s.strip()))
        return cls(services=normalized, open_now=open_now)


def name_sort_key(name: str) -> str:
    """Collation key for locale-aware ascending name order."""
    return locale.strxfrm(name.casefold())


def filter_stores(stores: Sequence[Store], criteria: FilterCriteria, now: datetime) -> list[Store]:
    required = set(criteria.services)
    filtered = [store for store in stores if required <= store.services]
    if criteria.open_now:
        filtered = [store for store in filtered if is_open(store, now)]
    return filtered


def attach_distances(stores: Sequence[Store], anchor: Optional[Coordinates]) -> list[Store]:
    if anchor is None:
        return list(stores)
    return [store.with_distance(distance(anchor, store.coordinates)) for store in stores]


def sort_stores(stores: Sequence[Store], sort_by: str, anchor: Optional[Coordinates] = None) -> list[Store]:
    # sorted() is stable, so ties keep input order
    if sort_by == SORT_DISTANCE and anchor is not None:
        return sorted(stores, key=lambda store: store.distance if store.distance is not None else float("inf"))
    if sort_by == SORT_NAME:
        return sorted(stores, key=lambda store: name_sort_key(store.name))
    if sort_by == SORT_RECENT:
        return list(reversed(stores))
    return list(stores)


def process(
    stores: Sequence[Store],
    criteria: FilterCriteria,
    sort_by: str,
    anchor: Optional[Coordinates],
    max_results: int,
    now: datetime,
) -> tuple[list[Store], int]:
    """Run filter -> distance -> sort -> truncate.

    Returns the visible stores and the number of matches before truncation.
    """

    if max_results < 1:
        raise ValueError("max_results must be >= 1")
    matched = filter_stores(stores, criteria, now)
    with_distance = attach_distances(matched, anchor)
    ordered = sort_stores(with_distance, sort_by, anchor)
    return ordered[:max_results], len(matched)


def available_services(stores: Iterable[Store]) -> list[str]:
    """Unique service tags present in the catalog, alphabetically."""

    services: set[str] = set()
    for store in stores:
        services.update(service for service in store.services if service)
    return sorted(services)
