from datetime import datetime

from src.storefinder.models.domain import Address, Contact, Coordinates, DayHours, Store
from src.storefinder.services.hours import default_weekly_hours
from src.storefinder.services.pipeline import (
    FilterCriteria,
    available_services,
    filter_stores,
    name_sort_key,
    process,
    sort_stores,
)

# 2024-01-01 is a Monday
MONDAY_NOON = datetime(2024, 1, 1, 12, 0)
ANCHOR = Coordinates(lat=45.5231, lng=-122.6765)


def _store(sid: str, name: str, lat: float, lng: float, services=(), hours=None) -> Store:
    return Store(
        id=sid,
        name=name,
        address=Address("1 Main St", "Portland", "OR", "97201", Coordinates(lat, lng)),
        contact=Contact(),
        hours=hours if hours is not None else default_weekly_hours(),
        services=frozenset(services),
    )


def _catalog() -> list[Store]:
    return [
        _store("store-0", "zeta Market", 45.60, -122.70, {"pharmacy", "deli"}),
        _store("store-1", "Alpha Foods", 45.53, -122.68, {"deli"}),
        _store("store-2", "beta Grocers", 45.40, -122.60, {"pharmacy", "bakery", "deli"}),
        _store("store-3", "Gamma Mart", 45.52, -122.67, {"pickup"}),
    ]


def test_filter_requires_every_selected_service():
    stores = _catalog()

    filtered = filter_stores(stores, FilterCriteria.build(["pharmacy", "deli"]), MONDAY_NOON)

    assert [store.id for store in filtered] == ["store-0", "store-2"]
    assert len(filtered) <= len(stores)
    assert all({"pharmacy", "deli"} <= store.services for store in filtered)


def test_filter_criteria_normalizes_services():
    criteria = FilterCriteria.build([" Pharmacy", "pharmacy", "", "DELI "], open_now=True)

    assert criteria.services == ("pharmacy", "deli")
    assert criteria.open_now is True


def test_open_now_filter_uses_evaluation_time():
    stores = _catalog() + [_store("store-4", "Night Owl", 45.5, -122.6, hours={"monday": DayHours("22:00", "23:30")})]

    filtered = filter_stores(stores, FilterCriteria.build(open_now=True), MONDAY_NOON)

    assert "store-4" not in {store.id for store in filtered}
    assert len(filtered) == 4


def test_only_closed_pharmacy_with_open_now_yields_nothing():
    stores = [
        _store("store-0", "Closed Pharmacy", 45.5, -122.6, {"pharmacy"}, hours={"tuesday": DayHours("09:00", "21:00")}),
        _store("store-1", "Deli", 45.5, -122.6, {"deli"}),
    ]

    visible, total = process(stores, FilterCriteria.build(["pharmacy"], open_now=True), "distance", None, 10, MONDAY_NOON)

    assert visible == []
    assert total == 0


def test_distance_attached_whenever_anchor_exists():
    visible, _ = process(_catalog(), FilterCriteria(), "name", ANCHOR, 10, MONDAY_NOON)

    assert all(store.distance is not None and store.distance >= 0 for store in visible)


def test_distance_sort_is_ascending_and_does_not_mutate_catalog():
    stores = _catalog()

    visible, _ = process(stores, FilterCriteria(), "distance", ANCHOR, 10, MONDAY_NOON)

    distances = [store.distance for store in visible]
    assert distances == sorted(distances)
    assert visible[0].id == "store-3"
    assert all(store.distance is None for store in stores)


def test_distance_sort_without_anchor_keeps_input_order():
    visible, _ = process(_catalog(), FilterCriteria(), "distance", None, 10, MONDAY_NOON)

    assert [store.id for store in visible] == ["store-0", "store-1", "store-2", "store-3"]
    assert all(store.distance is None for store in visible)


def test_name_sort_is_non_decreasing_under_collation():
    ordered = sort_stores(_catalog(), "name")

    keys = [name_sort_key(store.name) for store in ordered]
    assert keys == sorted(keys)
    assert [store.name for store in ordered] == ["Alpha Foods", "beta Grocers", "Gamma Mart", "zeta Market"]


def test_recent_reverses_catalog_order_and_unknown_keeps_it():
    stores = _catalog()

    assert [s.id for s in sort_stores(stores, "recent")] == ["store-3", "store-2", "store-1", "store-0"]
    assert [s.id for s in sort_stores(stores, "rating")] == ["store-0", "store-1", "store-2", "store-3"]


def test_equal_distances_keep_input_order():
    stores = [
        _store("store-0", "First", 45.6, -122.7),
        _store("store-1", "Second", 45.6, -122.7),
        _store("store-2", "Third", 45.6, -122.7),
    ]

    visible, _ = process(stores, FilterCriteria(), "distance", ANCHOR, 10, MONDAY_NOON)

    assert [store.id for store in visible] == ["store-0", "store-1", "store-2"]


def test_truncates_after_sorting_and_reports_total():
    visible, total = process(_catalog(), FilterCriteria(), "distance", ANCHOR, 2, MONDAY_NOON)

    assert total == 4
    assert [store.id for store in visible] == ["store-3", "store-1"]


def test_process_is_deterministic():
    first = process(_catalog(), FilterCriteria.build(["deli"]), "distance", ANCHOR, 10, MONDAY_NOON)
    second = process(_catalog(), FilterCriteria.build(["deli"]), "distance", ANCHOR, 10, MONDAY_NOON)

    assert [s.id for s in first[0]] == [s.id for s in second[0]]
    assert [s.distance for s in first[0]] == [s.distance for s in second[0]]


def test_available_services_are_sorted_and_unique():
    assert available_services(_catalog()) == ["bakery", "deli", "pharmacy", "pickup"]
