"""Data access helpers for building the store catalog from authored rows or JSON."""

from __future__ import annotations

import csv
import json
import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence

import httpx
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..config import settings
from ..exceptions import CatalogLoadFailed, RowValidationError
from ..models.domain import Address, Contact, Coordinates, SpecialHours, Store
from ..services.hours import coerce_weekly_hours, parse_hours
from .fixtures import FIXTURE_ROWS

logger = logging.getLogger(__name__)

MIN_ROW_FIELDS = 6


@dataclass(slots=True)
class Catalog:
    """Validated, immutable store set for a session."""

    stores: tuple[Store, ...]
    skipped: int = 0
    _by_id: dict[str, Store] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self._by_id = {store.id: store for store in self.stores}

    def __len__(self) -> int:
        return len(self.stores)

    def __iter__(self) -> Iterator[Store]:
        return iter(self.stores)

    def get(self, store_id: Optional[str]) -> Optional[Store]:
        if not store_id:
            return None
        return self._by_id.get(store_id)


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def split_list(text: str, *, lower: bool = False) -> list[str]:
    """Comma-split, trim, drop empty tokens; keeps first occurrence order."""
    items = [item.strip() for item in text.split(",")]
    if lower:
        items = [item.lower() for item in items]
    return [item for item in items if item]


def parse_address(text: str, coordinates: Coordinates) -> Address:
    parts = [part.strip() for part in text.split(",")]
    parts += [""] * (4 - len(parts))
    return Address(street=parts[0], city=parts[1], state=parts[2], zip=parts[3], coordinates=coordinates)


def parse_coordinates(text: str) -> Coordinates:
    parts = [part.strip() for part in text.split(",")]
    if len(parts) < 2:
        raise RowValidationError(f"Coordinates '{text}' need a latitude and a longitude")
    try:
        coordinates = Coordinates(lat=float(parts[0]), lng=float(parts[1]))
    except ValueError as exc:
        raise RowValidationError(f"Coordinates '{text}' are not numeric") from exc
    if not coordinates.is_valid:
        raise RowValidationError(f"Coordinates '{text}' are out of range or unset")
    return coordinates


def parse_row(cells: Sequence[Any], index: int) -> Store:
    """Turn one authored row into a store.

    Columns: Name | Address | Coordinates | Phone | Hours | Services [| Photo | Details].
    """

    if len(cells) < MIN_ROW_FIELDS:
        raise RowValidationError(f"Expected at least {MIN_ROW_FIELDS} fields, got {len(cells)}", index)

    values = [_cell_text(cell) for cell in cells]
    name, address_text, coords_text, phone, hours_text, services_text = values[:MIN_ROW_FIELDS]
    photo = values[6] if len(values) > 6 else ""
    details_text = values[7] if len(values) > 7 else ""

    if not name or not address_text or not coords_text:
        raise RowValidationError("Missing name, address or coordinates", index)

    try:
        coordinates = parse_coordinates(coords_text)
    except RowValidationError as exc:
        exc.row_index = index
        raise

    return Store(
        id=f"store-{index}",
        name=name,
        address=parse_address(address_text, coordinates),
        contact=Contact(phone=phone, email=""),
        hours=parse_hours(hours_text),
        services=frozenset(split_list(services_text, lower=True)),
        photo=photo,
        details=tuple(split_list(details_text)),
    )


def _data_rows(rows: Sequence[Sequence[Any]]) -> Sequence[Sequence[Any]]:
    """Skip configuration rows and the "Name" header row when present."""

    for position, row in enumerate(rows):
        if row and _cell_text(row[0]).lower() == "name":
            return rows[position + 1:]
    return rows


def build_catalog(rows: Iterable[Sequence[Any]]) -> Catalog:
    """Validate authored rows into a catalog. Invalid rows are dropped and counted."""

    stores: list[Store] = []
    skipped = 0
    for index, row in enumerate(_data_rows(list(rows))):
        try:
            stores.append(parse_row(row, index))
        except RowValidationError as exc:
            skipped += 1
            logger.debug("Skipping row %s: %s", index, exc.reason)

    skip_msg = f", {skipped} incomplete rows skipped" if skipped else ""
    logger.info(f"Store catalog: {len(stores)} stores loaded{skip_msg}")
    return Catalog(stores=tuple(stores), skipped=skipped)


def _json_coordinates(address: Mapping[str, Any]) -> Coordinates:
    raw = address.get("coordinates")
    if not isinstance(raw, Mapping):
        raise RowValidationError("Missing coordinates")
    try:
        coordinates = Coordinates(lat=float(raw.get("lat")), lng=float(raw.get("lng")))
    except (TypeError, ValueError) as exc:
        raise RowValidationError("Coordinates are not numeric") from exc
    if not coordinates.is_valid:
        raise RowValidationError("Coordinates are out of range or unset")
    return coordinates


def _json_hours(value: Any):
    if value is None:
        return None
    if isinstance(value, str):
        return parse_hours(value)
    return coerce_weekly_hours(value)


def store_from_json(payload: Mapping[str, Any], index: int) -> Store:
    """Normalize an already-shaped store object (stores.json or remote API)."""

    name = _cell_text(payload.get("name"))
    address = payload.get("address")
    if not name or not isinstance(address, Mapping):
        raise RowValidationError("Missing name or address", index)

    coordinates = _json_coordinates(address)
    contact = payload.get("contact") or {}
    services = payload.get("services") or []
    if isinstance(services, str):
        services = split_list(services, lower=True)
    special_hours = tuple(
        SpecialHours(date=str(entry["date"]), status=str(entry.get("status", "")).lower())
        for entry in payload.get("specialHours") or []
        if isinstance(entry, Mapping) and entry.get("date")
    )

    return Store(
        id=_cell_text(payload.get("id")) or f"store-{index}",
        name=name,
        address=Address(
            street=_cell_text(address.get("street")),
            city=_cell_text(address.get("city")),
            state=_cell_text(address.get("state")),
            zip=_cell_text(address.get("zip")),
            coordinates=coordinates,
        ),
        contact=Contact(phone=_cell_text(contact.get("phone")), email=_cell_text(contact.get("email"))),
        hours=_json_hours(payload.get("hours")),
        services=frozenset(s.strip().lower() for s in services if isinstance(s, str) and s.strip()),
        photo=_cell_text(payload.get("photo")),
        details=tuple(d.strip() for d in payload.get("details") or [] if isinstance(d, str) and d.strip()),
        special_hours=special_hours,
        featured=bool(payload.get("featured", False)),
    )


def build_catalog_from_json(document: Any) -> Catalog:
    if isinstance(document, Mapping):
        items = document.get("stores")
    else:
        items = document
    if not isinstance(items, list):
        raise CatalogLoadFailed("Store document must contain a 'stores' list.")

    stores: list[Store] = []
    skipped = 0
    seen: set[str] = set()
    for index, item in enumerate(items):
        try:
            if not isinstance(item, Mapping):
                raise RowValidationError("Store entry is not an object", index)
            store = store_from_json(item, index)
            if store.id in seen:
                raise RowValidationError(f"Duplicate store id '{store.id}'", index)
        except RowValidationError as exc:
            skipped += 1
            logger.debug("Skipping store entry %s: %s", index, exc.reason)
            continue
        seen.add(store.id)
        stores.append(store)

    skip_msg = f", {skipped} invalid entries skipped" if skipped else ""
    logger.info(f"Store catalog: {len(stores)} stores loaded{skip_msg}")
    return Catalog(stores=tuple(stores), skipped=skipped)


def read_rows(path: Path) -> list[list[Any]]:
    """Read authored rows from a CSV file or the active sheet of an Excel workbook."""

    if not path.exists():
        raise FileNotFoundError(f"Store rows file not found: {path}")
    if path.suffix.lower() in {".xlsx", ".xlsm"}:
        wb = load_workbook(path, data_only=True, read_only=True)
        try:
            return [list(row) for row in wb.active.iter_rows(values_only=True)]
        finally:
            wb.close()
    with path.open(mode="r", encoding="utf-8-sig", newline="") as handle:
        return [row for row in csv.reader(handle)]


def _fetch_json(url: str) -> Any:
    with httpx.Client(timeout=httpx.Timeout(30.0, connect=10.0)) as client:
        response = client.get(url)
        response.raise_for_status()
        return response.json()


def load_catalog(source: Optional[str] = None, *, path: Optional[Path] = None, url: Optional[str] = None) -> Catalog:
    """Load the catalog from the configured source.

    Raises ``CatalogLoadFailed`` when the source cannot be read at all.
    """

    source = source or settings.catalog_source
    logger.info("Loading store data from: %s", source)
    try:
        if source == "fixture":
            return build_catalog(FIXTURE_ROWS)
        if source == "rows":
            return build_catalog(read_rows(path or settings.catalog_file))
        if source == "json-file":
            catalog_path = path or settings.catalog_file
            with catalog_path.open("r", encoding="utf-8") as handle:
                return build_catalog_from_json(json.load(handle))
        if source == "api":
            endpoint = url or settings.catalog_api_url
            if not endpoint:
                raise CatalogLoadFailed("Catalog API URL is not configured.")
            return build_catalog_from_json(_fetch_json(endpoint))
    except CatalogLoadFailed:
        raise
    except (OSError, ValueError, InvalidFileException, zipfile.BadZipFile, httpx.HTTPError) as exc:
        logger.error(f"Failed to load store data from {source}: {exc}")
        raise CatalogLoadFailed(f"Unable to load store data from '{source}': {exc}") from exc
    raise CatalogLoadFailed(f"Unknown catalog source '{source}'.")
