"""Async HTTP client for the Nominatim (OpenStreetMap) search API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import settings
from ...exceptions import GeocodeFailed
from ...models.domain import Coordinates
from .base import Suggestion

logger = logging.getLogger(__name__)


class NominatimGeocoder:
    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        suggestion_limit: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.geocoder_base_url).rstrip("/")
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds
        self.suggestion_limit = suggestion_limit if suggestion_limit is not None else settings.suggestion_limit
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        )

    async def _search(self, params: dict[str, Any]) -> list[dict]:
        url = f"{self.base_url}/search"
        async with self._get_client() as client:
            response = await client.get(url, params={"format": "json", **params})
            response.raise_for_status()
            data = response.json()
        if not isinstance(data, list):
            raise ValueError("Nominatim response is not a list of places.")
        return data

    async def geocode(self, text: str) -> Coordinates:
        logger.debug("Geocoding address: %s", text)
        try:
            results = await self._search({"q": text, "limit": 1})
        except httpx.HTTPStatusError as exc:
            raise GeocodeFailed(text, f"Geocoding API returned status {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise GeocodeFailed(text, str(exc)) from exc

        if not results:
            raise GeocodeFailed(text)
        try:
            coordinates = Coordinates(lat=float(results[0]["lat"]), lng=float(results[0]["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodeFailed(text, "Malformed coordinates in geocoding response") from exc
        logger.info(f"Geocoded '{text}' to {coordinates.lat:.5f}, {coordinates.lng:.5f}")
        return coordinates

    async def suggest(self, text: str) -> list[Suggestion]:
        results = await self._search({"q": text, "limit": self.suggestion_limit, "addressdetails": 1})
        logger.debug("Nominatim results: %s suggestions", len(results))
        return [
            Suggestion(label=item["display_name"], value=item["display_name"])
            for item in results
            if item.get("display_name")
        ]
