"""Debounced address autocomplete."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from ...config import settings
from .base import AddressGeocoder, Suggestion

logger = logging.getLogger(__name__)


class SuggestionDebouncer:
    """Waits out a quiet period before asking the geocoder for suggestions.

    A call made while an earlier one is still waiting supersedes it; the earlier
    caller gets an empty list. Lookups run independently of the search flow.
    """

    def __init__(
        self,
        geocoder: AddressGeocoder,
        *,
        delay_ms: Optional[int] = None,
        min_chars: Optional[int] = None,
    ) -> None:
        self.geocoder = geocoder
        self.delay_ms = delay_ms if delay_ms is not None else settings.suggestion_debounce_ms
        self.min_chars = min_chars if min_chars is not None else settings.suggestion_min_chars
        self._latest = 0

    async def suggest(self, text: str) -> list[Suggestion]:
        self._latest += 1
        token = self._latest
        query = (text or "").strip()
        if len(query) < self.min_chars:
            return []

        await asyncio.sleep(self.delay_ms / 1000)
        if token != self._latest:
            logger.debug("Suggestion lookup for '%s' superseded", query)
            return []

        try:
            suggestions = await self.geocoder.suggest(query)
        except (httpx.HTTPError, ValueError, KeyError) as exc:
            logger.warning(f"Autocomplete lookup failed for '{query}': {exc}")
            return []
        if token != self._latest:
            return []
        return suggestions
