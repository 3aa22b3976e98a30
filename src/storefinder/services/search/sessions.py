"""Per-client search sessions."""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

from ...config import settings
from ...exceptions import SupersededIntent
from ..location.suggestions import SuggestionDebouncer
from .orchestrator import SearchOrchestrator

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchSession:
    session_id: str
    orchestrator: SearchOrchestrator
    suggestions: SuggestionDebouncer


class SessionRegistry:
    """Keeps one orchestrator and one autocomplete debouncer per session id.

    The catalog and the key-value store are shared; anchors, filters, sequence
    numbers and pending lookups are not. Least recently used sessions are dropped
    past ``max_sessions``; their preferences stay persisted and are reloaded when
    the session returns.
    """

    def __init__(self, factory: Callable[[str], SearchSession], *, max_sessions: Optional[int] = None) -> None:
        self._factory = factory
        self.max_sessions = max_sessions if max_sessions is not None else settings.max_sessions
        self._sessions: OrderedDict[str, SearchSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    async def get(self, session_id: str) -> SearchSession:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
            return session

        session = self._factory(session_id)
        self._sessions[session_id] = session
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.debug("Dropped idle search session %s", evicted)
        logger.info(f"Started search session {session_id}")
        try:
            await session.orchestrator.start()
        except SupersededIntent:
            logger.debug("Initial load of session %s superseded by a newer intent", session_id)
        return session
