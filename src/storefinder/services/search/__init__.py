"""Search orchestration."""

from .intents import AddressIntent, FilterIntent, GeolocationIntent, SearchIntent
from .orchestrator import ResultSet, SearchOrchestrator, SearchState
from .sessions import SearchSession, SessionRegistry

__all__ = [
    "AddressIntent",
    "FilterIntent",
    "GeolocationIntent",
    "ResultSet",
    "SearchIntent",
    "SearchOrchestrator",
    "SearchSession",
    "SearchState",
    "SessionRegistry",
]
