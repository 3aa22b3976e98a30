"""FastAPI application entry point."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import health, preferences, search, stores
from .config import settings
from .data.catalog_repository import Catalog, load_catalog
from .persistence.preferences import PREFERENCES_KEY, JsonFileKeyValueStore, KeyValueStore, PreferenceStore
from .services.location import (
    AddressGeocoder,
    DeviceLocationProvider,
    LocationResolver,
    NominatimGeocoder,
    SuggestionDebouncer,
)
from .services.search import SearchOrchestrator, SearchSession, SessionRegistry

logger = logging.getLogger(__name__)


def create_app(
    *,
    catalog: Optional[Catalog] = None,
    geocoder: Optional[AddressGeocoder] = None,
    device: Optional[DeviceLocationProvider] = None,
    key_value_store: Optional[KeyValueStore] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> FastAPI:
    # CatalogLoadFailed propagates: there is nothing to serve without stores
    catalog = catalog if catalog is not None else load_catalog()
    geocoder = geocoder or NominatimGeocoder()
    resolver = LocationResolver(geocoder, device)
    key_value_store = key_value_store or JsonFileKeyValueStore()

    def open_session(session_id: str) -> SearchSession:
        # each session keeps its own preference document in the shared store
        preferences = PreferenceStore(key_value_store, key=f"{PREFERENCES_KEY}:{session_id}")
        return SearchSession(
            session_id=session_id,
            orchestrator=SearchOrchestrator(catalog, resolver, preferences, clock=clock),
            suggestions=SuggestionDebouncer(geocoder),
        )

    app = FastAPI(title=settings.app_name, root_path="")
    app.state.catalog = catalog
    app.state.sessions = SessionRegistry(open_session)

    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(stores.router, prefix=settings.api_prefix)
    app.include_router(search.router, prefix=settings.api_prefix)
    app.include_router(preferences.router, prefix=settings.api_prefix)
    return app


app = create_app()
