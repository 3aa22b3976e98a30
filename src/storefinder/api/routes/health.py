"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...data.catalog_repository import Catalog
from ...services.search import SessionRegistry
from ..dependencies import get_catalog, get_sessions

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/catalog", status_code=status.HTTP_200_OK)
def health_catalog(
    catalog: Catalog = Depends(get_catalog),
    sessions: SessionRegistry = Depends(get_sessions),
) -> dict:
    return {
        "stores": len(catalog),
        "skipped": catalog.skipped,
        "sessions": len(sessions),
    }
