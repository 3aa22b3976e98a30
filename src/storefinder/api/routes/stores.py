"""Store catalog endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ...config import settings
from ...data.catalog_repository import Catalog
from ...schemas.stores import CatalogResponse, StoreModel
from ...services.geospatial import distance
from ...services.pipeline import available_services
from ...services.search import SearchOrchestrator
from ..dependencies import get_catalog, get_orchestrator

router = APIRouter(prefix="/stores", tags=["stores"])


@router.get("", response_model=CatalogResponse, status_code=status.HTTP_200_OK)
def list_stores(
    catalog: Catalog = Depends(get_catalog),
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
) -> CatalogResponse:
    return CatalogResponse(
        stores=[StoreModel.from_domain(store, orchestrator.status_for(store)) for store in catalog],
        total=len(catalog),
        skipped=catalog.skipped,
        services=available_services(catalog),
    )


@router.get("/services", response_model=List[str], status_code=status.HTTP_200_OK)
def list_services(catalog: Catalog = Depends(get_catalog)) -> List[str]:
    return available_services(catalog) or list(settings.default_services)


@router.get("/{store_id}", response_model=StoreModel, status_code=status.HTTP_200_OK)
def get_store(
    store_id: str,
    catalog: Catalog = Depends(get_catalog),
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
) -> StoreModel:
    store = catalog.get(store_id)
    if store is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Store '{store_id}' not found.")
    if orchestrator.anchor is not None:
        store = store.with_distance(distance(orchestrator.anchor, store.coordinates))
    return StoreModel.from_domain(store, orchestrator.status_for(store))
