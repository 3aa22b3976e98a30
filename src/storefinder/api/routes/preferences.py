"""User preference endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from ...schemas.preferences import Preferences, PreferencesUpdate, PreferredStoreRequest
from ...services.search import SearchOrchestrator
from ..dependencies import get_orchestrator

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("", response_model=Preferences, status_code=status.HTTP_200_OK)
async def get_preferences(orchestrator: SearchOrchestrator = Depends(get_orchestrator)) -> Preferences:
    return orchestrator.preferences


@router.patch("", response_model=Preferences, status_code=status.HTTP_200_OK)
async def update_preferences(
    payload: PreferencesUpdate,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
) -> Preferences:
    try:
        return orchestrator.update_preferences(payload.model_dump(exclude_unset=True))
    except (ValidationError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


@router.put("/preferred-store", response_model=Preferences, status_code=status.HTTP_200_OK)
async def set_preferred_store(
    payload: PreferredStoreRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
) -> Preferences:
    try:
        orchestrator.set_preferred_store(payload.storeId)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Store '{payload.storeId}' not found."
        ) from exc
    return orchestrator.preferences


@router.delete("/preferred-store", response_model=Preferences, status_code=status.HTTP_200_OK)
async def clear_preferred_store(orchestrator: SearchOrchestrator = Depends(get_orchestrator)) -> Preferences:
    orchestrator.clear_preferred_store()
    return orchestrator.preferences
