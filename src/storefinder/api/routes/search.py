"""Search endpoints: intents, sort changes and address suggestions."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...exceptions import SupersededIntent
from ...schemas.search import ResultSetResponse, SearchIntentRequest, SortRequest, SuggestionModel
from ...services.location import SuggestionDebouncer
from ...services.search import SearchOrchestrator
from ..dependencies import get_orchestrator, get_suggestions

router = APIRouter(prefix="/search", tags=["search"])


def _response(orchestrator: SearchOrchestrator, result) -> ResultSetResponse:
    return ResultSetResponse.from_result(result, orchestrator.state.value)


@router.post("", response_model=ResultSetResponse, status_code=status.HTTP_200_OK)
async def run_search(
    payload: SearchIntentRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
) -> ResultSetResponse:
    try:
        result = await orchestrator.search(payload.root.to_intent())
    except SupersededIntent as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _response(orchestrator, result)


@router.get("/current", response_model=ResultSetResponse, status_code=status.HTTP_200_OK)
async def current_results(orchestrator: SearchOrchestrator = Depends(get_orchestrator)) -> ResultSetResponse:
    result = orchestrator.result
    if result is None:
        try:
            result = await orchestrator.start()
        except SupersededIntent as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _response(orchestrator, result)


@router.post("/sort", response_model=ResultSetResponse, status_code=status.HTTP_200_OK)
async def change_sort(
    payload: SortRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
) -> ResultSetResponse:
    return _response(orchestrator, orchestrator.change_sort(payload.sortBy))


@router.get("/suggestions", response_model=List[SuggestionModel], status_code=status.HTTP_200_OK)
async def suggestions(
    q: str = Query(..., description="Partial address typed by the user"),
    debouncer: SuggestionDebouncer = Depends(get_suggestions),
) -> List[SuggestionModel]:
    results = await debouncer.suggest(q)
    return [SuggestionModel(label=item.label, value=item.value) for item in results]
