"""Request-scoped access to the catalog and the caller's search session."""

from __future__ import annotations

import re
import uuid

from fastapi import Depends, Request, Response

from ..config import settings
from ..data.catalog_repository import Catalog
from ..services.location import SuggestionDebouncer
from ..services.search import SearchOrchestrator, SearchSession, SessionRegistry

SESSION_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,64}")


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def get_sessions(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_session_id(request: Request, response: Response) -> str:
    """Session id from the header, else the cookie; cookie clients without one are issued a fresh id."""
    header_id = request.headers.get(settings.session_header)
    if header_id and SESSION_ID_PATTERN.fullmatch(header_id):
        return header_id
    cookie_id = request.cookies.get(settings.session_cookie)
    if cookie_id and SESSION_ID_PATTERN.fullmatch(cookie_id):
        return cookie_id
    session_id = uuid.uuid4().hex
    response.set_cookie(settings.session_cookie, session_id, httponly=True, samesite="lax")
    return session_id


async def get_session(
    session_id: str = Depends(get_session_id),
    sessions: SessionRegistry = Depends(get_sessions),
) -> SearchSession:
    return await sessions.get(session_id)


def get_orchestrator(session: SearchSession = Depends(get_session)) -> SearchOrchestrator:
    return session.orchestrator


def get_suggestions(session: SearchSession = Depends(get_session)) -> SuggestionDebouncer:
    return session.suggestions
