from __future__ import annotations

from app.api.handlers.deps import ApiDeps
from app.api.schemas import SessionResponse
from app.domain.use_cases import sessions as session_use_cases

COMPONENT_ID_CREATE = "api.create_session"
COMPONENT_ID_JOIN = "api.join_session"

SESSION_COOKIE_NAME = "vt_session"
SESSION_HEADER_NAME = "X-Session-Key"
SESSION_COOKIE_MAX_AGE_SECONDS = 30 * 24 * 60 * 60


async def create_session_handler(*, api_deps: ApiDeps) -> SessionResponse:
    session = await session_use_cases.create_session(store=api_deps.store)
    return SessionResponse(session_key=session.session_key, created_at=session.created_at)


async def join_session_handler(*, raw_key: str, api_deps: ApiDeps) -> SessionResponse:
    session = await session_use_cases.join_session(store=api_deps.store, raw_key=raw_key)
    return SessionResponse(session_key=session.session_key, created_at=session.created_at)


async def resolve_session_key(*, header_key: str | None, cookie_key: str | None, api_deps: ApiDeps) -> str:
    """The header wins over the cookie when a client sends both."""
    raw_key = header_key if header_key else cookie_key
    return await session_use_cases.require_session(store=api_deps.store, raw_key=raw_key)
