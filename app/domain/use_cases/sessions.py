from __future__ import annotations

import logging

from app.domain.contracts import SessionedStore
from app.domain.errors import DomainInvariantError, DomainValidationError, NotFoundError
from app.domain.ids import is_valid_session_key, new_session_key, normalize_session_key
from app.domain.models import RubricCategorySnapshot, SessionSnapshot
from app.domain.rubric import DEFAULT_RUBRIC, group_for_index

COMPONENT_ID_CREATE = "domain.session.create"
COMPONENT_ID_JOIN = "domain.session.join"

MAX_KEY_ATTEMPTS = 5

logger = logging.getLogger("scoreboard")


def default_rubric(session_key: str) -> list[RubricCategorySnapshot]:
    return [
        RubricCategorySnapshot(
            session_key=session_key,
            category_index=index,
            group_name=group_for_index(index),
            name=name,
            guidance=guidance,
        )
        for index, name, guidance in DEFAULT_RUBRIC
    ]


async def create_session(*, store: SessionedStore) -> SessionSnapshot:
    """Allocate a fresh session key and seed its settings row and rubric."""
    for _ in range(MAX_KEY_ATTEMPTS):
        session_key = new_session_key()
        if await store.get_session(session_key=session_key) is not None:
            continue
        session = await store.create_session(session_key=session_key, rubric=default_rubric(session_key))
        logger.info("session created", extra={"session_key": session_key})
        return session
    raise DomainInvariantError("failed to allocate unique session key")


async def join_session(*, store: SessionedStore, raw_key: str) -> SessionSnapshot:
    session_key = normalize_session_key(raw_key)
    if not is_valid_session_key(session_key):
        raise DomainValidationError(["Session key must be a 5-character hex string"])
    session = await store.get_session(session_key=session_key)
    if session is None:
        raise NotFoundError("Session not found")
    return session


async def require_session(*, store: SessionedStore, raw_key: str | None) -> str:
    """Resolve the session key attached to a request, or fail before any store write."""
    if raw_key is None or not raw_key.strip():
        raise DomainValidationError(["Session key is required"])
    session_key = normalize_session_key(raw_key)
    if not is_valid_session_key(session_key):
        raise NotFoundError("Session not found")
    if await store.get_session(session_key=session_key) is None:
        raise NotFoundError("Session not found")
    return session_key
