from __future__ import annotations

import logging

from app.domain.contracts import SessionedStore
from app.domain.dto import TeamInput
from app.domain.errors import DomainValidationError, NotFoundError
from app.domain.ids import new_team_id
from app.domain.models import TeamSnapshot
from app.domain.teams import validate_team_input

COMPONENT_ID_LIST = "domain.team.list"
COMPONENT_ID_CREATE = "domain.team.create"
COMPONENT_ID_UPDATE = "domain.team.update"
COMPONENT_ID_DELETE = "domain.team.delete"

DEFAULT_MAX_TEAMS = 20

logger = logging.getLogger("scoreboard")


async def list_teams(*, store: SessionedStore, session_key: str) -> list[TeamSnapshot]:
    return await store.list_teams(session_key=session_key)


async def create_team(
    *,
    store: SessionedStore,
    session_key: str,
    data: TeamInput,
    max_teams: int = DEFAULT_MAX_TEAMS,
) -> TeamSnapshot:
    if await store.count_teams(session_key=session_key) >= max_teams:
        raise DomainValidationError([f"Maximum {max_teams} teams allowed"])

    existing = await store.list_teams(session_key=session_key)
    cleaned = validate_team_input(data, existing_teams=existing)
    team = await store.create_team(session_key=session_key, team_id=new_team_id(), data=cleaned)
    logger.info("team created", extra={"session_key": session_key, "team_id": team.team_id})
    return team


async def update_team(*, store: SessionedStore, session_key: str, team_id: str, data: TeamInput) -> TeamSnapshot:
    if await store.get_team(session_key=session_key, team_id=team_id) is None:
        raise NotFoundError("Team not found")

    existing = await store.list_teams(session_key=session_key)
    cleaned = validate_team_input(data, existing_teams=existing, exclude_team_id=team_id)
    return await store.update_team(session_key=session_key, team_id=team_id, data=cleaned)


async def delete_team(*, store: SessionedStore, session_key: str, team_id: str) -> None:
    if await store.get_team(session_key=session_key, team_id=team_id) is None:
        raise NotFoundError("Team not found")
    await store.delete_team(session_key=session_key, team_id=team_id)
    logger.info("team deleted", extra={"session_key": session_key, "team_id": team_id})
