from __future__ import annotations

from app.api.handlers.deps import ApiDeps
from app.api.schemas import SuccessResponse, TeamRequest, TeamResponse
from app.domain.dto import TeamInput
from app.domain.models import TeamSnapshot
from app.domain.teams import parse_members
from app.domain.use_cases import teams as team_use_cases

COMPONENT_ID_LIST = "api.list_teams"
COMPONENT_ID_CREATE = "api.create_team"
COMPONENT_ID_UPDATE = "api.update_team"
COMPONENT_ID_DELETE = "api.delete_team"


def team_response(team: TeamSnapshot) -> TeamResponse:
    members = parse_members(team.members_text)
    return TeamResponse(
        team_id=team.team_id,
        team_name=team.team_name,
        project_name=team.project_name,
        members_text=team.members_text,
        members=members,
        member_count=len(members),
        repo_url=team.repo_url,
        demo_url=team.demo_url,
        description=team.description,
        project_status=team.project_status,
        score_status=team.score_status,
        created_at=team.created_at,
        updated_at=team.updated_at,
    )


def _team_input(request: TeamRequest) -> TeamInput:
    return TeamInput(
        team_name=request.team_name,
        project_name=request.project_name,
        members_text=request.members_text,
        repo_url=request.repo_url,
        demo_url=request.demo_url,
        description=request.description,
    )


async def list_teams_handler(*, session_key: str, api_deps: ApiDeps) -> list[TeamResponse]:
    teams = await team_use_cases.list_teams(store=api_deps.store, session_key=session_key)
    return [team_response(team) for team in teams]


async def create_team_handler(*, session_key: str, request: TeamRequest, api_deps: ApiDeps) -> TeamResponse:
    team = await team_use_cases.create_team(
        store=api_deps.store,
        session_key=session_key,
        data=_team_input(request),
        max_teams=api_deps.settings.max_teams_per_session,
    )
    return team_response(team)


async def update_team_handler(
    *,
    session_key: str,
    team_id: str,
    request: TeamRequest,
    api_deps: ApiDeps,
) -> TeamResponse:
    team = await team_use_cases.update_team(
        store=api_deps.store,
        session_key=session_key,
        team_id=team_id,
        data=_team_input(request),
    )
    return team_response(team)


async def delete_team_handler(*, session_key: str, team_id: str, api_deps: ApiDeps) -> SuccessResponse:
    await team_use_cases.delete_team(store=api_deps.store, session_key=session_key, team_id=team_id)
    return SuccessResponse()
