from __future__ import annotations

from collections.abc import Mapping

from app.api.handlers.deps import ApiDeps
from app.api.schemas import BoardResponse, BoardTeamResponse, TeamScoreResponse, TeamStatusRequest, TeamStatusResponse
from app.domain.dto import BoardEntry, TeamScoreEntry, TeamStatusUpdate

COMPONENT_ID_BOARD = "api.get_board"
COMPONENT_ID_TEAM_SCORE = "api.get_team_score"
COMPONENT_ID_SAVE_SCORE = "api.save_score"
COMPONENT_ID_TEAM_STATUS = "api.update_team_status"


def board_team_response(entry: BoardEntry) -> BoardTeamResponse:
    return BoardTeamResponse(
        team_id=entry.team_id,
        team_name=entry.team_name,
        project_name=entry.project_name,
        description=entry.description,
        members=list(entry.members),
        member_count=entry.member_count,
        repo_url=entry.repo_url,
        demo_url=entry.demo_url,
        project_status=entry.project_status,
        score_status=entry.score_status,
        business_subtotal=entry.business_subtotal,
        technical_subtotal=entry.technical_subtotal,
        total=entry.total,
        status=entry.status,
        rank=entry.rank,
        **entry.criteria.as_dict(),
    )


def _team_score_response(entry: TeamScoreEntry) -> TeamScoreResponse:
    return TeamScoreResponse(
        team_id=entry.team_id,
        team_name=entry.team_name,
        project_name=entry.project_name,
        business_subtotal=entry.business_subtotal,
        technical_subtotal=entry.technical_subtotal,
        total=entry.total,
        status=entry.status,
        **entry.criteria.as_dict(),
    )


async def get_board_handler(*, session_key: str, api_deps: ApiDeps) -> BoardResponse:
    board = await api_deps.scoreboard.get_board(session_key)
    return BoardResponse(
        scoring_locked=board.scoring_locked,
        show_partial=board.show_partial,
        teams=[board_team_response(entry) for entry in board.teams],
    )


async def get_team_score_handler(*, session_key: str, team_id: str, api_deps: ApiDeps) -> TeamScoreResponse:
    entry = await api_deps.scoreboard.get_team_score(session_key, team_id)
    return _team_score_response(entry)


async def save_score_handler(
    *,
    session_key: str,
    team_id: str,
    payload: Mapping[str, object],
    api_deps: ApiDeps,
) -> TeamScoreResponse:
    entry = await api_deps.scoreboard.save_score(session_key, team_id, payload)
    return _team_score_response(entry)


async def update_team_status_handler(
    *,
    session_key: str,
    team_id: str,
    request: TeamStatusRequest,
    api_deps: ApiDeps,
) -> TeamStatusResponse:
    result = await api_deps.scoreboard.update_team_status(
        session_key,
        team_id,
        TeamStatusUpdate(project_status=request.project_status, score_status=request.score_status),
    )
    return TeamStatusResponse(
        team_id=result.team_id,
        project_status=result.project_status,
        score_status=result.score_status,
    )
