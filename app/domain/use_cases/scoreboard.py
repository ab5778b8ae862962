from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
import logging

from app.domain.contracts import SessionedStore
from app.domain.dto import Board, BoardEntry, TeamScoreEntry, TeamStatusResult, TeamStatusUpdate
from app.domain.errors import NotFoundError, ScoringLockedError
from app.domain.models import EventSettingsSnapshot, ScoreFields, ScoreSnapshot, TeamSnapshot
from app.domain.scoring import aggregate_score, parse_score_fields, rank_entries
from app.domain.teams import parse_members, validate_status_update

COMPONENT_ID_BOARD = "domain.scoreboard.get_board"
COMPONENT_ID_TEAM_SCORE = "domain.scoreboard.get_team_score"
COMPONENT_ID_SAVE_SCORE = "domain.scoreboard.save_score"
COMPONENT_ID_TEAM_STATUS = "domain.scoreboard.update_team_status"

logger = logging.getLogger("scoreboard")


def _criteria_or_empty(score: ScoreSnapshot | None) -> ScoreFields:
    if score is None:
        return ScoreFields.empty()
    return score.criteria


def build_board_entry(team: TeamSnapshot, criteria: ScoreFields) -> BoardEntry:
    aggregate = aggregate_score(criteria)
    members = parse_members(team.members_text)
    return BoardEntry(
        team_id=team.team_id,
        team_name=team.team_name,
        project_name=team.project_name,
        description=team.description or "",
        members=tuple(members),
        member_count=len(members),
        repo_url=team.repo_url,
        demo_url=team.demo_url,
        project_status=team.project_status,
        score_status=team.score_status,
        criteria=criteria,
        business_subtotal=aggregate.business_subtotal,
        technical_subtotal=aggregate.technical_subtotal,
        total=aggregate.total,
        status=aggregate.status,
    )


def build_team_score_entry(team: TeamSnapshot, criteria: ScoreFields) -> TeamScoreEntry:
    aggregate = aggregate_score(criteria)
    return TeamScoreEntry(
        team_id=team.team_id,
        team_name=team.team_name,
        project_name=team.project_name,
        criteria=criteria,
        business_subtotal=aggregate.business_subtotal,
        technical_subtotal=aggregate.technical_subtotal,
        total=aggregate.total,
        status=aggregate.status,
    )


@dataclass(frozen=True)
class ScoreBoardService:
    """Joins teams, scores and settings of one session into leaderboard views."""

    store: SessionedStore

    async def _settings(self, session_key: str) -> EventSettingsSnapshot:
        settings = await self.store.get_settings(session_key=session_key)
        if settings is None:
            return EventSettingsSnapshot(session_key=session_key)
        return settings

    async def _require_team(self, session_key: str, team_id: str) -> TeamSnapshot:
        team = await self.store.get_team(session_key=session_key, team_id=team_id)
        if team is None:
            raise NotFoundError("Team not found")
        return team

    async def get_board(self, session_key: str) -> Board:
        settings = await self._settings(session_key)
        teams = await self.store.list_teams(session_key=session_key)

        # gather() re-raises the first failure, so a partial board is never assembled.
        scores = await asyncio.gather(
            *(self.store.get_score(session_key=session_key, team_id=team.team_id) for team in teams)
        )

        entries = [build_board_entry(team, _criteria_or_empty(score)) for team, score in zip(teams, scores)]
        ranked = rank_entries(entries)
        logger.debug(
            "board built",
            extra={"session_key": session_key, "teams_total": len(ranked)},
        )
        return Board(
            scoring_locked=settings.scoring_locked,
            show_partial=settings.show_partial,
            teams=ranked,
        )

    async def get_team_score(self, session_key: str, team_id: str) -> TeamScoreEntry:
        team = await self._require_team(session_key, team_id)
        score = await self.store.get_score(session_key=session_key, team_id=team_id)
        return build_team_score_entry(team, _criteria_or_empty(score))

    async def save_score(self, session_key: str, team_id: str, raw: Mapping[str, object]) -> TeamScoreEntry:
        settings = await self._settings(session_key)
        if settings.scoring_locked:
            logger.info(
                "score write rejected: scoring locked",
                extra={"session_key": session_key, "team_id": team_id, "error_code": "scoring_locked"},
            )
            raise ScoringLockedError()

        team = await self._require_team(session_key, team_id)
        criteria = parse_score_fields(raw)

        result = await self.store.upsert_score(session_key=session_key, team_id=team_id, criteria=criteria)
        logger.info(
            "score created" if result.created else "score updated",
            extra={"session_key": session_key, "team_id": team_id},
        )
        return build_team_score_entry(team, result.score.criteria)

    async def update_team_status(self, session_key: str, team_id: str, update: TeamStatusUpdate) -> TeamStatusResult:
        project_status, score_status = validate_status_update(update)
        await self._require_team(session_key, team_id)
        team = await self.store.update_team_status(
            session_key=session_key,
            team_id=team_id,
            project_status=project_status,
            score_status=score_status,
        )
        return TeamStatusResult(
            team_id=team.team_id,
            project_status=team.project_status,
            score_status=team.score_status,
        )
