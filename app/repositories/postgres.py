from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
import importlib
from typing import Any

from app.domain.dto import AnnouncementUpdate, RubricCategoryInput, SettingsUpdate, TeamInput
from app.domain.errors import DomainDependencyError, DomainInvariantError, DomainValidationError
from app.domain.models import (
    CRITERION_KEYS,
    AnnouncementSnapshot,
    EventSettingsSnapshot,
    ProjectStatus,
    RubricCategorySnapshot,
    RubricGroup,
    ScoreFields,
    ScoreSnapshot,
    ScoreStatus,
    SessionSnapshot,
    TeamSnapshot,
    UpsertScoreResult,
)
from app.repositories.sql_loader import load_sql

asyncpg_module = importlib.import_module("asyncpg")


SQL_CREATE_SESSION = load_sql("create_session.sql")
SQL_GET_SESSION = load_sql("get_session.sql")
SQL_GET_SETTINGS = load_sql("get_settings.sql")
SQL_ENSURE_SETTINGS = load_sql("ensure_settings.sql")
SQL_UPDATE_SETTINGS = load_sql("update_settings.sql")
SQL_LIST_TEAMS = load_sql("list_teams.sql")
SQL_GET_TEAM = load_sql("get_team.sql")
SQL_COUNT_TEAMS = load_sql("count_teams.sql")
SQL_CREATE_TEAM = load_sql("create_team.sql")
SQL_UPDATE_TEAM = load_sql("update_team.sql")
SQL_UPDATE_TEAM_STATUS = load_sql("update_team_status.sql")
SQL_DELETE_TEAM = load_sql("delete_team.sql")
SQL_LIST_RUBRIC = load_sql("list_rubric.sql")
SQL_SEED_RUBRIC = load_sql("seed_rubric.sql")
SQL_UPDATE_RUBRIC = load_sql("update_rubric.sql")
SQL_GET_SCORE = load_sql("get_score.sql")
SQL_UPSERT_SCORE = load_sql("upsert_score.sql")
SQL_LIST_ANNOUNCEMENTS = load_sql("list_announcements.sql")
SQL_GET_ANNOUNCEMENT = load_sql("get_announcement.sql")
SQL_COUNT_PINNED_ANNOUNCEMENTS = load_sql("count_pinned_announcements.sql")
SQL_CREATE_ANNOUNCEMENT = load_sql("create_announcement.sql")
SQL_UPDATE_ANNOUNCEMENT = load_sql("update_announcement.sql")
SQL_DELETE_ANNOUNCEMENT = load_sql("delete_announcement.sql")


def _is_unique_violation(exc: Exception) -> bool:
    return getattr(exc, "sqlstate", None) == "23505"


def _team_snapshot(row: Any) -> TeamSnapshot:
    return TeamSnapshot(
        team_id=row["team_id"],
        session_key=row["session_key"],
        team_name=row["team_name"],
        project_name=row["project_name"],
        members_text=row["members_text"],
        repo_url=row["repo_url"],
        demo_url=row["demo_url"],
        description=row["description"],
        project_status=ProjectStatus(row["project_status"]),
        score_status=ScoreStatus(row["score_status"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _settings_snapshot(row: Any) -> EventSettingsSnapshot:
    return EventSettingsSnapshot(
        session_key=row["session_key"],
        event_name=row["event_name"],
        event_icon=row["event_icon"],
        tagline=row["tagline"],
        countdown_target=row["countdown_target"],
        scoring_locked=row["scoring_locked"],
        show_partial=row["show_partial"],
        tv_refresh_seconds=row["tv_refresh_seconds"],
        updated_at=row["updated_at"],
    )


def _score_snapshot(row: Any) -> ScoreSnapshot:
    return ScoreSnapshot(
        team_id=row["team_id"],
        session_key=row["session_key"],
        criteria=ScoreFields(**{key: row[key] for key in CRITERION_KEYS}),
        updated_at=row["updated_at"],
    )


def _announcement_snapshot(row: Any) -> AnnouncementSnapshot:
    return AnnouncementSnapshot(
        announcement_id=row["announcement_id"],
        session_key=row["session_key"],
        title=row["title"],
        body=row["body"],
        published=row["published"],
        pinned=row["pinned"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


@dataclass
class AsyncpgPoolManager:
    dsn: str
    pool: Any | None = None

    async def startup(self) -> None:
        self.pool = await asyncpg_module.create_pool(
            dsn=self.dsn,
            min_size=1,
            max_size=5,
        )

    async def shutdown(self) -> None:
        if self.pool is None:
            return
        await self.pool.close()
        self.pool = None


@dataclass
class PostgresSessionedStore:
    pool_manager: AsyncpgPoolManager

    def _pool(self) -> Any:
        if self.pool_manager.pool is None:
            raise RuntimeError("postgres pool is not initialized")
        return self.pool_manager.pool

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[Any]:
        pool = self._pool()
        try:
            async with pool.acquire() as conn:
                yield conn
        except (asyncpg_module.PostgresError, OSError) as exc:
            if _is_unique_violation(exc):
                raise
            raise DomainDependencyError(f"postgres store failure: {exc}") from exc

    async def create_session(
        self,
        *,
        session_key: str,
        rubric: list[RubricCategorySnapshot],
    ) -> SessionSnapshot:
        try:
            async with self._connection() as conn:
                async with conn.transaction():
                    row = await conn.fetchrow(SQL_CREATE_SESSION, session_key)
                    await conn.execute(SQL_ENSURE_SETTINGS, session_key)
                    await conn.executemany(
                        SQL_SEED_RUBRIC,
                        [
                            (session_key, item.category_index, item.group_name.value, item.name, item.guidance)
                            for item in rubric
                        ],
                    )
        except Exception as exc:
            if _is_unique_violation(exc):
                raise DomainInvariantError("session key already exists") from exc
            raise
        if row is None:
            raise DomainInvariantError("failed to create session")
        return SessionSnapshot(session_key=row["session_key"], created_at=row["created_at"])

    async def get_session(self, *, session_key: str) -> SessionSnapshot | None:
        async with self._connection() as conn:
            row = await conn.fetchrow(SQL_GET_SESSION, session_key)
        if row is None:
            return None
        return SessionSnapshot(session_key=row["session_key"], created_at=row["created_at"])

    async def get_settings(self, *, session_key: str) -> EventSettingsSnapshot | None:
        async with self._connection() as conn:
            row = await conn.fetchrow(SQL_GET_SETTINGS, session_key)
        if row is None:
            return None
        return _settings_snapshot(row)

    async def save_settings(self, *, session_key: str, update: SettingsUpdate) -> EventSettingsSnapshot:
        async with self._connection() as conn:
            async with conn.transaction():
                await conn.execute(SQL_ENSURE_SETTINGS, session_key)
                row = await conn.fetchrow(
                    SQL_UPDATE_SETTINGS,
                    session_key,
                    update.event_name,
                    update.event_icon,
                    update.tagline,
                    update.countdown_target_provided,
                    update.countdown_target,
                    update.scoring_locked,
                    update.show_partial,
                    update.tv_refresh_seconds,
                )
        if row is None:
            raise DomainInvariantError("failed to save settings")
        return _settings_snapshot(row)

    async def list_teams(self, *, session_key: str) -> list[TeamSnapshot]:
        async with self._connection() as conn:
            rows = await conn.fetch(SQL_LIST_TEAMS, session_key)
        return [_team_snapshot(row) for row in rows]

    async def get_team(self, *, session_key: str, team_id: str) -> TeamSnapshot | None:
        async with self._connection() as conn:
            row = await conn.fetchrow(SQL_GET_TEAM, session_key, team_id)
        if row is None:
            return None
        return _team_snapshot(row)

    async def count_teams(self, *, session_key: str) -> int:
        async with self._connection() as conn:
            count = await conn.fetchval(SQL_COUNT_TEAMS, session_key)
        return int(count or 0)

    async def create_team(self, *, session_key: str, team_id: str, data: TeamInput) -> TeamSnapshot:
        try:
            async with self._connection() as conn:
                row = await conn.fetchrow(
                    SQL_CREATE_TEAM,
                    team_id,
                    session_key,
                    data.team_name,
                    data.project_name,
                    data.members_text,
                    data.repo_url or "",
                    data.demo_url or "",
                    data.description or "",
                )
        except Exception as exc:
            # Two concurrent creates with the same name in one session.
            if _is_unique_violation(exc):
                raise DomainValidationError(["teamName must be unique"]) from exc
            raise
        if row is None:
            raise DomainInvariantError("failed to create team")
        return _team_snapshot(row)

    async def update_team(self, *, session_key: str, team_id: str, data: TeamInput) -> TeamSnapshot:
        try:
            async with self._connection() as conn:
                row = await conn.fetchrow(
                    SQL_UPDATE_TEAM,
                    session_key,
                    team_id,
                    data.team_name,
                    data.project_name,
                    data.members_text,
                    data.repo_url or "",
                    data.demo_url or "",
                    data.description or "",
                )
        except Exception as exc:
            if _is_unique_violation(exc):
                raise DomainValidationError(["teamName must be unique"]) from exc
            raise
        if row is None:
            raise DomainInvariantError("team is not found")
        return _team_snapshot(row)

    async def update_team_status(
        self,
        *,
        session_key: str,
        team_id: str,
        project_status: ProjectStatus | None,
        score_status: ScoreStatus | None,
    ) -> TeamSnapshot:
        async with self._connection() as conn:
            row = await conn.fetchrow(
                SQL_UPDATE_TEAM_STATUS,
                session_key,
                team_id,
                project_status.value if project_status is not None else None,
                score_status.value if score_status is not None else None,
            )
        if row is None:
            raise DomainInvariantError("team is not found")
        return _team_snapshot(row)

    async def delete_team(self, *, session_key: str, team_id: str) -> None:
        # scores.team_id cascades on delete.
        async with self._connection() as conn:
            await conn.execute(SQL_DELETE_TEAM, session_key, team_id)

    async def list_rubric(self, *, session_key: str) -> list[RubricCategorySnapshot]:
        async with self._connection() as conn:
            rows = await conn.fetch(SQL_LIST_RUBRIC, session_key)
        return [
            RubricCategorySnapshot(
                session_key=row["session_key"],
                category_index=row["category_index"],
                group_name=RubricGroup(row["group_name"]),
                name=row["name"],
                guidance=row["guidance"],
            )
            for row in rows
        ]

    async def update_rubric(self, *, session_key: str, categories: list[RubricCategoryInput]) -> None:
        async with self._connection() as conn:
            async with conn.transaction():
                await conn.executemany(
                    SQL_UPDATE_RUBRIC,
                    [(session_key, item.category_index, item.name or "", item.guidance or "") for item in categories],
                )

    async def get_score(self, *, session_key: str, team_id: str) -> ScoreSnapshot | None:
        async with self._connection() as conn:
            row = await conn.fetchrow(SQL_GET_SCORE, session_key, team_id)
        if row is None:
            return None
        return _score_snapshot(row)

    async def upsert_score(self, *, session_key: str, team_id: str, criteria: ScoreFields) -> UpsertScoreResult:
        # Concurrent first saves for one team serialize on the team_id conflict target.
        async with self._connection() as conn:
            row = await conn.fetchrow(SQL_UPSERT_SCORE, session_key, team_id, *criteria.as_tuple())
        if row is None:
            raise DomainInvariantError("failed to save score")
        return UpsertScoreResult(score=_score_snapshot(row), created=row["inserted"])

    async def list_announcements(
        self,
        *,
        session_key: str,
        published: bool | None = None,
    ) -> list[AnnouncementSnapshot]:
        async with self._connection() as conn:
            rows = await conn.fetch(SQL_LIST_ANNOUNCEMENTS, session_key, published)
        return [_announcement_snapshot(row) for row in rows]

    async def get_announcement(self, *, session_key: str, announcement_id: str) -> AnnouncementSnapshot | None:
        async with self._connection() as conn:
            row = await conn.fetchrow(SQL_GET_ANNOUNCEMENT, session_key, announcement_id)
        if row is None:
            return None
        return _announcement_snapshot(row)

    async def count_pinned_announcements(self, *, session_key: str) -> int:
        async with self._connection() as conn:
            count = await conn.fetchval(SQL_COUNT_PINNED_ANNOUNCEMENTS, session_key)
        return int(count or 0)

    async def create_announcement(
        self,
        *,
        session_key: str,
        announcement_id: str,
        title: str,
        body: str,
        published: bool,
        pinned: bool,
    ) -> AnnouncementSnapshot:
        async with self._connection() as conn:
            row = await conn.fetchrow(
                SQL_CREATE_ANNOUNCEMENT,
                session_key,
                announcement_id,
                title,
                body,
                published,
                pinned,
            )
        if row is None:
            raise DomainInvariantError("failed to create announcement")
        return _announcement_snapshot(row)

    async def update_announcement(
        self,
        *,
        session_key: str,
        announcement_id: str,
        update: AnnouncementUpdate,
    ) -> AnnouncementSnapshot:
        async with self._connection() as conn:
            row = await conn.fetchrow(
                SQL_UPDATE_ANNOUNCEMENT,
                session_key,
                announcement_id,
                update.title,
                update.body,
                update.published,
                update.pinned,
            )
        if row is None:
            raise DomainInvariantError("announcement is not found")
        return _announcement_snapshot(row)

    async def delete_announcement(self, *, session_key: str, announcement_id: str) -> None:
        async with self._connection() as conn:
            await conn.execute(SQL_DELETE_ANNOUNCEMENT, session_key, announcement_id)
