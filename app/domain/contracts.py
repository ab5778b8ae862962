from __future__ import annotations

from typing import Protocol, runtime_checkable

from app.domain.dto import AnnouncementUpdate, RubricCategoryInput, SettingsUpdate, TeamInput
from app.domain.models import (
    AnnouncementSnapshot,
    EventSettingsSnapshot,
    ProjectStatus,
    RubricCategorySnapshot,
    ScoreFields,
    ScoreSnapshot,
    ScoreStatus,
    SessionSnapshot,
    TeamSnapshot,
    UpsertScoreResult,
)


@runtime_checkable
class SessionedStore(Protocol):
    """Persistence contract for every record scoped by a session key.

    Implementations never validate domain rules; callers do that before any
    write. Every read and write takes the session key so rows from another
    session are invisible. Score writes are last-write-wins per team.
    """

    # Writes the session, its default settings row and its rubric together or not at all.
    async def create_session(
        self,
        *,
        session_key: str,
        rubric: list[RubricCategorySnapshot],
    ) -> SessionSnapshot: ...

    async def get_session(self, *, session_key: str) -> SessionSnapshot | None: ...

    async def get_settings(self, *, session_key: str) -> EventSettingsSnapshot | None: ...

    async def save_settings(self, *, session_key: str, update: SettingsUpdate) -> EventSettingsSnapshot: ...

    async def list_teams(self, *, session_key: str) -> list[TeamSnapshot]: ...

    async def get_team(self, *, session_key: str, team_id: str) -> TeamSnapshot | None: ...

    async def count_teams(self, *, session_key: str) -> int: ...

    async def create_team(self, *, session_key: str, team_id: str, data: TeamInput) -> TeamSnapshot: ...

    async def update_team(self, *, session_key: str, team_id: str, data: TeamInput) -> TeamSnapshot: ...

    async def update_team_status(
        self,
        *,
        session_key: str,
        team_id: str,
        project_status: ProjectStatus | None,
        score_status: ScoreStatus | None,
    ) -> TeamSnapshot: ...

    # Removes the team's score row with it.
    async def delete_team(self, *, session_key: str, team_id: str) -> None: ...

    async def list_rubric(self, *, session_key: str) -> list[RubricCategorySnapshot]: ...

    async def update_rubric(self, *, session_key: str, categories: list[RubricCategoryInput]) -> None: ...

    async def get_score(self, *, session_key: str, team_id: str) -> ScoreSnapshot | None: ...

    # Update when a row exists for the team, insert otherwise.
    async def upsert_score(self, *, session_key: str, team_id: str, criteria: ScoreFields) -> UpsertScoreResult: ...

    async def list_announcements(
        self,
        *,
        session_key: str,
        published: bool | None = None,
    ) -> list[AnnouncementSnapshot]: ...

    async def get_announcement(self, *, session_key: str, announcement_id: str) -> AnnouncementSnapshot | None: ...

    async def count_pinned_announcements(self, *, session_key: str) -> int: ...

    async def create_announcement(
        self,
        *,
        session_key: str,
        announcement_id: str,
        title: str,
        body: str,
        published: bool,
        pinned: bool,
    ) -> AnnouncementSnapshot: ...

    async def update_announcement(
        self,
        *,
        session_key: str,
        announcement_id: str,
        update: AnnouncementUpdate,
    ) -> AnnouncementSnapshot: ...

    async def delete_announcement(self, *, session_key: str, announcement_id: str) -> None: ...
