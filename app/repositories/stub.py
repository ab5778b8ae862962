from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from app.domain.dto import AnnouncementUpdate, RubricCategoryInput, SettingsUpdate, TeamInput
from app.domain.errors import DomainInvariantError
from app.domain.models import (
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
from app.domain.rubric import group_for_index


def _now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class _SettingsRow:
    session_key: str
    event_name: str = "Hackathon"
    event_icon: str = "⚡"
    tagline: str = ""
    countdown_target: str | None = None
    scoring_locked: bool = False
    show_partial: bool = True
    tv_refresh_seconds: int = 15
    updated_at: datetime = field(default_factory=_now)


@dataclass
class _TeamRow:
    team_id: str
    session_key: str
    team_name: str
    project_name: str
    members_text: str
    repo_url: str = ""
    demo_url: str = ""
    description: str = ""
    project_status: ProjectStatus = ProjectStatus.PLANNING
    score_status: ScoreStatus = ScoreStatus.IN_PROGRESS
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)


@dataclass
class _RubricRow:
    session_key: str
    category_index: int
    group_name: RubricGroup
    name: str
    guidance: str = ""


@dataclass
class _ScoreRow:
    team_id: str
    session_key: str
    criteria: ScoreFields
    updated_at: datetime = field(default_factory=_now)


@dataclass
class _AnnouncementRow:
    announcement_id: str
    session_key: str
    title: str
    body: str
    published: bool = True
    pinned: bool = False
    sequence: int = 0
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)


def _team_snapshot(row: _TeamRow) -> TeamSnapshot:
    return TeamSnapshot(
        team_id=row.team_id,
        session_key=row.session_key,
        team_name=row.team_name,
        project_name=row.project_name,
        members_text=row.members_text,
        repo_url=row.repo_url,
        demo_url=row.demo_url,
        description=row.description,
        project_status=row.project_status,
        score_status=row.score_status,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _settings_snapshot(row: _SettingsRow) -> EventSettingsSnapshot:
    return EventSettingsSnapshot(
        session_key=row.session_key,
        event_name=row.event_name,
        event_icon=row.event_icon,
        tagline=row.tagline,
        countdown_target=row.countdown_target,
        scoring_locked=row.scoring_locked,
        show_partial=row.show_partial,
        tv_refresh_seconds=row.tv_refresh_seconds,
        updated_at=row.updated_at,
    )


def _announcement_snapshot(row: _AnnouncementRow) -> AnnouncementSnapshot:
    return AnnouncementSnapshot(
        announcement_id=row.announcement_id,
        session_key=row.session_key,
        title=row.title,
        body=row.body,
        published=row.published,
        pinned=row.pinned,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _rubric_row(session_key: str, category: RubricCategorySnapshot) -> _RubricRow:
    try:
        expected_group = group_for_index(category.category_index)
    except ValueError as exc:
        raise DomainInvariantError(str(exc)) from exc
    if category.group_name != expected_group:
        raise DomainInvariantError(f"category {category.category_index} must be in group {expected_group}")
    return _RubricRow(
        session_key=session_key,
        category_index=category.category_index,
        group_name=category.group_name,
        name=category.name,
        guidance=category.guidance,
    )


@dataclass
class InMemorySessionedStore:
    """Non-network store with deterministic behavior for local runs and tests."""

    sessions: dict[str, SessionSnapshot] = field(default_factory=dict)
    settings: dict[str, _SettingsRow] = field(default_factory=dict)
    teams: dict[str, _TeamRow] = field(default_factory=dict)
    rubric: dict[tuple[str, int], _RubricRow] = field(default_factory=dict)
    scores: dict[str, _ScoreRow] = field(default_factory=dict)
    announcements: dict[str, _AnnouncementRow] = field(default_factory=dict)
    score_writes: list[tuple[str, str, bool]] = field(default_factory=list)
    next_announcement_sequence: int = 1

    async def create_session(
        self,
        *,
        session_key: str,
        rubric: list[RubricCategorySnapshot],
    ) -> SessionSnapshot:
        if session_key in self.sessions:
            raise DomainInvariantError("session key already exists")
        rubric_rows = [_rubric_row(session_key, category) for category in rubric]

        # Nothing is stored until every row is built.
        snapshot = SessionSnapshot(session_key=session_key, created_at=_now())
        self.sessions[session_key] = snapshot
        self.settings.setdefault(session_key, _SettingsRow(session_key=session_key))
        for row in rubric_rows:
            self.rubric[(session_key, row.category_index)] = row
        return snapshot

    async def get_session(self, *, session_key: str) -> SessionSnapshot | None:
        return self.sessions.get(session_key)

    async def get_settings(self, *, session_key: str) -> EventSettingsSnapshot | None:
        row = self.settings.get(session_key)
        if row is None:
            return None
        return _settings_snapshot(row)

    async def save_settings(self, *, session_key: str, update: SettingsUpdate) -> EventSettingsSnapshot:
        row = self.settings.get(session_key)
        if row is None:
            row = _SettingsRow(session_key=session_key)
            self.settings[session_key] = row

        if update.event_name is not None:
            row.event_name = update.event_name
        if update.event_icon is not None:
            row.event_icon = update.event_icon
        if update.tagline is not None:
            row.tagline = update.tagline
        if update.countdown_target_provided:
            row.countdown_target = update.countdown_target or None
        if update.scoring_locked is not None:
            row.scoring_locked = update.scoring_locked
        if update.show_partial is not None:
            row.show_partial = update.show_partial
        if update.tv_refresh_seconds is not None:
            row.tv_refresh_seconds = update.tv_refresh_seconds
        row.updated_at = _now()
        return _settings_snapshot(row)

    async def list_teams(self, *, session_key: str) -> list[TeamSnapshot]:
        items = [_team_snapshot(row) for row in self.teams.values() if row.session_key == session_key]
        items.sort(key=lambda item: item.team_name)
        return items

    async def get_team(self, *, session_key: str, team_id: str) -> TeamSnapshot | None:
        row = self.teams.get(team_id)
        if row is None or row.session_key != session_key:
            return None
        return _team_snapshot(row)

    async def count_teams(self, *, session_key: str) -> int:
        return sum(1 for row in self.teams.values() if row.session_key == session_key)

    async def create_team(self, *, session_key: str, team_id: str, data: TeamInput) -> TeamSnapshot:
        if team_id in self.teams:
            raise DomainInvariantError("team id already exists")
        row = _TeamRow(
            team_id=team_id,
            session_key=session_key,
            team_name=data.team_name or "",
            project_name=data.project_name or "",
            members_text=data.members_text or "",
            repo_url=data.repo_url or "",
            demo_url=data.demo_url or "",
            description=data.description or "",
        )
        self.teams[team_id] = row
        return _team_snapshot(row)

    def _team_row(self, *, session_key: str, team_id: str) -> _TeamRow:
        row = self.teams.get(team_id)
        if row is None or row.session_key != session_key:
            raise DomainInvariantError("team is not found")
        return row

    async def update_team(self, *, session_key: str, team_id: str, data: TeamInput) -> TeamSnapshot:
        row = self._team_row(session_key=session_key, team_id=team_id)
        row.team_name = data.team_name or ""
        row.project_name = data.project_name or ""
        row.members_text = data.members_text or ""
        row.repo_url = data.repo_url or ""
        row.demo_url = data.demo_url or ""
        row.description = data.description or ""
        row.updated_at = _now()
        return _team_snapshot(row)

    async def update_team_status(
        self,
        *,
        session_key: str,
        team_id: str,
        project_status: ProjectStatus | None,
        score_status: ScoreStatus | None,
    ) -> TeamSnapshot:
        row = self._team_row(session_key=session_key, team_id=team_id)
        if project_status is not None:
            row.project_status = project_status
        if score_status is not None:
            row.score_status = score_status
        row.updated_at = _now()
        return _team_snapshot(row)

    async def delete_team(self, *, session_key: str, team_id: str) -> None:
        self._team_row(session_key=session_key, team_id=team_id)
        self.scores.pop(team_id, None)
        del self.teams[team_id]

    async def list_rubric(self, *, session_key: str) -> list[RubricCategorySnapshot]:
        items = [
            RubricCategorySnapshot(
                session_key=row.session_key,
                category_index=row.category_index,
                group_name=row.group_name,
                name=row.name,
                guidance=row.guidance,
            )
            for row in self.rubric.values()
            if row.session_key == session_key
        ]
        items.sort(key=lambda item: item.category_index)
        return items

    async def update_rubric(self, *, session_key: str, categories: list[RubricCategoryInput]) -> None:
        for category in categories:
            row = self.rubric.get((session_key, category.category_index or 0))
            if row is None:
                continue
            row.name = category.name or ""
            row.guidance = category.guidance or ""

    async def get_score(self, *, session_key: str, team_id: str) -> ScoreSnapshot | None:
        row = self.scores.get(team_id)
        if row is None or row.session_key != session_key:
            return None
        return ScoreSnapshot(
            team_id=row.team_id,
            session_key=row.session_key,
            criteria=row.criteria,
            updated_at=row.updated_at,
        )

    async def upsert_score(self, *, session_key: str, team_id: str, criteria: ScoreFields) -> UpsertScoreResult:
        existing = self.scores.get(team_id)
        created = existing is None or existing.session_key != session_key
        row = _ScoreRow(team_id=team_id, session_key=session_key, criteria=criteria)
        self.scores[team_id] = row
        self.score_writes.append((session_key, team_id, created))
        return UpsertScoreResult(
            score=ScoreSnapshot(
                team_id=row.team_id,
                session_key=row.session_key,
                criteria=row.criteria,
                updated_at=row.updated_at,
            ),
            created=created,
        )

    async def list_announcements(
        self,
        *,
        session_key: str,
        published: bool | None = None,
    ) -> list[AnnouncementSnapshot]:
        rows = [
            row
            for row in self.announcements.values()
            if row.session_key == session_key and (published is None or row.published == published)
        ]
        # Pinned first, then newest first; the sequence breaks equal timestamps.
        rows.sort(key=lambda row: (row.pinned, row.created_at, row.sequence), reverse=True)
        return [_announcement_snapshot(row) for row in rows]

    async def get_announcement(self, *, session_key: str, announcement_id: str) -> AnnouncementSnapshot | None:
        row = self.announcements.get(announcement_id)
        if row is None or row.session_key != session_key:
            return None
        return _announcement_snapshot(row)

    async def count_pinned_announcements(self, *, session_key: str) -> int:
        return sum(1 for row in self.announcements.values() if row.session_key == session_key and row.pinned)

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
        row = _AnnouncementRow(
            announcement_id=announcement_id,
            session_key=session_key,
            title=title,
            body=body,
            published=published,
            pinned=pinned,
            sequence=self.next_announcement_sequence,
        )
        self.next_announcement_sequence += 1
        self.announcements[announcement_id] = row
        return _announcement_snapshot(row)

    def _announcement_row(self, *, session_key: str, announcement_id: str) -> _AnnouncementRow:
        row = self.announcements.get(announcement_id)
        if row is None or row.session_key != session_key:
            raise DomainInvariantError("announcement is not found")
        return row

    async def update_announcement(
        self,
        *,
        session_key: str,
        announcement_id: str,
        update: AnnouncementUpdate,
    ) -> AnnouncementSnapshot:
        row = self._announcement_row(session_key=session_key, announcement_id=announcement_id)
        if update.title is not None:
            row.title = update.title
        if update.body is not None:
            row.body = update.body
        if update.published is not None:
            row.published = update.published
        if update.pinned is not None:
            row.pinned = update.pinned
        row.updated_at = _now()
        return _announcement_snapshot(row)

    async def delete_announcement(self, *, session_key: str, announcement_id: str) -> None:
        self._announcement_row(session_key=session_key, announcement_id=announcement_id)
        del self.announcements[announcement_id]
