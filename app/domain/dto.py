from __future__ import annotations

from dataclasses import dataclass

from app.domain.models import CompletionStatus, ProjectStatus, ScoreFields, ScoreStatus


@dataclass(frozen=True)
class TeamInput:
    team_name: str | None
    project_name: str | None
    members_text: str | None
    repo_url: str | None = None
    demo_url: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class TeamStatusUpdate:
    project_status: str | None = None
    score_status: str | None = None


@dataclass(frozen=True)
class TeamStatusResult:
    team_id: str
    project_status: ProjectStatus
    score_status: ScoreStatus


@dataclass(frozen=True)
class RubricCategoryInput:
    category_index: int | None
    name: str | None
    guidance: str | None = None


@dataclass(frozen=True)
class SettingsUpdate:
    event_name: str | None = None
    event_icon: str | None = None
    tagline: str | None = None
    countdown_target: str | None = None
    # countdown_target is the only field that can be cleared, so presence is tracked separately.
    countdown_target_provided: bool = False
    scoring_locked: bool | None = None
    show_partial: bool | None = None
    tv_refresh_seconds: int | None = None


@dataclass(frozen=True)
class AnnouncementInput:
    title: str | None
    body: str | None
    published: bool = True
    pinned: bool = False


@dataclass(frozen=True)
class AnnouncementUpdate:
    title: str | None = None
    body: str | None = None
    published: bool | None = None
    pinned: bool | None = None


@dataclass(frozen=True)
class TeamScoreEntry:
    team_id: str
    team_name: str
    project_name: str
    criteria: ScoreFields
    business_subtotal: int
    technical_subtotal: int
    total: int
    status: CompletionStatus


@dataclass(frozen=True)
class BoardEntry:
    team_id: str
    team_name: str
    project_name: str
    description: str
    members: tuple[str, ...]
    member_count: int
    repo_url: str
    demo_url: str
    project_status: ProjectStatus
    score_status: ScoreStatus
    criteria: ScoreFields
    business_subtotal: int
    technical_subtotal: int
    total: int
    status: CompletionStatus
    rank: int | None = None


@dataclass(frozen=True)
class Board:
    scoring_locked: bool
    show_partial: bool
    teams: list[BoardEntry]
