from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.domain.models import CompletionStatus, ProjectStatus, RubricGroup, ScoreStatus


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(ApiModel):
    errors: list[str]


class HealthResponse(ApiModel):
    status: str
    role: str
    mode: str


class ReadyResponse(ApiModel):
    status: str
    role: str
    mode: str
    store: str


class SuccessResponse(ApiModel):
    success: bool = True


class SessionResponse(ApiModel):
    session_key: str
    created_at: datetime | None = None


class EventSettingsResponse(ApiModel):
    event_name: str
    event_icon: str
    tagline: str
    countdown_target: str | None
    scoring_locked: bool
    show_partial: bool
    tv_refresh_seconds: int
    updated_at: datetime | None


class UpdateSettingsRequest(ApiModel):
    event_name: str | None = None
    event_icon: str | None = None
    tagline: str | None = None
    countdown_target: str | None = None
    scoring_locked: bool | None = None
    show_partial: bool | None = None
    # Range is checked by the domain so every violation is reported together.
    tv_refresh_seconds: int | None = None


class TeamRequest(ApiModel):
    team_name: str | None = None
    project_name: str | None = None
    members_text: str | None = None
    repo_url: str | None = None
    demo_url: str | None = None
    description: str | None = None


class TeamResponse(ApiModel):
    team_id: str
    team_name: str
    project_name: str
    members_text: str
    members: list[str]
    member_count: int
    repo_url: str
    demo_url: str
    description: str
    project_status: ProjectStatus
    score_status: ScoreStatus
    created_at: datetime | None
    updated_at: datetime | None


class TeamStatusRequest(ApiModel):
    project_status: str | None = None
    score_status: str | None = None


class TeamStatusResponse(ApiModel):
    team_id: str
    project_status: ProjectStatus
    score_status: ScoreStatus


class RubricCategoryRequest(ApiModel):
    id: int | None = None
    category_index: int | None = None
    name: str | None = None
    guidance: str | None = None


class UpdateRubricRequest(ApiModel):
    categories: list[RubricCategoryRequest] = Field(default_factory=list)


class RubricCategoryResponse(ApiModel):
    id: int
    category_index: int
    group_name: RubricGroup
    name: str
    guidance: str


class CriteriaFields(ApiModel):
    c1: int | None = None
    c2: int | None = None
    c3: int | None = None
    c4: int | None = None
    c5: int | None = None
    c6: int | None = None
    c7: int | None = None
    c8: int | None = None
    c9: int | None = None
    c10: int | None = None


class TeamScoreResponse(CriteriaFields):
    team_id: str
    team_name: str
    project_name: str
    business_subtotal: int
    technical_subtotal: int
    total: int
    status: CompletionStatus


class BoardTeamResponse(CriteriaFields):
    team_id: str
    team_name: str
    project_name: str
    description: str
    members: list[str]
    member_count: int
    repo_url: str
    demo_url: str
    project_status: ProjectStatus
    score_status: ScoreStatus
    business_subtotal: int
    technical_subtotal: int
    total: int
    status: CompletionStatus
    rank: int = Field(ge=1)


class BoardResponse(ApiModel):
    scoring_locked: bool
    show_partial: bool
    teams: list[BoardTeamResponse]


class AnnouncementRequest(ApiModel):
    title: str | None = None
    body: str | None = None
    published: bool = True
    pinned: bool = False


class UpdateAnnouncementRequest(ApiModel):
    title: str | None = None
    body: str | None = None
    published: bool | None = None
    pinned: bool | None = None


class AnnouncementResponse(ApiModel):
    id: str
    title: str
    body: str
    published: bool
    pinned: bool
    created_at: datetime | None
    updated_at: datetime | None
