from __future__ import annotations

from collections.abc import Iterable

from app.domain.dto import TeamInput, TeamStatusUpdate
from app.domain.errors import DomainValidationError
from app.domain.models import ProjectStatus, ScoreStatus, TeamSnapshot

TEAM_NAME_MAX_LENGTH = 60
PROJECT_NAME_MAX_LENGTH = 80
MEMBER_NAME_MAX_LENGTH = 60
MIN_MEMBERS = 1
MAX_MEMBERS = 15


def parse_members(members_text: str | None) -> list[str]:
    """One name per line; lines are stripped and blank ones dropped."""
    if not members_text:
        return []
    return [line.strip() for line in members_text.split("\n") if line.strip()]


def validate_team_input(
    data: TeamInput,
    *,
    existing_teams: Iterable[TeamSnapshot],
    exclude_team_id: str | None = None,
) -> TeamInput:
    """Check a create/update payload against the session's other teams.

    Returns the payload with names and optional text fields stripped.
    """
    errors: list[str] = []
    team_name = (data.team_name or "").strip()
    project_name = (data.project_name or "").strip()

    if not team_name:
        errors.append("teamName is required")
    elif len(team_name) > TEAM_NAME_MAX_LENGTH:
        errors.append(f"teamName max {TEAM_NAME_MAX_LENGTH} characters")
    elif any(team.team_name == team_name and team.team_id != exclude_team_id for team in existing_teams):
        errors.append("teamName must be unique")

    if not project_name:
        errors.append("projectName is required")
    elif len(project_name) > PROJECT_NAME_MAX_LENGTH:
        errors.append(f"projectName max {PROJECT_NAME_MAX_LENGTH} characters")

    if not data.members_text or not data.members_text.strip():
        errors.append("membersText is required")
    else:
        members = parse_members(data.members_text)
        if len(members) < MIN_MEMBERS or len(members) > MAX_MEMBERS:
            errors.append(f"Must have {MIN_MEMBERS}-{MAX_MEMBERS} members")
        if any(len(member) > MEMBER_NAME_MAX_LENGTH for member in members):
            errors.append(f"Each member name max {MEMBER_NAME_MAX_LENGTH} characters")

    if errors:
        raise DomainValidationError(errors)

    return TeamInput(
        team_name=team_name,
        project_name=project_name,
        members_text=data.members_text,
        repo_url=(data.repo_url or "").strip(),
        demo_url=(data.demo_url or "").strip(),
        description=(data.description or "").strip(),
    )


def validate_status_update(update: TeamStatusUpdate) -> tuple[ProjectStatus | None, ScoreStatus | None]:
    errors: list[str] = []
    project_status: ProjectStatus | None = None
    score_status: ScoreStatus | None = None

    if update.project_status is None and update.score_status is None:
        raise DomainValidationError(["projectStatus or scoreStatus is required"])

    if update.project_status is not None:
        try:
            project_status = ProjectStatus(update.project_status)
        except ValueError:
            allowed = ", ".join(status.value for status in ProjectStatus)
            errors.append(f"projectStatus must be one of: {allowed}")

    if update.score_status is not None:
        try:
            score_status = ScoreStatus(update.score_status)
        except ValueError:
            allowed = ", ".join(status.value for status in ScoreStatus)
            errors.append(f"scoreStatus must be one of: {allowed}")

    if errors:
        raise DomainValidationError(errors)
    return project_status, score_status
