from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from enum import StrEnum


class RubricGroup(StrEnum):
    BUSINESS = "Business"
    TECHNICAL = "Technical"


# Project lifecycle status tracked per team, independent of scoring.
class ProjectStatus(StrEnum):
    PLANNING = "Planning"
    DESIGN = "Design"
    CODING = "Coding"
    TESTING = "Testing"
    DEPLOYED = "Deployed"


# Judge-controlled flag on the team; not derived from the score record.
class ScoreStatus(StrEnum):
    IN_PROGRESS = "In Progress"
    COMPLETE = "Complete"


# Derived from the score record: Complete iff all ten criteria are set.
class CompletionStatus(StrEnum):
    COMPLETE = "Complete"
    PARTIAL = "Partial"


CRITERIA_COUNT = 10
CRITERION_KEYS: tuple[str, ...] = tuple(f"c{index}" for index in range(1, CRITERIA_COUNT + 1))
BUSINESS_INDICES = range(1, 6)
TECHNICAL_INDICES = range(6, 11)


@dataclass(frozen=True)
class ScoreFields:
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

    @classmethod
    def empty(cls) -> ScoreFields:
        return cls()

    def as_tuple(self) -> tuple[int | None, ...]:
        return tuple(getattr(self, item.name) for item in fields(self))

    def business(self) -> tuple[int | None, ...]:
        return (self.c1, self.c2, self.c3, self.c4, self.c5)

    def technical(self) -> tuple[int | None, ...]:
        return (self.c6, self.c7, self.c8, self.c9, self.c10)

    def as_dict(self) -> dict[str, int | None]:
        return dict(zip(CRITERION_KEYS, self.as_tuple()))


@dataclass(frozen=True)
class SessionSnapshot:
    session_key: str
    created_at: datetime


@dataclass(frozen=True)
class EventSettingsSnapshot:
    session_key: str
    event_name: str = "Hackathon"
    event_icon: str = "⚡"
    tagline: str = ""
    countdown_target: str | None = None
    scoring_locked: bool = False
    show_partial: bool = True
    tv_refresh_seconds: int = 15
    updated_at: datetime | None = None


@dataclass(frozen=True)
class TeamSnapshot:
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
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class RubricCategorySnapshot:
    session_key: str
    category_index: int
    group_name: RubricGroup
    name: str
    guidance: str = ""


@dataclass(frozen=True)
class ScoreSnapshot:
    team_id: str
    session_key: str
    criteria: ScoreFields
    updated_at: datetime | None = None


@dataclass(frozen=True)
class UpsertScoreResult:
    score: ScoreSnapshot
    created: bool


@dataclass(frozen=True)
class AnnouncementSnapshot:
    announcement_id: str
    session_key: str
    title: str
    body: str
    published: bool = True
    pinned: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
