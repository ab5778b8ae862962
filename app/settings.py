from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from app.domain.use_cases.announcements import DEFAULT_MAX_PINNED
from app.domain.use_cases.teams import DEFAULT_MAX_TEAMS


@dataclass(frozen=True)
class RuntimeSettings:
    host: str = "0.0.0.0"
    port: int = 8000
    database_url: str | None = None
    log_level: str = "INFO"
    max_teams_per_session: int = DEFAULT_MAX_TEAMS
    max_pinned_announcements: int = DEFAULT_MAX_PINNED


def runtime_settings_from_env() -> RuntimeSettings:
    return RuntimeSettings(
        host=os.getenv("APP_HOST", "0.0.0.0"),
        port=_env_int("APP_PORT", 8000),
        database_url=os.getenv("DATABASE_URL") or None,
        log_level=_env_log_level("LOG_LEVEL", "INFO"),
        max_teams_per_session=_env_int("MAX_TEAMS_PER_SESSION", DEFAULT_MAX_TEAMS),
        max_pinned_announcements=_env_int("MAX_PINNED_ANNOUNCEMENTS", DEFAULT_MAX_PINNED),
    )


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default

    try:
        parsed = int(value)
    except ValueError:
        return default

    return parsed if parsed > 0 else default


def _env_log_level(name: str, default: str) -> str:
    value = os.getenv(name, default).strip().upper()
    if value not in logging.getLevelNamesMapping():
        return default
    return value
