from __future__ import annotations

from dataclasses import replace

from app.domain.contracts import SessionedStore
from app.domain.dto import SettingsUpdate
from app.domain.errors import DomainValidationError
from app.domain.models import EventSettingsSnapshot

COMPONENT_ID_GET = "domain.settings.get"
COMPONENT_ID_UPDATE = "domain.settings.update"

EVENT_NAME_MAX_LENGTH = 120
TAGLINE_MAX_LENGTH = 200
MIN_TV_REFRESH_SECONDS = 5
MAX_TV_REFRESH_SECONDS = 120


async def get_settings(*, store: SessionedStore, session_key: str) -> EventSettingsSnapshot:
    settings = await store.get_settings(session_key=session_key)
    if settings is None:
        return EventSettingsSnapshot(session_key=session_key)
    return settings


def validate_settings_update(update: SettingsUpdate) -> SettingsUpdate:
    errors: list[str] = []
    if update.event_name is not None and (
        not update.event_name.strip() or len(update.event_name) > EVENT_NAME_MAX_LENGTH
    ):
        errors.append(f"eventName must be 1-{EVENT_NAME_MAX_LENGTH} characters")
    if update.tagline is not None and len(update.tagline) > TAGLINE_MAX_LENGTH:
        errors.append(f"tagline must be max {TAGLINE_MAX_LENGTH} characters")
    if update.tv_refresh_seconds is not None and not (
        MIN_TV_REFRESH_SECONDS <= update.tv_refresh_seconds <= MAX_TV_REFRESH_SECONDS
    ):
        errors.append(f"tvRefreshSeconds must be integer {MIN_TV_REFRESH_SECONDS}-{MAX_TV_REFRESH_SECONDS}")

    if errors:
        raise DomainValidationError(errors)

    if update.countdown_target_provided and not update.countdown_target:
        return replace(update, countdown_target=None)
    return update


async def update_settings(*, store: SessionedStore, session_key: str, update: SettingsUpdate) -> EventSettingsSnapshot:
    cleaned = validate_settings_update(update)
    return await store.save_settings(session_key=session_key, update=cleaned)
