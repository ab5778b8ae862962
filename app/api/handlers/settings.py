from __future__ import annotations

from app.api.handlers.deps import ApiDeps
from app.api.schemas import EventSettingsResponse, UpdateSettingsRequest
from app.domain.dto import SettingsUpdate
from app.domain.models import EventSettingsSnapshot
from app.domain.use_cases import settings as settings_use_cases

COMPONENT_ID_GET = "api.get_settings"
COMPONENT_ID_UPDATE = "api.update_settings"


def _settings_response(settings: EventSettingsSnapshot) -> EventSettingsResponse:
    return EventSettingsResponse(
        event_name=settings.event_name,
        event_icon=settings.event_icon or "⚡",
        tagline=settings.tagline or "",
        countdown_target=settings.countdown_target or None,
        scoring_locked=settings.scoring_locked,
        show_partial=settings.show_partial,
        tv_refresh_seconds=settings.tv_refresh_seconds,
        updated_at=settings.updated_at,
    )


async def get_settings_handler(*, session_key: str, api_deps: ApiDeps) -> EventSettingsResponse:
    settings = await settings_use_cases.get_settings(store=api_deps.store, session_key=session_key)
    return _settings_response(settings)


async def update_settings_handler(
    *,
    session_key: str,
    request: UpdateSettingsRequest,
    api_deps: ApiDeps,
) -> EventSettingsResponse:
    update = SettingsUpdate(
        event_name=request.event_name,
        event_icon=request.event_icon,
        tagline=request.tagline,
        countdown_target=request.countdown_target,
        countdown_target_provided="countdown_target" in request.model_fields_set,
        scoring_locked=request.scoring_locked,
        show_partial=request.show_partial,
        tv_refresh_seconds=request.tv_refresh_seconds,
    )
    settings = await settings_use_cases.update_settings(store=api_deps.store, session_key=session_key, update=update)
    return _settings_response(settings)
