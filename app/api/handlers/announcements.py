from __future__ import annotations

from app.api.handlers.deps import ApiDeps
from app.api.schemas import AnnouncementRequest, AnnouncementResponse, SuccessResponse, UpdateAnnouncementRequest
from app.domain.dto import AnnouncementInput, AnnouncementUpdate
from app.domain.models import AnnouncementSnapshot
from app.domain.use_cases import announcements as announcement_use_cases

COMPONENT_ID_LIST = "api.list_announcements"
COMPONENT_ID_CREATE = "api.create_announcement"
COMPONENT_ID_UPDATE = "api.update_announcement"
COMPONENT_ID_DELETE = "api.delete_announcement"


def _announcement_response(announcement: AnnouncementSnapshot) -> AnnouncementResponse:
    return AnnouncementResponse(
        id=announcement.announcement_id,
        title=announcement.title,
        body=announcement.body,
        published=announcement.published,
        pinned=announcement.pinned,
        created_at=announcement.created_at,
        updated_at=announcement.updated_at,
    )


async def list_announcements_handler(
    *,
    session_key: str,
    published: bool | None,
    api_deps: ApiDeps,
) -> list[AnnouncementResponse]:
    items = await announcement_use_cases.list_announcements(
        store=api_deps.store,
        session_key=session_key,
        published=published,
    )
    return [_announcement_response(item) for item in items]


async def create_announcement_handler(
    *,
    session_key: str,
    request: AnnouncementRequest,
    api_deps: ApiDeps,
) -> AnnouncementResponse:
    announcement = await announcement_use_cases.create_announcement(
        store=api_deps.store,
        session_key=session_key,
        data=AnnouncementInput(
            title=request.title,
            body=request.body,
            published=request.published,
            pinned=request.pinned,
        ),
        max_pinned=api_deps.settings.max_pinned_announcements,
    )
    return _announcement_response(announcement)


async def update_announcement_handler(
    *,
    session_key: str,
    announcement_id: str,
    request: UpdateAnnouncementRequest,
    api_deps: ApiDeps,
) -> AnnouncementResponse:
    announcement = await announcement_use_cases.update_announcement(
        store=api_deps.store,
        session_key=session_key,
        announcement_id=announcement_id,
        update=AnnouncementUpdate(
            title=request.title,
            body=request.body,
            published=request.published,
            pinned=request.pinned,
        ),
        max_pinned=api_deps.settings.max_pinned_announcements,
    )
    return _announcement_response(announcement)


async def delete_announcement_handler(*, session_key: str, announcement_id: str, api_deps: ApiDeps) -> SuccessResponse:
    await announcement_use_cases.delete_announcement(
        store=api_deps.store,
        session_key=session_key,
        announcement_id=announcement_id,
    )
    return SuccessResponse()
