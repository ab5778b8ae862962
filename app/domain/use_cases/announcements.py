from __future__ import annotations

import logging

from app.domain.contracts import SessionedStore
from app.domain.dto import AnnouncementInput, AnnouncementUpdate
from app.domain.errors import DomainValidationError, NotFoundError
from app.domain.ids import new_announcement_id
from app.domain.models import AnnouncementSnapshot

COMPONENT_ID_LIST = "domain.announcement.list"
COMPONENT_ID_CREATE = "domain.announcement.create"
COMPONENT_ID_UPDATE = "domain.announcement.update"
COMPONENT_ID_DELETE = "domain.announcement.delete"

DEFAULT_MAX_PINNED = 4

logger = logging.getLogger("scoreboard")


def _pin_limit_error(max_pinned: int) -> DomainValidationError:
    return DomainValidationError([f"Maximum {max_pinned} pinned announcements allowed. Unpin one first."])


async def list_announcements(
    *,
    store: SessionedStore,
    session_key: str,
    published: bool | None = None,
) -> list[AnnouncementSnapshot]:
    return await store.list_announcements(session_key=session_key, published=published)


async def create_announcement(
    *,
    store: SessionedStore,
    session_key: str,
    data: AnnouncementInput,
    max_pinned: int = DEFAULT_MAX_PINNED,
) -> AnnouncementSnapshot:
    errors: list[str] = []
    title = (data.title or "").strip()
    body = (data.body or "").strip()
    if not title:
        errors.append("title is required")
    if not body:
        errors.append("body is required")
    if errors:
        raise DomainValidationError(errors)

    if data.pinned and await store.count_pinned_announcements(session_key=session_key) >= max_pinned:
        raise _pin_limit_error(max_pinned)

    announcement = await store.create_announcement(
        session_key=session_key,
        announcement_id=new_announcement_id(),
        title=title,
        body=body,
        published=data.published,
        pinned=data.pinned,
    )
    logger.info(
        "announcement created",
        extra={"session_key": session_key, "announcement_id": announcement.announcement_id},
    )
    return announcement


async def update_announcement(
    *,
    store: SessionedStore,
    session_key: str,
    announcement_id: str,
    update: AnnouncementUpdate,
    max_pinned: int = DEFAULT_MAX_PINNED,
) -> AnnouncementSnapshot:
    existing = await store.get_announcement(session_key=session_key, announcement_id=announcement_id)
    if existing is None:
        raise NotFoundError("Announcement not found")

    errors: list[str] = []
    if update.title is not None and not update.title.strip():
        errors.append("title cannot be empty")
    if update.body is not None and not update.body.strip():
        errors.append("body cannot be empty")
    if errors:
        raise DomainValidationError(errors)

    # Only a newly pinned announcement counts against the limit.
    if update.pinned and not existing.pinned:
        if await store.count_pinned_announcements(session_key=session_key) >= max_pinned:
            raise _pin_limit_error(max_pinned)

    cleaned = AnnouncementUpdate(
        title=update.title.strip() if update.title is not None else None,
        body=update.body.strip() if update.body is not None else None,
        published=update.published,
        pinned=update.pinned,
    )
    return await store.update_announcement(
        session_key=session_key,
        announcement_id=announcement_id,
        update=cleaned,
    )


async def delete_announcement(*, store: SessionedStore, session_key: str, announcement_id: str) -> None:
    if await store.get_announcement(session_key=session_key, announcement_id=announcement_id) is None:
        raise NotFoundError("Announcement not found")
    await store.delete_announcement(session_key=session_key, announcement_id=announcement_id)
    logger.info("announcement deleted", extra={"session_key": session_key, "announcement_id": announcement_id})
