from __future__ import annotations

from collections.abc import Sequence

from app.domain.contracts import SessionedStore
from app.domain.dto import RubricCategoryInput
from app.domain.models import RubricCategorySnapshot
from app.domain.rubric import validate_rubric_update

COMPONENT_ID_LIST = "domain.rubric.list"
COMPONENT_ID_UPDATE = "domain.rubric.update"


async def list_rubric(*, store: SessionedStore, session_key: str) -> list[RubricCategorySnapshot]:
    return await store.list_rubric(session_key=session_key)


async def update_rubric(
    *,
    store: SessionedStore,
    session_key: str,
    categories: Sequence[RubricCategoryInput],
) -> list[RubricCategorySnapshot]:
    """Rename/re-describe all ten criteria at once; groups stay tied to the index."""
    cleaned = validate_rubric_update(categories)
    await store.update_rubric(session_key=session_key, categories=cleaned)
    return await store.list_rubric(session_key=session_key)
