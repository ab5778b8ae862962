from __future__ import annotations

from app.api.handlers.deps import ApiDeps
from app.api.schemas import RubricCategoryResponse, UpdateRubricRequest
from app.domain.dto import RubricCategoryInput
from app.domain.models import RubricCategorySnapshot
from app.domain.use_cases import rubric as rubric_use_cases

COMPONENT_ID_LIST = "api.list_rubric"
COMPONENT_ID_UPDATE = "api.update_rubric"


def _category_response(category: RubricCategorySnapshot) -> RubricCategoryResponse:
    return RubricCategoryResponse(
        id=category.category_index,
        category_index=category.category_index,
        group_name=category.group_name,
        name=category.name,
        guidance=category.guidance,
    )


async def list_rubric_handler(*, session_key: str, api_deps: ApiDeps) -> list[RubricCategoryResponse]:
    categories = await rubric_use_cases.list_rubric(store=api_deps.store, session_key=session_key)
    return [_category_response(category) for category in categories]


async def update_rubric_handler(
    *,
    session_key: str,
    request: UpdateRubricRequest,
    api_deps: ApiDeps,
) -> list[RubricCategoryResponse]:
    # Clients send either ``id`` or ``categoryIndex``; both name the same criterion.
    inputs = [
        RubricCategoryInput(
            category_index=item.category_index if item.category_index is not None else item.id,
            name=item.name,
            guidance=item.guidance,
        )
        for item in request.categories
    ]
    categories = await rubric_use_cases.update_rubric(
        store=api_deps.store,
        session_key=session_key,
        categories=inputs,
    )
    return [_category_response(category) for category in categories]
