from __future__ import annotations

from collections.abc import Sequence

from app.domain.dto import RubricCategoryInput
from app.domain.errors import DomainValidationError
from app.domain.models import BUSINESS_INDICES, CRITERIA_COUNT, RubricGroup

# (index, name, guidance); the group is always derived from the index.
DEFAULT_RUBRIC: tuple[tuple[int, str, str], ...] = (
    (
        1,
        "Problem importance",
        "1: unclear / low relevance · 10: high-priority pain point with clear stakeholders",
    ),
    (
        2,
        "Value & ROI",
        "1: no measurable benefit · 10: quantified benefit (cost, risk reduction, revenue, productivity)"
        " + credible assumptions",
    ),
    (
        3,
        "Customer / user experience",
        "1: hard to use / unclear workflow · 10: intuitive experience with clear user journey and outcomes",
    ),
    (
        4,
        "Strategic alignment",
        "1: off-strategy / isolated · 10: directly supports key business priorities and operating model",
    ),
    (
        5,
        "Innovation & differentiation",
        "1: incremental / common pattern · 10: meaningfully new approach, defensible advantage, reusable pattern",
    ),
    (
        6,
        "Architecture & engineering quality",
        "1: brittle prototype · 10: sound design, clean interfaces, handles edge cases",
    ),
    (
        7,
        "AI implementation correctness",
        "1: prompt-only / unreliable behavior · 10: appropriate model choice, grounded outputs,"
        " evaluation approach defined",
    ),
    (
        8,
        "Security, privacy & compliance hygiene",
        "1: unclear data handling / secrets risk · 10: data classification noted, controls described,"
        " no secrets, least-privilege considered",
    ),
    (
        9,
        "Reliability & performance",
        "1: fails often / slow / not repeatable · 10: stable runs, basic tests or eval script,"
        " performance understood",
    ),
    (
        10,
        "Ship-ability (operational readiness)",
        "1: cannot be handed off · 10: runbook/README, deployment path, logging/monitoring notes, cost awareness",
    ),
)


def group_for_index(category_index: int) -> RubricGroup:
    if category_index < 1 or category_index > CRITERIA_COUNT:
        raise ValueError(f"category index must be 1-{CRITERIA_COUNT}, got {category_index}")
    if category_index in BUSINESS_INDICES:
        return RubricGroup.BUSINESS
    return RubricGroup.TECHNICAL


def validate_rubric_update(categories: Sequence[RubricCategoryInput]) -> list[RubricCategoryInput]:
    """Check a full rubric submission and return it normalized (stripped, sorted by index)."""
    if len(categories) != CRITERIA_COUNT:
        raise DomainValidationError([f"Must provide exactly {CRITERIA_COUNT} categories"])

    errors: list[str] = []
    seen: set[int] = set()
    for item in categories:
        index = item.category_index
        if index is None:
            errors.append("Category id is required")
        elif index < 1 or index > CRITERIA_COUNT:
            errors.append(f"Category {index}: id must be 1-{CRITERIA_COUNT}")
        elif index in seen:
            errors.append(f"Category {index}: duplicate id")
        else:
            seen.add(index)
        if not item.name or not item.name.strip():
            errors.append(f"Category {index}: name is required")

    if errors:
        raise DomainValidationError(errors)

    normalized = [
        RubricCategoryInput(
            category_index=item.category_index,
            name=(item.name or "").strip(),
            guidance=(item.guidance or "").strip(),
        )
        for item in categories
    ]
    normalized.sort(key=lambda item: item.category_index or 0)
    return normalized
