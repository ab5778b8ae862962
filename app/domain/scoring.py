from __future__ import annotations

from collections.abc import Mapping, Sequence
import re
from dataclasses import dataclass, replace
from typing import Protocol, TypeVar

from app.domain.errors import DomainValidationError
from app.domain.models import CRITERION_KEYS, CompletionStatus, ScoreFields

MIN_CRITERION_SCORE = 1
MAX_CRITERION_SCORE = 10

INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class ScoreAggregate:
    business_subtotal: int
    technical_subtotal: int
    total: int
    status: CompletionStatus


@dataclass(frozen=True)
class RankingEntry:
    team_name: str
    business_subtotal: int
    technical_subtotal: int
    total: int
    rank: int | None = None


class Rankable(Protocol):
    @property
    def team_name(self) -> str: ...

    @property
    def business_subtotal(self) -> int: ...

    @property
    def technical_subtotal(self) -> int: ...

    @property
    def total(self) -> int: ...


RankableT = TypeVar("RankableT", bound=Rankable)


def aggregate_score(fields: ScoreFields) -> ScoreAggregate:
    business = fields.business()
    technical = fields.technical()

    business_subtotal = sum(value for value in business if value is not None)
    technical_subtotal = sum(value for value in technical if value is not None)
    complete = all(value is not None for value in business + technical)

    return ScoreAggregate(
        business_subtotal=business_subtotal,
        technical_subtotal=technical_subtotal,
        total=business_subtotal + technical_subtotal,
        status=CompletionStatus.COMPLETE if complete else CompletionStatus.PARTIAL,
    )


def _score_triple(entry: Rankable) -> tuple[int, int, int]:
    return (entry.total, entry.business_subtotal, entry.technical_subtotal)


def rank_entries(entries: Sequence[RankableT]) -> list[RankableT]:
    """Order entries for the leaderboard and assign competition ranks.

    Sort is total, business subtotal, technical subtotal (all descending) and
    then team name ascending. Entries with an equal score triple share a rank;
    the next distinct entry takes its 1-based position (1, 1, 3). The name only
    orders tied entries and never changes a rank number.

    Entries must be dataclasses with a ``rank`` field; new instances are
    returned and the input sequence is left untouched.
    """
    ordered = sorted(
        entries,
        key=lambda entry: (
            -entry.total,
            -entry.business_subtotal,
            -entry.technical_subtotal,
            entry.team_name,
        ),
    )

    ranked: list[RankableT] = []
    rank = 1
    for position, entry in enumerate(ordered, start=1):
        if position > 1 and _score_triple(entry) != _score_triple(ordered[position - 2]):
            rank = position
        ranked.append(replace(entry, rank=rank))  # type: ignore[type-var]
    return ranked


def _parse_criterion(value: object) -> int | None:
    """Returns the parsed value, or raises ValueError when it is not an integer 1-10."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("booleans are not scores")
    if isinstance(value, str):
        stripped = value.strip()
        if stripped == "":
            return None
        if INTEGER_TEXT.fullmatch(stripped) is None:
            raise ValueError("not a plain integer")
        parsed = int(stripped)
    elif isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValueError("fractional score")
        parsed = int(value)
    else:
        raise ValueError("unsupported score type")

    if parsed < MIN_CRITERION_SCORE or parsed > MAX_CRITERION_SCORE:
        raise ValueError("score out of range")
    return parsed


def parse_score_fields(raw: Mapping[str, object]) -> ScoreFields:
    """Validate a raw c1..c10 payload, collecting every bad field before failing."""
    values: dict[str, int | None] = {}
    errors: list[str] = []
    for key in CRITERION_KEYS:
        try:
            values[key] = _parse_criterion(raw.get(key))
        except ValueError:
            errors.append(f"{key} must be an integer {MIN_CRITERION_SCORE}-{MAX_CRITERION_SCORE} or null")

    if errors:
        raise DomainValidationError(errors)
    return ScoreFields(**values)
