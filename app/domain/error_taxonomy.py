from __future__ import annotations

from collections.abc import Mapping
from typing import Literal

from app.domain.errors import (
    DomainDependencyError,
    DomainInvariantError,
    DomainValidationError,
    NotFoundError,
    ScoringLockedError,
)

# Canonical error vocabulary surfaced to API clients and logs.
ErrorCode = Literal[
    "validation_error",
    "not_found",
    "scoring_locked",
    "invariant_violation",
    "internal_error",
]

CANONICAL_ERROR_CODES: tuple[ErrorCode, ...] = (
    "validation_error",
    "not_found",
    "scoring_locked",
    "invariant_violation",
    "internal_error",
)

HTTP_STATUS_BY_CODE: Mapping[ErrorCode, int] = {
    "validation_error": 400,
    "not_found": 404,
    "scoring_locked": 403,
    "invariant_violation": 409,
    "internal_error": 500,
}

# Most specific class first; DomainValidationError is never a subclass of the others.
_CODE_BY_EXCEPTION: tuple[tuple[type[Exception], ErrorCode], ...] = (
    (DomainValidationError, "validation_error"),
    (NotFoundError, "not_found"),
    (ScoringLockedError, "scoring_locked"),
    (DomainInvariantError, "invariant_violation"),
    (DomainDependencyError, "internal_error"),
)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def is_canonical_error_code(code: str) -> bool:
    return code in CANONICAL_ERROR_CODES


def resolve_error_code(exc: Exception) -> ErrorCode:
    for exc_type, code in _CODE_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return code
    return "internal_error"


def http_status_for(code: ErrorCode) -> int:
    return HTTP_STATUS_BY_CODE.get(code, 500)


def client_messages(exc: Exception) -> list[str]:
    """Messages safe to return to the caller for the given failure."""
    code = resolve_error_code(exc)
    if code == "internal_error":
        # Store and programming failures never leak their details.
        return [INTERNAL_ERROR_MESSAGE]
    if isinstance(exc, DomainValidationError):
        return list(exc.errors)
    return [str(exc)]
