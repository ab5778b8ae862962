from __future__ import annotations

from collections.abc import Iterable


class DomainError(Exception):
    pass


class DomainValidationError(DomainError):
    """Carries every violated field-level message, not just the first."""

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class NotFoundError(DomainError):
    pass


class ScoringLockedError(DomainError):
    def __init__(self, message: str = "Scoring is locked") -> None:
        super().__init__(message)


class DomainInvariantError(DomainError):
    pass


class DomainDependencyError(DomainError):
    pass
