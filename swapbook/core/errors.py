"""Error value hierarchy. Domain functions return these inside Err, never raise them.

Base class SwapbookError; six @final subclasses, one per failure kind a
lifecycle caller has to tell apart:

  NotFoundError            a referenced trade or reference datum does not exist
  InactiveReferenceError   the datum exists but is flagged inactive
  ValidationError          one or more business-rule violations (full list)
  UnauthorizedError        the caller lacks the privilege for the operation
  ConcurrencyConflictError the active-version check failed at commit (retryable)
  PersistenceError         the store itself failed
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import final

from swapbook.core.types import UtcDatetime


@dataclass(frozen=True, slots=True)
class SwapbookError:
    """Base error value. NOT @final — has subclasses."""

    message: str
    code: str
    timestamp: UtcDatetime
    source: str  # "module.function" that produced this error

    def with_context(self, context: str) -> SwapbookError:
        """Return a copy with context prepended to message."""
        return replace(self, message=f"{context}: {self.message}")

    def to_dict(self) -> dict[str, object]:
        return {
            "message": self.message,
            "code": self.code,
            "timestamp": self.timestamp.value.isoformat(),
            "source": self.source,
        }


@final
@dataclass(frozen=True, slots=True)
class FieldViolation:
    """A single business-rule violation."""

    path: str  # e.g. "trade.maturity_date", "legs[1].rate"
    constraint: str  # human-readable rule, e.g. "Start date cannot be before trade date"
    actual_value: str


@final
@dataclass(frozen=True, slots=True)
class ValidationError(SwapbookError):
    """One or more rules failed. Carries every violation, never just the first."""

    fields: tuple[FieldViolation, ...]

    @property
    def messages(self) -> tuple[str, ...]:
        return tuple(f.constraint for f in self.fields)

    def to_dict(self) -> dict[str, object]:
        return {
            **SwapbookError.to_dict(self),
            "fields": [
                {"path": f.path, "constraint": f.constraint, "actual_value": f.actual_value}
                for f in self.fields
            ],
        }


@final
@dataclass(frozen=True, slots=True)
class NotFoundError(SwapbookError):
    """A trade or reference datum does not exist."""

    entity: str  # e.g. "trade", "book", "index"
    field: str  # "id", "name" or "trade_id"
    value: str

    def to_dict(self) -> dict[str, object]:
        return {
            **SwapbookError.to_dict(self),
            "entity": self.entity,
            "field": self.field,
            "value": self.value,
        }


@final
@dataclass(frozen=True, slots=True)
class InactiveReferenceError(SwapbookError):
    """Book, counterparty, trader or inputter exists but is inactive."""

    entity: str
    identifier: str

    def to_dict(self) -> dict[str, object]:
        return {**SwapbookError.to_dict(self), "entity": self.entity, "identifier": self.identifier}


@final
@dataclass(frozen=True, slots=True)
class UnauthorizedError(SwapbookError):
    """The caller may not perform the requested operation."""

    user_id: int
    operation: str

    def to_dict(self) -> dict[str, object]:
        return {**SwapbookError.to_dict(self), "user_id": self.user_id, "operation": self.operation}


@final
@dataclass(frozen=True, slots=True)
class ConcurrencyConflictError(SwapbookError):
    """The active version changed between read and commit. Safe to retry."""

    trade_id: int
    expected_version: int | None  # None: the writer expected no active version
    actual_version: int | None  # None: no active version found at commit

    def to_dict(self) -> dict[str, object]:
        return {
            **SwapbookError.to_dict(self),
            "trade_id": self.trade_id,
            "expected_version": self.expected_version,
            "actual_version": self.actual_version,
        }


@final
@dataclass(frozen=True, slots=True)
class PersistenceError(SwapbookError):
    """Database or storage operation failed."""

    operation: str

    def to_dict(self) -> dict[str, object]:
        return {**SwapbookError.to_dict(self), "operation": self.operation}


type LifecycleError = (
    NotFoundError
    | InactiveReferenceError
    | ValidationError
    | UnauthorizedError
    | ConcurrencyConflictError
    | PersistenceError
)

RETRYABLE_ERRORS: frozenset[type[SwapbookError]] = frozenset({
    ConcurrencyConflictError,
    PersistenceError,
})


def is_retryable(error: SwapbookError) -> bool:
    """Conflicts and storage failures may succeed on retry; everything else will not."""
    return type(error) in RETRYABLE_ERRORS


def http_status(error: SwapbookError) -> int:
    """Status code an HTTP layer should answer with for this error."""
    match error:
        case NotFoundError():
            return 404
        case ValidationError() | InactiveReferenceError():
            return 400
        case UnauthorizedError():
            return 403
        case ConcurrencyConflictError():
            return 409
        case _:
            return 500


def validation_error(
    source: str, code: str, violations: list[FieldViolation] | tuple[FieldViolation, ...],
    message: str = "Validation failed",
) -> ValidationError:
    """Build a ValidationError stamped now."""
    return ValidationError(
        message=message,
        code=code,
        timestamp=UtcDatetime.now(),
        source=source,
        fields=tuple(violations),
    )
