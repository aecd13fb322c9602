"""Error value hierarchy — no domain function raises exceptions.

Every error is a frozen dataclass value that can be pattern-matched,
serialized, and stored. Base class ContingentError; the engine aborts a
reduction by returning one of these inside Err, never a partial tree.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import final

from contingent.core.types import UtcDatetime


@dataclass(frozen=True, slots=True)
class ContingentError:
    """Base error value. NOT @final — has subclasses."""

    message: str
    code: str
    timestamp: UtcDatetime
    source: str  # "module.function" that produced this error

    def with_context(self, context: str) -> ContingentError:
        """Return a copy with context prepended to message."""
        return replace(self, message=f"{context}: {self.message}")

    def to_dict(self) -> dict[str, object]:
        """Serialize to dict with stable, documented keys."""
        return {
            "message": self.message,
            "code": self.code,
            "timestamp": self.timestamp.value.isoformat(),
            "source": self.source,
        }


@final
@dataclass(frozen=True, slots=True)
class FieldViolation:
    """Describes a single field validation failure."""

    path: str  # e.g. "election.amount"
    constraint: str  # e.g. "must be positive"
    actual_value: str  # e.g. "-100"


@final
@dataclass(frozen=True, slots=True)
class ValidationError(ContingentError):
    """One or more input fields failed validation."""

    fields: tuple[FieldViolation, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            **ContingentError.to_dict(self),
            "fields": [
                {"path": f.path, "constraint": f.constraint, "actual_value": f.actual_value}
                for f in self.fields
            ],
        }


@final
@dataclass(frozen=True, slots=True)
class ConstructionError(ContingentError):
    """A claim tree is malformed at build time (e.g. Or with one choice)."""

    node: str

    def to_dict(self) -> dict[str, object]:
        return {**ContingentError.to_dict(self), "node": self.node}


@final
@dataclass(frozen=True, slots=True)
class MissingObservationError(ContingentError):
    """The oracle has no value for a required (observable, time)."""

    observable: str
    as_of: str

    def to_dict(self) -> dict[str, object]:
        return {**ContingentError.to_dict(self), "observable": self.observable, "as_of": self.as_of}


@final
@dataclass(frozen=True, slots=True)
class EvaluationError(ContingentError):
    """Arithmetic on observed values failed (division by zero, overflow)."""

    expression: str

    def to_dict(self) -> dict[str, object]:
        return {**ContingentError.to_dict(self), "expression": self.expression}


@final
@dataclass(frozen=True, slots=True)
class UnmatchedElectionTagError(ContingentError):
    """An election tag matches no live Or/Anytime alternative."""

    tag: str
    available: tuple[str, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            **ContingentError.to_dict(self),
            "tag": self.tag,
            "available": list(self.available),
        }


@final
@dataclass(frozen=True, slots=True)
class MultipleElectionsError(ContingentError):
    """More elections in one invocation than the engine accepts."""

    count: int
    limit: int

    def to_dict(self) -> dict[str, object]:
        return {**ContingentError.to_dict(self), "count": self.count, "limit": self.limit}


@final
@dataclass(frozen=True, slots=True)
class BusinessRuleViolationError(ContingentError):
    """An instrument builder was given inconsistent terms."""

    rule: str

    def to_dict(self) -> dict[str, object]:
        return {**ContingentError.to_dict(self), "rule": self.rule}


@final
@dataclass(frozen=True, slots=True)
class ReplayMismatchError(ContingentError):
    """Replaying the retained history does not reproduce the stored version."""

    expected: str
    actual: str

    def to_dict(self) -> dict[str, object]:
        return {
            **ContingentError.to_dict(self),
            "expected": self.expected,
            "actual": self.actual,
        }


@final
@dataclass(frozen=True, slots=True)
class PersistenceError(ContingentError):
    """Version store operation failed."""

    operation: str

    def to_dict(self) -> dict[str, object]:
        return {**ContingentError.to_dict(self), "operation": self.operation}


type EvaluationFailure = MissingObservationError | EvaluationError

type LifecycleError = (
    MissingObservationError
    | EvaluationError
    | UnmatchedElectionTagError
    | MultipleElectionsError
    | ValidationError
)
