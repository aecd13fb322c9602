"""Workflow and activity data types for the instrument lifecycle.

All types: @final @dataclass(frozen=True, slots=True).
Market data crosses the workflow boundary as a FixingTable, so activities
stay pure functions of their input.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, final

from contingent.lifecycle.effect import Effect
from contingent.lifecycle.version import (
    ElectionOutcome,
    ElectionRequest,
    InstrumentVersion,
    TimeEventOutcome,
)
from contingent.oracle.fixings import FixingTable


class LifecycleStatus(Enum):
    """Terminal states of one lifecycle workflow run."""

    VERSIONED = "Versioned"
    DISCHARGED = "Discharged"
    NO_CHANGE = "NoChange"
    FAILED = "Failed"


# ---------------------------------------------------------------------------
# Activity inputs / outputs
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class ElectionInput:
    version: InstrumentVersion
    request: ElectionRequest
    fixings: FixingTable


@final
@dataclass(frozen=True, slots=True)
class TimeEventInput:
    version: InstrumentVersion
    time: Any
    fixings: FixingTable


@final
@dataclass(frozen=True, slots=True)
class ElectionOutput:
    """Wrapper for the election activity result or error."""

    outcome: ElectionOutcome | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if (self.outcome is None) == (self.error is None):
            raise TypeError("ElectionOutput must have exactly one of outcome or error")


@final
@dataclass(frozen=True, slots=True)
class TimeEventOutput:
    """Wrapper for the time-event activity result or error."""

    outcome: TimeEventOutcome | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if (self.outcome is None) == (self.error is None):
            raise TypeError("TimeEventOutput must have exactly one of outcome or error")


# ---------------------------------------------------------------------------
# Workflow input / result
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class LifecycleInput:
    """One event against one instrument version.

    Exactly one of ``request`` (an election) or ``time`` (a time event).
    The workflow ID should be ``{instrument_id}:{version}`` so that two
    events cannot race on the same version.
    """

    version: InstrumentVersion
    fixings: FixingTable
    request: ElectionRequest | None = None
    time: Any = None

    def __post_init__(self) -> None:
        if (self.request is None) == (self.time is None):
            raise TypeError("LifecycleInput must have exactly one of request or time")


@final
@dataclass(frozen=True, slots=True)
class LifecycleOutput:
    instrument_id: str
    status: LifecycleStatus
    effect: Effect | None = None
    version: InstrumentVersion | None = None
    error: str | None = None
