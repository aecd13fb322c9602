"""Activity implementations for the instrument lifecycle workflow.

Activities are thin wrappers. All domain logic lives in the pure
contingent.lifecycle layer; an activity unpacks its input, calls it, and
turns an Err into an error string on its output.

Each activity:
- Is decorated with @activity.defn
- Takes a single frozen-dataclass input
- Returns a frozen-dataclass output (with optional error field)
- Is idempotent (same input -> same output)
"""

from __future__ import annotations

from typing import final

from temporalio import activity

from contingent.core.errors import ContingentError
from contingent.core.result import Err, Ok
from contingent.infra.protocols import VersionStore
from contingent.lifecycle.version import InstrumentVersion, apply_election, apply_time_event
from contingent.workflow.types import (
    ElectionInput,
    ElectionOutput,
    TimeEventInput,
    TimeEventOutput,
)


def _describe(error: ContingentError) -> str:
    return f"{error.code}: {error.message}"


@activity.defn(name="apply_election")
async def apply_election_activity(inp: ElectionInput) -> ElectionOutput:
    """Apply one election against the fixings shipped with the input.

    Timeout: 30s | Retries: 1 (deterministic: a failure repeats)
    """
    activity.logger.info(
        "Applying election %r to %s@%s",
        inp.request.tag, inp.version.instrument_id, inp.version.version[:12],
    )
    match apply_election(inp.version, inp.request, inp.fixings):
        case Err(e):
            activity.logger.warning(
                "Election %r rejected for %s: %s",
                inp.request.tag, inp.version.instrument_id, e.code,
            )
            return ElectionOutput(error=_describe(e))
        case Ok(outcome):
            return ElectionOutput(outcome=outcome)


@activity.defn(name="apply_time_event")
async def apply_time_event_activity(inp: TimeEventInput) -> TimeEventOutput:
    """Advance a version to ``inp.time``.

    Timeout: 30s | Retries: 1
    """
    activity.logger.info(
        "Advancing %s@%s to %s",
        inp.version.instrument_id, inp.version.version[:12], inp.time,
    )
    match apply_time_event(inp.version, inp.fixings, inp.time):
        case Err(e):
            activity.logger.warning(
                "Time event %s failed for %s: %s",
                inp.time, inp.version.instrument_id, e.code,
            )
            return TimeEventOutput(error=_describe(e))
        case Ok(outcome):
            return TimeEventOutput(outcome=outcome)


@final
class VersionStoreActivities:
    """Activities bound to a VersionStore."""

    def __init__(self, store: VersionStore) -> None:
        self._store = store

    @activity.defn(name="store_version")
    async def store_version(self, version: InstrumentVersion) -> str:
        """Persist a minted version; idempotent on (instrument_id, version).

        Timeout: 10s | Retries: 3 (exponential backoff)
        """
        activity.logger.info(
            "Storing %s@%s", version.instrument_id, version.version[:12],
        )
        match self._store.store(version):
            case Err(e):
                raise RuntimeError(_describe(e))
            case Ok(key):
                return key
