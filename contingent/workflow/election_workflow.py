"""Durable workflow applying one lifecycle event to one instrument version.

Steps: apply (election or time event) -> store the minted version, if any.

Determinism contract: this module contains NO I/O, NO randomness, NO system
clock access, NO mutable globals. All external interaction is delegated to
Activities.
"""

from __future__ import annotations

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from contingent.lifecycle.effect import Effect
    from contingent.lifecycle.version import InstrumentVersion
    from contingent.workflow.activities import (
        VersionStoreActivities,
        apply_election_activity,
        apply_time_event_activity,
    )
    from contingent.workflow.types import (
        ElectionInput,
        LifecycleInput,
        LifecycleOutput,
        LifecycleStatus,
        TimeEventInput,
    )

APPLY_RETRY = RetryPolicy(maximum_attempts=1)

STORE_RETRY = RetryPolicy(
    initial_interval=timedelta(seconds=1),
    backoff_coefficient=2.0,
    maximum_interval=timedelta(seconds=10),
    maximum_attempts=3,
)


@workflow.defn(name="InstrumentLifecycle")
class InstrumentLifecycleWorkflow:
    """Apply one election or time event and persist the result.

    Invariants maintained:
    - Every run reaches exactly one terminal LifecycleStatus
    - A version is stored only after the event was applied successfully
    - The workflow is deterministic under Temporal replay
    """

    def __init__(self) -> None:
        self._status: str = "RECEIVED"

    @workflow.query
    def get_status(self) -> str:
        return self._status

    @workflow.run
    async def run(self, inp: LifecycleInput) -> LifecycleOutput:
        instrument_id = inp.version.instrument_id
        effect: Effect | None
        new_version: InstrumentVersion | None

        if inp.request is not None:
            self._status = "ELECTING"
            workflow.logger.info("Election %r on %s", inp.request.tag, instrument_id)
            elected = await workflow.execute_activity(
                apply_election_activity,
                ElectionInput(version=inp.version, request=inp.request, fixings=inp.fixings),
                start_to_close_timeout=timedelta(seconds=30),
                retry_policy=APPLY_RETRY,
            )
            if elected.outcome is None:
                return self._failed(instrument_id, elected.error)
            effect, new_version = elected.outcome.effect, elected.outcome.version
        else:
            self._status = "ADVANCING"
            workflow.logger.info("Time event %s on %s", inp.time, instrument_id)
            advanced = await workflow.execute_activity(
                apply_time_event_activity,
                TimeEventInput(version=inp.version, time=inp.time, fixings=inp.fixings),
                start_to_close_timeout=timedelta(seconds=30),
                retry_policy=APPLY_RETRY,
            )
            if advanced.outcome is None:
                return self._failed(instrument_id, advanced.error)
            effect, new_version = advanced.outcome.effect, advanced.outcome.version

        if new_version is not None:
            self._status = "STORING"
            await workflow.execute_activity_method(
                VersionStoreActivities.store_version,
                new_version,
                start_to_close_timeout=timedelta(seconds=10),
                retry_policy=STORE_RETRY,
            )
            status = LifecycleStatus.VERSIONED
        elif effect is None:
            status = LifecycleStatus.NO_CHANGE
        else:
            status = LifecycleStatus.DISCHARGED

        self._status = status.value
        workflow.logger.info("%s finished: %s", instrument_id, status.value)
        return LifecycleOutput(
            instrument_id=instrument_id,
            status=status,
            effect=effect,
            version=new_version,
        )

    def _failed(self, instrument_id: str, error: str | None) -> LifecycleOutput:
        self._status = LifecycleStatus.FAILED.value
        workflow.logger.warning("%s failed: %s", instrument_id, error)
        return LifecycleOutput(
            instrument_id=instrument_id,
            status=LifecycleStatus.FAILED,
            error=error,
        )
