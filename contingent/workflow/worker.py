"""Worker for the instrument lifecycle workflow.

Starts a Temporal worker with InstrumentLifecycleWorkflow and its
activities registered on the configured task queue.

Usage::

    import asyncio
    from contingent.workflow.worker import run_worker

    asyncio.run(run_worker())
"""

from __future__ import annotations

from temporalio.client import Client
from temporalio.worker import Worker

from contingent.infra.config import WorkerConfig
from contingent.infra.memory_adapter import InMemoryVersionStore
from contingent.infra.protocols import VersionStore
from contingent.workflow.activities import (
    VersionStoreActivities,
    apply_election_activity,
    apply_time_event_activity,
)
from contingent.workflow.election_workflow import InstrumentLifecycleWorkflow


def build_worker(client: Client, task_queue: str, store: VersionStore) -> Worker:
    """Worker with the lifecycle workflow and all activities registered."""
    storage = VersionStoreActivities(store)
    return Worker(
        client,
        task_queue=task_queue,
        workflows=[InstrumentLifecycleWorkflow],
        activities=[
            apply_election_activity,
            apply_time_event_activity,
            storage.store_version,
        ],
    )


async def run_worker(
    config: WorkerConfig | None = None,
    store: VersionStore | None = None,
) -> None:
    """Connect to Temporal and run the worker until interrupted."""
    from contingent.workflow.converter import CONTINGENT_DATA_CONVERTER

    cfg = config if config is not None else WorkerConfig()
    client = await Client.connect(
        cfg.target_host, namespace=cfg.namespace,
        data_converter=CONTINGENT_DATA_CONVERTER,
    )
    worker = build_worker(
        client, cfg.task_queue, store if store is not None else InMemoryVersionStore(),
    )
    await worker.run()
