"""Engine and worker configuration.

Pure configuration data; nothing here opens a connection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

TASK_QUEUE_LIFECYCLE: str = "contingent-lifecycle"


@final
@dataclass(frozen=True, slots=True)
class LifecycleConfig:
    """Knobs of the election-driven engine.

    max_elections_per_call: elections accepted by one ``elect`` call.
    verify_replay: re-derive the stored tree from its history before
        applying a new event to a version.
    """

    max_elections_per_call: int = 1
    verify_replay: bool = True

    def __post_init__(self) -> None:
        if self.max_elections_per_call < 1:
            raise TypeError(
                f"max_elections_per_call must be >= 1, got {self.max_elections_per_call}"
            )


@final
@dataclass(frozen=True, slots=True)
class WorkerConfig:
    """Temporal connection settings for the lifecycle worker."""

    target_host: str = "localhost:7233"
    namespace: str = "default"
    task_queue: str = TASK_QUEUE_LIFECYCLE
