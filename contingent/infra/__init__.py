"""contingent.infra — configuration, storage protocol and in-memory adapter."""

from contingent.infra.config import TASK_QUEUE_LIFECYCLE as TASK_QUEUE_LIFECYCLE
from contingent.infra.config import LifecycleConfig as LifecycleConfig
from contingent.infra.config import WorkerConfig as WorkerConfig
from contingent.infra.memory_adapter import InMemoryVersionStore as InMemoryVersionStore
from contingent.infra.protocols import VersionStore as VersionStore
