"""contingent.workflow — Temporal orchestration of instrument lifecycle events."""

from contingent.workflow.types import ElectionInput as ElectionInput
from contingent.workflow.types import ElectionOutput as ElectionOutput
from contingent.workflow.types import LifecycleInput as LifecycleInput
from contingent.workflow.types import LifecycleOutput as LifecycleOutput
from contingent.workflow.types import LifecycleStatus as LifecycleStatus
from contingent.workflow.types import TimeEventInput as TimeEventInput
from contingent.workflow.types import TimeEventOutput as TimeEventOutput
