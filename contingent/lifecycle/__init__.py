"""contingent.lifecycle — event application, effects and instrument versions."""

from contingent.lifecycle.effect import AssetQuantity as AssetQuantity
from contingent.lifecycle.effect import Effect as Effect
from contingent.lifecycle.effect import SplitPending as SplitPending
from contingent.lifecycle.effect import assemble_effect as assemble_effect
from contingent.lifecycle.effect import split_pending as split_pending
from contingent.lifecycle.engine import elect as elect
from contingent.lifecycle.engine import lifecycle as lifecycle
from contingent.lifecycle.engine import step as step
from contingent.lifecycle.events import Election as Election
from contingent.lifecycle.events import Event as Event
from contingent.lifecycle.events import LifecycleResult as LifecycleResult
from contingent.lifecycle.events import Pending as Pending
from contingent.lifecycle.events import TimeEvent as TimeEvent
from contingent.lifecycle.version import ElectionOutcome as ElectionOutcome
from contingent.lifecycle.version import ElectionRequest as ElectionRequest
from contingent.lifecycle.version import InstrumentVersion as InstrumentVersion
from contingent.lifecycle.version import TimeEventOutcome as TimeEventOutcome
from contingent.lifecycle.version import apply_election as apply_election
from contingent.lifecycle.version import apply_time_event as apply_time_event
from contingent.lifecycle.version import create_instrument as create_instrument
from contingent.lifecycle.version import replay as replay
from contingent.lifecycle.version import version_id as version_id
