"""Oracle protocol — the only source of market data the engine sees.

An oracle is a synchronous, side-effect-free function of (observable, time).
It is passed explicitly into every evaluation and lifecycle call; there is
no ambient market-data state anywhere in the core.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol, final, runtime_checkable

from contingent.core.errors import MissingObservationError
from contingent.core.result import Err, Ok
from contingent.core.types import UtcDatetime

type ObserveFn = Callable[[Any, Any], Ok[Decimal] | Err[MissingObservationError]]


@runtime_checkable
class Oracle(Protocol):
    """Market observation source.

    Invariants:
      - observe() is deterministic: the same (key, time) always yields the
        same value or the same Err.
      - observe() never substitutes a default for a missing value.
    """

    def observe(
        self, key: Any, time: Any,
    ) -> Ok[Decimal] | Err[MissingObservationError]: ...


@final
@dataclass(frozen=True, slots=True)
class FunctionOracle:
    """Adapts a plain ``(key, time) -> Result`` callable to the Oracle protocol."""

    fn: ObserveFn

    def observe(
        self, key: Any, time: Any,
    ) -> Ok[Decimal] | Err[MissingObservationError]:
        return self.fn(key, time)


def as_oracle(source: Oracle | ObserveFn) -> Oracle:
    """Accept either an Oracle or a bare observe callable."""
    if isinstance(source, Oracle):
        return source
    return FunctionOracle(fn=source)


def missing_observation(key: Any, time: Any, source: str) -> MissingObservationError:
    """Construct the standard MissingObservationError for (key, time)."""
    return MissingObservationError(
        message=f"No observation for {key!s} at {time!s}",
        code="MISSING_OBSERVATION",
        timestamp=UtcDatetime.now(),
        source=source,
        observable=str(key),
        as_of=str(time),
    )


@final
@dataclass(frozen=True, slots=True)
class EmptyOracle:
    """Oracle with no data. Any Observe fails; pure time predicates still work."""

    def observe(
        self, key: Any, time: Any,
    ) -> Ok[Decimal] | Err[MissingObservationError]:
        return Err(missing_observation(key, time, "oracle.protocols.EmptyOracle.observe"))
