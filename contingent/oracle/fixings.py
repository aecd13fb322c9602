"""FixingTable — immutable in-memory oracle of published fixings.

Backed by a FrozenMap keyed by (observable, time), so a table has a
canonical encoding and can be shipped through the workflow converter.
Lookups are exact: no interpolation, no nearest-date fallback.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, final

from contingent.core.errors import MissingObservationError
from contingent.core.numeric import is_finite_decimal
from contingent.core.result import Err, Ok
from contingent.core.types import FrozenMap
from contingent.oracle.protocols import missing_observation


@final
@dataclass(frozen=True, slots=True)
class FixingTable:
    """Published values of named observables at given times."""

    fixings: FrozenMap[tuple[Any, Any], Decimal]

    @staticmethod
    def create(
        entries: dict[tuple[Any, Any], Decimal] | Iterable[tuple[tuple[Any, Any], Decimal]],
    ) -> Ok[FixingTable] | Err[str]:
        """Build a table from ((key, time), value) entries.

        Values must be finite Decimals; keys must be mutually comparable.
        """
        items = list(entries.items() if isinstance(entries, dict) else entries)
        for (key, time), value in items:
            if not is_finite_decimal(value):
                return Err(f"FixingTable: value for ({key}, {time}) must be finite Decimal, "
                           f"got {value!r}")
        match FrozenMap.create(items):
            case Err(e):
                return Err(f"FixingTable: {e}")
            case Ok(fm):
                return Ok(FixingTable(fixings=fm))

    @staticmethod
    def empty() -> FixingTable:
        return FixingTable(fixings=FrozenMap.EMPTY)

    def with_fixing(self, key: Any, time: Any, value: Decimal) -> Ok[FixingTable] | Err[str]:
        """Return a new table with one more (or one replaced) fixing."""
        merged = dict(self.fixings.items())
        merged[(key, time)] = value
        return FixingTable.create(merged)

    def observe(
        self, key: Any, time: Any,
    ) -> Ok[Decimal] | Err[MissingObservationError]:
        value = self.fixings.get((key, time))
        if value is None:
            return Err(missing_observation(key, time, "oracle.fixings.FixingTable.observe"))
        return Ok(value)

    def __len__(self) -> int:
        return len(self.fixings)
