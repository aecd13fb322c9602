"""Storage protocol for instrument versions.

The engine never persists anything; orchestration code stores the versions
it mints through this protocol. All methods return Ok[T] | Err[PersistenceError].
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from contingent.core.errors import PersistenceError
from contingent.core.result import Err, Ok

if TYPE_CHECKING:
    from contingent.lifecycle.version import InstrumentVersion


@runtime_checkable
class VersionStore(Protocol):
    """Content-addressed store of InstrumentVersions.

    Invariants:
      - store() is idempotent: storing the same (instrument_id, version)
        twice keeps the first copy and returns the same key.
      - retrieve() returns Err if the version is not found.
      - latest() is the most recently stored version of an instrument.
    """

    def store(
        self, version: InstrumentVersion,
    ) -> Ok[str] | Err[PersistenceError]: ...

    def retrieve(
        self, instrument_id: str, version: str,
    ) -> Ok[InstrumentVersion] | Err[PersistenceError]: ...

    def exists(
        self, instrument_id: str, version: str,
    ) -> Ok[bool] | Err[PersistenceError]: ...

    def latest(
        self, instrument_id: str,
    ) -> Ok[InstrumentVersion] | Err[PersistenceError]: ...
