"""In-memory VersionStore.

Test double and single-process default; lets the suite and the worker run
without a database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, final

from contingent.core.errors import PersistenceError
from contingent.core.result import Err, Ok
from contingent.core.types import UtcDatetime

if TYPE_CHECKING:
    from contingent.lifecycle.version import InstrumentVersion


def _persistence_error(operation: str, detail: str) -> PersistenceError:
    return PersistenceError(
        message=detail,
        code="PERSISTENCE_ERROR",
        timestamp=UtcDatetime.now(),
        source=f"memory_adapter.{operation}",
        operation=operation,
    )


@final
class InMemoryVersionStore:
    """Versions keyed by (instrument_id, version), plus per-instrument order."""

    def __init__(self) -> None:
        self._versions: dict[tuple[str, str], InstrumentVersion] = {}
        self._chains: dict[str, list[str]] = {}

    def store(
        self, version: InstrumentVersion,
    ) -> Ok[str] | Err[PersistenceError]:
        """Store. Idempotent: a known (instrument_id, version) is a no-op."""
        key = (version.instrument_id, version.version)
        if key not in self._versions:
            self._versions[key] = version
            self._chains.setdefault(version.instrument_id, []).append(version.version)
        return Ok(version.version)

    def retrieve(
        self, instrument_id: str, version: str,
    ) -> Ok[InstrumentVersion] | Err[PersistenceError]:
        found = self._versions.get((instrument_id, version))
        if found is None:
            return Err(_persistence_error(
                "retrieve", f"Version not found: {instrument_id}@{version}",
            ))
        return Ok(found)

    def exists(
        self, instrument_id: str, version: str,
    ) -> Ok[bool] | Err[PersistenceError]:
        return Ok((instrument_id, version) in self._versions)

    def latest(
        self, instrument_id: str,
    ) -> Ok[InstrumentVersion] | Err[PersistenceError]:
        chain = self._chains.get(instrument_id)
        if not chain:
            return Err(_persistence_error(
                "latest", f"No versions stored for instrument: {instrument_id}",
            ))
        return Ok(self._versions[(instrument_id, chain[-1])])

    def count(self) -> int:
        """Test-only helper."""
        return len(self._versions)

    def versions_of(self, instrument_id: str) -> tuple[str, ...]:
        """Test-only helper: version keys in storage order."""
        return tuple(self._chains.get(instrument_id, ()))
