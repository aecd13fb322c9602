"""Tests for contingent.workflow.types — activity and workflow payloads."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from contingent.claims.builders import european
from contingent.claims.claim import One
from contingent.core.result import unwrap
from contingent.lifecycle.version import (
    ElectionRequest,
    InstrumentVersion,
    TimeEventOutcome,
    create_instrument,
)
from contingent.oracle.fixings import FixingTable
from contingent.workflow.types import (
    ElectionOutput,
    LifecycleInput,
    LifecycleOutput,
    LifecycleStatus,
    TimeEventOutput,
)

D1 = date(2025, 3, 20)
D2 = date(2025, 6, 20)


def _version() -> InstrumentVersion:
    return unwrap(create_instrument("OPT-1", european(D2, One(asset="USD")), D1))


def _request() -> ElectionRequest:
    return unwrap(ElectionRequest.create(
        elector="HOLDER", counterparty="WRITER", elector_is_owner=True,
        tag="EXERCISE", amount=Decimal("1"), time=D2,
    ))


class TestLifecycleInput:
    def test_election(self) -> None:
        inp = LifecycleInput(version=_version(), fixings=FixingTable.empty(), request=_request())
        assert inp.time is None

    def test_time_event(self) -> None:
        inp = LifecycleInput(version=_version(), fixings=FixingTable.empty(), time=D2)
        assert inp.request is None

    def test_needs_exactly_one_event(self) -> None:
        with pytest.raises(TypeError):
            LifecycleInput(version=_version(), fixings=FixingTable.empty())
        with pytest.raises(TypeError):
            LifecycleInput(
                version=_version(), fixings=FixingTable.empty(), request=_request(), time=D2,
            )


class TestOutputs:
    def test_election_output_exactly_one(self) -> None:
        assert ElectionOutput(error="boom").outcome is None
        with pytest.raises(TypeError):
            ElectionOutput()

    def test_time_event_output_exactly_one(self) -> None:
        out = TimeEventOutput(outcome=TimeEventOutcome(effect=None, version=None))
        assert out.error is None
        with pytest.raises(TypeError):
            TimeEventOutput(outcome=TimeEventOutcome(effect=None, version=None), error="boom")

    def test_lifecycle_output_defaults(self) -> None:
        out = LifecycleOutput(instrument_id="OPT-1", status=LifecycleStatus.NO_CHANGE)
        assert out.effect is None
        assert out.version is None
        assert out.error is None

    def test_status_values(self) -> None:
        assert [s.value for s in LifecycleStatus] == [
            "Versioned", "Discharged", "NoChange", "Failed",
        ]
