"""Effect assembly — package a reduction for settlement.

split_pending turns signed Pending fragments into what the elector delivers
(consumed) and what the elector receives (produced). Effect ties those
quantities to the instrument versions before and after the event.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, final

from contingent.lifecycle.events import LifecycleResult, Pending


@final
@dataclass(frozen=True, slots=True)
class AssetQuantity[A]:
    """A strictly positive quantity of one asset."""

    asset: A
    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal) or not self.amount > 0:
            raise TypeError(f"AssetQuantity.amount must be Decimal > 0, got {self.amount!r}")


@final
@dataclass(frozen=True, slots=True)
class SplitPending:
    consumed: tuple[AssetQuantity[Any], ...]
    produced: tuple[AssetQuantity[Any], ...]


def split_pending(
    pending: Iterable[Pending[Any, Any]], elector_is_owner: bool = True,
) -> SplitPending:
    """Partition realized fragments from the elector's point of view.

    Pending amounts are signed from the holder's side; a counterparty
    elector sees every sign flipped. Zero fragments are dropped and nothing
    is netted, so order and granularity follow the claim tree.
    """
    consumed: list[AssetQuantity[Any]] = []
    produced: list[AssetQuantity[Any]] = []
    for p in pending:
        amount = p.amount if elector_is_owner else -p.amount
        if amount > 0:
            produced.append(AssetQuantity(asset=p.asset, amount=amount))
        elif amount < 0:
            consumed.append(AssetQuantity(asset=p.asset, amount=-amount))
    return SplitPending(consumed=tuple(consumed), produced=tuple(produced))


@final
@dataclass(frozen=True, slots=True)
class Effect:
    """Settlement-facing record of one applied event.

    produced_instrument_version is None when the instrument was fully
    discharged (or nothing changed).
    """

    instrument_id: str
    target_instrument_version: str
    produced_instrument_version: str | None
    consumed: tuple[AssetQuantity[Any], ...]
    produced: tuple[AssetQuantity[Any], ...]
    settlement_time: Any

    @property
    def is_empty(self) -> bool:
        return not self.consumed and not self.produced


def assemble_effect(
    instrument_id: str,
    target_version: str,
    produced_version: str | None,
    result: LifecycleResult,
    settlement_time: Any,
    elector_is_owner: bool = True,
) -> Effect:
    split = split_pending(result.pending, elector_is_owner)
    return Effect(
        instrument_id=instrument_id,
        target_instrument_version=target_version,
        produced_instrument_version=produced_version,
        consumed=split.consumed,
        produced=split.produced,
        settlement_time=settlement_time,
    )
