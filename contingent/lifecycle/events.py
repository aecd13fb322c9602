"""Lifecycle inputs and outputs.

Event = TimeEvent | Election. Both advance the clock; an Election also
resolves the Or/Anytime alternatives tagged with its tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, final

from contingent.claims.claim import Claim


@final
@dataclass(frozen=True, slots=True)
class TimeEvent[T]:
    """The passage of time up to ``time``; no discretionary choice."""

    time: T


@final
@dataclass(frozen=True, slots=True)
class Election[T]:
    """A discretionary choice of the alternative tagged ``tag``.

    elector_is_owner is True when the holder of the claim elects, False
    when the counterparty does.
    """

    time: T
    tag: str
    elector_is_owner: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.tag, str) or not self.tag:
            raise TypeError(f"Election.tag must be a non-empty str, got {self.tag!r}")


type Event = TimeEvent[Any] | Election[Any]


@final
@dataclass(frozen=True, slots=True)
class Pending[T, A]:
    """A realized obligation fragment.

    ``amount`` is signed from the holder's perspective: positive is
    received, negative is delivered. ``time`` is the effective (acquisition)
    time of the fragment.
    """

    time: T
    asset: A
    amount: Decimal


@final
@dataclass(frozen=True, slots=True)
class LifecycleResult:
    """``remaining`` is None iff the tree is fully discharged."""

    remaining: Claim | None
    pending: tuple[Pending[Any, Any], ...]

    @property
    def is_discharged(self) -> bool:
        return self.remaining is None
