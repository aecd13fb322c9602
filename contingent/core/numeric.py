"""Decimal context and refined numeric types.

All claim arithmetic uses CONTINGENT_DECIMAL_CONTEXT with prec=28,
ROUND_HALF_EVEN, and traps for InvalidOperation/DivisionByZero/Overflow.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN as _ROUND_HALF_EVEN
from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)
from typing import final

from contingent.core.result import Err, Ok

CONTINGENT_DECIMAL_CONTEXT = Context(
    prec=28,
    rounding=_ROUND_HALF_EVEN,
    Emin=-999999,
    Emax=999999,
    capitals=1,
    clamp=0,
    flags=[],
    traps=[InvalidOperation, DivisionByZero, Overflow],
)


@final
@dataclass(frozen=True, slots=True)
class PositiveDecimal:
    """Decimal constrained to be > 0."""

    value: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal) or not (self.value > 0):
            raise TypeError(f"PositiveDecimal requires Decimal > 0, got {self.value!r}")

    @staticmethod
    def parse(raw: Decimal) -> Ok[PositiveDecimal] | Err[str]:
        if not isinstance(raw, Decimal):
            return Err(f"PositiveDecimal requires Decimal, got {type(raw).__name__}")
        if not raw.is_finite() or raw <= 0:
            return Err(f"PositiveDecimal requires finite > 0, got {raw}")
        return Ok(PositiveDecimal(value=raw))


def is_finite_decimal(value: object) -> bool:
    """True for a Decimal that is neither NaN nor infinite."""
    return isinstance(value, Decimal) and value.is_finite()
