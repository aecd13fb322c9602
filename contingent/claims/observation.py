"""Observation expressions — arithmetic over time-varying named values.

Observation = Const | Observe | Arithmetic.

An Observation is data, not a function: it is evaluated at a query time
against an oracle. Evaluation is total only where the oracle is total;
there is no default or interpolation policy at this layer.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from decimal import Decimal, DivisionByZero, InvalidOperation, Overflow, localcontext
from enum import Enum
from typing import Any, final

from contingent.core.errors import EvaluationError, EvaluationFailure
from contingent.core.numeric import CONTINGENT_DECIMAL_CONTEXT, is_finite_decimal
from contingent.core.result import Err, Ok
from contingent.core.types import UtcDatetime
from contingent.oracle.protocols import Oracle


class ArithmeticOp(Enum):
    """Binary operators available inside an Observation."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


@final
@dataclass(frozen=True, slots=True)
class Const:
    """A constant value, independent of time."""

    value: Decimal

    def __post_init__(self) -> None:
        if not is_finite_decimal(self.value):
            raise TypeError(f"Const.value must be finite Decimal, got {self.value!r}")


@final
@dataclass(frozen=True, slots=True)
class Observe[O]:
    """The value of observable ``key`` at the query time."""

    key: O


@final
@dataclass(frozen=True, slots=True)
class Arithmetic:
    """``lhs <op> rhs``, both sides evaluated at the same query time."""

    op: ArithmeticOp
    lhs: Observation
    rhs: Observation

    def __post_init__(self) -> None:
        if not isinstance(self.op, ArithmeticOp):
            raise TypeError(
                f"Arithmetic.op must be ArithmeticOp, got {type(self.op).__name__}"
            )


type Observation = Const | Observe[Any] | Arithmetic


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def const(value: Decimal | int | str) -> Const:
    """Const from a Decimal, int, or decimal string (never a float)."""
    return Const(value=Decimal(value))


def add(lhs: Observation, rhs: Observation) -> Arithmetic:
    return Arithmetic(op=ArithmeticOp.ADD, lhs=lhs, rhs=rhs)


def sub(lhs: Observation, rhs: Observation) -> Arithmetic:
    return Arithmetic(op=ArithmeticOp.SUB, lhs=lhs, rhs=rhs)


def mul(lhs: Observation, rhs: Observation) -> Arithmetic:
    return Arithmetic(op=ArithmeticOp.MUL, lhs=lhs, rhs=rhs)


def div(lhs: Observation, rhs: Observation) -> Arithmetic:
    return Arithmetic(op=ArithmeticOp.DIV, lhs=lhs, rhs=rhs)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def _apply(op: ArithmeticOp, x: Decimal, y: Decimal) -> Decimal:
    match op:
        case ArithmeticOp.ADD:
            return x + y
        case ArithmeticOp.SUB:
            return x - y
        case ArithmeticOp.MUL:
            return x * y
        case ArithmeticOp.DIV:
            return x / y


def evaluate(
    oracle: Oracle, observation: Observation, time: Any,
) -> Ok[Decimal] | Err[EvaluationFailure]:
    """Value of ``observation`` at ``time``.

    Const returns immediately; Observe asks the oracle; Arithmetic evaluates
    both sides then combines them under CONTINGENT_DECIMAL_CONTEXT.
    A MissingObservationError from the oracle is propagated unchanged.
    """
    match observation:
        case Const(value=v):
            return Ok(v)
        case Observe(key=k):
            return oracle.observe(k, time)
        case Arithmetic(op=op, lhs=lhs, rhs=rhs):
            match evaluate(oracle, lhs, time):
                case Err() as e:
                    return e
                case Ok(x):
                    pass
            match evaluate(oracle, rhs, time):
                case Err() as e:
                    return e
                case Ok(y):
                    pass
            try:
                with localcontext(CONTINGENT_DECIMAL_CONTEXT):
                    return Ok(_apply(op, x, y))
            except (DivisionByZero, InvalidOperation, Overflow) as exc:
                return Err(EvaluationError(
                    message=f"Cannot evaluate {x} {op.value} {y}: {type(exc).__name__}",
                    code="EVALUATION_ERROR",
                    timestamp=UtcDatetime.now(),
                    source="claims.observation.evaluate",
                    expression=render_observation(observation),
                ))
    raise TypeError(f"Not an Observation: {type(observation).__name__}")


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def map_observation(observation: Observation, map_key: Callable[[Any], Any]) -> Observation:
    """Re-target every Observe key; tree shape and constants unchanged."""
    match observation:
        case Const():
            return observation
        case Observe(key=k):
            return Observe(key=map_key(k))
        case Arithmetic(op=op, lhs=lhs, rhs=rhs):
            return Arithmetic(
                op=op,
                lhs=map_observation(lhs, map_key),
                rhs=map_observation(rhs, map_key),
            )
    raise TypeError(f"Not an Observation: {type(observation).__name__}")


def observation_keys(observation: Observation) -> Iterator[Any]:
    """Observable keys in left-to-right order (duplicates included)."""
    match observation:
        case Observe(key=k):
            yield k
        case Arithmetic(lhs=lhs, rhs=rhs):
            yield from observation_keys(lhs)
            yield from observation_keys(rhs)
        case _:
            return


def render_observation(observation: Observation) -> str:
    """Deterministic infix rendering, fully parenthesized."""
    match observation:
        case Const(value=v):
            return str(v)
        case Observe(key=k):
            return f"Observe({k!s})"
        case Arithmetic(op=op, lhs=lhs, rhs=rhs):
            return f"({render_observation(lhs)} {op.value} {render_observation(rhs)})"
    raise TypeError(f"Not an Observation: {type(observation).__name__}")
