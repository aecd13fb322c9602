"""Inequality — boolean predicates over time and observations.

Inequality = Lte | TimeGte | TimeLte.

The engine assumes predicates guarding When/Until are monotonic in time
for well-formed instruments: once true they stay true.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, final

from contingent.claims.observation import (
    Observation,
    evaluate,
    map_observation,
    observation_keys,
    render_observation,
)
from contingent.core.errors import EvaluationFailure
from contingent.core.result import Err, Ok
from contingent.oracle.protocols import Oracle


@final
@dataclass(frozen=True, slots=True)
class Lte:
    """``lhs <= rhs``, both observed at the query time."""

    lhs: Observation
    rhs: Observation


@final
@dataclass(frozen=True, slots=True)
class TimeGte[T]:
    """True at and after ``time``."""

    time: T


@final
@dataclass(frozen=True, slots=True)
class TimeLte[T]:
    """True at and before ``time``."""

    time: T


type Inequality = Lte | TimeGte[Any] | TimeLte[Any]


def compare(
    oracle: Oracle, inequality: Inequality, time: Any,
) -> Ok[bool] | Err[EvaluationFailure]:
    """Truth value of ``inequality`` at ``time``.

    Time predicates never consult the oracle.
    """
    match inequality:
        case TimeGte(time=s):
            return Ok(time >= s)
        case TimeLte(time=s):
            return Ok(s >= time)
        case Lte(lhs=lhs, rhs=rhs):
            match evaluate(oracle, lhs, time):
                case Err() as e:
                    return e
                case Ok(x):
                    pass
            match evaluate(oracle, rhs, time):
                case Err() as e:
                    return e
                case Ok(y):
                    return Ok(x <= y)
    raise TypeError(f"Not an Inequality: {type(inequality).__name__}")


def map_inequality(
    inequality: Inequality,
    map_time: Callable[[Any], Any],
    map_key: Callable[[Any], Any],
) -> Inequality:
    """Rewrite the time and observable parameters of a predicate."""
    match inequality:
        case TimeGte(time=s):
            return TimeGte(time=map_time(s))
        case TimeLte(time=s):
            return TimeLte(time=map_time(s))
        case Lte(lhs=lhs, rhs=rhs):
            return Lte(lhs=map_observation(lhs, map_key), rhs=map_observation(rhs, map_key))
    raise TypeError(f"Not an Inequality: {type(inequality).__name__}")


def inequality_times(inequality: Inequality) -> Iterator[Any]:
    """Absolute times mentioned by the predicate (at most one)."""
    match inequality:
        case TimeGte(time=s) | TimeLte(time=s):
            yield s
        case _:
            return


def inequality_keys(inequality: Inequality) -> Iterator[Any]:
    match inequality:
        case Lte(lhs=lhs, rhs=rhs):
            yield from observation_keys(lhs)
            yield from observation_keys(rhs)
        case _:
            return


def render_inequality(inequality: Inequality) -> str:
    match inequality:
        case TimeGte(time=s):
            return f"t >= {s!s}"
        case TimeLte(time=s):
            return f"t <= {s!s}"
        case Lte(lhs=lhs, rhs=rhs):
            return f"{render_observation(lhs)} <= {render_observation(rhs)}"
    raise TypeError(f"Not an Inequality: {type(inequality).__name__}")
