"""Result[T, E] — error values instead of exceptions.

Every fallible function in the algebra and the engine returns Ok[T] | Err[E].
Callers branch with ``match``; nothing in the pure core raises for an
expected failure.

Methods: .map, .bind, .unwrap, .unwrap_or, .map_err.
Free functions: unwrap, sequence, traverse.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, NoReturn, final


@final
@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Success variant of Result."""

    value: T

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        """Apply f to the value, returning Ok(f(value))."""
        return Ok(f(self.value))

    def bind[U, E](self, f: Callable[[T], Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
        """Apply f to the value, where f itself returns a Result."""
        return f(self.value)

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        return self.value

    def map_err(self, f: Callable[[Any], Any]) -> Ok[T]:  # noqa: ARG002
        return self


@final
@dataclass(frozen=True, slots=True)
class Err[E]:
    """Error variant of Result."""

    error: E

    def map(self, f: Callable[[Any], Any]) -> Err[E]:  # noqa: ARG002
        return self

    def bind(self, f: Callable[[Any], Any]) -> Err[E]:  # noqa: ARG002
        """Short-circuits: f is never called."""
        return self

    def unwrap(self) -> NoReturn:
        """Raise RuntimeError — there is no value to return."""
        raise RuntimeError(f"Called unwrap on Err: {self.error}")

    def unwrap_or[T](self, default: T) -> T:
        return default

    def map_err[F](self, f: Callable[[E], F]) -> Err[F]:
        """Apply f to the error, returning Err(f(error))."""
        return Err(f(self.error))


type Result[T, E] = Ok[T] | Err[E]


def unwrap[T](result: Ok[T] | Err[Any]) -> T:
    """Extract Ok value or raise RuntimeError. Test/boundary code only."""
    if isinstance(result, Ok):
        return result.value
    if isinstance(result, Err):
        raise RuntimeError(f"unwrap on Err: {result.error}")
    raise TypeError(f"Expected Ok or Err, got {type(result).__name__}")


def sequence[T, E](results: Iterable[Ok[T] | Err[E]]) -> Ok[tuple[T, ...]] | Err[E]:
    """Collect Results into a Result of tuple. Short-circuits on first Err."""
    values: list[T] = []
    for r in results:
        if isinstance(r, Err):
            return r
        values.append(r.value)
    return Ok(tuple(values))


def traverse[A, T, E](
    items: Iterable[A], f: Callable[[A], Ok[T] | Err[E]],
) -> Ok[tuple[T, ...]] | Err[E]:
    """Map f over items, stopping at the first Err.

    Unlike ``sequence(map(f, items))`` this never calls f past a failure,
    which matters when f consults an oracle.
    """
    values: list[T] = []
    for item in items:
        match f(item):
            case Err() as e:
                return e
            case Ok(v):
                values.append(v)
    return Ok(tuple(values))
