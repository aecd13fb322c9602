"""Claim algebra — the recursive contract tree.

Claim = Zero | One | Give | And | Or | Cond | Scale | When | Anytime | Until.

Nodes are frozen dataclasses: equality is structural and every
transformation builds a new tree. Leaf parameters are generic (time ``T``,
asset ``A``, observable id ``O`` via the predicates and observations);
quantities are Decimal.

The node classes accept any well-typed children. The smart constructors
``and_``/``all_of`` and ``or_``/``any_of`` normalize: nested And/Or are
flattened one level, Zero is dropped from And, and insertion order is kept.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, final

from contingent.claims.inequality import Inequality
from contingent.claims.observation import Observation
from contingent.core.errors import ConstructionError
from contingent.core.result import Err, Ok
from contingent.core.types import UtcDatetime

# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class Zero:
    """No obligation."""


@final
@dataclass(frozen=True, slots=True)
class One[A]:
    """Unconditional obligation to receive one unit of ``asset``."""

    asset: A


@final
@dataclass(frozen=True, slots=True)
class Give:
    """The sub-claim from the counterparty's perspective."""

    claim: Claim


@final
@dataclass(frozen=True, slots=True)
class And:
    """All sub-claims at once. At least two children."""

    claims: tuple[Claim, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.claims, tuple) or len(self.claims) < 2:
            raise TypeError(
                f"And requires a tuple of at least 2 claims, got {self.claims!r}"
            )


@final
@dataclass(frozen=True, slots=True)
class Or:
    """Exactly one tagged alternative, chosen by an election. At least two."""

    alternatives: tuple[tuple[str, Claim], ...]

    def __post_init__(self) -> None:
        if not isinstance(self.alternatives, tuple) or len(self.alternatives) < 2:
            raise TypeError("Or: at least 2 choices required")

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(tag for tag, _ in self.alternatives)


@final
@dataclass(frozen=True, slots=True)
class Cond:
    """``then`` if the predicate holds now, else ``otherwise``."""

    predicate: Inequality
    then: Claim
    otherwise: Claim


@final
@dataclass(frozen=True, slots=True)
class Scale:
    """The sub-claim with every quantity multiplied by ``observation``."""

    observation: Observation
    claim: Claim


@final
@dataclass(frozen=True, slots=True)
class When:
    """The sub-claim, acquired the first time the predicate holds."""

    predicate: Inequality
    claim: Claim


@final
@dataclass(frozen=True, slots=True)
class Anytime:
    """Standing option: electable under ``tag`` whenever the predicate holds."""

    predicate: Inequality
    tag: str
    claim: Claim


@final
@dataclass(frozen=True, slots=True)
class Until:
    """The sub-claim, knocked out once the predicate holds.

    Knock-out drops only the remaining tree: whatever the sub-claim realized
    in the knock-out step itself is still paid.
    """

    predicate: Inequality
    claim: Claim


type Claim = (
    Zero | One[Any] | Give | And | Or | Cond | Scale | When | Anytime | Until
)

type Alternative = tuple[str, Claim]

ZERO = Zero()


def is_zero(claim: Claim) -> bool:
    return isinstance(claim, Zero)


# ---------------------------------------------------------------------------
# Smart constructors
# ---------------------------------------------------------------------------


def all_of(claims: Iterable[Claim]) -> Claim:
    """Bulk ``and``: one flat And over ``claims``.

    Linear in the number of immediate operands: And operands are spliced
    (one level), Zero operands are dropped. Zero if nothing remains, the
    single operand if one remains.
    """
    flat: list[Claim] = []
    for c in claims:
        match c:
            case Zero():
                continue
            case And(claims=children):
                flat.extend(children)
            case _:
                flat.append(c)
    if not flat:
        return ZERO
    if len(flat) == 1:
        return flat[0]
    return And(claims=tuple(flat))


def and_(lhs: Claim, rhs: Claim) -> Claim:
    """Pairwise ``and``; Zero is the identity on both sides."""
    return all_of((lhs, rhs))


def any_of(options: Iterable[Alternative | Or]) -> Ok[Or] | Err[ConstructionError]:
    """Bulk ``or``: one flat Or over tagged alternatives.

    Or operands are spliced one level. There is no identity element: fewer
    than two alternatives is a ConstructionError.
    """
    flat: list[Alternative] = []
    for option in options:
        match option:
            case Or(alternatives=alts):
                flat.extend(alts)
            case (str() as tag, claim):
                flat.append((tag, claim))
            case _:
                return Err(_construction_error(
                    f"Or alternative must be (tag, claim) or Or, got {option!r}",
                ))
    if len(flat) < 2:
        return Err(_construction_error(
            f"at least 2 choices required, got {len(flat)}",
        ))
    return Ok(Or(alternatives=tuple(flat)))


def or_(lhs: Alternative | Or, rhs: Alternative | Or) -> Ok[Or] | Err[ConstructionError]:
    """Pairwise ``or``."""
    return any_of((lhs, rhs))


def _construction_error(message: str) -> ConstructionError:
    return ConstructionError(
        message=message,
        code="CONSTRUCTION_ERROR",
        timestamp=UtcDatetime.now(),
        source="claims.claim.any_of",
        node="Or",
    )
