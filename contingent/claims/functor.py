"""Generic traversal over the claim functor.

map_children applies a function to the immediate sub-claims of one node;
fold_claim is the catamorphism built on it. Every whole-tree traversal in
the package (map_params, the claim utilities) is a fold, so a new node
kind needs wiring in map_children only.

map_params re-targets a tree from one parameter space to another (calendar
dates to ledger timestamps, asset tickers to ledger ids) without touching
its shape.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, final

from contingent.claims.claim import (
    And,
    Anytime,
    Claim,
    Cond,
    Give,
    One,
    Or,
    Scale,
    Until,
    When,
    Zero,
)
from contingent.claims.inequality import map_inequality
from contingent.claims.observation import map_observation
from contingent.core.errors import MissingObservationError
from contingent.core.result import Err, Ok
from contingent.oracle.protocols import Oracle


def map_children(claim: Claim, f: Callable[[Any], Any]) -> Any:
    """Rebuild ``claim`` with ``f`` applied to each immediate sub-claim.

    Shape-preserving: And/Or are rebuilt directly, never re-normalized.
    Leaf parameters (assets, predicates, observations, tags) are untouched.
    """
    match claim:
        case Zero() | One():
            return claim
        case Give(claim=c):
            return Give(claim=f(c))
        case And(claims=cs):
            return And(claims=tuple(f(c) for c in cs))
        case Or(alternatives=alts):
            return Or(alternatives=tuple((tag, f(c)) for tag, c in alts))
        case Cond(predicate=p, then=t, otherwise=e):
            return Cond(predicate=p, then=f(t), otherwise=f(e))
        case Scale(observation=o, claim=c):
            return Scale(observation=o, claim=f(c))
        case When(predicate=p, claim=c):
            return When(predicate=p, claim=f(c))
        case Anytime(predicate=p, tag=tag, claim=c):
            return Anytime(predicate=p, tag=tag, claim=f(c))
        case Until(predicate=p, claim=c):
            return Until(predicate=p, claim=f(c))
    raise TypeError(f"Not a Claim: {type(claim).__name__}")


def fold_claim[R](claim: Claim, algebra: Callable[[Any], R]) -> R:
    """Catamorphism: fold the tree bottom-up.

    ``algebra`` receives a node whose sub-claims have already been replaced
    by their folded results (e.g. ``Give(claim=r)`` with ``r: R``).
    """
    return algebra(map_children(claim, lambda c: fold_claim(c, algebra)))


def _identity(x: Any) -> Any:
    return x


@final
@dataclass(frozen=True, slots=True)
class ParamMapping:
    """Four independent parameter maps.

    map_time:       source time -> target time (predicate leaves)
    unmap_time:     target time -> source time (query times sent to a source oracle)
    map_asset:      source asset -> target asset (One leaves)
    map_observable: source observable id -> target id (Observe leaves)
    """

    map_time: Callable[[Any], Any] = _identity
    unmap_time: Callable[[Any], Any] = _identity
    map_asset: Callable[[Any], Any] = _identity
    map_observable: Callable[[Any], Any] = _identity

    def claim(self, claim: Claim) -> Claim:
        return map_params(
            claim, self.map_time, self.unmap_time, self.map_asset, self.map_observable,
        )

    def oracle(self, source: Oracle, unmap_observable: Callable[[Any], Any] = _identity) -> Oracle:
        """An oracle over the target parameters backed by a source-side oracle."""
        return _PulledBackOracle(
            source=source, unmap_time=self.unmap_time, unmap_observable=unmap_observable,
        )


@final
@dataclass(frozen=True, slots=True)
class _PulledBackOracle:
    source: Oracle
    unmap_time: Callable[[Any], Any]
    unmap_observable: Callable[[Any], Any]

    def observe(self, key: Any, time: Any) -> Ok[Decimal] | Err[MissingObservationError]:
        return self.source.observe(self.unmap_observable(key), self.unmap_time(time))


def map_params(
    claim: Claim,
    map_time: Callable[[Any], Any],
    unmap_time: Callable[[Any], Any],  # noqa: ARG001
    map_asset: Callable[[Any], Any],
    map_observable: Callable[[Any], Any],
) -> Claim:
    """Isomorphic tree with every leaf parameter rewritten.

    The tree only carries times covariantly, so ``unmap_time`` does not
    touch it; it travels with the tree to re-target the oracle that will
    evaluate it (see ``ParamMapping.oracle``).
    """

    def algebra(node: Any) -> Claim:
        match node:
            case One(asset=a):
                return One(asset=map_asset(a))
            case Cond(predicate=p, then=t, otherwise=e):
                return Cond(predicate=_pred(p), then=t, otherwise=e)
            case Scale(observation=o, claim=c):
                return Scale(observation=map_observation(o, map_observable), claim=c)
            case When(predicate=p, claim=c):
                return When(predicate=_pred(p), claim=c)
            case Anytime(predicate=p, tag=tag, claim=c):
                return Anytime(predicate=_pred(p), tag=tag, claim=c)
            case Until(predicate=p, claim=c):
                return Until(predicate=_pred(p), claim=c)
            case _:
                return node

    def _pred(p: Any) -> Any:
        return map_inequality(p, map_time, map_observable)

    return fold_claim(claim, algebra)


def identity_mapping() -> ParamMapping:
    return ParamMapping()
