"""Claim utilities — queries over a tree, each a single fold.

fixing_dates, expiry, assets, observables, election_tags, size, render.
"""

from __future__ import annotations

from typing import Any

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
from contingent.claims.functor import fold_claim
from contingent.claims.inequality import (
    inequality_keys,
    inequality_times,
    render_inequality,
)
from contingent.claims.observation import observation_keys, render_observation


def _unique(items: list[Any]) -> tuple[Any, ...]:
    """De-duplicate, keeping first occurrence."""
    seen: list[Any] = []
    for x in items:
        if x not in seen:
            seen.append(x)
    return tuple(seen)


def _collect(claim: Claim, leaf: Any) -> list[Any]:
    """Fold collecting ``leaf(node)`` items in depth-first, left-to-right order."""

    def algebra(node: Any) -> list[Any]:
        own = list(leaf(node))
        match node:
            case Zero() | One():
                return own
            case Give(claim=r) | Scale(claim=r) | When(claim=r) | Anytime(claim=r) | Until(claim=r):
                return own + r
            case Cond(then=rt, otherwise=re):
                return own + rt + re
            case And(claims=rs):
                return own + [x for r in rs for x in r]
            case Or(alternatives=alts):
                return own + [x for _, r in alts for x in r]
        raise TypeError(f"Not a Claim: {type(node).__name__}")

    return fold_claim(claim, algebra)


def _node_times(node: Any) -> list[Any]:
    match node:
        case Cond(predicate=p) | When(predicate=p) | Anytime(predicate=p) | Until(predicate=p):
            return list(inequality_times(p))
    return []


def _node_keys(node: Any) -> list[Any]:
    match node:
        case Scale(observation=o):
            return list(observation_keys(o))
        case Cond(predicate=p) | When(predicate=p) | Anytime(predicate=p) | Until(predicate=p):
            return list(inequality_keys(p))
    return []


def fixing_dates(claim: Claim) -> tuple[Any, ...]:
    """Every absolute time in the tree's predicates, sorted, de-duplicated."""
    return tuple(sorted(set(_collect(claim, _node_times))))


def expiry(claim: Claim) -> Any | None:
    """Latest absolute time in the tree, or None if it mentions none."""
    times = fixing_dates(claim)
    return times[-1] if times else None


def assets(claim: Claim) -> tuple[Any, ...]:
    """Assets of the One leaves, in first-occurrence order."""

    def leaf(node: Any) -> list[Any]:
        return [node.asset] if isinstance(node, One) else []

    return _unique(_collect(claim, leaf))


def observables(claim: Claim) -> tuple[Any, ...]:
    """Observable ids referenced by Scale and Lte, in first-occurrence order."""
    return _unique(_collect(claim, _node_keys))


def election_tags(claim: Claim) -> tuple[str, ...]:
    """Tags an election could currently target: Or alternatives and Anytime nodes."""

    def leaf(node: Any) -> list[str]:
        match node:
            case Or(alternatives=alts):
                return [tag for tag, _ in alts]
            case Anytime(tag=tag):
                return [tag]
        return []

    return _unique(_collect(claim, leaf))


def size(claim: Claim) -> int:
    """Number of nodes."""
    return len(_collect(claim, lambda node: [node]))


def render(claim: Claim) -> str:
    """Deterministic single-line rendering of a tree."""

    def algebra(node: Any) -> str:
        match node:
            case Zero():
                return "Zero"
            case One(asset=a):
                return f"One({a!s})"
            case Give(claim=r):
                return f"Give({r})"
            case And(claims=rs):
                return f"And[{', '.join(rs)}]"
            case Or(alternatives=alts):
                return "Or[" + ", ".join(f"{tag!r}: {r}" for tag, r in alts) + "]"
            case Cond(predicate=p, then=rt, otherwise=re):
                return f"Cond({render_inequality(p)}, {rt}, {re})"
            case Scale(observation=o, claim=r):
                return f"Scale({render_observation(o)}, {r})"
            case When(predicate=p, claim=r):
                return f"When({render_inequality(p)}, {r})"
            case Anytime(predicate=p, tag=tag, claim=r):
                return f"Anytime({render_inequality(p)}, {tag!r}, {r})"
            case Until(predicate=p, claim=r):
                return f"Until({render_inequality(p)}, {r})"
        raise TypeError(f"Not a Claim: {type(node).__name__}")

    return fold_claim(claim, algebra)
