"""Lifecycle engine — reduce a claim tree under an ordered event history.

``lifecycle`` folds one reduction step per event over the tree. A step walks
the tree top-down, carrying the event, the Give parity of the current node
and the time at which the current sub-tree was acquired:

- Zero discharges; One realizes one unit at the acquisition time.
- Give negates what its sub-claim realizes.
- And steps every child and re-normalizes the survivors.
- Or and Anytime resolve only under an election with a matching tag from
  the matching side; the election is consumed there.
- Cond picks a branch at the acquisition time, the same time Scale
  observes at, and afresh at every event until a branch makes progress.
- Scale multiplies realized amounts by the observation at each amount's
  own time.
- When fires at most once; Until is knocked out once its predicate holds,
  dropping the remaining tree but not what its sub-claim realized in the
  same step.

A step never returns a partial tree: the first error aborts the whole
reduction. Nothing is cached between calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation, Overflow, localcontext
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
    all_of,
    is_zero,
)
from contingent.claims.inequality import TimeGte, compare
from contingent.claims.observation import evaluate, render_observation
from contingent.claims.util import election_tags
from contingent.core.errors import (
    EvaluationError,
    FieldViolation,
    LifecycleError,
    MultipleElectionsError,
    UnmatchedElectionTagError,
    ValidationError,
)
from contingent.core.numeric import CONTINGENT_DECIMAL_CONTEXT
from contingent.core.result import Err, Ok, traverse
from contingent.core.types import UtcDatetime
from contingent.infra.config import LifecycleConfig
from contingent.lifecycle.events import Election, Event, LifecycleResult, Pending
from contingent.oracle.protocols import ObserveFn, Oracle, as_oracle

_ONE = Decimal(1)


@final
@dataclass(frozen=True, slots=True)
class _Context:
    oracle: Oracle
    time: Any
    election: Election[Any] | None
    given: bool = False
    acquired: Any = None  # None: acquired no later than the event

    @property
    def effective_time(self) -> Any:
        return self.time if self.acquired is None else self.acquired

    def can_elect(self) -> bool:
        """An election is live here and was made from this node's side."""
        return self.election is not None and self.election.elector_is_owner != self.given


@final
@dataclass(frozen=True, slots=True)
class _Step:
    remaining: Claim | None
    pending: tuple[Pending[Any, Any], ...]
    consumed: bool = False


_DISCHARGED = _Step(remaining=None, pending=())


def _unchanged(claim: Claim) -> _Step:
    return _Step(remaining=claim, pending=())


def _wrap(claim: Claim, child: Claim, step: _Step, rebuild: Any) -> _Step:
    """Re-wrap a single-child node around its stepped child."""
    if step.remaining is child:
        remaining: Claim | None = claim
    elif step.remaining is None:
        remaining = None
    else:
        remaining = rebuild(step.remaining)
    return _Step(remaining=remaining, pending=step.pending, consumed=step.consumed)


def _acquisition_time(ctx: _Context, claim: When) -> Any:
    """When a fired When's sub-claim is acquired.

    A TimeGte guard is satisfied from its boundary onwards, so the sub-claim
    is acquired at the boundary (never before the enclosing acquisition);
    any other guard is first observed true at the event time.
    """
    match claim.predicate:
        case TimeGte(time=s):
            if ctx.acquired is None:
                return s
            return max(s, ctx.acquired)
    return ctx.time


def _scale_pending(
    ctx: _Context, claim: Scale, pending: tuple[Pending[Any, Any], ...],
) -> Ok[tuple[Pending[Any, Any], ...]] | Err[LifecycleError]:
    scaled: list[Pending[Any, Any]] = []
    for p in pending:
        match evaluate(ctx.oracle, claim.observation, p.time):
            case Err() as e:
                return e
            case Ok(factor):
                pass
        try:
            with localcontext(CONTINGENT_DECIMAL_CONTEXT):
                amount = p.amount * factor
        except (InvalidOperation, Overflow) as exc:
            return Err(EvaluationError(
                message=f"Cannot scale {p.amount} by {factor}: {type(exc).__name__}",
                code="EVALUATION_ERROR",
                timestamp=UtcDatetime.now(),
                source="lifecycle.engine._scale_pending",
                expression=render_observation(claim.observation),
            ))
        scaled.append(replace(p, amount=amount))
    return Ok(tuple(scaled))


def _step(ctx: _Context, claim: Claim) -> Ok[_Step] | Err[LifecycleError]:  # noqa: PLR0911, PLR0912
    match claim:
        case Zero():
            return Ok(_DISCHARGED)

        case One(asset=asset):
            return Ok(_Step(
                remaining=None,
                pending=(Pending(time=ctx.effective_time, asset=asset, amount=_ONE),),
            ))

        case Give(claim=c):
            match _step(replace(ctx, given=not ctx.given), c):
                case Err() as e:
                    return e
                case Ok(r):
                    pass
            flipped = _Step(
                remaining=r.remaining,
                pending=tuple(replace(p, amount=-p.amount) for p in r.pending),
                consumed=r.consumed,
            )
            return Ok(_wrap(claim, c, flipped, lambda x: Give(claim=x)))

        case And(claims=cs):
            match traverse(cs, lambda c: _step(ctx, c)):
                case Err() as e:
                    return e
                case Ok(steps):
                    pass
            pending = tuple(p for r in steps for p in r.pending)
            consumed = any(r.consumed for r in steps)
            if all(r.remaining is c for r, c in zip(steps, cs, strict=True)):
                return Ok(_Step(remaining=claim, pending=pending, consumed=consumed))
            rebuilt = all_of(r.remaining for r in steps if r.remaining is not None)
            return Ok(_Step(
                remaining=None if is_zero(rebuilt) else rebuilt,
                pending=pending,
                consumed=consumed,
            ))

        case Or(alternatives=alts):
            election = ctx.election
            if election is None or not ctx.can_elect():
                return Ok(_unchanged(claim))
            for tag, c in alts:
                if tag == election.tag:
                    match _step(replace(ctx, election=None), c):
                        case Err() as e:
                            return e
                        case Ok(r):
                            return Ok(replace(r, consumed=True))
            return Ok(_unchanged(claim))

        case Cond(predicate=p, then=t, otherwise=o):
            match compare(ctx.oracle, p, ctx.effective_time):
                case Err() as e:
                    return e
                case Ok(holds):
                    pass
            branch = t if holds else o
            match _step(ctx, branch):
                case Err() as e:
                    return e
                case Ok(r):
                    pass
            if r.remaining is branch and not r.pending and not r.consumed:
                return Ok(_unchanged(claim))
            return Ok(r)

        case Scale(observation=obs, claim=c):
            match _step(ctx, c):
                case Err() as e:
                    return e
                case Ok(r):
                    pass
            match _scale_pending(ctx, claim, r.pending):
                case Err() as e:
                    return e
                case Ok(scaled):
                    pass
            return Ok(_wrap(
                claim, c, replace(r, pending=scaled),
                lambda x: Scale(observation=obs, claim=x),
            ))

        case When(predicate=p, claim=c):
            match compare(ctx.oracle, p, ctx.time):
                case Err() as e:
                    return e
                case Ok(holds):
                    pass
            if not holds:
                return Ok(_unchanged(claim))
            return _step(replace(ctx, acquired=_acquisition_time(ctx, claim)), c)

        case Anytime(predicate=p, tag=tag, claim=c):
            if ctx.election is None or ctx.election.tag != tag or not ctx.can_elect():
                return Ok(_unchanged(claim))
            match compare(ctx.oracle, p, ctx.time):
                case Err() as e:
                    return e
                case Ok(holds):
                    pass
            if not holds:
                return Ok(_unchanged(claim))
            match _step(replace(ctx, election=None, acquired=ctx.time), c):
                case Err() as e:
                    return e
                case Ok(r):
                    return Ok(replace(r, consumed=True))

        case Until(predicate=p, claim=c):
            match _step(ctx, c):
                case Err() as e:
                    return e
                case Ok(r):
                    pass
            match compare(ctx.oracle, p, ctx.time):
                case Err() as e:
                    return e
                case Ok(holds):
                    pass
            if holds:
                return Ok(_Step(remaining=None, pending=r.pending, consumed=r.consumed))
            return Ok(_wrap(claim, c, r, lambda x: Until(predicate=p, claim=x)))

    raise TypeError(f"Not a Claim: {type(claim).__name__}")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def _unmatched(election: Election[Any], claim: Claim | None) -> UnmatchedElectionTagError:
    available = election_tags(claim) if claim is not None else ()
    return UnmatchedElectionTagError(
        message=(
            f"claim structure invariant violated: no live alternative tagged "
            f"{election.tag!r} electable by "
            f"{'owner' if election.elector_is_owner else 'counterparty'} "
            f"at {election.time!s}"
        ),
        code="UNMATCHED_ELECTION_TAG",
        timestamp=UtcDatetime.now(),
        source="lifecycle.engine.lifecycle",
        tag=election.tag,
        available=available,
    )


def _check_order(events: Sequence[Event]) -> Ok[None] | Err[ValidationError]:
    for i in range(len(events) - 1):
        if events[i].time > events[i + 1].time:
            return Err(ValidationError(
                message="Events must be ordered by non-decreasing time",
                code="VALIDATION_ERROR",
                timestamp=UtcDatetime.now(),
                source="lifecycle.engine.lifecycle",
                fields=(FieldViolation(
                    path=f"events[{i + 1}].time",
                    constraint=f"must be >= events[{i}].time ({events[i].time!s})",
                    actual_value=str(events[i + 1].time),
                ),),
            ))
    return Ok(None)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def step(
    claim: Claim, oracle: Oracle | ObserveFn, event: Event,
) -> Ok[LifecycleResult] | Err[LifecycleError]:
    """Apply a single event to ``claim``."""
    return lifecycle(claim, oracle, (event,))


def lifecycle(
    claim: Claim | None,
    oracle: Oracle | ObserveFn,
    events: Iterable[Event],
) -> Ok[LifecycleResult] | Err[LifecycleError]:
    """Reduce ``claim`` under ``events``, in order.

    Returns the remaining tree (None once discharged) and every realized
    obligation in event order. Satisfies the replay law: reducing under
    ``e1 + e2`` equals reducing under ``e1`` and then reducing the remaining
    tree under ``e2``.
    """
    source = as_oracle(oracle)
    history = tuple(events)
    match _check_order(history):
        case Err() as e:
            return e

    remaining: Claim | None = None if claim is None or is_zero(claim) else claim
    pending: list[Pending[Any, Any]] = []
    for event in history:
        election = event if isinstance(event, Election) else None
        if remaining is None:
            if election is not None:
                return Err(_unmatched(election, None))
            continue
        ctx = _Context(oracle=source, time=event.time, election=election)
        match _step(ctx, remaining):
            case Err() as e:
                return e
            case Ok(r):
                pass
        if election is not None and not r.consumed:
            return Err(_unmatched(election, remaining))
        remaining = r.remaining
        pending.extend(r.pending)
    return Ok(LifecycleResult(remaining=remaining, pending=tuple(pending)))


def elect(
    claim: Claim | None,
    oracle: Oracle | ObserveFn,
    events: Iterable[Event],
    config: LifecycleConfig | None = None,
) -> Ok[LifecycleResult] | Err[LifecycleError]:
    """Election-driven lifecycle: ``lifecycle`` with a cap on elections.

    More than ``config.max_elections_per_call`` elections (default one) is a
    MultipleElectionsError; nothing is reduced.
    """
    cfg = config if config is not None else LifecycleConfig()
    history = tuple(events)
    count = sum(1 for e in history if isinstance(e, Election))
    if count > cfg.max_elections_per_call:
        return Err(MultipleElectionsError(
            message=(
                f"{count} elections in one call; at most "
                f"{cfg.max_elections_per_call} supported"
            ),
            code="MULTIPLE_ELECTIONS_UNSUPPORTED",
            timestamp=UtcDatetime.now(),
            source="lifecycle.engine.elect",
            count=count,
            limit=cfg.max_elections_per_call,
        ))
    return lifecycle(claim, oracle, history)
