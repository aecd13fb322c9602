"""Reusable claim builders over explicit dates.

These take already-adjusted payment dates and plain amounts: no day count,
no holiday calendars, no rate compounding. ``periodic_dates`` produces a
plain unadjusted schedule for the common case. Schedule-level business rules
(non-empty, strictly increasing dates) are checked and reported as
BusinessRuleViolationError values.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Any

from dateutil.relativedelta import relativedelta

from contingent.claims.claim import (
    ZERO,
    Anytime,
    Claim,
    Cond,
    Give,
    One,
    Or,
    Scale,
    Until,
    When,
    all_of,
)
from contingent.claims.inequality import Lte, TimeGte, TimeLte
from contingent.claims.observation import Observation, Observe, const, mul, sub
from contingent.core.errors import BusinessRuleViolationError
from contingent.core.result import Err, Ok
from contingent.core.types import UtcDatetime

EXERCISE = "EXERCISE"
EXPIRE = "EXPIRE"
CALLED = "CALLED"
NOT_CALLED = "NOT CALLED"


def _violation(rule: str, message: str, source: str) -> BusinessRuleViolationError:
    return BusinessRuleViolationError(
        message=message,
        code="BUSINESS_RULE_VIOLATION",
        timestamp=UtcDatetime.now(),
        source=f"claims.builders.{source}",
        rule=rule,
    )


def _check_schedule(
    dates: Sequence[Any], source: str,
) -> Ok[None] | Err[BusinessRuleViolationError]:
    if not dates:
        return Err(_violation("NON_EMPTY_SCHEDULE", "schedule must not be empty", source))
    for i in range(len(dates) - 1):
        if dates[i] >= dates[i + 1]:
            return Err(_violation(
                "INCREASING_SCHEDULE",
                f"dates must be strictly increasing, but dates[{i}]={dates[i]} "
                f">= dates[{i + 1}]={dates[i + 1]}",
                source,
            ))
    return Ok(None)


def periodic_dates(
    start: date, end: date, months: int,
) -> Ok[tuple[date, ...]] | Err[BusinessRuleViolationError]:
    """Unadjusted dates every ``months`` after ``start``, ending at ``end``.

    Dates are stepped from ``start`` (not chained), so month-end anchors do
    not drift; a short final period ends at ``end``. No holiday adjustment.
    """
    if months < 1:
        return Err(_violation("POSITIVE_FREQUENCY",
                              f"months must be >= 1, got {months}", "periodic_dates"))
    if start >= end:
        return Err(_violation("START_BEFORE_END",
                              f"start {start} must be before end {end}", "periodic_dates"))
    dates: list[date] = []
    k = 1
    current = start + relativedelta(months=months)
    while current < end:
        dates.append(current)
        k += 1
        current = start + relativedelta(months=months * k)
    dates.append(end)
    return Ok(tuple(dates))


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


def at(time: Any, claim: Claim) -> When:
    """``claim`` acquired at ``time``."""
    return When(predicate=TimeGte(time=time), claim=claim)


def pay(amount: Decimal | Observation, asset: Any) -> Claim:
    """``amount`` units of ``asset``. A Decimal 1 is a bare One."""
    if isinstance(amount, Decimal):
        if amount == 1:
            return One(asset=asset)
        return Scale(observation=const(amount), claim=One(asset=asset))
    return Scale(observation=amount, claim=One(asset=asset))


def zcb(maturity: Any, principal: Decimal, asset: Any) -> When:
    """Zero-coupon bond: ``principal`` of ``asset`` at ``maturity``."""
    return at(maturity, pay(principal, asset))


# ---------------------------------------------------------------------------
# Bonds
# ---------------------------------------------------------------------------


def fixed(
    principal: Decimal,
    coupon: Decimal,
    asset: Any,
    payment_dates: Sequence[Any],
) -> Ok[Claim] | Err[BusinessRuleViolationError]:
    """Fixed-rate bond: ``coupon`` at every date, ``principal`` at the last.

    ``coupon`` is the per-period amount, already accrued by the caller.
    """
    match _check_schedule(payment_dates, "fixed"):
        case Err() as e:
            return e
    if principal <= 0:
        return Err(_violation("POSITIVE_PRINCIPAL",
                              f"principal must be > 0, got {principal}", "fixed"))
    coupons = [zcb(d, coupon, asset) for d in payment_dates]
    return Ok(all_of([*coupons, zcb(payment_dates[-1], principal, asset)]))


def floating(
    principal: Decimal,
    rate: Any,
    asset: Any,
    payment_dates: Sequence[Any],
) -> Ok[Claim] | Err[BusinessRuleViolationError]:
    """Floating-rate bond paying ``principal * Observe(rate)`` per period.

    The rate is observed at the payment date; accrual scaling belongs in
    the rate observable itself.
    """
    match _check_schedule(payment_dates, "floating"):
        case Err() as e:
            return e
    if principal <= 0:
        return Err(_violation("POSITIVE_PRINCIPAL",
                              f"principal must be > 0, got {principal}", "floating"))
    coupon = mul(const(principal), Observe(key=rate))
    coupons = [at(d, pay(coupon, asset)) for d in payment_dates]
    return Ok(all_of([*coupons, zcb(payment_dates[-1], principal, asset)]))


def callable_bond(
    principal: Decimal,
    coupon: Decimal,
    asset: Any,
    payment_dates: Sequence[Any],
    call_dates: Sequence[Any],
) -> Ok[Claim] | Err[BusinessRuleViolationError]:
    """Fixed-rate bond the issuer may redeem early on any call date.

    On each call date (a payment date other than the last) the coupon is
    paid and the issuer chooses CALLED (principal now, nothing after) or
    NOT CALLED (the rest of the bond). The choice belongs to the issuer, so
    the Or sits under a Give, and both branches are given back to keep the
    holder receiving.
    """
    match _check_schedule(payment_dates, "callable_bond"):
        case Err() as e:
            return e
    unknown = [d for d in call_dates if d not in payment_dates[:-1]]
    if unknown:
        return Err(_violation(
            "CALL_ON_PAYMENT_DATE",
            f"call dates must be payment dates before maturity, got {unknown}",
            "callable_bond",
        ))

    rest: Claim = zcb(payment_dates[-1], principal + coupon, asset)
    for d in reversed(payment_dates[:-1]):
        if d in call_dates:
            choice = Or(alternatives=(
                (CALLED, Give(claim=pay(principal, asset))),
                (NOT_CALLED, Give(claim=rest)),
            ))
            rest = at(d, all_of([pay(coupon, asset), Give(claim=choice)]))
        else:
            rest = all_of([zcb(d, coupon, asset), rest])
    return Ok(rest)


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


def european(expiry: Any, claim: Claim) -> When:
    """Holder may acquire ``claim`` at ``expiry`` (EXERCISE) or let it lapse."""
    return at(expiry, Or(alternatives=((EXERCISE, claim), (EXPIRE, ZERO))))


def bermudan(
    exercise_dates: Sequence[Any], claim: Claim,
) -> Ok[Claim] | Err[BusinessRuleViolationError]:
    """Exercisable on any of ``exercise_dates``; declining moves to the next."""
    match _check_schedule(exercise_dates, "bermudan"):
        case Err() as e:
            return e
    rest: Claim = ZERO
    for d in reversed(exercise_dates):
        rest = at(d, Or(alternatives=((EXERCISE, claim), (EXPIRE, rest))))
    return Ok(rest)


def american(start: Any, expiry: Any, claim: Claim) -> Ok[Claim] | Err[BusinessRuleViolationError]:
    """Exercisable at any time in [start, expiry]; worthless afterwards."""
    if start > expiry:
        return Err(_violation("START_BEFORE_EXPIRY",
                              f"start {start} must be <= expiry {expiry}", "american"))
    window = Anytime(predicate=TimeLte(time=expiry), tag=EXERCISE, claim=claim)
    return Ok(at(start, Until(predicate=TimeGte(time=expiry), claim=window)))


def european_cash(
    expiry: Any,
    strike: Decimal,
    underlying: Any,
    asset: Any,
    *,
    is_call: bool,
) -> When:
    """Automatically exercised cash-settled option.

    At expiry the fixing of ``underlying`` is compared with ``strike``; in
    the money pays the intrinsic value in ``asset``, out of the money pays
    nothing.
    """
    spot = Observe(key=underlying)
    k = const(strike)
    if is_call:
        in_the_money = Lte(lhs=k, rhs=spot)
        payoff = sub(spot, k)
    else:
        in_the_money = Lte(lhs=spot, rhs=k)
        payoff = sub(k, spot)
    return at(expiry, Cond(
        predicate=in_the_money,
        then=Scale(observation=payoff, claim=One(asset=asset)),
        otherwise=ZERO,
    ))
