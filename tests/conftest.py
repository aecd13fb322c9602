"""Hypothesis strategies and shared fixtures for contingent.

Strategies are composable: claims are built from predicates, predicates
from observations. Claim strategies never produce Or/Anytime unless asked,
so time-only histories always reduce without an election; ``histories``
mixes in elections for trees that have them.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from typing import Any

from hypothesis import HealthCheck, settings
from hypothesis import strategies as st
from hypothesis.strategies import SearchStrategy

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
from contingent.claims.inequality import Inequality, Lte, TimeGte, TimeLte
from contingent.claims.observation import Const, Observation, Observe, add, mul, sub
from contingent.claims.util import election_tags
from contingent.core.errors import MissingObservationError
from contingent.core.result import Err, Ok, unwrap
from contingent.core.types import FrozenMap, UtcDatetime
from contingent.lifecycle.events import Election, Event, TimeEvent
from contingent.oracle.protocols import FunctionOracle, missing_observation

# ---------------------------------------------------------------------------
# Hypothesis global settings
# ---------------------------------------------------------------------------

settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.register_profile(
    "dev",
    max_examples=50,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.load_profile("dev")


# ===================================================================
# PRIMITIVE STRATEGIES
# ===================================================================

BASE_DATE = date(2025, 1, 1)
ASSETS = ("USD", "EUR", "GBP", "XAU")
OBSERVABLES = ("SPX", "EURIBOR3M", "SOFR", "VIX")


def finite_decimals(
    min_value: str = "-1000",
    max_value: str = "1000",
    places: int = 4,
) -> SearchStrategy[Decimal]:
    """Finite Decimal values, no NaN, no Infinity."""
    return st.decimals(
        min_value=Decimal(min_value),
        max_value=Decimal(max_value),
        places=places,
        allow_nan=False,
        allow_infinity=False,
    )


def dates(max_days: int = 720) -> SearchStrategy[date]:
    """Calendar dates within two years of BASE_DATE."""
    return st.integers(min_value=0, max_value=max_days).map(
        lambda n: BASE_DATE + timedelta(days=n)
    )


def aware_datetimes(
    min_year: int = 2020,
    max_year: int = 2030,
) -> SearchStrategy[datetime]:
    """Timezone-aware UTC datetimes."""
    return st.datetimes(
        min_value=datetime(min_year, 1, 1),
        max_value=datetime(max_year, 12, 31, 23, 59, 59),
        timezones=st.just(UTC),
    )


@st.composite
def utc_datetimes(draw: st.DrawFn) -> UtcDatetime:
    return unwrap(UtcDatetime.parse(draw(aware_datetimes())))


def assets() -> SearchStrategy[str]:
    return st.sampled_from(ASSETS)


def observable_keys() -> SearchStrategy[str]:
    return st.sampled_from(OBSERVABLES)


def tags() -> SearchStrategy[str]:
    return st.sampled_from(("EXERCISE", "EXPIRE", "CALLED", "NOT CALLED", "KNOCK"))


@st.composite
def frozen_maps_str_decimal(
    draw: st.DrawFn,
    min_size: int = 1,
    max_size: int = 5,
) -> FrozenMap[str, Decimal]:
    entries = draw(st.dictionaries(
        observable_keys(), finite_decimals(), min_size=min_size, max_size=max_size,
    ))
    return unwrap(FrozenMap.create(entries))


# ===================================================================
# OBSERVATION / PREDICATE STRATEGIES
# ===================================================================


def observations(max_leaves: int = 6) -> SearchStrategy[Observation]:
    """Observation trees without division (so evaluation never traps)."""
    leaves: SearchStrategy[Observation] = st.one_of(
        finite_decimals(min_value="-10", max_value="10", places=2).map(lambda d: Const(value=d)),
        observable_keys().map(lambda k: Observe(key=k)),
    )
    return st.recursive(
        leaves,
        lambda inner: st.tuples(st.sampled_from((add, sub, mul)), inner, inner).map(
            lambda t: t[0](t[1], t[2])
        ),
        max_leaves=max_leaves,
    )


def predicates() -> SearchStrategy[Inequality]:
    return st.one_of(
        dates().map(lambda d: TimeGte(time=d)),
        dates().map(lambda d: TimeLte(time=d)),
        st.tuples(observations(3), observations(3)).map(lambda t: Lte(lhs=t[0], rhs=t[1])),
    )


def time_predicates() -> SearchStrategy[Inequality]:
    """Predicates that never consult the oracle."""
    return st.one_of(
        dates().map(lambda d: TimeGte(time=d)),
        dates().map(lambda d: TimeLte(time=d)),
    )


# ===================================================================
# CLAIM STRATEGIES
# ===================================================================


def claims(max_leaves: int = 12, *, electable: bool = False) -> SearchStrategy[Claim]:
    """Claim trees over dates, ASSETS and OBSERVABLES.

    Election-free unless ``electable``, which adds Or and Anytime nodes at
    any depth (including under Give, where only the counterparty elects).
    """
    leaves: SearchStrategy[Claim] = st.one_of(
        st.just(ZERO),
        assets().map(lambda a: One(asset=a)),
    )

    def extend(inner: SearchStrategy[Claim]) -> SearchStrategy[Claim]:
        options: list[SearchStrategy[Claim]] = [
            inner.map(lambda c: Give(claim=c)),
            st.lists(inner, min_size=2, max_size=4).map(all_of),
            st.tuples(predicates(), inner, inner).map(
                lambda t: Cond(predicate=t[0], then=t[1], otherwise=t[2])
            ),
            st.tuples(observations(3), inner).map(
                lambda t: Scale(observation=t[0], claim=t[1])
            ),
            st.tuples(time_predicates(), inner).map(
                lambda t: When(predicate=t[0], claim=t[1])
            ),
            st.tuples(time_predicates(), inner).map(
                lambda t: Until(predicate=t[0], claim=t[1])
            ),
        ]
        if electable:
            options += [
                st.lists(st.tuples(tags(), inner), min_size=2, max_size=3).map(
                    lambda alts: Or(alternatives=tuple(alts))
                ),
                st.tuples(predicates(), tags(), inner).map(
                    lambda t: Anytime(predicate=t[0], tag=t[1], claim=t[2])
                ),
            ]
        return st.one_of(*options)

    return st.recursive(leaves, extend, max_leaves=max_leaves)


def claims_with_choices(max_leaves: int = 10) -> SearchStrategy[Claim]:
    """Claim trees that may also contain Or nodes (for structural tests)."""
    base = claims(max_leaves)
    return st.one_of(
        base,
        st.lists(st.tuples(tags(), base), min_size=2, max_size=3).map(
            lambda alts: Or(alternatives=tuple(alts))
        ),
    )


def time_events(min_size: int = 0, max_size: int = 5) -> SearchStrategy[tuple[TimeEvent[date], ...]]:
    """Time events in non-decreasing order."""
    return st.lists(dates(), min_size=min_size, max_size=max_size).map(
        lambda ds: tuple(TimeEvent(time=d) for d in sorted(ds))
    )


@st.composite
def histories(draw: st.DrawFn, claim: Claim, max_size: int = 5) -> tuple[Event, ...]:
    """Time events and elections in non-decreasing time order.

    Elections mostly target tags live in ``claim``, from either side, so a
    fair share of them are consumed rather than rejected.
    """
    live = election_tags(claim) or ("EXERCISE",)
    election = st.builds(
        lambda d, tag, owner: Election(time=d, tag=tag, elector_is_owner=owner),
        dates(),
        st.one_of(st.sampled_from(live), tags()),
        st.booleans(),
    )
    event: SearchStrategy[Event] = st.one_of(dates().map(lambda d: TimeEvent(time=d)), election)
    drawn = draw(st.lists(event, max_size=max_size))
    return tuple(sorted(drawn, key=lambda e: e.time))


# ===================================================================
# ORACLES
# ===================================================================


def _synthetic_fixing(key: Any, time: Any) -> Ok[Decimal] | Err[MissingObservationError]:
    """Total, deterministic oracle over OBSERVABLES and dates."""
    if key not in OBSERVABLES or not isinstance(time, date):
        return Err(missing_observation(key, time, "tests.conftest.synthetic_oracle"))
    offset = (time - BASE_DATE).days % 11
    return Ok(Decimal(OBSERVABLES.index(key) + 1) + Decimal(offset) / Decimal(4))


SYNTHETIC_ORACLE = FunctionOracle(fn=_synthetic_fixing)
