"""Tests for contingent.claims.builders — instrument templates over explicit dates."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from conftest import dates
from contingent.claims.builders import (
    american,
    at,
    bermudan,
    callable_bond,
    european,
    european_cash,
    fixed,
    floating,
    pay,
    periodic_dates,
    zcb,
)
from contingent.claims.claim import (
    ZERO,
    And,
    Anytime,
    Cond,
    Give,
    One,
    Or,
    Scale,
    Until,
    When,
)
from contingent.claims.inequality import Lte, TimeGte, TimeLte
from contingent.claims.observation import Const, Observe, const, mul, sub
from contingent.claims.util import expiry
from contingent.core.errors import BusinessRuleViolationError
from contingent.core.result import Err, Ok, unwrap

D1 = date(2025, 3, 20)
D2 = date(2025, 6, 20)
D3 = date(2025, 9, 19)
USD = One(asset="USD")


def _rule(result: object) -> str:
    match result:
        case Err(BusinessRuleViolationError() as e):
            return e.rule
    pytest.fail(f"Expected BusinessRuleViolationError, got {result}")


class TestPrimitives:
    def test_pay_one_is_bare_one(self) -> None:
        assert pay(Decimal("1"), "USD") == USD

    def test_pay_scales(self) -> None:
        assert pay(Decimal("5"), "USD") == Scale(observation=Const(value=Decimal("5")), claim=USD)

    def test_pay_observation(self) -> None:
        assert pay(Observe(key="SOFR"), "USD") == Scale(observation=Observe(key="SOFR"), claim=USD)

    def test_zcb(self) -> None:
        assert zcb(D2, Decimal("100"), "USD") == When(
            predicate=TimeGte(time=D2),
            claim=Scale(observation=const(100), claim=USD),
        )

    def test_at(self) -> None:
        assert at(D1, USD) == When(predicate=TimeGte(time=D1), claim=USD)


class TestBonds:
    def test_fixed(self) -> None:
        bond = unwrap(fixed(Decimal("100"), Decimal("5"), "USD", [D1, D2]))
        assert bond == And(claims=(
            zcb(D1, Decimal("5"), "USD"),
            zcb(D2, Decimal("5"), "USD"),
            zcb(D2, Decimal("100"), "USD"),
        ))

    def test_fixed_empty_schedule(self) -> None:
        assert _rule(fixed(Decimal("100"), Decimal("5"), "USD", [])) == "NON_EMPTY_SCHEDULE"

    @pytest.mark.parametrize("schedule", [[D2, D1], [D1, D1]])
    def test_fixed_non_increasing_schedule(self, schedule: list[date]) -> None:
        assert _rule(fixed(Decimal("100"), Decimal("5"), "USD", schedule)) == "INCREASING_SCHEDULE"

    def test_fixed_non_positive_principal(self) -> None:
        assert _rule(fixed(Decimal("0"), Decimal("5"), "USD", [D1])) == "POSITIVE_PRINCIPAL"

    def test_floating(self) -> None:
        bond = unwrap(floating(Decimal("100"), "EURIBOR3M", "EUR", [D1]))
        coupon = mul(const(100), Observe(key="EURIBOR3M"))
        assert bond == And(claims=(
            When(predicate=TimeGte(time=D1), claim=Scale(observation=coupon, claim=One(asset="EUR"))),
            zcb(D1, Decimal("100"), "EUR"),
        ))

    def test_floating_rejects_bad_schedule(self) -> None:
        assert isinstance(floating(Decimal("100"), "SOFR", "USD", [D2, D1]), Err)

    def test_callable_bond_structure(self) -> None:
        bond = unwrap(callable_bond(Decimal("100"), Decimal("5"), "USD", [D1, D2, D3], [D2]))
        rest = zcb(D3, Decimal("105"), "USD")
        choice = Or(alternatives=(
            ("CALLED", Give(claim=pay(Decimal("100"), "USD"))),
            ("NOT CALLED", Give(claim=rest)),
        ))
        assert bond == And(claims=(
            zcb(D1, Decimal("5"), "USD"),
            When(
                predicate=TimeGte(time=D2),
                claim=And(claims=(pay(Decimal("5"), "USD"), Give(claim=choice))),
            ),
        ))

    def test_callable_bond_call_date_must_be_payment_date(self) -> None:
        result = callable_bond(Decimal("100"), Decimal("5"), "USD", [D1, D3], [D2])
        assert _rule(result) == "CALL_ON_PAYMENT_DATE"

    def test_callable_bond_cannot_call_at_maturity(self) -> None:
        result = callable_bond(Decimal("100"), Decimal("5"), "USD", [D1, D3], [D3])
        assert _rule(result) == "CALL_ON_PAYMENT_DATE"

    @given(st.lists(dates(), min_size=1, max_size=6, unique=True))
    def test_fixed_expiry_is_last_payment(self, ds: list[date]) -> None:
        schedule = sorted(ds)
        bond = unwrap(fixed(Decimal("100"), Decimal("1"), "USD", schedule))
        assert expiry(bond) == schedule[-1]


class TestOptions:
    def test_european(self) -> None:
        assert european(D2, USD) == When(
            predicate=TimeGte(time=D2),
            claim=Or(alternatives=(("EXERCISE", USD), ("EXPIRE", ZERO))),
        )

    def test_bermudan(self) -> None:
        option = unwrap(bermudan([D1, D2], USD))
        last = When(
            predicate=TimeGte(time=D2),
            claim=Or(alternatives=(("EXERCISE", USD), ("EXPIRE", ZERO))),
        )
        assert option == When(
            predicate=TimeGte(time=D1),
            claim=Or(alternatives=(("EXERCISE", USD), ("EXPIRE", last))),
        )

    def test_bermudan_rejects_empty(self) -> None:
        assert _rule(bermudan([], USD)) == "NON_EMPTY_SCHEDULE"

    def test_american(self) -> None:
        assert american(D1, D3, USD) == Ok(When(
            predicate=TimeGte(time=D1),
            claim=Until(
                predicate=TimeGte(time=D3),
                claim=Anytime(predicate=TimeLte(time=D3), tag="EXERCISE", claim=USD),
            ),
        ))

    def test_american_start_after_expiry(self) -> None:
        assert _rule(american(D3, D1, USD)) == "START_BEFORE_EXPIRY"

    def test_cash_put(self) -> None:
        put = european_cash(D2, Decimal("50"), "SPX", "USD", is_call=False)
        spot = Observe(key="SPX")
        assert put == When(predicate=TimeGte(time=D2), claim=Cond(
            predicate=Lte(lhs=spot, rhs=const(50)),
            then=Scale(observation=sub(const(50), spot), claim=USD),
            otherwise=ZERO,
        ))

    def test_cash_call(self) -> None:
        call = european_cash(D2, Decimal("50"), "SPX", "USD", is_call=True)
        spot = Observe(key="SPX")
        assert call == When(predicate=TimeGte(time=D2), claim=Cond(
            predicate=Lte(lhs=const(50), rhs=spot),
            then=Scale(observation=sub(spot, const(50)), claim=USD),
            otherwise=ZERO,
        ))


class TestPeriodicDates:
    def test_month_end_does_not_drift(self) -> None:
        assert periodic_dates(date(2025, 1, 31), date(2025, 7, 31), 3) == Ok(
            (date(2025, 4, 30), date(2025, 7, 31)),
        )

    def test_short_final_period(self) -> None:
        assert periodic_dates(date(2025, 1, 15), date(2025, 6, 1), 2) == Ok(
            (date(2025, 3, 15), date(2025, 5, 15), date(2025, 6, 1)),
        )

    def test_invalid_frequency(self) -> None:
        assert _rule(periodic_dates(D1, D2, 0)) == "POSITIVE_FREQUENCY"

    def test_start_must_precede_end(self) -> None:
        assert _rule(periodic_dates(D2, D2, 3)) == "START_BEFORE_END"

    @given(dates(max_days=365), st.integers(min_value=1, max_value=12))
    def test_feeds_fixed(self, start: date, months: int) -> None:
        end = date(2027, 1, 1)
        schedule = unwrap(periodic_dates(start, end, months))
        assert schedule[-1] == end
        assert isinstance(fixed(Decimal("100"), Decimal("2"), "USD", schedule), Ok)
