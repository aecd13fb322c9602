"""Tests for contingent.claims.claim — nodes and smart constructors."""

from __future__ import annotations

import dataclasses
from datetime import date

import pytest
from hypothesis import given
from hypothesis import strategies as st

from conftest import claims
from contingent.claims.claim import (
    ZERO,
    And,
    Claim,
    Give,
    One,
    Or,
    When,
    Zero,
    all_of,
    and_,
    any_of,
    is_zero,
    or_,
)
from contingent.claims.inequality import TimeGte
from contingent.core.errors import ConstructionError
from contingent.core.result import Err, Ok, unwrap

USD = One(asset="USD")
EUR = One(asset="EUR")
GBP = One(asset="GBP")


class TestNodes:
    def test_structural_equality(self) -> None:
        d = date(2025, 1, 1)
        assert When(predicate=TimeGte(time=d), claim=USD) == When(
            predicate=TimeGte(time=d), claim=One(asset="USD"),
        )

    def test_nodes_are_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            USD.asset = "EUR"  # type: ignore[misc]

    def test_and_requires_two_children(self) -> None:
        with pytest.raises(TypeError):
            And(claims=(USD,))

    def test_and_requires_tuple(self) -> None:
        with pytest.raises(TypeError):
            And(claims=[USD, EUR])  # type: ignore[arg-type]

    def test_or_requires_two_choices(self) -> None:
        with pytest.raises(TypeError, match="at least 2 choices required"):
            Or(alternatives=(("A", USD),))

    def test_or_tags(self) -> None:
        assert Or(alternatives=(("A", USD), ("B", EUR))).tags == ("A", "B")

    def test_zero_singleton_equality(self) -> None:
        assert Zero() == ZERO
        assert is_zero(ZERO)
        assert not is_zero(USD)


# ---------------------------------------------------------------------------
# and
# ---------------------------------------------------------------------------


class TestAnd:
    def test_zero_is_left_and_right_identity(self) -> None:
        assert and_(ZERO, USD) == USD
        assert and_(USD, ZERO) == USD

    def test_zero_and_zero(self) -> None:
        assert and_(ZERO, ZERO) == ZERO

    def test_flattens_one_level(self) -> None:
        nested = and_(and_(USD, EUR), GBP)
        assert nested == And(claims=(USD, EUR, GBP))

    def test_preserves_insertion_order(self) -> None:
        assert all_of([GBP, USD, EUR]) == And(claims=(GBP, USD, EUR))

    def test_keeps_duplicates(self) -> None:
        assert all_of([USD, USD]) == And(claims=(USD, USD))

    def test_empty_is_zero(self) -> None:
        assert all_of([]) == ZERO

    def test_does_not_flatten_under_give(self) -> None:
        inner = And(claims=(USD, EUR))
        assert all_of([Give(claim=inner), GBP]) == And(claims=(Give(claim=inner), GBP))

    @given(claims())
    def test_identity_law(self, c: Claim) -> None:
        assert and_(ZERO, c) == c
        assert and_(c, ZERO) == c

    @given(st.lists(claims(max_leaves=4), max_size=5))
    def test_result_never_contains_zero_or_nested_and(self, cs: list[Claim]) -> None:
        result = all_of(cs)
        if isinstance(result, And):
            assert len(result.claims) >= 2
            for child in result.claims:
                assert not is_zero(child)
                assert not isinstance(child, And)


# ---------------------------------------------------------------------------
# or
# ---------------------------------------------------------------------------


class TestOr:
    def test_pairwise(self) -> None:
        assert or_(("A", USD), ("B", EUR)) == Ok(Or(alternatives=(("A", USD), ("B", EUR))))

    def test_flattens_nested_or(self) -> None:
        inner = unwrap(or_(("A", USD), ("B", EUR)))
        assert or_(inner, ("C", GBP)) == Ok(
            Or(alternatives=(("A", USD), ("B", EUR), ("C", GBP)))
        )

    def test_one_choice_is_construction_error(self) -> None:
        match any_of([("A", USD)]):
            case Err(ConstructionError() as e):
                assert "at least 2 choices required" in e.message
                assert e.node == "Or"
            case other:
                pytest.fail(f"Expected ConstructionError, got {other}")

    def test_empty_is_construction_error(self) -> None:
        assert isinstance(any_of([]), Err)

    def test_zero_is_a_real_alternative(self) -> None:
        assert isinstance(any_of([("EXERCISE", USD), ("EXPIRE", ZERO)]), Ok)

    def test_malformed_alternative(self) -> None:
        assert isinstance(any_of([USD, ("B", EUR)]), Err)  # type: ignore[list-item]

    @given(st.integers(min_value=2, max_value=6))
    def test_arity_preserved(self, n: int) -> None:
        alts = [(f"T{i}", USD) for i in range(n)]
        assert len(unwrap(any_of(alts)).alternatives) == n
