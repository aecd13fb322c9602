"""Tests for contingent.core.result — Result[T, E] error handling."""

from __future__ import annotations

import dataclasses

import pytest
from hypothesis import given
from hypothesis import strategies as st

from contingent.core.result import Err, Ok, sequence, traverse, unwrap

# ---------------------------------------------------------------------------
# Ok and Err hold values, are frozen, support pattern matching
# ---------------------------------------------------------------------------


class TestOkBasics:
    def test_ok_holds_value(self) -> None:
        assert Ok(42).value == 42

    def test_ok_is_frozen(self) -> None:
        ok = Ok(42)
        with pytest.raises(dataclasses.FrozenInstanceError):
            ok.value = 99  # type: ignore[misc]

    def test_ok_equality(self) -> None:
        assert Ok(42) == Ok(42)
        assert Ok(42) != Ok(99)

    def test_pattern_match_ok(self) -> None:
        match Ok(42):
            case Ok(v):
                assert v == 42
            case _:
                pytest.fail("Should match Ok")


class TestErrBasics:
    def test_err_holds_error(self) -> None:
        assert Err("fail").error == "fail"

    def test_err_is_frozen(self) -> None:
        err = Err("fail")
        with pytest.raises(dataclasses.FrozenInstanceError):
            err.error = "other"  # type: ignore[misc]

    def test_pattern_match_err(self) -> None:
        match Err("fail"):
            case Err(e):
                assert e == "fail"
            case _:
                pytest.fail("Should match Err")

    def test_ok_is_not_err(self) -> None:
        assert not isinstance(Ok(1), Err)
        assert not isinstance(Err("e"), Ok)


# ---------------------------------------------------------------------------
# Methods
# ---------------------------------------------------------------------------


def _safe_div(x: int) -> Ok[float] | Err[str]:
    if x == 0:
        return Err("division by zero")
    return Ok(10.0 / x)


class TestMethods:
    def test_ok_map(self) -> None:
        assert Ok(5).map(lambda x: x * 2) == Ok(10)

    def test_err_map_passthrough(self) -> None:
        assert Err("fail").map(lambda x: x * 2) == Err("fail")

    def test_ok_bind(self) -> None:
        assert Ok(5).bind(_safe_div) == Ok(2.0)
        assert Ok(0).bind(_safe_div) == Err("division by zero")

    def test_err_bind_short_circuits(self) -> None:
        assert Err("initial").bind(_safe_div) == Err("initial")

    def test_unwrap(self) -> None:
        assert Ok(42).unwrap() == 42
        with pytest.raises(RuntimeError, match="Called unwrap on Err"):
            Err("fail").unwrap()

    def test_unwrap_or(self) -> None:
        assert Ok(42).unwrap_or(0) == 42
        assert Err("fail").unwrap_or(0) == 0

    def test_map_err(self) -> None:
        assert Ok(42).map_err(str.upper) == Ok(42)
        assert Err("error").map_err(str.upper) == Err("ERROR")


# ---------------------------------------------------------------------------
# Free functions
# ---------------------------------------------------------------------------


class TestFreeFunctions:
    def test_unwrap_ok(self) -> None:
        assert unwrap(Ok(42)) == 42

    def test_unwrap_err_raises(self) -> None:
        with pytest.raises(RuntimeError, match="unwrap on Err"):
            unwrap(Err("fail"))

    def test_unwrap_non_result_raises_type_error(self) -> None:
        with pytest.raises(TypeError):
            unwrap(42)  # type: ignore[arg-type]

    def test_sequence_all_ok(self) -> None:
        assert sequence([Ok(1), Ok(2), Ok(3)]) == Ok((1, 2, 3))

    def test_sequence_first_err(self) -> None:
        assert sequence([Ok(1), Err("e"), Err("f")]) == Err("e")

    def test_sequence_empty(self) -> None:
        assert sequence([]) == Ok(())

    def test_traverse_stops_at_first_err(self) -> None:
        calls: list[int] = []

        def f(x: int) -> Ok[int] | Err[str]:
            calls.append(x)
            return Err("stop") if x == 2 else Ok(x * 10)

        assert traverse([1, 2, 3], f) == Err("stop")
        assert calls == [1, 2]

    def test_traverse_all_ok(self) -> None:
        assert traverse([1, 2], lambda x: Ok(x + 1)) == Ok((2, 3))


# ---------------------------------------------------------------------------
# Laws
# ---------------------------------------------------------------------------


class TestLaws:
    @given(st.integers())
    def test_map_identity(self, x: int) -> None:
        assert Ok(x).map(lambda v: v) == Ok(x)

    @given(st.integers())
    def test_bind_left_identity(self, x: int) -> None:
        def f(v: int) -> Ok[int] | Err[str]:
            return Ok(v + 1)

        assert Ok(x).bind(f) == f(x)

    @given(st.lists(st.integers()))
    def test_sequence_of_oks_preserves_order(self, xs: list[int]) -> None:
        assert sequence(Ok(x) for x in xs) == Ok(tuple(xs))
