"""Tests for SafeInt unsigned arithmetic wrapper."""

import pytest

from stableswap.safe_int import DivisionByZero, S, SafeInt, SafeIntError, Underflow


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_rejects_bool_and_float(self):
        """Booleans and floats are not amounts."""
        with pytest.raises(TypeError):
            SafeInt(True)  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore

    def test_alias_s(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt

    def test_zero_constructor(self):
        """SafeInt.zero() creates zero value."""
        assert SafeInt.zero().value == 0


class TestSafeIntArithmetic:
    """Tests for arithmetic operators."""

    def test_add_and_radd(self):
        """Addition works with ints on either side."""
        assert (S(2) + 3).value == 5
        assert (3 + S(2)).value == 5

    def test_sub_to_zero(self):
        """Subtraction down to exactly zero is allowed."""
        assert (S(5) - 5).value == 0

    def test_sub_underflow(self):
        """Subtraction below zero raises Underflow."""
        with pytest.raises(Underflow):
            S(5) - 6

    def test_rsub_underflow(self):
        """Reflected subtraction below zero raises Underflow."""
        with pytest.raises(Underflow):
            5 - S(6)

    def test_mul_exact_for_large_values(self):
        """Products wider than 256 bits stay exact."""
        assert (S(2**255) * 2**255).value == 2**510

    def test_floordiv_truncates(self):
        """Division truncates toward zero."""
        assert (S(7) // 2).value == 3

    def test_floordiv_by_zero(self):
        """Division by zero raises DivisionByZero."""
        with pytest.raises(DivisionByZero):
            S(1) // 0
        with pytest.raises(DivisionByZero):
            1 // S(0)

    def test_mod_by_zero(self):
        """Modulo by zero raises DivisionByZero."""
        with pytest.raises(DivisionByZero):
            S(1) % 0

    def test_errors_are_arithmetic_errors(self):
        """Both faults share the SafeIntError / ArithmeticError base."""
        assert issubclass(Underflow, SafeIntError)
        assert issubclass(DivisionByZero, SafeIntError)
        assert issubclass(SafeIntError, ArithmeticError)


class TestSafeIntComparison:
    """Tests for comparisons and conversions."""

    def test_compares_with_int(self):
        """SafeInt compares against plain ints."""
        assert S(3) == 3
        assert S(3) < 4
        assert S(3) >= 3
        assert S(3) > S(2)

    def test_bool_and_int(self):
        """Zero is falsy and int() unwraps."""
        assert not S(0)
        assert int(S(7)) == 7

    def test_usable_as_index(self):
        """SafeInt works where Python needs an index."""
        assert [10, 20, 30][S(1)] == 20


class TestSafeIntNamedOperations:
    """Tests for abs_diff and within."""

    def test_abs_diff_is_symmetric(self):
        """abs_diff never goes through a negative value."""
        assert S(3).abs_diff(10).value == 7
        assert S(10).abs_diff(3).value == 7

    def test_within_tolerance(self):
        """within() is inclusive of the tolerance."""
        assert S(100).within(101, 1)
        assert S(101).within(100, 1)
        assert not S(100).within(102, 1)
