"""
Tests for sqrt, cos, arctan, exp and the constants E and PI.

Reference values come from mpmath at a working precision well above the
requested bound.
"""

import math

import mpmath as mp
import pytest

from rationals import Rational
from reals import E, PI, Real, _isqrt, arctan, cos, exp, sqrt

TWO = Real(Rational(2, 1))
HALF = Real(Rational(1, 2))


def mpf_of(q: Rational):
    return mp.mpf(q.numerator) / q.denominator


def assert_close(real: Real, expected, precisions) -> None:
    """|real.approx(n) - expected| <= 1/n for each n; expected is evaluated under workdps."""
    with mp.workdps(80):
        target = expected()
        for n in precisions:
            error = abs(mpf_of(real.approx(n)) - target)
            assert error <= mp.mpf(1) / n, f"n={n}: error {mp.nstr(error, 5)}"


class TestIsqrt:
    """Integer square root by quarter-sized recursion"""

    def test_matches_math_isqrt(self) -> None:
        for x in range(300):
            assert _isqrt(x) == math.isqrt(x)

    def test_big_values(self) -> None:
        for x in (10 ** 40, 10 ** 40 - 1, 2 ** 255 + 12345):
            assert _isqrt(x) == math.isqrt(x)


class TestSqrt:
    """sqrt samples at 4n^2 and rounds to a denominator of 2n"""

    def test_modulus(self, check_modulus) -> None:
        check_modulus(sqrt(Real.ONE), 100)
        check_modulus(sqrt(TWO), 100)
        check_modulus(sqrt(sqrt(TWO)), 100)

    def test_perfect_square_is_exact(self) -> None:
        four = Real(Rational(4, 1))
        for n in range(1, 101):
            assert sqrt(four).approx(n) == Rational(2, 1)
        assert Real.sqrt(four).approx(100).subtract(Rational(2, 1)).abs() <= Rational(1, 100)

    def test_converges(self) -> None:
        assert_close(sqrt(TWO), lambda: mp.sqrt(2), (1, 10, 1000, 10 ** 15))
        assert_close(sqrt(sqrt(TWO)), lambda: mp.root(2, 4), (1, 10, 1000, 10 ** 6))
        assert_close(sqrt(Real(Rational(1, 10 ** 6))), lambda: mp.mpf("0.001"), (1, 10 ** 4, 10 ** 8))

    def test_denominator_is_twice_the_precision(self) -> None:
        q = sqrt(TWO).approx(7)
        assert q.denominator == 14

    def test_clamps_negative_approximations(self, check_modulus) -> None:
        # x = 0 approached from below
        below_zero = Real(lambda n: Rational(-1, 2 * n))
        for n in (1, 5, 1000):
            assert sqrt(below_zero).approx(n) == Rational.ZERO
        assert sqrt(Real.ZERO).approx(3) == Rational.ZERO
        check_modulus(sqrt(below_zero), 40)


class TestCos:
    def test_modulus(self, check_modulus) -> None:
        check_modulus(cos(Real.ONE), 50)
        check_modulus(cos(TWO), 50)

    def test_converges(self) -> None:
        assert_close(cos(Real.ONE), lambda: mp.cos(1), (1, 10, 1000, 10 ** 12))
        assert_close(cos(Real(-7)), lambda: mp.cos(-7), (1, 100, 10 ** 9))
        assert_close(Real.cos(Real.ZERO), lambda: mp.mpf(1), (1, 10 ** 6))

    def test_inexact_operand(self, check_modulus) -> None:
        c = cos(sqrt(TWO))
        check_modulus(c, 40)
        assert_close(c, lambda: mp.cos(mp.sqrt(2)), (1, 1000, 10 ** 8))


class TestArctan:
    def test_modulus(self, check_modulus) -> None:
        check_modulus(arctan(Real.ONE), 50)
        check_modulus(arctan(HALF), 50)
        check_modulus(arctan(Real(-3)), 40)

    def test_converges_on_every_branch(self) -> None:
        for value in ("1/5", "1/2", "3/4", "1", "-3/4", "-1", "3/2", "3", "-3", "-2/3", "100"):
            q = Rational(*map(int, value.split("/"))) if "/" in value else Rational(int(value), 1)
            assert_close(Real.arctan(Real(q)), lambda: mp.atan(mpf_of(q)), (1, 10, 1000, 10 ** 9))

    def test_inexact_operand(self) -> None:
        assert_close(arctan(sqrt(TWO)), lambda: mp.atan(mp.sqrt(2)), (1, 100, 10 ** 6))


class TestExp:
    def test_modulus(self, check_modulus) -> None:
        check_modulus(exp(Real.ONE), 50)
        check_modulus(exp(TWO), 50)

    def test_high_precisions_keep_the_modulus(self) -> None:
        e = exp(Real.ONE)
        values = {n: e.approx(n) for n in (1000, 1200, 1500)}
        for n, a in values.items():
            for m, b in values.items():
                assert a.subtract(b).abs() <= Rational(1, n).add(Rational(1, m))
        assert_close(e, lambda: mp.e, tuple(values))

    def test_converges(self) -> None:
        assert_close(exp(TWO), lambda: mp.exp(2), (1, 1000, 1600, 10 ** 12))
        assert_close(exp(Real(-3)), lambda: mp.exp(-3), (1, 1000, 10 ** 9))
        assert_close(Real.exp(Real.ZERO), lambda: mp.mpf(1), (1, 10 ** 6))

    def test_inexact_operand(self, check_modulus) -> None:
        x = exp(sqrt(TWO))
        check_modulus(x, 30)
        assert_close(x, lambda: mp.exp(mp.sqrt(2)), (1, 1000, 10 ** 6))


class TestConstants:
    def test_identities(self) -> None:
        assert Real.E is E
        assert Real.PI is PI
        assert Real.ZERO.approx(5) == Rational.ZERO
        assert Real.ONE.approx(5) == Rational.ONE

    def test_e(self) -> None:
        assert_close(E, lambda: mp.e, (1, 10, 10 ** 6, 10 ** 30))

    def test_pi(self, check_modulus) -> None:
        assert_close(PI, lambda: mp.pi, (1, 10, 10 ** 6, 10 ** 30))
        check_modulus(PI, 30)

    @pytest.mark.parametrize("real, reference", [(E, lambda: mp.e), (PI, lambda: mp.pi)])
    def test_decimal_approx(self, real: Real, reference) -> None:
        for digits in (0, 5, 20):
            d = real.decimal_approx(digits)
            assert d.as_tuple().exponent == -(digits + 1)
            with mp.workdps(60):
                bound = mp.mpf(10) ** -digits + mp.mpf(10) ** -(digits + 1) / 2
                assert abs(mp.mpf(str(d)) - reference()) <= bound

    def test_pi_from_arctan_of_one(self) -> None:
        quarter_turns = arctan(Real.ONE).multiply(Real(4))
        assert_close(quarter_turns, lambda: mp.pi, (1, 100, 10 ** 6))
