"""Constructive real numbers in the sense of Bishop and Bridges.

A Real is not a value but a procedure: approx(n) returns a Rational within
1/n of the (never materialised) true value, for every positive int n. It
follows that any two approximations satisfy

    |approx(n) - approx(m)| <= 1/n + 1/m

which is the only property a caller can check.

Every operation below builds a new Real whose approximation function samples
its operands at derived precisions, chosen so the errors of the parts add up
to at most 1/n:

    negate      x(n)                                 error unchanged
    add         x(2n) + y(2n)                        1/2n + 1/2n
    multiply    x(Kn) * y(Kn), K = 2 max(|x(1)|+2)   bounded by operand size
    inverse     1/x(N^3) or 1/x(iN^2)                N from a threshold search
    sqrt        isqrt(floor(4n^2 x(4n^2))) / 2n      1/2n + 1/2n
    cos, exp    truncated series, rounded to /2n     1/4n + 1/4n + 1/2n
    arctan      reduced series, rounded to /2n       1/4n + 3/32n + 1/8n + 1/2n

Nothing is cached: each call to approx re-evaluates the whole composition.
"""

from __future__ import annotations
from decimal import Decimal
from fractions import Fraction
from typing import Callable, Optional
import logging

from rationals import Rational, to_rational

logger = logging.getLogger(__name__)

# Upper bound on the precisions tried by Real.inverse() before giving up.
# None keeps the search unbounded: it then never returns for a zero operand.
INVERSE_SEARCH_LIMIT: Optional[int] = None

HALF = Rational(1, 2)


class NonTerminatingSearch(ArithmeticError):
    pass


class Real:
    """A real number given by its approximation function n -> Rational."""

    __slots__ = ("_approx",)

    def __init__(self, value: Rational | int | Fraction | Callable[[int], Rational]):
        if callable(value):
            self._approx = value
        else:
            constant = to_rational(value)
            self._approx = lambda n: constant

    def __setattr__(self, name, value):
        if hasattr(self, "_approx"):
            raise AttributeError("Real is immutable")
        object.__setattr__(self, name, value)

    def approx(self, n: int) -> Rational:
        """A Rational within 1/n of this real."""
        if isinstance(n, bool) or not isinstance(n, int):
            raise TypeError(f"precision must be an int, got {type(n).__name__}")
        if n < 1:
            raise ValueError(f"precision must be positive, got {n}")
        return self._approx(n)

    def decimal_approx(self, digits: int) -> Decimal:
        """Approximation to within 10^-digits, rendered with digits + 1 places."""
        return self.approx(10 ** digits).decimal_value(digits + 1)

    def negate(self) -> Real:
        x = self._approx
        return Real(lambda n: x(n).negate())

    def add(self, other: Real) -> Real:
        x, y = self._approx, other._approx
        return Real(lambda n: x(2 * n).add(y(2 * n)))

    def subtract(self, other: Real) -> Real:
        return self.add(other.negate())

    def multiply(self, other: Real) -> Real:
        """
        Product of two reals.

        With |x| <= |x(1)| + 1 and the same for y, let
        K = 2 * max(ceil|x(1)| + 2, ceil|y(1)| + 2). Sampling both operands at
        Kn gives |xy - x'y'| <= |x||y - y'| + |y'||x - x'| < 1/n.
        The bound is taken once, when the product is built.
        """
        x, y = self._approx, other._approx
        kx = x(1).abs().ceil() + 2
        ky = y(1).abs().ceil() + 2
        two_k = 2 * max(kx, ky)
        return Real(lambda n: x(two_k * n).multiply(y(two_k * n)))

    def inverse(self, limit: Optional[int] = None) -> Real:
        """
        Reciprocal of a real that is apart from zero.

        Searches k = 1, 2, ... for the first k with |x(k)| > 1/k. Then
        N = ceil(2 / (|x(k)| - 1/k)) guarantees |x(m)| >= 1/N for all m >= N,
        and the reciprocal is approximated by 1/x(N^3) for i < N and by
        1/x(i * N^2) otherwise.

        The search runs now, not when the result is approximated. It does not
        terminate if this real is zero or its approximations break the 1/n
        contract, unless `limit` (or INVERSE_SEARCH_LIMIT) caps the precisions
        tried, in which case NonTerminatingSearch is raised.
        """
        if limit is None:
            limit = INVERSE_SEARCH_LIMIT
        x = self._approx

        k = 1
        xk = x(k)
        while xk.abs() <= Rational(1, k):
            if limit is not None and k >= limit:
                raise NonTerminatingSearch(
                    f"no k <= {limit} with |x(k)| > 1/k; operand may be zero")
            k += 1
            xk = x(k)

        gap = xk.abs().subtract(Rational(1, k))
        N = Rational(2, 1).divide(gap).ceil()
        logger.debug("inverse: apart from zero at k=%d, threshold N=%d", k, N)

        n_cubed = N ** 3
        n_squared = N ** 2

        def approx(i: int) -> Rational:
            m = n_cubed if i < N else i * n_squared
            return x(m).inverse()

        return Real(approx)

    def divide(self, other: Real, limit: Optional[int] = None) -> Real:
        return self.multiply(other.inverse(limit))

    def __neg__(self) -> Real:
        return self.negate()

    def __add__(self, other: Real) -> Real:
        return self.add(other)

    def __sub__(self, other: Real) -> Real:
        return self.subtract(other)

    def __mul__(self, other: Real) -> Real:
        return self.multiply(other)

    def __truediv__(self, other: Real) -> Real:
        return self.divide(other)

    @staticmethod
    def sqrt(r: Real) -> Real:
        return sqrt(r)

    @staticmethod
    def cos(r: Real) -> Real:
        return cos(r)

    @staticmethod
    def arctan(r: Real) -> Real:
        return arctan(r)

    @staticmethod
    def exp(r: Real) -> Real:
        return exp(r)


def _isqrt(x: int) -> int:
    """floor(sqrt(x)) by recursion on x // 4."""
    if x == 0:
        return 0
    r2 = 2 * _isqrt(x // 4)
    r3 = r2 + 1
    return r2 if x < r3 * r3 else r3


def sqrt(r: Real) -> Real:
    """
    Square root of a non-negative real.

    r is sampled at 4n^2, which moves the root by at most 1/2n, and
    floor(sqrt(floor(4n^2 q))) / 2n is within 1/2n of sqrt(q). Approximations
    that dip below zero are clamped to zero.
    """
    def approx(n: int) -> Rational:
        m = 2 * n * n
        scaled = r.approx(2 * m).normalize(m)
        return Rational(_isqrt(max(scaled, 0)), 2 * n)
    return Real(approx)


def _cos_sum(r: Real, n: int) -> Rational:
    """
    Taylor sum of cos at r(4n), truncated once the Lagrange remainder
    |x|^2k / (2k)! drops under 1/4n.
    """
    x = r.approx(4 * n)
    x_sq = x.multiply(x)
    tolerance = Rational(1, 4 * n)

    total = Rational.ZERO
    term = Rational.ONE
    k = 0
    while term.abs() > tolerance:
        total = total.add(term)
        k += 1
        term = term.multiply(x_sq).multiply(Rational(-1, (2 * k - 1) * (2 * k)))
    return total


def cos(r: Real) -> Real:
    return Real(lambda n: Rational(_cos_sum(r, n).normalize(n), 2 * n))


def _exp_sum(r: Real, n: int, scale: int) -> Rational:
    """
    Taylor sum of exp at r(4n * scale), where scale exceeds e^(|x| + 1).

    Once k + 1 > 2|x| every later term is at most half the previous one, so
    the tail from term k on is bounded by 2|t_k|.
    """
    x = r.approx(4 * n * scale)
    twice_x = x.abs().multiply(Rational(2, 1))
    tolerance = Rational(1, 4 * n)

    total = Rational.ZERO
    term = Rational.ONE
    k = 0
    while twice_x >= Rational(k + 1, 1) or term.abs().multiply(Rational(2, 1)) > tolerance:
        total = total.add(term)
        k += 1
        term = term.multiply(x).multiply(Rational(1, k))
    return total


def exp(r: Real) -> Real:
    """
    Exponential of a real.

    exp is not globally Lipschitz, so the operand is sampled at a precision
    scaled by 3^(ceil|r(1)| + 2), which exceeds e^(|x| + 1). The bound is
    taken once, when the Real is built.
    """
    scale = 3 ** (r.approx(1).abs().ceil() + 2)
    return Real(lambda n: Rational(_exp_sum(r, n, scale).normalize(n), 2 * n))


def _arctan_series(y: Rational, tolerance: Rational) -> Rational:
    """Alternating Taylor sum of arctan for |y| <= 1; the tail is below the first omitted term."""
    y_sq = y.multiply(y)
    total = Rational.ZERO
    power = y
    term = y
    k = 0
    while term.abs() > tolerance:
        total = total.add(term)
        k += 1
        power = power.multiply(y_sq).negate()
        term = power.multiply(Rational(1, 2 * k + 1))
    return total


def _arctan_sum(r: Real, n: int) -> Rational:
    """
    arctan at r(4n), with the series only ever run on |y| <= 1/2:

        |x| > 1          arctan x = sign(x) pi/2 - arctan(1/x)
        1/2 < x <= 1     arctan x =  pi/4 + arctan((x - 1) / (x + 1))
        -1 <= x < -1/2   arctan x = -pi/4 + arctan((x + 1) / (1 - x))

    At most 3/4 pi is added, so pi sampled at 8n contributes under 3/32n.
    """
    x = r.approx(4 * n)
    tolerance = Rational(1, 8 * n)

    reflect = x.abs() > Rational.ONE
    if reflect:
        side = Rational(-1 if x.numerator < 0 else 1, 2)
        x = x.inverse()

    shift = Rational.ZERO  # multiple of pi
    if x > HALF:
        shift = Rational(1, 4)
        x = x.subtract(Rational.ONE).divide(x.add(Rational.ONE))
    elif x < HALF.negate():
        shift = Rational(-1, 4)
        x = x.add(Rational.ONE).divide(Rational.ONE.subtract(x))

    total = _arctan_series(x, tolerance)
    if reflect:
        total = total.negate()
        shift = side.subtract(shift)
    if shift:
        total = total.add(shift.multiply(PI.approx(8 * n)))
    return total


def arctan(r: Real) -> Real:
    return Real(lambda n: Rational(_arctan_sum(r, n).normalize(n), 2 * n))


ZERO = Real(Rational.ZERO)
ONE = Real(Rational.ONE)
E = exp(ONE)
# Machin: pi = 16 arctan(1/5) - 4 arctan(1/239)
PI = (arctan(Real(Rational(1, 5))).multiply(Real(16))
      .subtract(arctan(Real(Rational(1, 239))).multiply(Real(4))))

Real.ZERO = ZERO
Real.ONE = ONE
Real.E = E
Real.PI = PI
