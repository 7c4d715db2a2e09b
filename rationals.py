from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from math import gcd
from typing import Optional


class InvalidDivisor(ZeroDivisionError):
    pass


class ComparisonTypeError(TypeError):
    pass


@dataclass(frozen=True, eq=False)
class Rational:
    """Exact fraction of two Python ints.

    The denominator is always positive; the sign lives in the numerator.
    Construction does not reduce, arithmetic results are in lowest terms.
    Equality is by cross-multiplication, so (2 / 4) == (1 / 2).
    """
    numerator: int
    denominator: int

    def __post_init__(self):
        n, d = self.numerator, self.denominator
        if not isinstance(n, int) or not isinstance(d, int):
            raise TypeError(f"Rational needs int parts, got {type(n).__name__}/{type(d).__name__}")
        if d == 0:
            raise InvalidDivisor(f"zero denominator for numerator {n}")
        if d < 0:
            object.__setattr__(self, "numerator", -n)
            object.__setattr__(self, "denominator", -d)

    @classmethod
    def create(cls, n: int, d: int) -> Optional[Rational]:
        """Rational n/d, or None if d is zero."""
        if d == 0:
            return None
        return cls(n, d)

    def lowest_terms(self) -> Rational:
        g = gcd(self.numerator, self.denominator)
        return Rational(self.numerator // g, self.denominator // g)

    def add(self, other: Rational) -> Rational:
        num = self.numerator * other.denominator + other.numerator * self.denominator
        return Rational(num, self.denominator * other.denominator).lowest_terms()

    def subtract(self, other: Rational) -> Rational:
        num = self.numerator * other.denominator - other.numerator * self.denominator
        return Rational(num, self.denominator * other.denominator).lowest_terms()

    def multiply(self, other: Rational) -> Rational:
        return Rational(self.numerator * other.numerator,
                        self.denominator * other.denominator).lowest_terms()

    def negate(self) -> Rational:
        return Rational(-self.numerator, self.denominator)

    def inverse(self) -> Optional[Rational]:
        return Rational.create(self.denominator, self.numerator)

    def divide(self, other: Rational) -> Optional[Rational]:
        inv = other.inverse()
        if inv is None:
            return None
        return self.multiply(inv)

    def abs(self) -> Rational:
        return Rational(abs(self.numerator), self.denominator)

    def ceil(self) -> int:
        """Smallest integer >= self."""
        return -(-self.numerator // self.denominator)

    def compare(self, other: Rational) -> int:
        """-1, 0 or 1 as self is less than, equal to or greater than other."""
        if not isinstance(other, Rational):
            raise ComparisonTypeError(f"cannot compare Rational with {type(other).__name__}")
        lhs = self.numerator * other.denominator
        rhs = other.numerator * self.denominator
        return (lhs > rhs) - (lhs < rhs)

    def equals(self, other: Rational) -> bool:
        return self.compare(other) == 0

    def normalize(self, n: int) -> int:
        """
        Scale to a numerator over 2n: returns a = floor(2 * self * n), so that
        a / 2n lies within 1/(2n) below self.
        """
        return (2 * self.numerator * n) // self.denominator

    def decimal_value(self, scale: int) -> Decimal:
        """
        Decimal rounded to `scale` places, ties away from zero (half-up).
        Built from the digit tuple directly, so neither decimal context rounding
        nor the int-to-str digit limit applies.
        """
        if scale < 0:
            raise ValueError(f"decimal_value requires scale >= 0, got {scale}")
        num = abs(self.numerator) * 10 ** scale
        rounded = (2 * num + self.denominator) // (2 * self.denominator)
        sign = 1 if self.numerator < 0 and rounded != 0 else 0
        return Decimal((sign, Decimal(rounded).as_tuple().digits, -scale))

    # Python number protocol

    def __str__(self) -> str:
        return f"({self.numerator} / {self.denominator})"

    def __eq__(self, other):
        if not isinstance(other, Rational):
            return NotImplemented
        return self.equals(other)

    def __hash__(self):
        reduced = self.lowest_terms()
        return hash((reduced.numerator, reduced.denominator))

    def __lt__(self, other: Rational) -> bool:
        return self.compare(other) < 0

    def __le__(self, other: Rational) -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: Rational) -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: Rational) -> bool:
        return self.compare(other) >= 0

    def __bool__(self) -> bool:
        return self.numerator != 0

    def __add__(self, other: Rational) -> Rational:
        if not isinstance(other, Rational):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Rational) -> Rational:
        if not isinstance(other, Rational):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other: Rational) -> Rational:
        if not isinstance(other, Rational):
            return NotImplemented
        return self.multiply(other)

    def __truediv__(self, other: Rational) -> Rational:
        if not isinstance(other, Rational):
            return NotImplemented
        q = self.divide(other)
        if q is None:
            raise InvalidDivisor(f"division of {self} by zero")
        return q

    def __neg__(self) -> Rational:
        return self.negate()

    def __abs__(self) -> Rational:
        return self.abs()


Rational.ZERO = Rational(0, 1)
Rational.ONE = Rational(1, 1)


def to_rational(x: int | Fraction | Rational) -> Rational:
    """Convert an exact number to a Rational. Floats are refused: they are not exact."""
    if isinstance(x, Rational):
        return x
    if isinstance(x, bool) or isinstance(x, float):
        raise TypeError(f"refusing inexact or boolean value {x!r}")
    if isinstance(x, int):
        return Rational(x, 1)
    if isinstance(x, Fraction):
        return Rational(x.numerator, x.denominator)
    raise TypeError(f"cannot convert {type(x).__name__} to Rational")


def exact_decimal(q: Rational, max_digits: Optional[int] = None) -> str:
    """
    Exact decimal expansion of a Rational.
    - If it terminates, returns all digits.
    - If it repeats, returns a string with the repeating part in parentheses, e.g. "0.(3)".
    - If max_digits is given and the expansion needs more fractional digits,
      the first max_digits are returned followed by "...".
    """
    if q.numerator == 0:
        return "0"

    sign = '-' if q.numerator < 0 else ''
    n = abs(q.numerator)
    d = q.denominator

    int_part = n // d
    rem = n % d
    if rem == 0:
        return f"{sign}{int_part}"

    # long division with cycle detection
    digits = []
    seen = {}  # remainder -> index in digits

    while rem != 0 and rem not in seen:
        if max_digits is not None and len(digits) == max_digits:
            return f"{sign}{int_part}.{''.join(digits)}..."
        seen[rem] = len(digits)
        rem *= 10
        digits.append(str(rem // d))
        rem = rem % d

    if rem == 0:
        return f"{sign}{int_part}.{''.join(digits)}"
    start = seen[rem]
    nonrep = ''.join(digits[:start])
    rep = ''.join(digits[start:])
    return f"{sign}{int_part}.{nonrep}({rep})"
