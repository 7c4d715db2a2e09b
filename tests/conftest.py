import pytest

from rationals import Rational


@pytest.fixture
def check_modulus():
    """
    Assert |x(n) - x(m)| <= 1/n + 1/m for all start <= m < n < stop.

    Each approximation is computed once here; the Real itself caches nothing.
    """
    def check(real, stop, start=1):
        approximations = {n: real.approx(n) for n in range(start, stop)}
        for n in range(start, stop):
            for m in range(start, n):
                gap = approximations[n].subtract(approximations[m]).abs()
                bound = Rational(1, n).add(Rational(1, m))
                assert gap <= bound, f"|x({n}) - x({m})| = {gap} > {bound}"
    return check
