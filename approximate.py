from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import logging
import math
import sys
import time

import mpmath as mp

from parsing import parse_rational, ParseError
from rationals import Rational, exact_decimal
from reals import Real, NonTerminatingSearch, E, PI, sqrt, cos, arctan, exp

# Digits of mpmath working precision on top of those the bound itself needs.
REFERENCE_GUARD_DIGITS = 30
# Fractional digits shown for an approximation's exact expansion.
PREVIEW_DIGITS = 60
# Precisions tried before `inverse:` gives up on a (possibly) zero argument.
INVERSE_SEARCH_LIMIT = 10_000

MODES = ("approx", "digits")

FUNCTIONS: Dict[str, Tuple[Callable[[Real], Real], Callable]] = {
    "sqrt":    (sqrt, mp.sqrt),
    "cos":     (cos, mp.cos),
    "arctan":  (arctan, mp.atan),
    "exp":     (exp, mp.exp),
    "inverse": (lambda r: r.inverse(INVERSE_SEARCH_LIMIT), lambda v: 1 / v),
    "negate":  (lambda r: r.negate(), lambda v: -v),
}


def to_mpf(q: Rational):
    """Rational -> mpf at the current working precision."""
    return mp.mpf(q.numerator) / q.denominator


@dataclass(frozen=True)
class Expression:
    text: str
    real: Real
    reference: Callable[[], object]  # mpf at the current working precision


def build_expression(text: str) -> Expression:
    """
    Expression forms:
      e | pi                  the constants
      <rational>              a constant real, e.g. "-3/4"
      <function>:<rational>   one of FUNCTIONS applied to a constant, e.g. "exp:2"
    """
    if text == "e":
        return Expression(text, E, lambda: mp.e)
    if text == "pi":
        return Expression(text, PI, lambda: mp.pi)

    name, sep, literal = text.partition(":")
    if not sep:
        q = parse_rational(text)
        return Expression(text, Real(q), lambda: to_mpf(q))

    if name not in FUNCTIONS:
        raise ParseError(f"Unknown function '{name}'. Supported functions {sorted(FUNCTIONS)}")
    q = parse_rational(literal)
    if name == "sqrt" and q.numerator < 0:
        raise ParseError(f"sqrt needs a non-negative argument, got {literal}")
    build, reference = FUNCTIONS[name]
    return Expression(text, build(Real(q)), lambda: reference(to_mpf(q)))


@dataclass(frozen=True)
class Sample:
    precision: int
    rendered: str
    seconds: float
    ok: bool        # result lies within its error bound of the reference


def evaluate(expression: Expression, mode: str, n: int) -> Sample:
    """Evaluate once (nothing is cached between samples) and check it against mpmath."""
    logging.info("Evaluating %s in %s mode at n=%d", expression.text, mode, n)
    start = time.perf_counter()
    if mode == "approx":
        value = expression.real.approx(n)
    else:
        value = expression.real.decimal_approx(n)
    elapsed = time.perf_counter() - start

    digits = len(str(n)) if mode == "approx" else n
    with mp.workdps(digits + REFERENCE_GUARD_DIGITS):
        reference = expression.reference()
        if mode == "approx":
            error = abs(to_mpf(value) - reference)
            bound = mp.mpf(1) / n
            rendered = f"approx({n}) = {value} = {exact_decimal(value, PREVIEW_DIGITS)}"
        else:
            error = abs(mp.mpf(str(value)) - reference)
            # 10^-n from the approximation, half a unit in the last place from rounding
            bound = mp.mpf(10) ** -n + mp.mpf(10) ** -(n + 1) / 2
            rendered = f"{expression.text} to {n} digits: {value}"
        ok = bool(error <= bound)

    return Sample(precision=n, rendered=rendered, seconds=elapsed, ok=ok)


@dataclass(frozen=True)
class TimingStats:
    mean: Optional[float]
    minimum: Optional[float]
    maximum: Optional[float]


def compute_stats(vals: List[float]) -> TimingStats:
    if not vals:
        return TimingStats(None, None, None)
    fsum = math.fsum(vals)
    return TimingStats(fsum / len(vals), min(vals), max(vals))


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv if argv is None else argv
    verbose = len(argv) > 1 and argv[1] == "-v"
    if verbose:
        argv = argv[:1] + argv[2:]
    if len(argv) < 4 or argv[1] not in MODES:
        print(f"Usage: {argv[0]} [-v] <approx|digits> <expression> <n> [<n> ...]")
        print(f"  expression: e | pi | <rational> | <function>:<rational>, function in {sorted(FUNCTIONS)}")
        print("  -v: log each evaluation and the inverse search threshold")
        return 1

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level)
    logging.getLogger().setLevel(level)
    mode = argv[1]

    try:
        precisions = [int(a) for a in argv[3:]]
    except ValueError:
        print("Error: <n> must be an integer.")
        return 1
    lowest = 1 if mode == "approx" else 0
    if any(n < lowest for n in precisions):
        print(f"Error: <n> must be at least {lowest} in {mode} mode.")
        return 1

    try:
        expression = build_expression(argv[2])
    except ParseError as e:
        print(f"Error parsing expression: {e}")
        return 1
    except NonTerminatingSearch as e:
        print(f"Error: {e}")
        return 1

    samples = []
    for n in precisions:
        sample = evaluate(expression, mode, n)
        samples.append(sample)
        print(sample.rendered)
        print(f"  Time Elapsed: {sample.seconds * 1000:.3f}ms")
        print(f"  Within error bound of reference: {sample.ok}")

    stats = compute_stats([s.seconds * 1000 for s in samples])
    print(f"\nTimes (ms, over {len(samples)} runs):")
    print(f"  mean: {stats.mean:.3f}  min: {stats.minimum:.3f}  max: {stats.maximum:.3f}")

    failed = [s.precision for s in samples if not s.ok]
    if failed:
        print(f"WARNING: results outside their error bound at n = {failed}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
