from rationals import Rational

ALLOWED_CHARS = set("0123456789./-")

class ParseError(ValueError):
    pass

def check_text_strict(s: str) -> str:
    s = s.strip()
    if not s:
        raise ParseError("Empty rational literal.")
    if any(c not in ALLOWED_CHARS for c in s):
        bad = sorted(set(c for c in s if c not in ALLOWED_CHARS))
        raise ParseError(f"Illegal character(s) found: {bad}. Allowed are only 0-9 . / -")
    return s

def parse_digits(s: str, i: int):
    start = i
    while i < len(s) and s[i].isdigit():
        i += 1
    if i == start:
        raise ParseError(f"Expected digit at position {i}")
    return s[start:i], i

def parse_rational(text: str) -> Rational:
    """
    Parse an exact rational literal: "7", "-0.125" or "-3/4".
    The denominator of a fraction must be unsigned and non-zero.
    """
    s = check_text_strict(text)
    i = 0
    negative = False
    if s[i] == '-':
        negative = True
        i += 1
    whole, i = parse_digits(s, i)

    if i == len(s):
        num, den = int(whole), 1
    elif s[i] == '.':
        frac, i = parse_digits(s, i + 1)
        num, den = int(whole + frac), 10 ** len(frac)
    elif s[i] == '/':
        den_digits, i = parse_digits(s, i + 1)
        num, den = int(whole), int(den_digits)
        if den == 0:
            raise ParseError(f"Zero denominator in '{s}'")
    else:
        raise ParseError(f"Unexpected '{s[i]}' at position {i}")

    if i != len(s):
        raise ParseError(f"Trailing characters at position {i}")
    if negative:
        num = -num
    return Rational(num, den).lowest_terms()
