"""Numeric built-ins and line input, with C-style results for edge cases."""

from __future__ import annotations

import math
import random
import sys
from typing import Optional, TextIO

LINE_BUFFER = 4096

_rng = random.Random()


def abs_int(x: int) -> int:
    """Absolute value of an integer."""
    return -x if x < 0 else x


def min_int(a: int, b: int) -> int:
    """The smaller of two integers."""
    return a if a < b else b


def max_int(a: int, b: int) -> int:
    """The larger of two integers."""
    return a if a > b else b


def sqrt(x: float) -> float:
    """Square root; NaN for negative input."""
    if x < 0:
        return math.nan
    return math.sqrt(x)


def _is_odd_integer(y: float) -> bool:
    return math.isfinite(y) and y == int(y) and int(y) % 2 == 1


def power(base: float, exp: float) -> float:
    """``base`` raised to ``exp``; overflow gives infinity, domain errors NaN."""
    try:
        return math.pow(base, exp)
    except OverflowError:
        return -math.inf if base < 0 and _is_odd_integer(exp) else math.inf
    except ValueError:
        if base == 0:
            return math.copysign(math.inf, base) if _is_odd_integer(exp) else math.inf
        return math.nan


def _keep_zero_sign(result: float, x: float) -> float:
    return math.copysign(0.0, x) if result == 0 else result


def floor(x: float) -> float:
    """Largest integral value not above ``x``, as a float."""
    if not math.isfinite(x):
        return float(x)
    return _keep_zero_sign(float(math.floor(x)), x)


def ceil(x: float) -> float:
    """Smallest integral value not below ``x``, as a float."""
    if not math.isfinite(x):
        return float(x)
    return _keep_zero_sign(float(math.ceil(x)), x)


def round_half_away(x: float) -> float:
    """Round to the nearest integer, halves away from zero."""
    if not math.isfinite(x):
        return float(x)
    whole = float(math.trunc(x))
    if abs(x - whole) >= 0.5:
        whole += math.copysign(1.0, x)
    return math.copysign(whole, x) if whole == 0 else whole


def log(x: float) -> float:
    """Natural logarithm; -inf at zero and NaN below."""
    if x == 0:
        return -math.inf
    if x < 0:
        return math.nan
    return math.log(x)


def sin(x: float) -> float:
    """Sine; NaN for infinite input."""
    return math.nan if math.isinf(x) else math.sin(x)


def cos(x: float) -> float:
    """Cosine; NaN for infinite input."""
    return math.nan if math.isinf(x) else math.cos(x)


def tan(x: float) -> float:
    """Tangent; NaN for infinite input."""
    return math.nan if math.isinf(x) else math.tan(x)


def fabs(x: float) -> float:
    """Absolute value of a float."""
    return math.fabs(x)


def fmin(a: float, b: float) -> float:
    """The smaller of two floats, ignoring a NaN operand."""
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a < b else b


def fmax(a: float, b: float) -> float:
    """The larger of two floats, ignoring a NaN operand."""
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a > b else b


def random_int(lo: int, hi: int) -> int:
    """A random integer in ``[lo, hi]``; ``lo`` when the range is empty."""
    if lo >= hi:
        return lo
    return _rng.randint(lo, hi)


def read_line(stream: Optional[TextIO] = None) -> str:
    """Read one line without its newline; lines longer than the buffer come in pieces."""
    source = stream if stream is not None else sys.stdin
    line = source.readline(LINE_BUFFER - 1)
    if line.endswith("\n"):
        line = line[:-1]
    return line