"""String and array helpers of the language runtime."""

from __future__ import annotations

import re
import sys
from typing import List, MutableSequence, Optional, Sequence, TextIO, TypeVar

T = TypeVar("T")

_C_SPACE = " \t\n\v\f\r"
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_FLOAT_PREFIX = re.compile(
    r"[ \t\n\v\f\r]*("
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|[+-]?(?:infinity|inf|nan)"
    r")",
    re.IGNORECASE,
)
_TO_UPPER = str.maketrans("abcdefghijklmnopqrstuvwxyz", "ABCDEFGHIJKLMNOPQRSTUVWXYZ")
_TO_LOWER = str.maketrans("ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz")


def print_value(value: Optional[str], stream: Optional[TextIO] = None) -> None:
    """Write ``value`` and a newline; a missing value prints as ``nil``."""
    out = stream if stream is not None else sys.stdout
    out.write(("nil" if value is None else value) + "\n")


def concat(a: Optional[str], b: Optional[str]) -> str:
    """Join two strings, treating missing ones as empty."""
    return (a or "") + (b or "")


def char_to_str(c: str) -> str:
    """Turn a single character into a string."""
    if len(c) != 1:
        raise ValueError(f"expected a single character, got {c!r}")
    return c


def int_to_str(value: int) -> str:
    """Decimal text of an integer."""
    return str(int(value))


def float_to_str(value: float) -> str:
    """Text of a float with six significant digits."""
    return format(float(value), "g")


def bool_to_str(value: object) -> str:
    """``true`` or ``false``, by the truth of ``value``."""
    return str(bool(value)).lower()


def str_to_int(text: Optional[str]) -> int:
    """Parse the leading integer of ``text``; 0 if there is none."""
    if text is None:
        return 0
    match = _INT_PREFIX.match(text)
    if match is None:
        return 0
    return max(_INT64_MIN, min(_INT64_MAX, int(match.group(1))))


def str_to_float(text: Optional[str]) -> float:
    """Parse the leading number of ``text``; 0.0 if there is none."""
    if text is None:
        return 0.0
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        return 0.0
    return float(match.group(1))


def str_len(text: Optional[str]) -> int:
    """Length of ``text``; a missing string has length 0."""
    return len(text) if text is not None else 0


def contains(text: Optional[str], sub: Optional[str]) -> bool:
    """Whether ``sub`` occurs in ``text``."""
    if text is None or sub is None:
        return False
    return sub in text


def starts_with(text: Optional[str], prefix: Optional[str]) -> bool:
    """Whether ``text`` begins with ``prefix``."""
    if text is None or prefix is None:
        return False
    return text.startswith(prefix)


def ends_with(text: Optional[str], suffix: Optional[str]) -> bool:
    """Whether ``text`` ends with ``suffix``."""
    if text is None or suffix is None:
        return False
    return text.endswith(suffix)


def index_of(text: Optional[str], sub: Optional[str]) -> int:
    """Position of the first ``sub`` in ``text``, or -1."""
    if text is None or sub is None:
        return -1
    return text.find(sub)


def substring(text: Optional[str], start: int, end: int) -> str:
    """The part of ``text`` from ``start`` up to ``end``, with both clamped."""
    if text is None:
        return ""
    start = max(start, 0)
    end = min(max(end, start), len(text))
    if start >= end:
        return ""
    return text[start:end]


def replace(text: Optional[str], old: Optional[str], new: Optional[str]) -> str:
    """Replace every non-overlapping ``old`` with ``new``, left to right."""
    if text is None or old is None or new is None:
        return text if text is not None else ""
    if not old:
        return text
    return text.replace(old, new)


def trim(text: Optional[str]) -> str:
    """Strip leading and trailing ASCII whitespace."""
    return text.strip(_C_SPACE) if text is not None else ""


def to_upper(text: Optional[str]) -> str:
    """Upper-case ASCII letters; other characters are kept."""
    return text.translate(_TO_UPPER) if text is not None else ""


def to_lower(text: Optional[str]) -> str:
    """Lower-case ASCII letters; other characters are kept."""
    return text.translate(_TO_LOWER) if text is not None else ""


def char_at(text: Optional[str], index: int) -> str:
    """The character at ``index``, or an empty string when out of range."""
    if text is None or not 0 <= index < len(text):
        return ""
    return text[index]


def split(text: Optional[str], delim: Optional[str]) -> List[str]:
    """Split on ``delim``; an empty delimiter splits into characters."""
    if text is None or delim is None:
        return []
    if not delim:
        return list(text)
    return text.split(delim)


def join(items: Optional[Sequence[Optional[str]]], sep: Optional[str]) -> str:
    """Join strings with ``sep``; missing items and separator count as empty."""
    if not items:
        return ""
    return (sep or "").join(item or "" for item in items)


def check_bounds(index: int, length: int) -> None:
    """Raise ``IndexError`` unless ``0 <= index < length``."""
    if index < 0 or index >= length:
        raise IndexError(f"Array index out of bounds: index {index}, length {length}")


def pop(items: MutableSequence[T]) -> T:
    """Remove and return the last element of ``items``."""
    if not items:
        raise IndexError("Array pop on empty array")
    return items.pop()