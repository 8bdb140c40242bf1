"""A lenient JSON reader and writer used by the language's standard library."""

from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass
from typing import Any, List, Optional

MAX_OUTPUT = 65535

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_WHITESPACE = " \t\n\r"
_DIGITS = "0123456789"
_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t", "r": "\r", "/": "/"}
_INT_PREFIX = re.compile(r"-?[0-9]+")
_FLOAT_PREFIX = re.compile(r"-?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class JsonKind(enum.Enum):
    """The type of a JSON value."""

    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


@dataclass
class JsonValue:
    """A parsed JSON value.

    ``value`` holds a bool, int, float or str for scalars, a list of
    ``JsonValue`` for arrays and a list of ``(key, JsonValue)`` pairs for
    objects, in document order.
    """

    kind: JsonKind
    value: Any = None

    def _lookup(self, key: str) -> Optional["JsonValue"]:
        if self.kind is not JsonKind.OBJECT:
            return None
        for name, member in self.value:
            if name == key:
                return member
        return None

    def get_string(self, key: str) -> str:
        """The string stored under ``key``, or an empty string."""
        member = self._lookup(key)
        if member is not None and member.kind is JsonKind.STRING:
            return member.value
        return ""

    def get_int(self, key: str) -> int:
        """The number under ``key`` as an integer (floats truncated), or 0."""
        member = self._lookup(key)
        if member is None:
            return 0
        if member.kind is JsonKind.INT:
            return member.value
        if member.kind is JsonKind.FLOAT and math.isfinite(member.value):
            return max(_INT64_MIN, min(_INT64_MAX, math.trunc(member.value)))
        return 0

    def get_bool(self, key: str) -> bool:
        """The boolean under ``key``, or False."""
        member = self._lookup(key)
        if member is not None and member.kind is JsonKind.BOOL:
            return member.value
        return False

    def get_float(self, key: str) -> float:
        """The number under ``key`` as a float, or 0.0."""
        member = self._lookup(key)
        if member is not None and member.kind in (JsonKind.FLOAT, JsonKind.INT):
            return float(member.value)
        return 0.0

    def get_array(self, key: str) -> Optional["JsonValue"]:
        """The array under ``key``, or None."""
        member = self._lookup(key)
        if member is not None and member.kind is JsonKind.ARRAY:
            return member
        return None

    def get_object(self, key: str) -> Optional["JsonValue"]:
        """The object under ``key``, or None."""
        member = self._lookup(key)
        if member is not None and member.kind is JsonKind.OBJECT:
            return member
        return None

    def array_length(self) -> int:
        """Number of elements if this is an array, else 0."""
        return len(self.value) if self.kind is JsonKind.ARRAY else 0

    def array_get(self, index: int) -> Optional["JsonValue"]:
        """The element at ``index``, or None if out of range or not an array."""
        if self.kind is not JsonKind.ARRAY or not 0 <= index < len(self.value):
            return None
        return self.value[index]

    def stringify(self) -> str:
        """Compact JSON text of this value, cut at ``MAX_OUTPUT`` characters."""
        parts: List[str] = []
        _write(self, parts)
        return "".join(parts)[:MAX_OUTPUT]


def _write(node: Optional[JsonValue], out: List[str]) -> None:
    if node is None or node.kind is JsonKind.NULL:
        out.append("null")
    elif node.kind is JsonKind.BOOL:
        out.append("true" if node.value else "false")
    elif node.kind is JsonKind.INT:
        out.append(str(node.value))
    elif node.kind is JsonKind.FLOAT:
        out.append(format(node.value, "g"))
    elif node.kind is JsonKind.STRING:
        escaped = (
            node.value.replace("\\", "\\\\")
            .replace('"', '\\"')
            .replace("\n", "\\n")
            .replace("\t", "\\t")
        )
        out.append(f'"{escaped}"')
    elif node.kind is JsonKind.ARRAY:
        out.append("[")
        for position, item in enumerate(node.value):
            if position:
                out.append(",")
            _write(item, out)
        out.append("]")
    else:
        out.append("{")
        for position, (key, member) in enumerate(node.value):
            if position:
                out.append(",")
            # Keys are written as stored, without escaping.
            out.append(f'"{key}":')
            _write(member, out)
        out.append("}")


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_ws(self) -> None:
        while (char := self.peek()) and char in _WHITESPACE:
            self.pos += 1

    def skip_digits(self) -> None:
        while (char := self.peek()) and char in _DIGITS:
            self.pos += 1

    def value(self) -> JsonValue:
        self.skip_ws()
        char = self.peek()
        if char == '"':
            return self.string()
        if char == "{":
            return self.object()
        if char == "[":
            return self.array()
        if char and (char == "-" or char in _DIGITS):
            return self.number()
        for word, node in (
            ("true", JsonValue(JsonKind.BOOL, True)),
            ("false", JsonValue(JsonKind.BOOL, False)),
            ("null", JsonValue(JsonKind.NULL)),
        ):
            if self.text.startswith(word, self.pos):
                self.pos += len(word)
                return node
        return JsonValue(JsonKind.NULL)

    def string(self) -> JsonValue:
        self.pos += 1
        chars: List[str] = []
        while (char := self.peek()) and char != '"':
            if char == "\\":
                self.pos += 1
                escaped = self.peek()
                if not escaped:
                    break
                chars.append(_ESCAPES.get(escaped, escaped))
            else:
                chars.append(char)
            self.pos += 1
        if self.peek() == '"':
            self.pos += 1
        return JsonValue(JsonKind.STRING, "".join(chars))

    def number(self) -> JsonValue:
        start = self.pos
        is_float = False
        if self.peek() == "-":
            self.pos += 1
        self.skip_digits()
        if self.peek() == ".":
            is_float = True
            self.pos += 1
            self.skip_digits()
        if self.peek() in ("e", "E") and self.peek():
            is_float = True
            self.pos += 1
            if self.peek() in ("+", "-") and self.peek():
                self.pos += 1
            self.skip_digits()
        literal = self.text[start:self.pos]
        if is_float:
            match = _FLOAT_PREFIX.match(literal)
            return JsonValue(JsonKind.FLOAT, float(match.group(0)) if match else 0.0)
        match = _INT_PREFIX.match(literal)
        number = int(match.group(0)) if match else 0
        return JsonValue(JsonKind.INT, max(_INT64_MIN, min(_INT64_MAX, number)))

    def array(self) -> JsonValue:
        self.pos += 1
        items: List[JsonValue] = []
        node = JsonValue(JsonKind.ARRAY, items)
        self.skip_ws()
        if self.peek() == "]":
            self.pos += 1
            return node
        while True:
            self.skip_ws()
            items.append(self.value())
            self.skip_ws()
            char = self.peek()
            if char == ",":
                self.pos += 1
                continue
            if char == "]":
                self.pos += 1
            break
        return node

    def object(self) -> JsonValue:
        self.pos += 1
        pairs: List[tuple] = []
        node = JsonValue(JsonKind.OBJECT, pairs)
        self.skip_ws()
        if self.peek() == "}":
            self.pos += 1
            return node
        while True:
            self.skip_ws()
            if self.peek() != '"':
                break
            key = self.string().value
            self.skip_ws()
            if self.peek() == ":":
                self.pos += 1
            self.skip_ws()
            pairs.append((key, self.value()))
            self.skip_ws()
            char = self.peek()
            if char == ",":
                self.pos += 1
                continue
            if char == "}":
                self.pos += 1
            break
        return node


def parse(text: Optional[str]) -> Optional[JsonValue]:
    """Parse ``text`` leniently; malformed input yields nulls rather than errors."""
    if text is None:
        return None
    # Text ends at the first NUL character.
    return _Parser(text.split("\0", 1)[0]).value()