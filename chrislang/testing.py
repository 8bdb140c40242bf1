"""Test-run reporting and assertion helpers for compiled test programs."""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from chrislang.errors import ThrownError


def _out(stream: Optional[TextIO]) -> TextIO:
    return stream if stream is not None else sys.stdout


class TestRunner:
    """Prints per-test progress lines and counts passes and failures."""

    __test__ = False

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream
        self.passed_count = 0
        self.failed_count = 0

    def start(self, name: str) -> None:
        """Announce that test ``name`` is starting."""
        _out(self._stream).write(f"  [ RUN  ] {name}\n")

    def passed(self, name: str) -> None:
        """Record that test ``name`` passed."""
        _out(self._stream).write(f"  [  OK  ] {name}\n")
        self.passed_count += 1

    def failed(self, name: str) -> None:
        """Record that test ``name`` failed."""
        _out(self._stream).write(f"  [ FAIL ] {name}\n")
        self.failed_count += 1

    def summary(self) -> int:
        """Print the totals and return the number of failed tests."""
        total = self.passed_count + self.failed_count
        _out(self._stream).write(
            f"\n{total} test(s) ran: {self.passed_count} passed, "
            f"{self.failed_count} failed.\n"
        )
        return self.failed_count


def assert_eq(a: int, b: int, expr: str, stream: Optional[TextIO] = None) -> None:
    """Fail the current test with ``ThrownError`` unless ``a == b``."""
    if a != b:
        _out(stream).write(f"    ASSERTION FAILED: {expr} (expected {b}, got {a})\n")
        raise ThrownError("assertion failed")


def assert_true(cond: object, expr: str, stream: Optional[TextIO] = None) -> None:
    """Fail the current test with ``ThrownError`` unless ``cond`` is truthy."""
    if not cond:
        _out(stream).write(f"    ASSERTION FAILED: {expr} (expected true)\n")
        raise ThrownError("assertion failed")


class AssertionTracker:
    """Counts assertion outcomes, reporting failures without stopping."""

    def __init__(
        self, stream: Optional[TextIO] = None, err_stream: Optional[TextIO] = None
    ) -> None:
        self._stream = stream
        self._err_stream = err_stream
        self.total = 0
        self.passed = 0
        self.failed = 0

    def _err(self) -> TextIO:
        return self._err_stream if self._err_stream is not None else sys.stderr

    def _record(self, ok: bool, failure: str) -> bool:
        self.total += 1
        if ok:
            self.passed += 1
        else:
            self.failed += 1
            self._err().write(failure)
        return ok

    def check(
        self, condition: object, message: Optional[str], file: str = "", line: int = 0
    ) -> bool:
        """Record whether ``condition`` holds; return it as a bool."""
        text = message if message else "assertion failed"
        return self._record(bool(condition), f"  FAIL: {text} ({file}:{line})\n")

    def equal_int(
        self, expected: int, actual: int, message: Optional[str], line: int = 0
    ) -> bool:
        """Record whether two integers are equal."""
        text = message if message else "assertEqual"
        return self._record(
            expected == actual,
            f"  FAIL: {text} \u2014 expected {expected}, got {actual} (line {line})\n",
        )

    def equal_str(
        self,
        expected: Optional[str],
        actual: Optional[str],
        message: Optional[str],
        line: int = 0,
    ) -> bool:
        """Record whether two strings are present and equal."""
        text = message if message else "assertEqual"
        ok = expected is not None and actual is not None and expected == actual
        shown_expected = expected if expected is not None else "(null)"
        shown_actual = actual if actual is not None else "(null)"
        return self._record(
            ok,
            f'  FAIL: {text} \u2014 expected "{shown_expected}", '
            f'got "{shown_actual}" (line {line})\n',
        )

    def summary(self) -> None:
        """Print the totals and an overall verdict."""
        out = _out(self._stream)
        out.write("\n--- Test Results ---\n")
        out.write(f"Total: {self.total} | Passed: {self.passed} | Failed: {self.failed}\n")
        out.write("FAILED\n" if self.failed > 0 else "PASSED\n")

    def exit_code(self) -> int:
        """1 if any assertion failed, else 0."""
        return 1 if self.failed > 0 else 0