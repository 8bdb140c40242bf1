import io

import pytest

from chrislang import testing
from chrislang.errors import ThrownError


def test_runner_progress_lines():
    out = io.StringIO()
    runner = testing.TestRunner(out)
    runner.start("adds")
    runner.passed("adds")
    runner.start("breaks")
    runner.failed("breaks")
    text = out.getvalue()
    assert "  [ RUN  ] adds\n" in text
    assert "  [  OK  ] adds\n" in text
    assert "  [ FAIL ] breaks\n" in text


def test_runner_summary_returns_failures():
    out = io.StringIO()
    runner = testing.TestRunner(out)
    runner.passed("a")
    runner.failed("b")
    assert runner.summary() == 1
    assert "2 test(s) ran: 1 passed, 1 failed." in out.getvalue()


def test_runner_summary_all_passing():
    runner = testing.TestRunner(io.StringIO())
    runner.passed("a")
    assert runner.summary() == 0


def test_assert_eq_passes_silently():
    out = io.StringIO()
    testing.assert_eq(42, 42, "x == 42", out)
    assert out.getvalue() == ""


def test_assert_eq_failure():
    out = io.StringIO()
    with pytest.raises(ThrownError) as info:
        testing.assert_eq(1, 2, "one", out)
    assert info.value.message == "assertion failed"
    assert "ASSERTION FAILED: one (expected 2, got 1)" in out.getvalue()


def test_assert_true_failure():
    out = io.StringIO()
    with pytest.raises(ThrownError):
        testing.assert_true(0, "flag", out)
    assert "ASSERTION FAILED: flag (expected true)" in out.getvalue()


def test_tracker_counts_and_exit_code():
    out, err = io.StringIO(), io.StringIO()
    tracker = testing.AssertionTracker(out, err)
    assert tracker.check(True, "ok", "t.chr", 1) is True
    assert tracker.equal_int(42, 42, "ints", 2) is True
    assert tracker.equal_str("hello", "hello", "strs", 3) is True
    assert tracker.exit_code() == 0
    assert tracker.equal_int(1, 2, "mismatch", 4) is False
    assert tracker.total == 4
    assert tracker.passed == 3
    assert tracker.failed == 1
    assert tracker.exit_code() == 1
    assert "FAIL: mismatch" in err.getvalue()


def test_tracker_check_failure_message():
    err = io.StringIO()
    tracker = testing.AssertionTracker(io.StringIO(), err)
    tracker.check(False, None, "main.chr", 12)
    assert "  FAIL: assertion failed (main.chr:12)" in err.getvalue()


def test_tracker_equal_str_with_missing_value():
    err = io.StringIO()
    tracker = testing.AssertionTracker(io.StringIO(), err)
    assert tracker.equal_str(None, None, None, 5) is False
    assert '"(null)"' in err.getvalue()
    assert "assertEqual" in err.getvalue()


def test_tracker_summary_verdicts():
    out = io.StringIO()
    tracker = testing.AssertionTracker(out, io.StringIO())
    tracker.check(True, "ok")
    tracker.summary()
    assert "--- Test Results ---" in out.getvalue()
    assert out.getvalue().endswith("PASSED\n")

    failing_out = io.StringIO()
    failing = testing.AssertionTracker(failing_out, io.StringIO())
    failing.check(False, "bad")
    failing.summary()
    assert failing_out.getvalue().endswith("FAILED\n")