import pytest

from chrislang.errors import MAX_TRY_DEPTH, ThrownError, TryStack


def test_begin_returns_entry_depth_and_increments():
    stack = TryStack()
    first = stack.begin()
    second = stack.begin()
    assert second == first + 1
    assert stack.depth() == second + 1


def test_end_decrements_and_stops_at_zero():
    stack = TryStack()
    stack.begin()
    stack.end()
    assert stack.depth() == 0
    stack.end()
    assert stack.depth() == 0


def test_throw_inside_handler_unwinds_one_level():
    stack = TryStack()
    stack.begin()
    entered = stack.begin()
    with pytest.raises(ThrownError) as info:
        stack.throw("boom")
    assert info.value.handled
    assert info.value.handler == entered
    assert info.value.message == "boom"
    assert stack.depth() == entered


def test_throw_without_handler_is_unhandled():
    stack = TryStack()
    with pytest.raises(ThrownError, match="Unhandled exception: oops") as info:
        stack.throw("oops")
    assert not info.value.handled
    assert info.value.handler is None


def test_unhandled_nil_message():
    stack = TryStack()
    with pytest.raises(ThrownError, match=r"\(nil\)"):
        stack.throw(None)


def test_last_message_is_recorded():
    stack = TryStack()
    stack.begin()
    with pytest.raises(ThrownError):
        stack.throw("first")
    assert stack.last_message == "first"


def test_nesting_too_deep():
    stack = TryStack(max_depth=2)
    stack.begin()
    stack.begin()
    with pytest.raises(RuntimeError, match="try nesting too deep"):
        stack.begin()
    assert stack.depth() == 2


def test_default_limit():
    stack = TryStack()
    for _ in range(MAX_TRY_DEPTH):
        stack.begin()
    with pytest.raises(RuntimeError):
        stack.begin()


def test_invalid_max_depth():
    with pytest.raises(ValueError):
        TryStack(max_depth=0)