import io
import math

import pytest

from chrislang import strings


def test_print_value_writes_line():
    buf = io.StringIO()
    strings.print_value("hi", buf)
    strings.print_value(None, buf)
    assert buf.getvalue().splitlines() == ["hi", "nil"]


@pytest.mark.parametrize("a,b", [("ab", "cd"), ("", "x"), ("x", "")])
def test_concat_invariant(a, b):
    result = strings.concat(a, b)
    assert result.startswith(a)
    assert result.endswith(b)
    assert len(result) == len(a) + len(b)


def test_concat_missing():
    assert strings.concat(None, "x") == "x"
    assert strings.concat(None, None) == ""


def test_char_to_str():
    assert strings.char_to_str("q") == "q"
    with pytest.raises(ValueError):
        strings.char_to_str("ab")


@pytest.mark.parametrize("value", [0, 7, -12345, 2**62])
def test_int_round_trip(value):
    assert strings.str_to_int(strings.int_to_str(value)) == value


@pytest.mark.parametrize("value", [0.5, -2.25, 123456.0, 1e-5])
def test_float_round_trip(value):
    assert strings.str_to_float(strings.float_to_str(value)) == value


def test_float_to_str_exponent_form():
    assert strings.float_to_str(1e20) == "1e+20"


def test_bool_to_str():
    assert strings.bool_to_str(True) == "true"
    assert strings.bool_to_str(0) == "false"


def test_str_to_int_prefix_and_garbage():
    assert strings.str_to_int("  42abc") == 42
    assert strings.str_to_int("-7") == -7
    assert strings.str_to_int("abc") == 0
    assert strings.str_to_int(None) == 0


def test_str_to_int_clamps():
    assert strings.str_to_int("9" * 30) == 2**63 - 1


def test_str_to_float_prefix_and_garbage():
    assert strings.str_to_float("3.5xyz") == 3.5
    assert strings.str_to_float("") == 0.0
    assert strings.str_to_float(None) == 0.0
    assert math.isinf(strings.str_to_float("inf"))


def test_str_len():
    assert strings.str_len("hello") == len("hello")
    assert strings.str_len(None) == 0


def test_contains_starts_ends():
    assert strings.contains("hello", "ell")
    assert not strings.contains("hello", "xyz")
    assert strings.contains("hello", "")
    assert not strings.contains(None, "a")
    assert strings.starts_with("hello", "he")
    assert not strings.starts_with("hello", "lo")
    assert strings.ends_with("hello", "lo")
    assert not strings.ends_with("lo", "hello")
    assert not strings.ends_with(None, "x")


def test_index_of():
    text = "hello world"
    pos = strings.index_of(text, "o")
    assert text[pos:].startswith("o")
    assert "o" not in text[:pos]
    assert strings.index_of(text, "z") == -1
    assert strings.index_of(None, "a") == -1


def test_substring_clamping():
    text = "hello"
    assert strings.substring(text, -5, 2) == strings.substring(text, 0, 2)
    assert strings.substring(text, 3, 1) == ""
    assert strings.substring(text, 0, 100) == text
    assert strings.substring(text, 10, 20) == ""
    assert strings.substring(None, 0, 1) == ""


def test_replace():
    result = strings.replace("a-b-c", "-", "+")
    assert "-" not in result
    assert result.count("+") == 2
    assert strings.replace("abc", "", "x") == "abc"
    assert strings.replace("abc", None, "x") == "abc"
    assert strings.replace(None, "a", "b") == ""


def test_trim():
    assert strings.trim("  \t hi \n\v") == "hi"
    assert strings.trim(None) == ""


def test_case_conversion_ascii_only():
    upper = strings.to_upper("abc")
    assert upper.isupper()
    assert strings.to_lower(upper) == "abc"
    assert strings.to_upper("é") == "é"
    assert strings.to_lower(None) == ""


def test_char_at():
    assert strings.char_at("abc", 1) == "b"
    assert strings.char_at("abc", 3) == ""
    assert strings.char_at("abc", -1) == ""
    assert strings.char_at(None, 0) == ""


def test_split_and_join_round_trip():
    text = "a,,b,"
    parts = strings.split(text, ",")
    assert "" in parts
    assert strings.join(parts, ",") == text


def test_split_empty_delimiter():
    assert strings.split("abc", "") == ["a", "b", "c"]
    assert strings.split(None, ",") == []


def test_join_edge_cases():
    assert strings.join([], ",") == ""
    assert strings.join(["a", None, "b"], None) == "ab"


@pytest.mark.parametrize("index,length", [(-1, 3), (3, 3), (0, 0)])
def test_check_bounds_raises(index, length):
    with pytest.raises(IndexError, match="Array index out of bounds"):
        strings.check_bounds(index, length)


def test_pop():
    items = [1, 2]
    assert strings.pop(items) == 2
    assert items == [1]
    items.clear()
    with pytest.raises(IndexError, match="Array pop on empty array"):
        strings.pop(items)