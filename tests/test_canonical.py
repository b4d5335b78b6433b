import pytest

from polyref.canonical import (
    PAYLOAD_MAX_BYTES,
    PAYLOAD_MAX_DEPTH,
    CanonicalError,
    NonFiniteError,
    OversizeError,
    TooDeepError,
    canonicalize,
)
from polyref.errors import CoreError


def _nested(levels):
    value = None
    for _ in range(levels):
        value = [value]
    return value


def test_sorts_keys():
    assert canonicalize({"b": 2, "a": 1}) == b'{"a":1,"b":2}'


def test_stable_under_key_reorder():
    assert canonicalize({"z": 1, "a": 2, "m": 3}) == canonicalize({"a": 2, "m": 3, "z": 1})


def test_no_whitespace():
    out = canonicalize({"key": [1, 2, 3]})
    assert b" " not in out
    assert out == b'{"key":[1,2,3]}'


def test_rejects_oversize_payload():
    with pytest.raises(OversizeError):
        canonicalize("x" * (PAYLOAD_MAX_BYTES + 1))


def test_rejects_too_deep():
    with pytest.raises(TooDeepError):
        canonicalize(_nested(PAYLOAD_MAX_DEPTH + 2))


def test_depth_boundary():
    assert canonicalize(_nested(PAYLOAD_MAX_DEPTH)).startswith(b"[[")
    with pytest.raises(TooDeepError):
        canonicalize(_nested(PAYLOAD_MAX_DEPTH + 1))


def test_strings_with_escapes():
    assert canonicalize('hello\nworld\t"quoted"') == b'"hello\\nworld\\t\\"quoted\\""'


def test_control_chars_use_unicode_escape():
    assert canonicalize("a\x01\x1fb") == b'"a\\u0001\\u001fb"'
    assert canonicalize("\b\f\r\\") == b'"\\b\\f\\r\\\\"'


def test_non_ascii_is_written_as_utf8():
    assert canonicalize("é") == '"é"'.encode("utf-8")


def test_null_bool():
    assert canonicalize(None) == b"null"
    assert canonicalize(True) == b"true"
    assert canonicalize(False) == b"false"


def test_numbers():
    assert canonicalize(42) == b"42"
    assert canonicalize(-1) == b"-1"
    assert canonicalize(1.5) == b"1.5"
    assert canonicalize(1e20) == b"1e20"
    assert canonicalize(1e-7) == b"1e-7"


def test_empty_containers():
    assert canonicalize({}) == b"{}"
    assert canonicalize([]) == b"[]"


@pytest.mark.parametrize("number", [float("nan"), float("inf"), float("-inf")])
def test_rejects_non_finite(number):
    with pytest.raises(NonFiniteError):
        canonicalize({"n": [number]})


def test_keys_sorted_by_utf16_code_units():
    # U+1F600 encodes as a surrogate pair starting 0xD83D, below U+FFFF.
    out = canonicalize({"\uffff": 1, "\U0001F600": 2})
    assert out == '{"\U0001F600":2,"\uffff":1}'.encode("utf-8")


def test_rejects_non_string_keys():
    with pytest.raises(CanonicalError):
        canonicalize({1: "a"})


def test_rejects_unsupported_type():
    with pytest.raises(CanonicalError):
        canonicalize({"a": object()})


def test_errors_are_core_errors():
    with pytest.raises(CoreError):
        canonicalize(float("nan"))