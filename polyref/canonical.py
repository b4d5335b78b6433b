"""Canonical JSON (JSON Canonicalization Scheme) with hard size and depth caps."""

from __future__ import annotations

import math
from typing import Any

from polyref.errors import CoreError

PAYLOAD_MAX_BYTES = 16 * 1024 * 1024
"""Hard cap on the canonical payload size, in bytes."""

PAYLOAD_MAX_DEPTH = 64
"""Hard cap on JSON nesting depth."""


class CanonicalError(CoreError, ValueError):
    """A value cannot be written as canonical JSON."""


class OversizeError(CanonicalError):
    """The canonical output exceeds :data:`PAYLOAD_MAX_BYTES`."""

    def __init__(self) -> None:
        super().__init__(f"payload exceeds {PAYLOAD_MAX_BYTES} bytes")


class TooDeepError(CanonicalError):
    """The value nests deeper than :data:`PAYLOAD_MAX_DEPTH`."""

    def __init__(self) -> None:
        super().__init__(f"payload exceeds depth {PAYLOAD_MAX_DEPTH}")


class NonFiniteError(CanonicalError):
    """The value contains NaN or an infinity."""

    def __init__(self) -> None:
        super().__init__("payload contains non-finite number")


_ESCAPES = {
    ord('"'): '\\"',
    ord("\\"): "\\\\",
    0x08: "\\b",
    0x0C: "\\f",
    ord("\n"): "\\n",
    ord("\r"): "\\r",
    ord("\t"): "\\t",
}
for _code in range(0x20):
    _ESCAPES.setdefault(_code, f"\\u{_code:04x}")
del _code


def canonicalize(value: Any) -> bytes:
    """Return the canonical UTF-8 byte form of a JSON value.

    The value is built from ``None``, ``bool``, ``int``, ``float``, ``str``,
    lists/tuples and dicts with string keys. Keys are sorted by UTF-16 code
    units and no whitespace is emitted.
    """
    _check_value(value, 0)
    parts: list[str] = []
    _write_value(value, parts)
    try:
        out = "".join(parts).encode("utf-8")
    except UnicodeEncodeError as exc:
        raise CanonicalError(f"serialization error: {exc}") from None
    if len(out) > PAYLOAD_MAX_BYTES:
        raise OversizeError()
    return out


def _check_value(value: Any, depth: int) -> None:
    if depth > PAYLOAD_MAX_DEPTH:
        raise TooDeepError()
    if isinstance(value, float):
        if not math.isfinite(value):
            raise NonFiniteError()
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_value(item, depth + 1)
    elif isinstance(value, dict):
        for item in value.values():
            _check_value(item, depth + 1)


def _format_float(number: float) -> str:
    text = repr(number)
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    sign = "-" if exponent.startswith("-") else ""
    digits = exponent.lstrip("+-").lstrip("0") or "0"
    return f"{mantissa}e{sign}{digits}"


def _write_string(text: str, parts: list[str]) -> None:
    parts.append('"')
    parts.append(text.translate(_ESCAPES))
    parts.append('"')


def _utf16_key(key: str) -> bytes:
    return key.encode("utf-16-be", "surrogatepass")


def _write_value(value: Any, parts: list[str]) -> None:
    if value is None:
        parts.append("null")
    elif value is True:
        parts.append("true")
    elif value is False:
        parts.append("false")
    elif isinstance(value, int):
        parts.append(str(int(value)))
    elif isinstance(value, float):
        parts.append(_format_float(value))
    elif isinstance(value, str):
        _write_string(value, parts)
    elif isinstance(value, (list, tuple)):
        parts.append("[")
        for index, item in enumerate(value):
            if index:
                parts.append(",")
            _write_value(item, parts)
        parts.append("]")
    elif isinstance(value, dict):
        if not all(isinstance(key, str) for key in value):
            raise CanonicalError("serialization error: object keys must be strings")
        parts.append("{")
        for index, key in enumerate(sorted(value, key=_utf16_key)):
            if index:
                parts.append(",")
            _write_string(key, parts)
            parts.append(":")
            _write_value(value[key], parts)
        parts.append("}")
    else:
        raise CanonicalError(
            f"serialization error: unsupported type {type(value).__name__}"
        )