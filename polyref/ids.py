"""Validated identifiers: entity, artifact, correspondence and build-edge ids.

An id can only be obtained through its parser, which checks the id grammar
and rejects unsafe input: control characters, bidi overrides, zero-width
characters, non-NFC text, absolute paths and parent traversal.
"""

from __future__ import annotations

import unicodedata
from abc import ABC, abstractmethod
from enum import Enum
from functools import total_ordering
from typing import Optional

from polyref.errors import CoreError

ID_MAX_LEN = 16 * 1024
"""Hard cap on the length of an id, in UTF-8 bytes."""

VALID_LANGUAGES = frozenset(
    {"build", "dockerfile", "java", "json", "jsonschema", "openapi", "py", "sql", "ts", "yaml"}
)
VALID_REPO_SIDES = frozenset({"old", "new"})

_LOWER_HEX = frozenset("0123456789abcdef")
_KIND_CHARS = frozenset("abcdefghijklmnopqrstuvwxyz_")


class IdErrorKind(str, Enum):
    """Category of an id parse failure."""

    EMPTY = "empty"
    TOO_LONG = "too_long"
    NUL = "nul"
    CONTROL_CHAR = "control_char"
    BIDI_OVERRIDE = "bidi_override"
    ZERO_WIDTH = "zero_width"
    NOT_NFC = "not_nfc"
    PARENT_TRAVERSAL = "parent_traversal"
    ABSOLUTE_PATH = "absolute_path"
    SYNTAX = "syntax"

    def __str__(self) -> str:
        return self.value


_MESSAGES = {
    IdErrorKind.EMPTY: "empty id",
    IdErrorKind.TOO_LONG: "id too long",
    IdErrorKind.NUL: "id contains NUL",
    IdErrorKind.CONTROL_CHAR: "id contains control character",
    IdErrorKind.BIDI_OVERRIDE: "id contains bidi override codepoint",
    IdErrorKind.ZERO_WIDTH: "id contains zero-width codepoint",
    IdErrorKind.NOT_NFC: "id is not NFC-normalised",
    IdErrorKind.PARENT_TRAVERSAL: "id contains path-traversal segment",
    IdErrorKind.ABSOLUTE_PATH: "id contains absolute path",
}


class IdParseError(CoreError, ValueError):
    """An id failed to parse; ``kind`` says why, ``detail`` names the grammar rule."""

    def __init__(self, kind: IdErrorKind, detail: Optional[str] = None) -> None:
        if kind is IdErrorKind.SYNTAX:
            message = f"id does not match grammar: {detail}"
        else:
            message = _MESSAGES[kind]
        super().__init__(message)
        self.kind = kind
        self.detail = detail


def _syntax(detail: str) -> IdParseError:
    return IdParseError(IdErrorKind.SYNTAX, detail)


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8", "surrogatepass"))


def _check_disallowed_chars(text: str) -> None:
    for ch in text:
        code = ord(ch)
        if code == 0:
            raise IdParseError(IdErrorKind.NUL)
        if code <= 0x1F or 0x7F <= code <= 0x9F:
            raise IdParseError(IdErrorKind.CONTROL_CHAR)
        if 0x202A <= code <= 0x202E or 0x2066 <= code <= 0x2069:
            raise IdParseError(IdErrorKind.BIDI_OVERRIDE)
        if 0x200B <= code <= 0x200D or code in (0xFEFF, 0x2060):
            raise IdParseError(IdErrorKind.ZERO_WIDTH)


def _check_nfc(text: str) -> None:
    if unicodedata.normalize("NFC", text) != text:
        raise IdParseError(IdErrorKind.NOT_NFC)


def _check_path_safety(text: str) -> None:
    if text.startswith("/"):
        raise IdParseError(IdErrorKind.ABSOLUTE_PATH)
    if ".." in text.split("/"):
        raise IdParseError(IdErrorKind.PARENT_TRAVERSAL)


def _validate_common(text: str) -> None:
    if not isinstance(text, str):
        raise _syntax("id must be a string")
    if not text:
        raise IdParseError(IdErrorKind.EMPTY)
    if _byte_len(text) > ID_MAX_LEN:
        raise IdParseError(IdErrorKind.TOO_LONG)
    _check_disallowed_chars(text)
    _check_nfc(text)
    _check_path_safety(text)


def _check_kind(kind: str) -> None:
    if not kind:
        raise _syntax("empty kind")
    if not set(kind) <= _KIND_CHARS:
        raise _syntax("kind must be lowercase ascii + underscore")


def _is_lower_hex(text: str) -> bool:
    return set(text) <= _LOWER_HEX


@total_ordering
class _ValidatedId(ABC):
    """Immutable string id whose only ingress is validation."""

    __slots__ = ("_value",)

    def __init__(self, text: str) -> None:
        _validate_common(text)
        self._check(text)
        self._value = text

    @abstractmethod
    def _check(self, text: str) -> None:
        """Check the type-specific grammar; raise :class:`IdParseError` on failure."""

    @property
    def value(self) -> str:
        """The underlying id string."""
        return self._value

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value  # type: ignore[attr-defined]

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value < other._value  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._value))


class EntityId(_ValidatedId):
    """``<repo_side>:<language>:<kind>:<local_path>:<stable_hash>``.

    ``local_path`` may itself contain colons; the stable hash is whatever
    follows the last colon.
    """

    __slots__ = ("_segments",)

    @classmethod
    def parse(cls, text: str) -> EntityId:
        """Parse and validate ``text``; raises :class:`IdParseError`."""
        return cls(text)

    def _check(self, text: str) -> None:
        parts = text.split(":", 3)
        if len(parts) < 2:
            raise _syntax("missing language")
        if len(parts) < 3:
            raise _syntax("missing kind")
        if len(parts) < 4:
            raise _syntax("missing local_path and stable_hash")
        repo_side, language, kind, rest = parts
        local_path, sep, stable_hash = rest.rpartition(":")
        if not sep:
            raise _syntax("missing stable_hash separator")

        if repo_side not in VALID_REPO_SIDES:
            raise _syntax("invalid repo_side")
        if language not in VALID_LANGUAGES:
            raise _syntax("invalid language")
        _check_kind(kind)
        if not local_path:
            raise _syntax("empty local_path")
        if _byte_len(stable_hash) != 12:
            raise _syntax("stable_hash must be 12 hex chars")
        if not _is_lower_hex(stable_hash):
            raise _syntax("stable_hash must be lowercase hex")
        self._segments = (repo_side, language, kind, local_path, stable_hash)

    def repo_side(self) -> str:
        """The repo side segment, ``old`` or ``new``."""
        return self._segments[0]

    def language(self) -> str:
        """The language segment."""
        return self._segments[1]

    def kind(self) -> str:
        """The entity kind segment; the only segment compared for type-respecting."""
        return self._segments[2]

    def local_path(self) -> str:
        """The local path segment, possibly with ``#`` anchors and colons."""
        return self._segments[3]

    def stable_hash(self) -> str:
        """The 12-hex-character stable hash segment."""
        return self._segments[4]


class ArtifactId(_ValidatedId):
    """``artifact:<repo_side>:<path>:<content_hash>``."""

    __slots__ = ()

    @classmethod
    def parse(cls, text: str) -> ArtifactId:
        """Parse and validate ``text``; raises :class:`IdParseError`."""
        return cls(text)

    def _check(self, text: str) -> None:
        if not text.startswith("artifact:"):
            raise _syntax("must start with 'artifact:'")
        stripped = text[len("artifact:"):]
        repo_side, sep, after_repo_side = stripped.partition(":")
        if not sep:
            raise _syntax("missing path")
        path, sep, content_hash = after_repo_side.rpartition(":")
        if not sep:
            raise _syntax("missing content_hash separator")

        if repo_side not in VALID_REPO_SIDES:
            raise _syntax("invalid repo_side")
        if not path:
            raise _syntax("empty path")
        if _byte_len(content_hash) != 12:
            raise _syntax("content_hash must be 12 hex chars")
        if not _is_lower_hex(content_hash):
            raise _syntax("content_hash must be lowercase hex")


def _check_kind_hash(text: str, prefix: str) -> None:
    """Check ``<prefix><kind>:<hash>`` with a 16–64 character lowercase hex hash."""
    if not text.startswith(prefix):
        raise _syntax(f"must start with '{prefix}'")
    kind, sep, digest = text[len(prefix):].partition(":")
    if not sep:
        raise _syntax("missing hash separator")
    _check_kind(kind)
    if not 16 <= _byte_len(digest) <= 64:
        raise _syntax("hash must be 16–64 hex chars")
    if not _is_lower_hex(digest):
        raise _syntax("hash must be lowercase hex")


class CorrId(_ValidatedId):
    """Correspondence id: ``corr:<kind>:<hash>``."""

    __slots__ = ()

    @classmethod
    def parse(cls, text: str) -> CorrId:
        """Parse and validate ``text``; raises :class:`IdParseError`."""
        return cls(text)

    def _check(self, text: str) -> None:
        _check_kind_hash(text, "corr:")


class EdgeId(_ValidatedId):
    """Build-edge id: ``edge:<kind>:<hash>``."""

    __slots__ = ()

    @classmethod
    def parse(cls, text: str) -> EdgeId:
        """Parse and validate ``text``; raises :class:`IdParseError`."""
        return cls(text)

    def _check(self, text: str) -> None:
        _check_kind_hash(text, "edge:")