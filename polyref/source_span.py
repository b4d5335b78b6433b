"""Source spans over artifacts, with a checked constructor."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from polyref.errors import CoreError
from polyref.ids import ArtifactId

_U32_MAX = 2**32 - 1


class SpanError(CoreError, ValueError):
    """A source span has an inverted range."""


def _check_u32(name: str, value: Any, minimum: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    if not minimum <= value <= _U32_MAX:
        raise ValueError(f"{name} must be in [{minimum}, {_U32_MAX}]")
    return value


@dataclass(frozen=True, order=True)
class LineCol:
    """Position: 1-indexed line and 0-indexed UTF-8 byte column."""

    line: int
    col: int

    def __post_init__(self) -> None:
        _check_u32("line", self.line, minimum=1)
        _check_u32("col", self.col)

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "col": self.col}


def _linecol_from(data: Any) -> LineCol:
    if not isinstance(data, Mapping) or "line" not in data or "col" not in data:
        raise ValueError("position must be a mapping with 'line' and 'col'")
    return LineCol(data["line"], data["col"])


@dataclass(frozen=True)
class SourceSpan:
    """Half-open span ``[start, end)`` over an artifact.

    Construction rejects ``start > end`` and an inverted UTF-16 column pair.
    """

    artifact: ArtifactId
    start: LineCol
    end: LineCol
    utf16_cols: Optional[tuple[int, int]] = None

    def __post_init__(self) -> None:
        if not isinstance(self.artifact, ArtifactId):
            raise TypeError("artifact must be an ArtifactId")
        if not isinstance(self.start, LineCol) or not isinstance(self.end, LineCol):
            raise TypeError("start and end must be LineCol")
        if self.start > self.end:
            raise SpanError("inverted range: start > end")
        if self.utf16_cols is not None:
            cols = tuple(self.utf16_cols)
            if len(cols) != 2:
                raise ValueError("utf16_cols must be a pair")
            first = _check_u32("utf16 start col", cols[0])
            second = _check_u32("utf16 end col", cols[1])
            if first > second:
                raise SpanError("utf16 cols inverted")
            object.__setattr__(self, "utf16_cols", (first, second))

    def to_dict(self) -> dict[str, Any]:
        """Wire form; ``utf16_cols`` is omitted when absent."""
        data: dict[str, Any] = {
            "artifact": str(self.artifact),
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
        }
        if self.utf16_cols is not None:
            data["utf16_cols"] = list(self.utf16_cols)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SourceSpan:
        """Build a span from its wire form, applying every constructor check."""
        if not isinstance(data, Mapping):
            raise ValueError("source span must be a mapping")
        for key in ("artifact", "start", "end"):
            if key not in data:
                raise ValueError(f"source span is missing '{key}'")
        raw_cols = data.get("utf16_cols")
        cols = None
        if raw_cols is not None:
            if not isinstance(raw_cols, (list, tuple)) or len(raw_cols) != 2:
                raise ValueError("utf16_cols must be a pair")
            cols = (raw_cols[0], raw_cols[1])
        return cls(
            ArtifactId.parse(data["artifact"]),
            _linecol_from(data["start"]),
            _linecol_from(data["end"]),
            cols,
        )