"""Evidence records and validated evidence pointers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from polyref.errors import CoreError
from polyref.source_span import SourceSpan
from polyref.status import BrokenReason, Outcome, UnknownReason

_POINTER_PREFIX = "evidence/"
_MAX_SUFFIX_LEN = 512
_POINTER_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_./-"
)


class EvidencePointerError(CoreError, ValueError):
    """An evidence pointer is not a safe relative path under ``evidence/``."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"invalid evidence pointer: {reason}")
        self.reason = reason


@dataclass(frozen=True)
class EvidencePointer:
    """Relative path under ``evidence/`` matching ``evidence/[A-Za-z0-9_./-]{1,512}``.

    Parent traversal and empty segments are rejected.
    """

    value: str

    def __post_init__(self) -> None:
        text = self.value
        if not isinstance(text, str) or not text.startswith(_POINTER_PREFIX):
            raise EvidencePointerError("must start with 'evidence/'")
        suffix = text[len(_POINTER_PREFIX):]
        if not suffix:
            raise EvidencePointerError("empty path after 'evidence/'")
        if len(suffix.encode("utf-8", "surrogatepass")) > _MAX_SUFFIX_LEN:
            raise EvidencePointerError(
                "path too long (max 512 chars after 'evidence/')"
            )
        if not set(suffix) <= _POINTER_CHARS:
            raise EvidencePointerError("contains disallowed character")
        if ".." in suffix.split("/"):
            raise EvidencePointerError("contains parent-traversal '..'")
        if "//" in suffix:
            raise EvidencePointerError("contains empty path segment '//'")

    @classmethod
    def parse(cls, text: str) -> EvidencePointer:
        """Parse and validate a pointer string."""
        return cls(text)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PredicateId:
    """Versioned identifier of a checker rule, e.g. ``route.migrate-v1``."""

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Version:
    """Version of a checker plugin or rule."""

    value: str

    def __str__(self) -> str:
        return self.value


def _require(data: Mapping[str, Any], key: str) -> Any:
    if key not in data:
        raise ValueError(f"evidence is missing '{key}'")
    return data[key]


def _require_str(data: Mapping[str, Any], key: str) -> str:
    value = _require(data, key)
    if not isinstance(value, str):
        raise ValueError(f"evidence field '{key}' must be a string")
    return value


def _require_list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = _require(data, key)
    if not isinstance(value, list):
        raise ValueError(f"evidence field '{key}' must be a list")
    return value


@dataclass(frozen=True)
class Evidence:
    """Evidence record produced by one checker call."""

    outcome: Outcome
    predicate: PredicateId
    spans: tuple[SourceSpan, ...]
    pointers: tuple[EvidencePointer, ...]
    checker_version: Version
    rule_version: Version

    def __post_init__(self) -> None:
        if not isinstance(self.outcome, Outcome):
            raise TypeError("outcome must be an Outcome")
        if not isinstance(self.predicate, PredicateId):
            raise TypeError("predicate must be a PredicateId")
        if not isinstance(self.checker_version, Version) or not isinstance(
            self.rule_version, Version
        ):
            raise TypeError("checker_version and rule_version must be Version")
        spans = tuple(self.spans)
        pointers = tuple(self.pointers)
        if not all(isinstance(span, SourceSpan) for span in spans):
            raise TypeError("spans must be SourceSpan values")
        if not all(isinstance(pointer, EvidencePointer) for pointer in pointers):
            raise TypeError("pointers must be EvidencePointer values")
        object.__setattr__(self, "spans", spans)
        object.__setattr__(self, "pointers", pointers)

    @classmethod
    def ok_pres(
        cls,
        predicate: PredicateId,
        spans: Iterable[SourceSpan],
        pointers: Iterable[EvidencePointer],
        checker_version: Version,
        rule_version: Version,
    ) -> Evidence:
        """Evidence with outcome ``pres``."""
        return cls(Outcome.pres(), predicate, tuple(spans), tuple(pointers),
                   checker_version, rule_version)

    @classmethod
    def ok_migrated(
        cls,
        predicate: PredicateId,
        spans: Iterable[SourceSpan],
        pointers: Iterable[EvidencePointer],
        checker_version: Version,
        rule_version: Version,
    ) -> Evidence:
        """Evidence with outcome ``migrated``."""
        return cls(Outcome.migrated(), predicate, tuple(spans), tuple(pointers),
                   checker_version, rule_version)

    @classmethod
    def broken(
        cls,
        reason: BrokenReason,
        predicate: PredicateId,
        spans: Iterable[SourceSpan],
        pointers: Iterable[EvidencePointer],
        checker_version: Version,
        rule_version: Version,
    ) -> Evidence:
        """Evidence with outcome ``broken`` and its reason."""
        return cls(Outcome.broken(reason), predicate, tuple(spans), tuple(pointers),
                   checker_version, rule_version)

    @classmethod
    def unknown(
        cls,
        reason: UnknownReason,
        predicate: PredicateId,
        spans: Iterable[SourceSpan],
        pointers: Iterable[EvidencePointer],
        checker_version: Version,
        rule_version: Version,
    ) -> Evidence:
        """Evidence with outcome ``unknown`` and its reason."""
        return cls(Outcome.unknown(reason), predicate, tuple(spans), tuple(pointers),
                   checker_version, rule_version)

    def to_dict(self) -> dict[str, Any]:
        """Wire form of the record."""
        return {
            "outcome": self.outcome.to_dict(),
            "predicate": self.predicate.value,
            "spans": [span.to_dict() for span in self.spans],
            "pointers": [pointer.value for pointer in self.pointers],
            "checker_version": self.checker_version.value,
            "rule_version": self.rule_version.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Evidence:
        """Build a record from its wire form; pointers and spans are re-validated."""
        if not isinstance(data, Mapping):
            raise ValueError("evidence must be a mapping")
        return cls(
            Outcome.from_dict(_require(data, "outcome")),
            PredicateId(_require_str(data, "predicate")),
            tuple(SourceSpan.from_dict(span) for span in _require_list(data, "spans")),
            tuple(EvidencePointer.parse(p) for p in _require_list(data, "pointers")),
            Version(_require_str(data, "checker_version")),
            Version(_require_str(data, "rule_version")),
        )