"""Validation status model: outcomes and the reasons they carry."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class UnknownReason(str, Enum):
    """Closed set of reasons a checker may emit ``unknown``."""

    AMBIGUOUS_ENDPOINT = "ambiguous_endpoint"
    CHECKER_TIMEOUT = "checker_timeout"
    CYCLIC_GENERATOR = "cyclic_generator"
    DYNAMIC_EVIDENCE_UNVERIFIED = "dynamic_evidence_unverified"
    DYNAMIC_STRING = "dynamic_string"
    GENERATED_EVIDENCE_MISSING = "generated_evidence_missing"
    GENERATED_EVIDENCE_WEAK = "generated_evidence_weak"
    MIGRATION_MAP_AMBIGUOUS = "migration_map_ambiguous"
    MISSING_ENDPOINT = "missing_endpoint"
    NO_ACCEPTING_RULE_APPLIED = "no_accepting_rule_applied"
    OBSERVATION_REWRITE_UNDEFINED = "observation_rewrite_undefined"
    OPAQUE_BUILD_CACHE = "opaque_build_cache"
    PLUGIN_FAILURE = "plugin_failure"
    REFLECTION = "reflection"
    UNSUPPORTED_EXTRACTOR = "unsupported_extractor"
    UNSUPPORTED_FRAMEWORK = "unsupported_framework"

    def __str__(self) -> str:
        return self.value


class BrokenReason(str, Enum):
    """Closed set of reasons a checker may emit ``broken``."""

    BUILD_TARGET_UNREACHABLE = "build_target_unreachable"
    EVENT_PAYLOAD_INCOMPATIBLE = "event_payload_incompatible"
    GENERATED_CLIENT_STALE = "generated_client_stale"
    GENERATOR_MISMATCH = "generator_mismatch"
    HANDLER_BINDING_MISMATCH = "handler_binding_mismatch"
    LOCAL_CHECKER_FAILURE = "local_checker_failure"
    MIGRATION_MAP_CONFLICT = "migration_map_conflict"
    QUERY_TABLE_MISSING = "query_table_missing"
    REQUIRED_FIELD_DRIFT = "required_field_drift"
    ROUTE_PATH_REFUTED = "route_path_refuted"
    SCHEMA_INCOMPATIBLE = "schema_incompatible"
    WORKFLOW_PACKAGES_OLD_TARGET = "workflow_packages_old_target"

    def __str__(self) -> str:
        return self.value


class OutcomeTag(str, Enum):
    """Discriminator of an :class:`Outcome`."""

    PRES = "pres"
    MIGRATED = "migrated"
    BROKEN = "broken"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


Reason = Union[BrokenReason, UnknownReason]


@dataclass(frozen=True)
class Outcome:
    """Outcome of a frontier item.

    ``pres`` and ``migrated`` carry no reason; ``broken`` carries a
    :class:`BrokenReason` and ``unknown`` an :class:`UnknownReason`. Any
    other combination is rejected on construction.
    """

    tag: OutcomeTag
    reason: Optional[Reason] = None

    def __post_init__(self) -> None:
        tag = OutcomeTag(self.tag)
        object.__setattr__(self, "tag", tag)
        if tag in (OutcomeTag.PRES, OutcomeTag.MIGRATED):
            if self.reason is not None:
                raise ValueError(f"outcome '{tag.value}' cannot carry a reason")
        elif tag is OutcomeTag.BROKEN:
            if not isinstance(self.reason, BrokenReason):
                raise ValueError("outcome 'broken' requires a BrokenReason")
        elif not isinstance(self.reason, UnknownReason):
            raise ValueError("outcome 'unknown' requires an UnknownReason")

    @classmethod
    def pres(cls) -> Outcome:
        """Item compatible without endpoint identity rewrite."""
        return cls(OutcomeTag.PRES)

    @classmethod
    def migrated(cls) -> Outcome:
        """Item consistently rewritten by the migration map."""
        return cls(OutcomeTag.MIGRATED)

    @classmethod
    def broken(cls, reason: BrokenReason) -> Outcome:
        """A checker refuted a concrete predicate."""
        return cls(OutcomeTag.BROKEN, reason)

    @classmethod
    def unknown(cls, reason: UnknownReason) -> Outcome:
        """Evidence is missing, unsupported, ambiguous or timed out."""
        return cls(OutcomeTag.UNKNOWN, reason)

    def is_accepting(self) -> bool:
        """True for ``pres`` or ``migrated``."""
        return self.tag in (OutcomeTag.PRES, OutcomeTag.MIGRATED)

    def to_dict(self) -> dict[str, Any]:
        """Internally tagged wire form: ``{"tag": ..., "reason": ...}``."""
        data: dict[str, Any] = {"tag": self.tag.value}
        if self.reason is not None:
            data["reason"] = self.reason.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Outcome:
        """Build an outcome from its wire form, validating tag and reason."""
        if not isinstance(data, Mapping):
            raise ValueError("outcome must be a mapping")
        raw_tag = data.get("tag")
        try:
            tag = OutcomeTag(raw_tag)
        except ValueError:
            raise ValueError(f"unknown outcome tag: {raw_tag!r}") from None
        if tag is OutcomeTag.PRES:
            return cls.pres()
        if tag is OutcomeTag.MIGRATED:
            return cls.migrated()
        if "reason" not in data:
            raise ValueError(f"outcome '{tag.value}' is missing its reason")
        raw_reason = data["reason"]
        try:
            if tag is OutcomeTag.BROKEN:
                return cls.broken(BrokenReason(raw_reason))
            return cls.unknown(UnknownReason(raw_reason))
        except ValueError:
            raise ValueError(
                f"unknown reason for outcome '{tag.value}': {raw_reason!r}"
            ) from None