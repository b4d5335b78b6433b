"""Validation report aggregate root and its fail-closed invariant."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from polyref.errors import CoreError
from polyref.evidence import Evidence
from polyref.kinds import Visibility

_U32_MAX = 2**32 - 1


class CandidateDecision(str, Enum):
    """Decision for a candidate: the meet over visible observations."""

    ACCEPTED = "accepted"
    BROKEN = "broken"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class ObservationDecision(str, Enum):
    """Decision for a single observation."""

    ACCEPTED = "accepted"
    BROKEN = "broken"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class InvariantViolation(str, Enum):
    """Which report invariant was violated."""

    MISSING_ENDPOINT_UNKNOWN_IN_ACCEPTED = "missing_endpoint_unknown_in_accepted"
    NON_ACCEPTING_ITEM_IN_ACCEPTED_OBSERVATION = "non_accepting_item_in_accepted_observation"
    EVIDENCE_POINTER_OUTSIDE_EVIDENCE_DIR = "evidence_pointer_outside_evidence_dir"
    INVALID_ID_SYNTAX = "invalid_id_syntax"

    def __str__(self) -> str:
        return self.value


_VIOLATION_MESSAGES = {
    InvariantViolation.MISSING_ENDPOINT_UNKNOWN_IN_ACCEPTED:
        "candidate decision 'accepted' is incompatible with missing_endpoint_unknown=true",
    InvariantViolation.NON_ACCEPTING_ITEM_IN_ACCEPTED_OBSERVATION:
        "observation has Accepted status but a non-accepting item",
    InvariantViolation.EVIDENCE_POINTER_OUTSIDE_EVIDENCE_DIR:
        "evidence pointer escaped evidence/ subtree",
    InvariantViolation.INVALID_ID_SYNTAX: "id field has invalid syntax",
}


class ReportInvariantError(CoreError, ValueError):
    """A report would violate an invariant; ``violation`` says which."""

    def __init__(self, violation: InvariantViolation) -> None:
        super().__init__(_VIOLATION_MESSAGES[violation])
        self.violation = violation


@dataclass(frozen=True)
class ObservationRow:
    """One observation's verdict in the report."""

    observation_id: str
    obs_kind: str
    visibility: Visibility
    frontier_size: int
    items: tuple[Evidence, ...]
    status: ObservationDecision

    def __post_init__(self) -> None:
        object.__setattr__(self, "visibility", Visibility(self.visibility))
        object.__setattr__(self, "status", ObservationDecision(self.status))
        size = self.frontier_size
        if isinstance(size, bool) or not isinstance(size, int) or not 0 <= size <= _U32_MAX:
            raise ValueError("frontier_size must be an unsigned 32-bit integer")
        items = tuple(self.items)
        if not all(isinstance(item, Evidence) for item in items):
            raise TypeError("items must be Evidence values")
        object.__setattr__(self, "items", items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "observation_id": self.observation_id,
            "obs_kind": self.obs_kind,
            "visibility": self.visibility.value,
            "frontier_size": self.frontier_size,
            "items": [item.to_dict() for item in self.items],
            "status": self.status.value,
        }


@dataclass(frozen=True)
class ReportRepoRef:
    """Repository id and commit."""

    repo_id: str
    commit: str

    def to_dict(self) -> dict[str, Any]:
        return {"repo_id": self.repo_id, "commit": self.commit}


@dataclass(frozen=True)
class ReportRepos:
    """Old and new repository references."""

    old: ReportRepoRef
    new: ReportRepoRef

    def to_dict(self) -> dict[str, Any]:
        return {"old": self.old.to_dict(), "new": self.new.to_dict()}


@dataclass(frozen=True)
class ReportCandidate:
    """Candidate metadata: id, source kind and patch hash."""

    candidate_id: str
    source: str
    patch_hash: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "candidate_id": self.candidate_id,
            "source": self.source,
            "patch_hash": self.patch_hash,
        }


@dataclass(frozen=True)
class ReportConfigs:
    """Pinned extractor and checker versions, keyed by tool id."""

    extractor_versions: Mapping[str, str] = field(default_factory=dict)
    checker_versions: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extractor_versions", dict(sorted(self.extractor_versions.items())))
        object.__setattr__(self, "checker_versions", dict(sorted(self.checker_versions.items())))

    def to_dict(self) -> dict[str, Any]:
        return {
            "extractor_versions": dict(self.extractor_versions),
            "checker_versions": dict(self.checker_versions),
        }


@dataclass(frozen=True)
class ReportAuditPointers:
    """Paths of the audit log and the run manifest."""

    audit_ndjson: str
    manifest_json: str

    def to_dict(self) -> dict[str, Any]:
        return {"audit_ndjson": self.audit_ndjson, "manifest_json": self.manifest_json}


@dataclass
class ReportParts:
    """Inputs to :meth:`ValidationReport.assemble`."""

    report_id: str
    repos: ReportRepos
    candidate: ReportCandidate
    configs: ReportConfigs
    observations: Iterable[ObservationRow]
    missing_endpoint_unknown: bool
    audit_pointers: ReportAuditPointers


def _meet(observations: Iterable[ObservationRow]) -> CandidateDecision:
    visible = {o.status for o in observations if o.visibility is Visibility.VISIBLE}
    if ObservationDecision.BROKEN in visible:
        return CandidateDecision.BROKEN
    if ObservationDecision.UNKNOWN in visible:
        return CandidateDecision.UNKNOWN
    return CandidateDecision.ACCEPTED


def _check_invariants(
    observations: Iterable[ObservationRow],
    decision: CandidateDecision,
    missing_endpoint_unknown: bool,
) -> None:
    if decision is CandidateDecision.ACCEPTED and missing_endpoint_unknown:
        raise ReportInvariantError(InvariantViolation.MISSING_ENDPOINT_UNKNOWN_IN_ACCEPTED)
    for obs in observations:
        if obs.status is ObservationDecision.ACCEPTED and any(
            not item.outcome.is_accepting() for item in obs.items
        ):
            raise ReportInvariantError(
                InvariantViolation.NON_ACCEPTING_ITEM_IN_ACCEPTED_OBSERVATION
            )


@dataclass(frozen=True)
class ValidationReport:
    """Validation report for one candidate.

    The candidate decision is the meet over visible observations, and an
    ``accepted`` decision can never coexist with ``missing_endpoint_unknown``.
    Both rules are checked on every construction.
    """

    SCHEMA_VERSION: ClassVar[str] = "0.1.0"

    schema_version: str
    report_id: str
    candidate: ReportCandidate
    repos: ReportRepos
    configs: ReportConfigs
    observations: tuple[ObservationRow, ...]
    candidate_decision: CandidateDecision
    missing_endpoint_unknown: bool
    audit_pointers: ReportAuditPointers

    def __post_init__(self) -> None:
        observations = tuple(self.observations)
        if not all(isinstance(o, ObservationRow) for o in observations):
            raise TypeError("observations must be ObservationRow values")
        object.__setattr__(self, "observations", observations)
        decision = CandidateDecision(self.candidate_decision)
        object.__setattr__(self, "candidate_decision", decision)
        if not isinstance(self.missing_endpoint_unknown, bool):
            raise TypeError("missing_endpoint_unknown must be a bool")
        if decision is not _meet(observations):
            raise ValueError("candidate_decision must be the meet over visible observations")
        _check_invariants(observations, decision, self.missing_endpoint_unknown)

    @classmethod
    def assemble(cls, parts: ReportParts) -> ValidationReport:
        """Build a report, computing the candidate decision from the observations."""
        observations = tuple(parts.observations)
        decision = _meet(observations)
        _check_invariants(observations, decision, parts.missing_endpoint_unknown)
        return cls(
            schema_version=cls.SCHEMA_VERSION,
            report_id=parts.report_id,
            candidate=parts.candidate,
            repos=parts.repos,
            configs=parts.configs,
            observations=observations,
            candidate_decision=decision,
            missing_endpoint_unknown=parts.missing_endpoint_unknown,
            audit_pointers=parts.audit_pointers,
        )

    def to_dict(self) -> dict[str, Any]:
        """Wire form of the report."""
        return {
            "schema_version": self.schema_version,
            "report_id": self.report_id,
            "candidate": self.candidate.to_dict(),
            "repos": self.repos.to_dict(),
            "configs": self.configs.to_dict(),
            "observations": [o.to_dict() for o in self.observations],
            "candidate_decision": self.candidate_decision.value,
            "missing_endpoint_unknown": self.missing_endpoint_unknown,
            "audit_pointers": self.audit_pointers.to_dict(),
        }