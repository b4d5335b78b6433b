"""Observation kinds, their common header and support references."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional, Union

from polyref.ids import CorrId, EdgeId, EntityId, IdErrorKind, IdParseError
from polyref.kinds import Visibility

SupportRef = Union[CorrId, EdgeId]
"""One element of an observation's support set."""


class HttpMethod(str, Enum):
    """HTTP method of an API call observation."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    def __str__(self) -> str:
        return self.value


class SchemaExpectedOutcome(str, Enum):
    """Expected outcome of a schema validation observation."""

    VALID = "valid"
    INVALID = "invalid"

    def __str__(self) -> str:
        return self.value


def parse_support_ref(text: str) -> SupportRef:
    """Parse a support reference: a correspondence id or a build-edge id."""
    for id_type in (CorrId, EdgeId):
        try:
            return id_type.parse(text)
        except IdParseError:
            continue
    raise IdParseError(
        IdErrorKind.SYNTAX,
        "support reference is neither a correspondence nor a build-edge id",
    )


def _check_optional_entity(name: str, value: Any) -> None:
    if value is not None and not isinstance(value, EntityId):
        raise TypeError(f"{name} must be an EntityId or None")


def _check_entity(name: str, value: Any) -> None:
    if not isinstance(value, EntityId):
        raise TypeError(f"{name} must be an EntityId")


def _check_optional_str(name: str, value: Any) -> None:
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{name} must be a string or None")


@dataclass(frozen=True)
class ObsHeader:
    """Header shared by every observation.

    ``visibility`` never changes on an observation; ``defined_semantics`` is
    false when the support set does not resolve to typed entities.
    """

    visibility: Visibility
    support: tuple[SupportRef, ...]
    defined_semantics: bool

    def __post_init__(self) -> None:
        object.__setattr__(self, "visibility", Visibility(self.visibility))
        support = tuple(self.support)
        if not all(isinstance(ref, (CorrId, EdgeId)) for ref in support):
            raise TypeError("support entries must be CorrId or EdgeId values")
        object.__setattr__(self, "support", support)
        if not isinstance(self.defined_semantics, bool):
            raise TypeError("defined_semantics must be a bool")


class Observation:
    """Base of the observation kinds; each kind carries an :class:`ObsHeader`."""

    _kind_tag: ClassVar[str] = ""
    header: ObsHeader

    def kind_tag(self) -> str:
        """The snake-case kind tag, e.g. ``api_call``."""
        return self._kind_tag

    def _check_header(self) -> None:
        if not isinstance(self.header, ObsHeader):
            raise TypeError("header must be an ObsHeader")


@dataclass(frozen=True, kw_only=True)
class ApiCallObs(Observation):
    """HTTP API call observation."""

    _kind_tag: ClassVar[str] = "api_call"

    method: HttpMethod
    path: str
    header: ObsHeader
    request_schema_id: Optional[EntityId] = None
    response_schema_id: Optional[EntityId] = None
    client_id: Optional[EntityId] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HttpMethod(self.method))
        if not isinstance(self.path, str):
            raise TypeError("path must be a string")
        _check_optional_entity("request_schema_id", self.request_schema_id)
        _check_optional_entity("response_schema_id", self.response_schema_id)
        _check_optional_entity("client_id", self.client_id)
        self._check_header()


@dataclass(frozen=True, kw_only=True)
class TestObs(Observation):
    """Test invocation observation."""

    __test__ = False
    _kind_tag: ClassVar[str] = "test_invocation"

    test_id: EntityId
    header: ObsHeader
    public_entrypoint: Optional[EntityId] = None

    def __post_init__(self) -> None:
        _check_entity("test_id", self.test_id)
        _check_optional_entity("public_entrypoint", self.public_entrypoint)
        self._check_header()


@dataclass(frozen=True, kw_only=True)
class BuildTargetObs(Observation):
    """Build target observation."""

    _kind_tag: ClassVar[str] = "build_target"

    target_name: str
    header: ObsHeader
    generator_command: Optional[str] = None
    expected_artifact_path: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.target_name, str):
            raise TypeError("target_name must be a string")
        _check_optional_str("generator_command", self.generator_command)
        _check_optional_str("expected_artifact_path", self.expected_artifact_path)
        self._check_header()


@dataclass(frozen=True, kw_only=True)
class WorkflowObs(Observation):
    """Workflow run observation."""

    _kind_tag: ClassVar[str] = "workflow_run"

    workflow_id: EntityId
    header: ObsHeader
    packaged_target_name: Optional[str] = None
    env_keys: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _check_entity("workflow_id", self.workflow_id)
        _check_optional_str("packaged_target_name", self.packaged_target_name)
        keys = tuple(self.env_keys)
        if not all(isinstance(key, str) for key in keys):
            raise TypeError("env_keys must be strings")
        object.__setattr__(self, "env_keys", keys)
        self._check_header()


@dataclass(frozen=True, kw_only=True)
class SchemaObs(Observation):
    """Schema validation observation."""

    _kind_tag: ClassVar[str] = "schema_validation"

    schema_id: EntityId
    header: ObsHeader
    sample_payload_ref: Optional[str] = None
    expected_outcome: Optional[SchemaExpectedOutcome] = None

    def __post_init__(self) -> None:
        _check_entity("schema_id", self.schema_id)
        _check_optional_str("sample_payload_ref", self.sample_payload_ref)
        if self.expected_outcome is not None:
            object.__setattr__(
                self, "expected_outcome", SchemaExpectedOutcome(self.expected_outcome)
            )
        self._check_header()