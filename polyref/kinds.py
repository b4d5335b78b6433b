"""Closed tag enums: artifact kinds, correspondence kinds, languages, visibility."""

from __future__ import annotations

from enum import Enum
from typing import TypeVar

from polyref.errors import CoreError

_E = TypeVar("_E", bound=Enum)


class TagParseError(CoreError, ValueError):
    """A tag string does not name a member of a closed enum."""

    def __init__(self, enum_name: str, tag: str) -> None:
        super().__init__(f"unknown {enum_name} tag: {tag}")
        self.enum_name = enum_name
        self.tag = tag


def _parse_tag(cls: type[_E], text: str) -> _E:
    if isinstance(text, str):
        for member in cls:
            if member.value == text:
                return member
    raise TagParseError(cls.__name__, str(text))


class ArtifactKind(str, Enum):
    """Closed set of artifact families."""

    BUILD_FILE = "build_file"
    CONFIG = "config"
    DOCKERFILE = "dockerfile"
    GENERATED = "generated"
    QUERY = "query"
    SCHEMA = "schema"
    SOURCE_FILE = "source_file"
    TEST = "test"
    WORKFLOW = "workflow"

    def as_tag(self) -> str:
        """Return the canonical snake-case tag."""
        return self.value

    @classmethod
    def parse(cls, text: str) -> ArtifactKind:
        """Parse the canonical tag string; the inverse of ``as_tag``."""
        return _parse_tag(cls, text)

    def __str__(self) -> str:
        return self.value


class CorrespondenceKind(str, Enum):
    """Correspondence kinds between entities."""

    BUILD_CODEGEN = "build_codegen"
    CALL = "call"
    CONFIGURATION = "configuration"
    EVENT = "event"
    GENERATED_CLIENT = "generated_client"
    QUERY_TABLE = "query_table"
    ROUTE = "route"
    SCHEMA = "schema"
    SERIALIZATION = "serialization"
    TEST_ORACLE = "test_oracle"
    WORKFLOW = "workflow"

    def as_tag(self) -> str:
        """Return the canonical snake-case tag."""
        return self.value

    @classmethod
    def parse(cls, text: str) -> CorrespondenceKind:
        """Parse the canonical tag string; the inverse of ``as_tag``."""
        return _parse_tag(cls, text)

    def __str__(self) -> str:
        return self.value


class Language(str, Enum):
    """Closed set of language tags used in entity ids."""

    BUILD = "build"
    DOCKERFILE = "dockerfile"
    JAVA = "java"
    JSON = "json"
    JSONSCHEMA = "jsonschema"
    OPENAPI = "openapi"
    PY = "py"
    SQL = "sql"
    TS = "ts"
    YAML = "yaml"

    def as_tag(self) -> str:
        """Return the canonical lowercase tag."""
        return self.value

    @classmethod
    def parse(cls, text: str) -> Language:
        """Parse the canonical tag string; the inverse of ``as_tag``."""
        return _parse_tag(cls, text)

    def __str__(self) -> str:
        return self.value


class Visibility(str, Enum):
    """Visibility class of an observation.

    ``VISIBLE`` observations feed proposal and validation, ``HELD_OUT`` ones
    are consulted only by the post-decision evaluator, and
    ``EVALUATION_ONLY`` ones are oracle inputs never consulted by a method.
    """

    VISIBLE = "visible"
    HELD_OUT = "held_out"
    EVALUATION_ONLY = "evaluation_only"

    def as_tag(self) -> str:
        """Return the canonical snake-case tag."""
        return self.value

    @classmethod
    def parse(cls, text: str) -> Visibility:
        """Parse the canonical tag string; the inverse of ``as_tag``."""
        return _parse_tag(cls, text)

    @classmethod
    def default(cls) -> Visibility:
        """The default visibility, ``VISIBLE``."""
        return cls.VISIBLE

    def __str__(self) -> str:
        return self.value