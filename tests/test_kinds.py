import json

import pytest

from polyref.errors import CoreError
from polyref.kinds import (
    ArtifactKind,
    CorrespondenceKind,
    Language,
    TagParseError,
    Visibility,
)

ALL_ARTIFACT_KINDS = [
    ArtifactKind.BUILD_FILE,
    ArtifactKind.CONFIG,
    ArtifactKind.DOCKERFILE,
    ArtifactKind.GENERATED,
    ArtifactKind.QUERY,
    ArtifactKind.SCHEMA,
    ArtifactKind.SOURCE_FILE,
    ArtifactKind.TEST,
    ArtifactKind.WORKFLOW,
]


def test_artifact_kind_tag_round_trip_covers_all_nine_variants():
    assert len(ALL_ARTIFACT_KINDS) == 9
    assert set(ALL_ARTIFACT_KINDS) == set(ArtifactKind)
    for kind in ALL_ARTIFACT_KINDS:
        assert ArtifactKind.parse(kind.as_tag()) is kind


def test_artifact_kind_parse_rejects_unknown_tag():
    with pytest.raises(TagParseError) as info:
        ArtifactKind.parse("not-a-kind")
    assert info.value.tag == "not-a-kind"
    assert str(info.value) == "unknown ArtifactKind tag: not-a-kind"


@pytest.mark.parametrize(
    "kind",
    [ArtifactKind.BUILD_FILE, ArtifactKind.SOURCE_FILE, ArtifactKind.WORKFLOW],
)
def test_artifact_kind_tag_matches_serialized_representation(kind):
    assert json.dumps(kind) == f'"{kind.as_tag()}"'


def test_artifact_kind_tags():
    assert ArtifactKind.BUILD_FILE.as_tag() == "build_file"
    assert ArtifactKind.SOURCE_FILE.as_tag() == "source_file"


def test_parse_is_exact_match():
    with pytest.raises(TagParseError):
        ArtifactKind.parse("Build_File")
    with pytest.raises(TagParseError):
        ArtifactKind.parse(" config")


def test_correspondence_kind_round_trip():
    all_kinds = [
        CorrespondenceKind.BUILD_CODEGEN,
        CorrespondenceKind.CALL,
        CorrespondenceKind.CONFIGURATION,
        CorrespondenceKind.EVENT,
        CorrespondenceKind.GENERATED_CLIENT,
        CorrespondenceKind.QUERY_TABLE,
        CorrespondenceKind.ROUTE,
        CorrespondenceKind.SCHEMA,
        CorrespondenceKind.SERIALIZATION,
        CorrespondenceKind.TEST_ORACLE,
        CorrespondenceKind.WORKFLOW,
    ]
    assert set(all_kinds) == set(CorrespondenceKind)
    for kind in all_kinds:
        assert CorrespondenceKind.parse(kind.as_tag()) is kind


def test_correspondence_kind_parse_rejects_unknown():
    with pytest.raises(TagParseError) as info:
        CorrespondenceKind.parse("custom")
    assert info.value.enum_name == "CorrespondenceKind"


def test_language_tag_round_trip_covers_all_variants():
    all_languages = [
        Language.BUILD,
        Language.DOCKERFILE,
        Language.JAVA,
        Language.JSON,
        Language.JSONSCHEMA,
        Language.OPENAPI,
        Language.PY,
        Language.SQL,
        Language.TS,
        Language.YAML,
    ]
    assert set(all_languages) == set(Language)
    for lang in all_languages:
        assert Language.parse(lang.as_tag()) is lang


def test_language_parse_rejects_unknown():
    with pytest.raises(TagParseError):
        Language.parse("rust")


def test_language_tag_matches_serialized_representation():
    lang = Language.JSONSCHEMA
    assert json.dumps(lang) == f'"{lang.as_tag()}"'


def test_visibility_round_trip_covers_all_three_variants():
    for v in (Visibility.VISIBLE, Visibility.HELD_OUT, Visibility.EVALUATION_ONLY):
        assert Visibility.parse(v.as_tag()) is v


def test_visibility_parse_rejects_unknown():
    with pytest.raises(TagParseError):
        Visibility.parse("public")


def test_visibility_default_is_visible():
    assert Visibility.default() is Visibility.VISIBLE


def test_tag_parse_error_is_core_and_value_error():
    with pytest.raises(CoreError):
        Visibility.parse("nope")
    with pytest.raises(ValueError):
        Language.parse("nope")