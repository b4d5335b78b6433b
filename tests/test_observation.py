import dataclasses

import pytest

from polyref.ids import CorrId, EdgeId, EntityId, IdParseError
from polyref.kinds import Visibility
from polyref.observation import (
    ApiCallObs,
    BuildTargetObs,
    HttpMethod,
    ObsHeader,
    SchemaExpectedOutcome,
    SchemaObs,
    TestObs,
    WorkflowObs,
    parse_support_ref,
)

CORR = "corr:route:0123456789abcdef"
EDGE = "edge:build_codegen:0123456789abcdef"


def header(visibility=Visibility.VISIBLE):
    return ObsHeader(
        visibility=visibility,
        support=[CorrId.parse(CORR), EdgeId.parse(EDGE)],
        defined_semantics=True,
    )


def entity(text="old:ts:handler:src/users.ts#createUser:0123456789ab"):
    return EntityId.parse(text)


def test_parse_support_ref_corr():
    ref = parse_support_ref(CORR)
    assert ref == CorrId.parse(CORR)


def test_parse_support_ref_edge():
    ref = parse_support_ref(EDGE)
    assert ref == EdgeId.parse(EDGE)


def test_parse_support_ref_rejects_other():
    with pytest.raises(IdParseError):
        parse_support_ref("old:ts:handler:src/h.ts:0123456789ab")


def test_kind_tags():
    h = header()
    observations = [
        ApiCallObs(method=HttpMethod.POST, path="/users", header=h),
        TestObs(test_id=entity(), header=h),
        BuildTargetObs(target_name="api", header=h),
        WorkflowObs(workflow_id=entity(), header=h),
        SchemaObs(schema_id=entity(), header=h),
    ]
    assert [o.kind_tag() for o in observations] == [
        "api_call",
        "test_invocation",
        "build_target",
        "workflow_run",
        "schema_validation",
    ]


def test_header_is_shared_and_support_is_tuple():
    h = header(Visibility.HELD_OUT)
    obs = TestObs(test_id=entity(), header=h)
    assert obs.header.visibility is Visibility.HELD_OUT
    assert obs.header.support == (CorrId.parse(CORR), EdgeId.parse(EDGE))


def test_header_rejects_non_support_entries():
    with pytest.raises(TypeError):
        ObsHeader(visibility=Visibility.VISIBLE, support=[CORR], defined_semantics=True)


def test_http_method_parse():
    assert HttpMethod("GET") is HttpMethod.GET
    with pytest.raises(ValueError):
        ApiCallObs(method="FETCH", path="/users", header=header())


def test_api_call_coerces_method_string():
    obs = ApiCallObs(method="DELETE", path="/users/1", header=header())
    assert obs.method is HttpMethod.DELETE


def test_test_obs_requires_entity_id():
    with pytest.raises(TypeError):
        TestObs(test_id="old:ts:test:t.ts:0123456789ab", header=header())


def test_workflow_env_keys_become_tuple():
    obs = WorkflowObs(workflow_id=entity(), header=header(), env_keys=["PORT"])
    assert obs.env_keys == ("PORT",)


def test_schema_expected_outcome_coerced():
    obs = SchemaObs(schema_id=entity(), header=header(), expected_outcome="invalid")
    assert obs.expected_outcome is SchemaExpectedOutcome.INVALID


def test_observations_are_immutable():
    obs = BuildTargetObs(target_name="api", header=header())
    with pytest.raises(dataclasses.FrozenInstanceError):
        obs.target_name = "other"
    assert obs == BuildTargetObs(target_name="api", header=header())