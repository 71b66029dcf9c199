import pytest

from brokerapi.core.broker import BindDetails, ServiceDetails
from brokerapi.core.codec import (
    decode_accepts_incomplete,
    decode_bind_details,
    decode_json_object,
    decode_service_details,
    encode_service_details,
)
from brokerapi.core.errors import ErrorKind, InvalidRequestPayload


@pytest.mark.parametrize("raw,expected", [
    ("true", True),
    ("false", False),
    (None, False),
    ("", False),
    ("TRUE", False),
    ("1", False),
])
def test_decode_accepts_incomplete(raw, expected):
    assert decode_accepts_incomplete(raw) is expected


@pytest.mark.parametrize("body", [None, b"", "", b"   \n"])
def test_empty_body_decodes_to_empty_object(body):
    assert decode_json_object(body) == {}


def test_malformed_json_raises_invalid_payload():
    with pytest.raises(InvalidRequestPayload) as exc:
        decode_json_object(b"{{{{{")
    assert exc.value.kind is ErrorKind.INVALID_REQUEST_PAYLOAD
    assert "not valid JSON" in str(exc.value)


def test_non_utf8_body_raises_invalid_payload():
    with pytest.raises(InvalidRequestPayload):
        decode_json_object(b"\xff\xfe{")


def test_deeply_nested_json_raises_invalid_payload():
    with pytest.raises(InvalidRequestPayload, match="nested too deeply"):
        decode_json_object(b"[" * 100000)


@pytest.mark.parametrize("body", [b"[]", b"42", b'"plan"', b"null"])
def test_non_object_json_raises_invalid_payload(body):
    with pytest.raises(InvalidRequestPayload):
        decode_json_object(body)


def test_decode_service_details():
    body = (
        b'{"service_id": "svc", "plan_id": "plan", "organization_guid": "org",'
        b' "space_guid": "space", "parameters": {"a": 1}, "unknown": "ignored"}'
    )
    assert decode_service_details(body) == ServiceDetails(
        service_id="svc",
        plan_id="plan",
        organization_guid="org",
        space_guid="space",
        parameters={"a": 1},
    )


def test_service_details_equality_is_structural():
    first = decode_service_details(b'{"plan_id": "plan"}')
    second = decode_service_details(b'{"plan_id": "plan"}')
    assert first == second
    assert first is not second


def test_service_details_are_immutable():
    details = decode_service_details(b'{"plan_id": "plan"}')
    with pytest.raises(AttributeError):
        details.plan_id = "other"


@pytest.mark.parametrize("body", [
    b'{"plan_id": 42}',
    b'{"space_guid": ["a"]}',
    b'{"parameters": "size=large"}',
])
def test_invalid_field_types_raise_invalid_payload(body):
    with pytest.raises(InvalidRequestPayload):
        decode_service_details(body)


def test_null_fields_decode_as_empty():
    assert decode_service_details(b'{"plan_id": null, "parameters": null}') == ServiceDetails()


def test_decode_bind_details():
    details = decode_bind_details('{"app_guid": "app", "plan_id": "plan", "service_id": "svc"}')
    assert details == BindDetails(service_id="svc", plan_id="plan", app_guid="app")


def test_encode_service_details():
    details = ServiceDetails(plan_id="plan", parameters={"x": "y"})
    assert encode_service_details(details) == {
        "service_id": "",
        "plan_id": "plan",
        "organization_guid": "",
        "space_guid": "",
        "parameters": {"x": "y"},
    }


def test_decoded_details_are_hashable_and_read_only():
    details = decode_service_details(b'{"plan_id": "plan", "parameters": {"size": "large"}}')

    assert hash(details) == hash(ServiceDetails(plan_id="plan", parameters={"size": "small"}))
    assert details != ServiceDetails(plan_id="plan", parameters={"size": "small"})
    with pytest.raises(TypeError):
        details.parameters["size"] = "small"


def test_bind_details_copy_their_parameters():
    source = {"role": "reader"}
    details = BindDetails(parameters=source)
    source["role"] = "admin"

    assert details.parameters == {"role": "reader"}
    assert hash(details) == hash(BindDetails())
