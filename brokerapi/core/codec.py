"""Request decoding helpers.

Everything here raises ``InvalidRequestPayload`` on bad input so callers can
reject a request before the broker is consulted.
"""
from __future__ import annotations

import json
from typing import Any, Optional

from brokerapi.core.broker import BindDetails, ServiceDetails
from brokerapi.core.errors import InvalidRequestPayload


def decode_accepts_incomplete(raw: Optional[str]) -> bool:
    """Only the literal ``"true"`` opts in to asynchronous provisioning."""
    return raw == "true"


def decode_json_object(body: bytes | str | None) -> dict:
    """Parse a request body into a JSON object.

    An empty body decodes to ``{}``.

    Raises:
        InvalidRequestPayload: If the body is not well-formed JSON or is not
            a JSON object
    """
    if body is None:
        return {}
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidRequestPayload(f"request body is not valid UTF-8: {exc}")
    if not body.strip():
        return {}

    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise InvalidRequestPayload(f"request body is not valid JSON: {exc}")
    except RecursionError:
        raise InvalidRequestPayload("request body is nested too deeply")

    if not isinstance(payload, dict):
        raise InvalidRequestPayload("request body must be a JSON object")
    return payload


def _string_field(payload: dict, name: str) -> str:
    value = payload.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidRequestPayload(f"{name} must be a string")
    return value


def _parameters(payload: dict) -> dict[str, Any]:
    value = payload.get("parameters")
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidRequestPayload("parameters must be a JSON object")
    return value


def decode_service_details(body: bytes | str | None) -> ServiceDetails:
    payload = decode_json_object(body)
    return ServiceDetails(
        service_id=_string_field(payload, "service_id"),
        plan_id=_string_field(payload, "plan_id"),
        organization_guid=_string_field(payload, "organization_guid"),
        space_guid=_string_field(payload, "space_guid"),
        parameters=_parameters(payload),
    )


def decode_bind_details(body: bytes | str | None) -> BindDetails:
    payload = decode_json_object(body)
    return BindDetails(
        service_id=_string_field(payload, "service_id"),
        plan_id=_string_field(payload, "plan_id"),
        app_guid=_string_field(payload, "app_guid"),
        parameters=_parameters(payload),
    )


def encode_service_details(details: ServiceDetails) -> dict:
    """Wire form of ``details``, used for log data and by clients."""
    return {
        "service_id": details.service_id,
        "plan_id": details.plan_id,
        "organization_guid": details.organization_guid,
        "space_guid": details.space_guid,
        "parameters": dict(details.parameters),
    }
