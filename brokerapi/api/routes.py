"""Service broker API endpoints (/v2/*).

Routing only: every handler decodes path/query parts, hands them to the
``OperationDispatcher`` and serializes the ``BrokerResponse`` it returns.

Architecture:
    Platform -> /v2/* (this module) -> core/dispatcher.py -> broker implementation

Security:
    - HTTP Basic authentication on every route (validated in before_request)
    - Failed authentication answers 401 before the body is read
"""

from __future__ import annotations
from dataclasses import dataclass

from flask import Blueprint, Response, current_app, jsonify, request

from brokerapi.api.decorators import CredentialGate, unauthorized_response
from brokerapi.core.codec import decode_accepts_incomplete
from brokerapi.core.dispatcher import OperationDispatcher
from brokerapi.core.translator import NO_BODY, BrokerResponse

bp = Blueprint("broker", __name__, url_prefix="/v2")


@dataclass(frozen=True)
class BrokerAPI:
    """Immutable per-application wiring, stored in ``app.extensions``."""
    gate: CredentialGate
    dispatcher: OperationDispatcher


def _api() -> BrokerAPI:
    return current_app.extensions["brokerapi"]


def render(outcome: BrokerResponse) -> Response:
    """Serialize a dispatcher outcome as a JSON response."""
    if outcome.body is NO_BODY:
        return Response("", status=outcome.status, mimetype="application/json")
    response = jsonify(outcome.body)
    response.status_code = outcome.status
    return response


# ─────────────────────────────────────────────────────────────────────────────
# Authentication
# ─────────────────────────────────────────────────────────────────────────────

@bp.before_request
def authenticate():
    """Reject the request unless it carries the configured Basic credentials."""
    if not _api().gate.authenticate(request.headers.get("Authorization")):
        return unauthorized_response()
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Catalog
# ─────────────────────────────────────────────────────────────────────────────

@bp.route("/catalog", methods=["GET"])
def catalog():
    return render(_api().dispatcher.catalog())


# ─────────────────────────────────────────────────────────────────────────────
# Service instances
# ─────────────────────────────────────────────────────────────────────────────

@bp.route("/service_instances/<instance_id>", methods=["PUT"])
def provision(instance_id: str):
    """Provision a service instance.

    Query parameters:
        - accepts_incomplete: "true" to allow a 202 (asynchronous) answer

    Returns:
        201/202/409/422/500
    """
    accepts_incomplete = decode_accepts_incomplete(request.args.get("accepts_incomplete"))
    outcome = _api().dispatcher.provision(instance_id, request.get_data(), accepts_incomplete)
    return render(outcome)


@bp.route("/service_instances/<instance_id>", methods=["DELETE"])
def deprovision(instance_id: str):
    return render(_api().dispatcher.deprovision(instance_id))


@bp.route("/service_instances/<instance_id>/last_operation", methods=["GET"])
def last_operation(instance_id: str):
    return render(_api().dispatcher.last_operation(instance_id))


# ─────────────────────────────────────────────────────────────────────────────
# Service bindings
# ─────────────────────────────────────────────────────────────────────────────

@bp.route("/service_instances/<instance_id>/service_bindings/<binding_id>", methods=["PUT"])
def bind(instance_id: str, binding_id: str):
    return render(_api().dispatcher.bind(instance_id, binding_id, request.get_data()))


@bp.route("/service_instances/<instance_id>/service_bindings/<binding_id>", methods=["DELETE"])
def unbind(instance_id: str, binding_id: str):
    return render(_api().dispatcher.unbind(instance_id, binding_id))
