"""Outcome table: (operation, error kind) -> status, body, log event.

The bodies reproduce the service broker API contract exactly, including its
asymmetries (unbind answers 404 with an empty object where bind answers 404
with a description).
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Optional

from brokerapi.core.errors import ErrorKind, error_kind
from brokerapi.core.events import BrokerLogger


class Operation(str, enum.Enum):
    CATALOG = "catalog"
    PROVISION = "provision"
    DEPROVISION = "deprovision"
    BIND = "bind"
    UNBIND = "unbind"
    LAST_OPERATION = "lastOperation"


# Sentinel for responses that carry no body at all (401).
NO_BODY: Any = object()


@dataclass(frozen=True)
class BrokerResponse:
    status: int
    body: Any = NO_BODY


def _empty(error: BaseException) -> dict:
    return {}


def _describe(error: BaseException) -> dict:
    return {"description": str(error)}


def _async_required(error: BaseException) -> dict:
    return {"error": "AsyncRequired", "description": str(error)}


@dataclass(frozen=True)
class Rule:
    status: int
    render: Callable[[BaseException], Any]
    event: str


UNCLASSIFIED = Rule(500, _describe, "unknown-error")

ERROR_TABLE: dict[Operation, dict[ErrorKind, Rule]] = {
    Operation.CATALOG: {},
    Operation.PROVISION: {
        ErrorKind.INVALID_REQUEST_PAYLOAD: Rule(422, _describe, "invalid-service-details"),
        ErrorKind.INSTANCE_ALREADY_EXISTS: Rule(409, _empty, "instance-already-exists"),
        ErrorKind.INSTANCE_LIMIT_REACHED: Rule(500, _describe, "instance-limit-reached"),
        ErrorKind.ASYNC_REQUIRED: Rule(422, _async_required, "async-required"),
    },
    Operation.DEPROVISION: {
        ErrorKind.INSTANCE_DOES_NOT_EXIST: Rule(410, _empty, "instance-missing"),
    },
    Operation.BIND: {
        ErrorKind.INVALID_REQUEST_PAYLOAD: Rule(422, _describe, "invalid-bind-details"),
        ErrorKind.INSTANCE_DOES_NOT_EXIST: Rule(404, _describe, "instance-missing"),
        ErrorKind.BINDING_ALREADY_EXISTS: Rule(409, _describe, "binding-already-exists"),
    },
    Operation.UNBIND: {
        ErrorKind.INSTANCE_DOES_NOT_EXIST: Rule(404, _empty, "instance-missing"),
        ErrorKind.BINDING_DOES_NOT_EXIST: Rule(410, _empty, "binding-missing"),
    },
    Operation.LAST_OPERATION: {
        ErrorKind.INSTANCE_DOES_NOT_EXIST: Rule(404, _describe, "instance-missing"),
    },
}


def rule_for(operation: Operation, error: BaseException) -> Rule:
    """Look up the rule for ``error``; anything unlisted is unclassified."""
    return ERROR_TABLE[operation].get(error_kind(error), UNCLASSIFIED)


def translate(
    operation: Operation,
    error: BaseException,
    logger: BrokerLogger,
    data: Optional[dict] = None,
) -> BrokerResponse:
    """Log ``error`` under the operation's event name and render it.

    ``logger`` must already be scoped to the operation's session so the
    event reads ``<component>.<operation>.<event>``.
    """
    rule = rule_for(operation, error)
    logger.error(rule.event, error, data)
    return BrokerResponse(rule.status, rule.render(error))
