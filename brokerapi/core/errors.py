"""Broker error taxonomy.

Brokers report domain outcomes by raising one of the ``BrokerError``
subclasses below. The translator selects a status/body pair from the
``kind`` attribute, never from the message text. Any other exception raised
by a broker is treated as an unclassified failure.
"""
from __future__ import annotations

import enum
from typing import Optional


class ErrorKind(enum.Enum):
    """Closed set of outcomes the HTTP layer knows how to render."""

    UNAUTHORIZED = "unauthorized"
    INVALID_REQUEST_PAYLOAD = "invalid-request-payload"
    INSTANCE_ALREADY_EXISTS = "instance-already-exists"
    INSTANCE_DOES_NOT_EXIST = "instance-does-not-exist"
    INSTANCE_LIMIT_REACHED = "instance-limit-reached"
    BINDING_ALREADY_EXISTS = "binding-already-exists"
    BINDING_DOES_NOT_EXIST = "binding-does-not-exist"
    ASYNC_REQUIRED = "async-required"
    UNCLASSIFIED = "unclassified"


class BrokerError(Exception):
    """Base class for protocol-level broker outcomes."""

    kind: ErrorKind = ErrorKind.UNCLASSIFIED
    default_message = "unknown error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequestPayload(BrokerError):
    kind = ErrorKind.INVALID_REQUEST_PAYLOAD
    default_message = "invalid request payload"


class InstanceAlreadyExistsError(BrokerError):
    kind = ErrorKind.INSTANCE_ALREADY_EXISTS
    default_message = "instance already exists"


class InstanceDoesNotExistError(BrokerError):
    kind = ErrorKind.INSTANCE_DOES_NOT_EXIST
    default_message = "instance does not exist"


class InstanceLimitReachedError(BrokerError):
    kind = ErrorKind.INSTANCE_LIMIT_REACHED
    default_message = "instance limit for this service has been reached"


class BindingAlreadyExistsError(BrokerError):
    kind = ErrorKind.BINDING_ALREADY_EXISTS
    default_message = "binding already exists"


class BindingDoesNotExistError(BrokerError):
    kind = ErrorKind.BINDING_DOES_NOT_EXIST
    default_message = "binding does not exist"


class AsyncRequiredError(BrokerError):
    kind = ErrorKind.ASYNC_REQUIRED
    default_message = "This service plan requires client support for asynchronous service operations."


def error_kind(error: BaseException) -> ErrorKind:
    """Return the kind of ``error``; foreign exceptions are unclassified."""
    if isinstance(error, BrokerError):
        return error.kind
    return ErrorKind.UNCLASSIFIED
