"""Operation dispatcher: decode, call the broker, translate the outcome.

Framework independent. The HTTP layer hands raw request parts in and gets a
``BrokerResponse`` back; no exception raised by a broker escapes.
"""
from __future__ import annotations

from typing import Any, Optional

from brokerapi.core import codec
from brokerapi.core.broker import Capability, capabilities_of
from brokerapi.core.errors import AsyncRequiredError, InvalidRequestPayload
from brokerapi.core.events import BrokerLogger
from brokerapi.core.translator import BrokerResponse, Operation, translate


class PendingNotAccepted(Exception):
    """The broker deferred a provision the caller could not accept."""


class OperationDispatcher:
    """One entry point per protocol operation.

    Args:
        broker: Broker implementation (see ``brokerapi.core.broker``)
        logger: Event logger; each call opens a session named after the
            operation
    """

    def __init__(self, broker: Any, logger: Optional[BrokerLogger] = None):
        self.broker = broker
        self.logger = logger or BrokerLogger()

    # ─────────────────────────────────────────────────────────────────────
    # Catalog
    # ─────────────────────────────────────────────────────────────────────

    def catalog(self) -> BrokerResponse:
        logger = self.logger.session(Operation.CATALOG.value)
        try:
            catalog = self.broker.catalog()
        except Exception as exc:
            return translate(Operation.CATALOG, exc, logger)
        return BrokerResponse(200, catalog)

    # ─────────────────────────────────────────────────────────────────────
    # Service instances
    # ─────────────────────────────────────────────────────────────────────

    def provision(self, instance_id: str, body: Optional[bytes], accepts_incomplete: bool) -> BrokerResponse:
        """Provision an instance, negotiating sync/async completion.

        Returns:
            201 when the broker completed, 202 when it deferred (only if the
            caller accepts incomplete results), otherwise a translated error
        """
        logger = self.logger.session(Operation.PROVISION.value, {"instance-id": instance_id})

        try:
            details = codec.decode_service_details(body)
        except InvalidRequestPayload as exc:
            return translate(Operation.PROVISION, exc, logger)

        capabilities = capabilities_of(self.broker)
        if Capability.SYNCHRONOUS not in capabilities and not accepts_incomplete:
            return translate(Operation.PROVISION, AsyncRequiredError(), logger)

        try:
            provisioned = self.broker.provision(instance_id, details, accepts_incomplete)
            if not provisioned.is_async:
                return BrokerResponse(201, provisioned.to_dict())
            if not accepts_incomplete or Capability.ASYNCHRONOUS not in capabilities:
                raise PendingNotAccepted(
                    "broker returned an asynchronous result for a request that does not accept incomplete operations"
                )
        except Exception as exc:
            return translate(Operation.PROVISION, exc, logger, {"details": codec.encode_service_details(details)})

        return BrokerResponse(202, {})

    def deprovision(self, instance_id: str) -> BrokerResponse:
        logger = self.logger.session(Operation.DEPROVISION.value, {"instance-id": instance_id})
        try:
            self.broker.deprovision(instance_id)
        except Exception as exc:
            return translate(Operation.DEPROVISION, exc, logger)
        return BrokerResponse(200, {})

    # ─────────────────────────────────────────────────────────────────────
    # Service bindings
    # ─────────────────────────────────────────────────────────────────────

    def bind(self, instance_id: str, binding_id: str, body: Optional[bytes] = None) -> BrokerResponse:
        logger = self.logger.session(
            Operation.BIND.value, {"instance-id": instance_id, "binding-id": binding_id}
        )
        try:
            details = codec.decode_bind_details(body)
        except InvalidRequestPayload as exc:
            return translate(Operation.BIND, exc, logger)

        try:
            binding = self.broker.bind(instance_id, binding_id, details)
            rendered = binding.to_dict() if hasattr(binding, "to_dict") else {"credentials": binding}
        except Exception as exc:
            return translate(Operation.BIND, exc, logger)
        return BrokerResponse(201, rendered)

    def unbind(self, instance_id: str, binding_id: str) -> BrokerResponse:
        logger = self.logger.session(
            Operation.UNBIND.value, {"instance-id": instance_id, "binding-id": binding_id}
        )
        try:
            self.broker.unbind(instance_id, binding_id)
        except Exception as exc:
            return translate(Operation.UNBIND, exc, logger)
        return BrokerResponse(200, {})

    # ─────────────────────────────────────────────────────────────────────
    # Last operation
    # ─────────────────────────────────────────────────────────────────────

    def last_operation(self, instance_id: str) -> BrokerResponse:
        logger = self.logger.session(Operation.LAST_OPERATION.value)
        logger.info("starting-check-for-operation", {"instance-id": instance_id})

        try:
            body = self.broker.last_operation(instance_id).to_dict()
        except Exception as exc:
            return translate(Operation.LAST_OPERATION, exc, logger, {"instance-id": instance_id})

        logger.info("done-check-for-operation", {"instance-id": instance_id, "state": body["state"]})
        return BrokerResponse(200, body)
