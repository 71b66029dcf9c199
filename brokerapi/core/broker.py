"""Broker capability interface and the values exchanged with it.

A broker is any object exposing the operations of ``ServiceBroker``. It may
declare which provisioning modes it supports through a ``capabilities``
attribute; the dispatcher reads that set instead of inspecting the class:

    SYNCHRONOUS only            -> completes every provision in the request
    SYNCHRONOUS + ASYNCHRONOUS  -> may complete immediately or defer
    ASYNCHRONOUS only           -> refuses synchronous completion

Brokers that declare nothing are treated as synchronous-only.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, FrozenSet, Mapping, Optional


class Capability(enum.Enum):
    SYNCHRONOUS = "synchronous"
    ASYNCHRONOUS = "asynchronous"


SYNC_ONLY: FrozenSet[Capability] = frozenset({Capability.SYNCHRONOUS})
ASYNC_CAPABLE: FrozenSet[Capability] = frozenset({Capability.SYNCHRONOUS, Capability.ASYNCHRONOUS})
ASYNC_ONLY: FrozenSet[Capability] = frozenset({Capability.ASYNCHRONOUS})


def capabilities_of(broker: Any) -> FrozenSet[Capability]:
    """Return the provisioning capabilities declared by ``broker``."""
    declared = getattr(broker, "capabilities", None)
    if not declared:
        return SYNC_ONLY
    return frozenset(declared)


class LastOperationState(str, enum.Enum):
    IN_PROGRESS = "in progress"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def _read_only(parameters: Mapping[str, Any]) -> Mapping[str, Any]:
    """Copy ``parameters`` into a read-only view; it is compared but never hashed."""
    return MappingProxyType(dict(parameters))


@dataclass(frozen=True)
class BrokerCredentials:
    username: str
    password: str


@dataclass(frozen=True)
class ServiceDetails:
    """Provisioning request body."""
    service_id: str = ""
    plan_id: str = ""
    organization_guid: str = ""
    space_guid: str = ""
    parameters: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "parameters", _read_only(self.parameters))


@dataclass(frozen=True)
class BindDetails:
    """Binding request body (optional on the wire)."""
    service_id: str = ""
    plan_id: str = ""
    app_guid: str = ""
    parameters: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "parameters", _read_only(self.parameters))


@dataclass(frozen=True)
class ProvisionedServiceSpec:
    dashboard_url: str = ""
    is_async: bool = False

    def to_dict(self) -> dict:
        return {"dashboard_url": self.dashboard_url}


@dataclass(frozen=True)
class Binding:
    credentials: Any = None
    syslog_drain_url: Optional[str] = None

    def to_dict(self) -> dict:
        body = {"credentials": self.credentials}
        if self.syslog_drain_url:
            body["syslog_drain_url"] = self.syslog_drain_url
        return body


@dataclass(frozen=True)
class LastOperation:
    state: LastOperationState
    description: str = ""

    def to_dict(self) -> dict:
        state = self.state.value if isinstance(self.state, LastOperationState) else str(self.state)
        return {"state": state, "description": self.description}


class ServiceBroker:
    """Operations a broker implementation provides.

    Domain failures are reported by raising the ``BrokerError`` subclasses
    from ``brokerapi.core.errors``.
    """

    capabilities: FrozenSet[Capability] = SYNC_ONLY

    def catalog(self) -> Any:
        """Return the JSON-serializable catalog advertised to the platform."""
        raise NotImplementedError

    def provision(self, instance_id: str, details: ServiceDetails, accepts_incomplete: bool) -> ProvisionedServiceSpec:
        raise NotImplementedError

    def deprovision(self, instance_id: str) -> None:
        raise NotImplementedError

    def bind(self, instance_id: str, binding_id: str, details: BindDetails) -> Binding:
        raise NotImplementedError

    def unbind(self, instance_id: str, binding_id: str) -> None:
        raise NotImplementedError

    def last_operation(self, instance_id: str) -> LastOperation:
        raise NotImplementedError
