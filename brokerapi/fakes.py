"""In-memory broker doubles.

Used by the test-suite and served in demo mode. They keep just enough state
to report "already exists" / "does not exist" the way a real broker would,
and record every call so tests can assert on what reached the broker.
"""
from __future__ import annotations

from typing import Any, Optional

from brokerapi.core.broker import (
    ASYNC_CAPABLE,
    ASYNC_ONLY,
    SYNC_ONLY,
    BindDetails,
    Binding,
    LastOperation,
    LastOperationState,
    ProvisionedServiceSpec,
    ServiceDetails,
)
from brokerapi.core.errors import (
    BindingAlreadyExistsError,
    BindingDoesNotExistError,
    InstanceAlreadyExistsError,
    InstanceDoesNotExistError,
    InstanceLimitReachedError,
)

DEFAULT_DASHBOARD_URL = "http://example.com/dashboard"

DEFAULT_CATALOG = {
    "services": [
        {
            "id": "0A789746-596F-4CEA-BFAC-A0795DA056E3",
            "name": "p-cassandra",
            "description": "Cassandra service for application development and testing",
            "bindable": True,
            "plan_updateable": False,
            "plans": [
                {
                    "id": "ABE176EE-F69F-4A96-80CE-142595CC24E3",
                    "name": "default",
                    "description": "The default Cassandra plan",
                    "metadata": {"bullets": [], "displayName": "Cassandra"},
                }
            ],
            "metadata": {
                "displayName": "Cassandra",
                "longDescription": "Long description",
                "documentationUrl": "http://thedocs.com",
                "supportUrl": "http://helpme.no",
            },
            "tags": ["pivotal", "cassandra"],
        }
    ]
}

DEFAULT_CREDENTIALS = {
    "host": "127.0.0.1",
    "port": 3000,
    "username": "batman",
    "password": "robin",
}


class FakeServiceBroker:
    """Synchronous-only broker with an instance limit.

    With ``record_calls=False`` the call-record lists stay empty, so a
    long-running demo process only holds live instances and bindings.
    """

    capabilities = SYNC_ONLY

    def __init__(self, instance_limit: int = 3, record_calls: bool = True):
        self.instance_limit = instance_limit
        self.record_calls = record_calls
        self.broker_called = False

        self.provision_error: Optional[BaseException] = None
        self.deprovision_error: Optional[BaseException] = None
        self.bind_error: Optional[BaseException] = None
        self.unbind_error: Optional[BaseException] = None
        self.last_operation_error: Optional[BaseException] = None

        self.last_operation_state = LastOperationState.SUCCEEDED
        self.last_operation_description = ""

        self.provision_calls: list[tuple[str, ServiceDetails, bool]] = []
        self.provisioned_instances: dict[str, ServiceDetails] = {}
        self.provisioned_instance_ids: list[str] = []
        self.async_provisioned_instance_ids: list[str] = []
        self.deprovisioned_instance_ids: list[str] = []
        self.bound_instance_ids: list[str] = []
        self.bound_binding_ids: list[str] = []
        self.bind_details: Optional[BindDetails] = None
        self.unbound_binding_ids: list[str] = []
        self.last_operation_instance_ids: list[str] = []
        self.service_details: Optional[ServiceDetails] = None
        self.accepts_incomplete: Optional[bool] = None
        self._bindings: set[tuple[str, str]] = set()

    def _record(self, calls: list, entry: Any) -> None:
        if self.record_calls:
            calls.append(entry)

    def catalog(self) -> Any:
        self.broker_called = True
        return DEFAULT_CATALOG

    def provision(self, instance_id: str, details: ServiceDetails, accepts_incomplete: bool) -> ProvisionedServiceSpec:
        self.broker_called = True
        self._record(self.provision_calls, (instance_id, details, accepts_incomplete))

        if self.provision_error is not None:
            raise self.provision_error
        if len(self.provisioned_instances) >= self.instance_limit:
            raise InstanceLimitReachedError()
        if instance_id in self.provisioned_instances:
            raise InstanceAlreadyExistsError()

        self.service_details = details
        self.accepts_incomplete = accepts_incomplete
        self.provisioned_instances[instance_id] = details
        return self._complete(instance_id, accepts_incomplete)

    def _complete(self, instance_id: str, accepts_incomplete: bool) -> ProvisionedServiceSpec:
        self._record(self.provisioned_instance_ids, instance_id)
        return ProvisionedServiceSpec(dashboard_url=DEFAULT_DASHBOARD_URL)

    def deprovision(self, instance_id: str) -> None:
        self.broker_called = True
        self._record(self.deprovisioned_instance_ids, instance_id)

        if self.deprovision_error is not None:
            raise self.deprovision_error
        if instance_id not in self.provisioned_instances:
            raise InstanceDoesNotExistError()
        del self.provisioned_instances[instance_id]

    def bind(self, instance_id: str, binding_id: str, details: BindDetails) -> Binding:
        self.broker_called = True

        if self.bind_error is not None:
            raise self.bind_error
        if (instance_id, binding_id) in self._bindings:
            raise BindingAlreadyExistsError()

        self.bind_details = details
        self._record(self.bound_instance_ids, instance_id)
        self._record(self.bound_binding_ids, binding_id)
        self._bindings.add((instance_id, binding_id))
        return Binding(credentials=dict(DEFAULT_CREDENTIALS))

    def unbind(self, instance_id: str, binding_id: str) -> None:
        self.broker_called = True

        if self.unbind_error is not None:
            raise self.unbind_error
        if instance_id not in self.provisioned_instances:
            raise InstanceDoesNotExistError()
        if (instance_id, binding_id) not in self._bindings:
            raise BindingDoesNotExistError()

        self._bindings.discard((instance_id, binding_id))
        self._record(self.unbound_binding_ids, binding_id)

    def last_operation(self, instance_id: str) -> LastOperation:
        self.broker_called = True
        self._record(self.last_operation_instance_ids, instance_id)

        if self.last_operation_error is not None:
            raise self.last_operation_error
        return LastOperation(self.last_operation_state, self.last_operation_description)


class FakeAsyncServiceBroker(FakeServiceBroker):
    """Defers provisioning whenever the caller accepts incomplete results."""

    capabilities = ASYNC_CAPABLE

    def _complete(self, instance_id: str, accepts_incomplete: bool) -> ProvisionedServiceSpec:
        if not accepts_incomplete:
            return super()._complete(instance_id, accepts_incomplete)
        self._record(self.async_provisioned_instance_ids, instance_id)
        return ProvisionedServiceSpec(dashboard_url=DEFAULT_DASHBOARD_URL, is_async=True)


class FakeAsyncOnlyServiceBroker(FakeServiceBroker):
    """Only ever completes provisioning asynchronously."""

    capabilities = ASYNC_ONLY

    def _complete(self, instance_id: str, accepts_incomplete: bool) -> ProvisionedServiceSpec:
        self._record(self.async_provisioned_instance_ids, instance_id)
        return ProvisionedServiceSpec(dashboard_url=DEFAULT_DASHBOARD_URL, is_async=True)


def demo_broker() -> FakeServiceBroker:
    """Broker served in demo mode; keeps state but records no calls."""
    return FakeServiceBroker(record_calls=False)
