"""Core Business Logic Module

Protocol semantics of the service broker API, independent of the HTTP
framework.

Module Structure:
    - broker.py     : Broker capability interface and request/response values
    - errors.py     : Closed error taxonomy (ErrorKind + BrokerError subclasses)
    - codec.py      : Request payload decoding
    - translator.py : (operation, error kind) -> status/body/log event table
    - dispatcher.py : One entry point per protocol operation
    - events.py     : Structured log events and formatters

Usage Pattern:
    These modules are NOT auto-imported so broker implementations can depend
    on them without pulling in Flask.

        from brokerapi.core.broker import ServiceBroker, ProvisionedServiceSpec
        from brokerapi.core.errors import InstanceAlreadyExistsError
"""
