"""Service Broker API package.

To build the WSGI application:
    from brokerapi.flask_app import create_app
    app = create_app(broker, BrokerCredentials("user", "pass"))

To implement a broker:
    from brokerapi.core.broker import ServiceBroker, ProvisionedServiceSpec
    from brokerapi.core.errors import InstanceAlreadyExistsError
"""
# Note: We don't import flask_app by default so broker implementations can
# depend on brokerapi.core without pulling in Flask
