"""Application factory, middleware and framework-level error handling."""
import pytest

from brokerapi.api.context import current_region
from brokerapi.core.broker import ProvisionedServiceSpec
from brokerapi.fakes import FakeServiceBroker
from brokerapi import flask_app
from brokerapi.flask_app import create_app
from tests.conftest import basic_auth, unique_instance_id


class RegionAwareBroker(FakeServiceBroker):
    def __init__(self):
        super().__init__()
        self.regions = []

    def provision(self, instance_id, details, accepts_incomplete):
        self.regions.append(current_region())
        return ProvisionedServiceSpec()


def test_unknown_route_returns_json_404(client):
    response = client.get("/v3/catalog", headers=basic_auth())
    assert response.status_code == 404
    assert response.content_type == "application/json"
    assert "description" in response.get_json()


def test_wrong_method_returns_json_405(client):
    response = client.post("/v2/catalog", headers=basic_auth())
    assert response.status_code == 405
    assert response.content_type == "application/json"


def test_unexpected_render_failure_returns_json_500(make_client):
    class UnserializableCatalog:
        def catalog(self):
            return object()

    response = make_client(UnserializableCatalog()).get("/v2/catalog", headers=basic_auth())

    assert response.status_code == 500
    assert "description" in response.get_json()


def test_correlation_id_is_echoed(client):
    response = client.get("/v2/catalog", headers={**basic_auth(), "X-Correlation-Id": "abc-123"})
    assert response.headers["X-Correlation-Id"] == "abc-123"


@pytest.mark.parametrize("header", ["X-Region", "X-Cf-Region", "X-Azure-Region"])
def test_region_header_is_exposed_to_broker(make_client, header):
    broker = RegionAwareBroker()
    make_client(broker).put(
        f"/v2/service_instances/{unique_instance_id()}",
        headers={**basic_auth(), header: "eu-west-1"},
    )
    assert broker.regions == ["eu-west-1"]


def test_region_defaults_to_empty(make_client):
    broker = RegionAwareBroker()
    make_client(broker).put(f"/v2/service_instances/{unique_instance_id()}", headers=basic_auth())
    assert broker.regions == [""]


def test_current_region_outside_request_is_empty():
    assert current_region() == ""


def test_create_app_from_settings(monkeypatch):
    monkeypatch.setenv("DEMO_MODE", "false")
    monkeypatch.setenv("BROKER_USERNAME", "platform")
    monkeypatch.setenv("BROKER_PASSWORD", "s3cret")
    monkeypatch.setenv("BROKER_FACTORY", "brokerapi.fakes:FakeAsyncServiceBroker")
    monkeypatch.setenv("LOG_FORMAT", "text")
    monkeypatch.setenv("LOG_LEVEL", "info")
    logging_calls = []
    monkeypatch.setattr(flask_app, "configure_logging", lambda *args: logging_calls.append(args))

    app = create_app()
    client = app.test_client()

    assert client.get("/v2/catalog", headers=basic_auth("platform", "s3cret")).status_code == 200
    assert client.get("/v2/catalog", headers=basic_auth()).status_code == 401
    assert type(app.extensions["brokerapi"].dispatcher.broker).__name__ == "FakeAsyncServiceBroker"
    assert app.config["APP_CONFIG"].broker_username == "platform"
    assert logging_calls == [("INFO", "text")]


def test_explicit_wiring_skips_settings(monkeypatch):
    monkeypatch.delenv("BROKER_USERNAME", raising=False)
    monkeypatch.setenv("DEMO_MODE", "false")

    from brokerapi.core.broker import BrokerCredentials

    app = create_app(FakeServiceBroker(), BrokerCredentials("u", "p"))
    assert app.config["APP_CONFIG"] is None


def test_passed_broker_needs_no_factory(monkeypatch):
    monkeypatch.setenv("DEMO_MODE", "false")
    monkeypatch.setenv("BROKER_USERNAME", "platform")
    monkeypatch.setenv("BROKER_PASSWORD", "s3cret")
    monkeypatch.delenv("BROKER_FACTORY", raising=False)
    monkeypatch.setattr(flask_app, "configure_logging", lambda *args: None)
    broker = FakeServiceBroker()

    app = create_app(broker)

    assert app.extensions["brokerapi"].dispatcher.broker is broker
    assert app.config["APP_CONFIG"].broker_factory is None
    assert app.test_client().get("/v2/catalog", headers=basic_auth("platform", "s3cret")).status_code == 200


def test_missing_factory_without_broker_fails_in_production(monkeypatch):
    monkeypatch.setenv("DEMO_MODE", "false")
    monkeypatch.setenv("BROKER_USERNAME", "platform")
    monkeypatch.setenv("BROKER_PASSWORD", "s3cret")
    monkeypatch.delenv("BROKER_FACTORY", raising=False)
    monkeypatch.setattr(flask_app, "configure_logging", lambda *args: None)

    with pytest.raises(RuntimeError, match="BROKER_FACTORY"):
        create_app()


def test_demo_mode_broker_keeps_no_call_history(monkeypatch):
    monkeypatch.setenv("DEMO_MODE", "true")
    for name in ("BROKER_USERNAME", "BROKER_PASSWORD", "BROKER_FACTORY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(flask_app, "configure_logging", lambda *args: None)
    monkeypatch.setattr("brokerapi.config.settings._load_secret_from_file", lambda name, env_var=None: None)

    from brokerapi.config import settings

    app = create_app()
    client = app.test_client()
    headers = basic_auth(settings.DEMO_USERNAME, settings.DEMO_PASSWORD)
    instance_id = unique_instance_id()

    assert client.put(f"/v2/service_instances/{instance_id}", headers=headers).status_code == 201
    assert client.get(f"/v2/service_instances/{instance_id}/last_operation", headers=headers).status_code == 200
    assert client.delete(f"/v2/service_instances/{instance_id}", headers=headers).status_code == 200

    broker = app.extensions["brokerapi"].dispatcher.broker
    assert broker.provision_calls == []
    assert broker.last_operation_instance_ids == []
    assert broker.deprovisioned_instance_ids == []
    assert broker.provisioned_instances == {}
