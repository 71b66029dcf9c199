"""Pytest shared fixtures for the broker API tests."""
import base64
import json
import logging
import pathlib
import sys
import uuid

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from brokerapi.core.broker import BrokerCredentials
from brokerapi.core.events import LOGGER_NAME
from brokerapi.fakes import FakeServiceBroker
from brokerapi.flask_app import create_app

FIXTURES_DIR = pathlib.Path(__file__).resolve().parent / "fixtures"

CREDENTIALS = BrokerCredentials(username="username", password="password")

SERVICE_DETAILS = {
    "service_id": "service-id",
    "plan_id": "plan-id",
    "organization_guid": "organization-guid",
    "space_guid": "space-guid",
}


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────
def fixture(name: str):
    """Load a JSON fixture from tests/fixtures."""
    return json.loads((FIXTURES_DIR / name).read_text())


def basic_auth(username: str = CREDENTIALS.username, password: str = CREDENTIALS.password) -> dict:
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


def unique_instance_id() -> str:
    return f"instance-{uuid.uuid4()}"


def unique_binding_id() -> str:
    return f"binding-{uuid.uuid4()}"


def broker_events(caplog) -> list:
    """Records emitted through the broker event logger, in order."""
    return [record for record in caplog.records if record.name == LOGGER_NAME]


def last_event(caplog):
    events = broker_events(caplog)
    assert events, "expected some log lines but there were none!"
    return events[-1]


# ─────────────────────────────────────────────────────────────────────────────
# Application
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def fake_broker():
    return FakeServiceBroker(instance_limit=3)


@pytest.fixture()
def make_client(caplog):
    """Build a test client around any broker double."""
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)

    def _make(broker):
        flask_app = create_app(broker, CREDENTIALS)
        flask_app.config.update(TESTING=True)
        return flask_app.test_client()

    return _make


@pytest.fixture()
def client(make_client, fake_broker):
    """Flask test client wired to the synchronous fake broker."""
    return make_client(fake_broker)


@pytest.fixture()
def provision(client):
    """PUT /v2/service_instances/<id> with JSON service details."""

    def _provision(instance_id, details=None, query="", api_client=None):
        body = json.dumps(SERVICE_DETAILS if details is None else details)
        return (api_client or client).put(
            f"/v2/service_instances/{instance_id}{query}",
            data=body,
            headers={**basic_auth(), "Content-Type": "application/json"},
        )

    return _provision


# ─────────────────────────────────────────────────────────────────────────────
# Pytest Configuration
# ─────────────────────────────────────────────────────────────────────────────
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "critical: marks tests as critical security tests (P0 priority)"
    )
