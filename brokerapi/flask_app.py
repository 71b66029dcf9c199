"""Flask application factory and bootstrap.

This module provides the create_app() factory function wiring the broker
implementation, credentials and event logger into the /v2 blueprint.

Gunicorn entry point:
    gunicorn "brokerapi.flask_app:create_app()"
"""
from __future__ import annotations
from typing import Any, Optional

from flask import Flask
from werkzeug.utils import import_string

from brokerapi.config import BrokerConfig, load_settings
from brokerapi.core.broker import BrokerCredentials
from brokerapi.core.dispatcher import OperationDispatcher
from brokerapi.core.events import BrokerLogger, configure_logging


# ─────────────────────────────────────────────────────────────────────────────
# Application Factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app(
    broker: Any = None,
    credentials: Optional[BrokerCredentials] = None,
    logger: Optional[BrokerLogger] = None,
) -> Flask:
    """Create and configure the Flask application.

    When ``broker`` and ``credentials`` are both supplied the app is built
    from them alone; otherwise missing pieces come from ``load_settings()``.
    """
    cfg: Optional[BrokerConfig] = None
    if broker is None or credentials is None:
        cfg = load_settings()
        configure_logging(cfg.log_level, cfg.log_format)
        if broker is None:
            broker = _build_broker(cfg.broker_factory)
        if credentials is None:
            credentials = BrokerCredentials(cfg.broker_username, cfg.broker_password)
        if logger is None:
            logger = BrokerLogger(cfg.log_component)

    app = Flask(__name__)
    app.config["APP_CONFIG"] = cfg

    from brokerapi.api import errors, routes
    from brokerapi.api.decorators import CredentialGate

    app.extensions["brokerapi"] = routes.BrokerAPI(
        gate=CredentialGate(credentials),
        dispatcher=OperationDispatcher(broker, logger or BrokerLogger()),
    )

    app.register_blueprint(routes.bp)

    # Register error handlers
    errors.register_error_handlers(app)

    # Register middleware/before_request handlers
    _register_middleware(app)

    if cfg is not None:
        mode_label = "DEMO" if cfg.demo_mode else "PRODUCTION"
        print(f"[flask_app] Mode={mode_label}")
        print(f"[flask_app] Service broker API registered at /v2 (broker={type(broker).__name__})")

    return app


def _register_middleware(app: Flask):
    """Register before/after request hooks."""
    from brokerapi.api.context import capture_region_header, echo_correlation_id

    app.before_request(capture_region_header)
    app.after_request(echo_correlation_id)


# ─────────────────────────────────────────────────────────────────────────────
# Helper Functions
# ─────────────────────────────────────────────────────────────────────────────
def _build_broker(factory_path: Optional[str]) -> Any:
    """Import ``module:callable`` and call it to obtain the broker."""
    if not factory_path:
        raise RuntimeError("Environment variable BROKER_FACTORY is required in production mode.")
    factory = import_string(factory_path)
    return factory()


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
