"""Gunicorn configuration for the service broker API.

Credential loading priority (see brokerapi/config/settings.py):
1. /run/secrets/broker_username, /run/secrets/broker_password (Docker secrets)
2. BROKER_USERNAME / BROKER_PASSWORD environment variables
3. Demo defaults when DEMO_MODE=true

Each worker builds its own application; the core keeps no state shared
between requests, so any worker/thread count is safe.
"""
import os

wsgi_app = "brokerapi.flask_app:create_app()"
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8080")
workers = int(os.environ.get("GUNICORN_WORKERS", "2"))
threads = int(os.environ.get("GUNICORN_THREADS", "4"))
accesslog = "-"


def post_fork(server, worker):
    """
    Called just after a worker has been forked.

    Reports where the broker credentials will come from so misconfigured
    deployments are visible in the worker log before the first request.
    """
    from pathlib import Path

    demo_mode = os.environ.get("DEMO_MODE", "false").lower() == "true"
    secrets_dir = Path("/run/secrets")
    has_secret_files = all(
        (secrets_dir / name).is_file() for name in ("broker_username", "broker_password")
    )

    if has_secret_files:
        worker.log.info("Broker credentials found in /run/secrets")
    elif os.environ.get("BROKER_USERNAME") and os.environ.get("BROKER_PASSWORD"):
        worker.log.info("Broker credentials loaded from environment")
    elif demo_mode:
        worker.log.warning("DEMO_MODE=true: using demo broker credentials")
    else:
        worker.log.error("BROKER_USERNAME/BROKER_PASSWORD not configured; application start will fail")
