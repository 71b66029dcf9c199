"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEMO_USERNAME = "broker"
DEMO_PASSWORD = "demo-broker-password"
DEMO_BROKER_FACTORY = "brokerapi.fakes:demo_broker"


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    # Priority 1: Read from /run/secrets
    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                print(f"[settings] ✓ Loaded {secret_name} from /run/secrets")
                return secret_value
        except OSError as e:
            print(f"[settings] ✗ Failed to read /run/secrets/{secret_name}: {e}")

    # Priority 2: Fallback to environment variable
    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            return secret_value

    return None


@dataclass(frozen=True)
class BrokerConfig:
    """Application configuration container."""
    # Mode
    demo_mode: bool

    # Basic auth credentials expected from the platform
    broker_username: str
    broker_password: str

    # Broker implementation ("module:callable"); only needed when create_app()
    # is not handed a broker
    broker_factory: Optional[str]

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_component: str = "broker-api"


def _get_or_default(var_name: str, demo_default: Optional[str], demo_mode: bool, secret_name: str | None = None) -> str:
    """Get a required value, falling back to a demo default in demo mode."""
    if secret_name:
        value = _load_secret_from_file(secret_name, var_name)
    else:
        value = os.environ.get(var_name)
    if value:
        return value

    if demo_mode and demo_default is not None:
        print(f"[demo-mode] Using default for {var_name}")
        return demo_default

    raise RuntimeError(f"Environment variable {var_name} is required in production mode.")


def load_settings() -> BrokerConfig:
    """Load application settings from environment and /run/secrets."""
    demo_mode = os.environ.get("DEMO_MODE", "false").lower() == "true"

    broker_username = _get_or_default("BROKER_USERNAME", DEMO_USERNAME, demo_mode, secret_name="broker_username")
    broker_password = _get_or_default("BROKER_PASSWORD", DEMO_PASSWORD, demo_mode, secret_name="broker_password")
    broker_factory = os.environ.get("BROKER_FACTORY") or None
    if broker_factory is None and demo_mode:
        print("[demo-mode] Using default for BROKER_FACTORY")
        broker_factory = DEMO_BROKER_FACTORY

    log_level = os.environ.get("LOG_LEVEL", "INFO").strip().upper()
    log_format = os.environ.get("LOG_FORMAT", "json").strip().lower()
    if log_format not in {"json", "text"}:
        raise RuntimeError(f"LOG_FORMAT must be 'json' or 'text', got {log_format!r}")
    log_component = os.environ.get("BROKER_LOG_COMPONENT", "broker-api").strip() or "broker-api"

    mode_label = "DEMO" if demo_mode else "PRODUCTION"
    print(f"[settings] Mode={mode_label}; broker={broker_factory}; log_level={log_level}")

    if demo_mode:
        print("[settings] WARNING: Demo credentials in use. Do not deploy with these defaults.")

    return BrokerConfig(
        demo_mode=demo_mode,
        broker_username=broker_username,
        broker_password=broker_password,
        broker_factory=broker_factory,
        log_level=log_level,
        log_format=log_format,
        log_component=log_component,
    )
