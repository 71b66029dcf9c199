"""Configuration module for the service broker API."""
from .settings import BrokerConfig, load_settings

__all__ = ["BrokerConfig", "load_settings"]
