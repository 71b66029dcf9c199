"""Structured log events emitted by the broker API.

Every event has a dotted message (``broker-api.provision.instance-missing``)
and a ``data`` mapping attached to the ``logging.LogRecord``. Downstream
tooling matches on the message names and data keys, so treat them as part of
the public contract.
"""
from __future__ import annotations

import datetime
import json
import logging
from typing import Any, Mapping, Optional

DEFAULT_COMPONENT = "broker-api"
LOGGER_NAME = "brokerapi"


class BrokerLogger:
    """Thin session-aware wrapper around a standard library logger."""

    def __init__(
        self,
        component: str = DEFAULT_COMPONENT,
        logger: Optional[logging.Logger] = None,
        data: Optional[Mapping[str, Any]] = None,
    ):
        self.component = component
        self._logger = logger or logging.getLogger(LOGGER_NAME)
        self._data = dict(data or {})

    def session(self, task: str, data: Optional[Mapping[str, Any]] = None) -> "BrokerLogger":
        """Return a child logger whose messages are prefixed with ``task``."""
        merged = dict(self._data)
        merged.update(data or {})
        return BrokerLogger(f"{self.component}.{task}", self._logger, merged)

    def _emit(self, level: int, action: str, data: Optional[Mapping[str, Any]]) -> None:
        payload = dict(self._data)
        payload.update(data or {})
        self._logger.log(level, f"{self.component}.{action}", extra={"data": payload})

    def debug(self, action: str, data: Optional[Mapping[str, Any]] = None) -> None:
        self._emit(logging.DEBUG, action, data)

    def info(self, action: str, data: Optional[Mapping[str, Any]] = None) -> None:
        self._emit(logging.INFO, action, data)

    def error(self, action: str, error: BaseException, data: Optional[Mapping[str, Any]] = None) -> None:
        payload = dict(data or {})
        payload["error"] = str(error)
        self._emit(logging.ERROR, action, payload)


class JsonEventFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        event = {
            "timestamp": datetime.datetime.fromtimestamp(record.created, tz=datetime.timezone.utc).isoformat(),
            "source": record.name,
            "message": record.getMessage(),
            "log_level": record.levelname.lower(),
            "data": getattr(record, "data", {}),
        }
        if record.exc_info:
            event["data"] = dict(event["data"], traceback=self.formatException(record.exc_info))
        return json.dumps(event, default=str, sort_keys=True)


class TextEventFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        data = getattr(record, "data", None)
        if data:
            line = f"{line} {json.dumps(data, default=str, sort_keys=True)}"
        return line


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install a single stream handler on the broker logger."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JsonEventFormatter())
    else:
        handler.setFormatter(TextEventFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
