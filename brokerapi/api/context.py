"""Per-request context captured from inbound headers.

Broker implementations run inside the request, so they can call
``current_region()`` to learn which region the platform addressed.
"""
from __future__ import annotations

import re

from flask import g, has_request_context, request

# Matches X-Region, X-Cf-Region, X-Some-Cloud-Region, ...
REGION_HEADER_PATTERN = re.compile(r"X(-*[a-zA-Z]*)-Region")


def capture_region_header() -> None:
    """Store the first region-style header value on ``g.region``."""
    region = ""
    for name, value in request.headers.items():
        if REGION_HEADER_PATTERN.search(name):
            region = value
            break
    g.region = region


def current_region() -> str:
    """Return the region header of the current request, or ``""``."""
    if not has_request_context():
        return ""
    return g.get("region", "")


def echo_correlation_id(response):
    """Copy ``X-Correlation-Id`` from the request onto the response."""
    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        response.headers["X-Correlation-Id"] = correlation_id
    return response
