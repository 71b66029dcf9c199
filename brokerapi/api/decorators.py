"""
HTTP Basic authentication for the broker API.

Every protocol route is guarded by the credentials configured when the
application is built. A failed check answers 401 with an empty JSON body and
stops the request before its payload is read or the broker is called.

Security:
- Constant-time comparison of username and password (hmac.compare_digest)
- Only the ``Basic`` scheme is accepted
- Credentials are never logged
"""

import base64
import binascii
import hmac
from typing import Optional, Tuple

from flask import Response

from brokerapi.core.broker import BrokerCredentials


class CredentialGate:
    """Validates ``Authorization: Basic`` headers against fixed credentials."""

    def __init__(self, credentials: BrokerCredentials):
        self._credentials = credentials

    @staticmethod
    def parse_basic_header(header: Optional[str]) -> Optional[Tuple[str, str]]:
        """
        Extract ``(username, password)`` from a Basic authorization header.

        Returns:
            tuple: Decoded credentials, or None when the header is missing,
            uses another scheme, or is not valid base64 ``user:password``
        """
        if not header:
            return None

        scheme, _, encoded = header.partition(" ")
        if scheme.lower() != "basic" or not encoded.strip():
            return None

        try:
            decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return None

        if ":" not in decoded:
            return None
        username, _, password = decoded.partition(":")
        return username, password

    def authenticate(self, header: Optional[str]) -> bool:
        parsed = self.parse_basic_header(header)
        if parsed is None:
            return False

        username, password = parsed
        # Evaluate both comparisons so timing does not reveal which one failed
        username_ok = hmac.compare_digest(username.encode("utf-8"), self._credentials.username.encode("utf-8"))
        password_ok = hmac.compare_digest(password.encode("utf-8"), self._credentials.password.encode("utf-8"))
        return username_ok and password_ok


def unauthorized_response() -> Response:
    """401 with an empty body."""
    return Response("", status=401, mimetype="application/json")

