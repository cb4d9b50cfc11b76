from __future__ import annotations

import json
from typing import Any


class SmartObjectsError(Exception):
    """Base client error."""


class ConfigError(SmartObjectsError):
    """Invalid client configuration."""


class NetworkError(SmartObjectsError):
    """Transport/network layer error."""


class SerializationError(SmartObjectsError):
    """Payload could not be encoded or a response could not be decoded."""


class ApiError(SmartObjectsError):
    def __init__(self, status_code: int, body: str | None = None, message: str | None = None):
        body = body or ""
        super().__init__(message or f"The server responded with StatusCode: {status_code} - Body: {body.strip()}")
        self.status_code = status_code
        self.body = body

    def json(self) -> Any | None:
        return parse_error_body(self.body)


class AuthError(ApiError):
    """Auth-related API error."""


class PlatformUnavailableError(ApiError):
    """The platform answered 503; the call may be retried."""

    def __init__(self, body: str | None = None):
        super().__init__(503, body, "SmartObjects platform is not available")


def parse_error_body(body: str | None) -> Any | None:
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return None
