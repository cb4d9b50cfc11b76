from __future__ import annotations

import base64
import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import urlencode

from .config_types import ClientConfig
from .errors import ConfigError, SerializationError
from .transport import RequestDescriptor

logger = logging.getLogger(__name__)

TOKEN_PATH = "/oauth/token"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass(frozen=True)
class AccessToken:
    value: str
    token_type: str = "bearer"
    expires_in: int = 0  # milliseconds
    expires_at: float = math.inf
    scope: str = ""
    jti: str = ""

    @classmethod
    def from_response(cls, data: Any, now: float) -> AccessToken:
        if not isinstance(data, dict) or not data.get("access_token"):
            raise SerializationError("token response has no access_token")
        try:
            expires_in = int(data.get("expires_in") or 0)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"invalid expires_in in token response: {data.get('expires_in')!r}") from e
        return cls(
            value=str(data["access_token"]),
            token_type=str(data.get("token_type") or "bearer"),
            expires_in=expires_in,
            expires_at=now + expires_in / 1000.0,
            scope=str(data.get("scope") or ""),
            jti=str(data.get("jti") or ""),
        )

    def has_expired(self, now: float | None = None) -> bool:
        if now is None:
            now = time.monotonic()
        return self.expires_at <= now


def basic_authorization(client_id: str, client_secret: str) -> str:
    raw = f"{client_id}:{client_secret}".encode("utf-8")
    return f"Basic {base64.b64encode(raw).decode('ascii')}"


class TokenManager:
    """Holds the client's bearer token and refreshes it when it expires.

    With a static token no request is ever made. With client credentials the
    token is fetched on first use and again once it has expired; concurrent
    callers share a single refresh.
    """

    def __init__(
            self,
            cfg: ClientConfig,
            send: Callable[[RequestDescriptor], Any],
            *,
            clock: Callable[[], float] = time.monotonic,
    ):
        self._cfg = cfg
        self._send = send
        self._clock = clock
        self._lock = threading.Lock()
        self._token: AccessToken | None = AccessToken(value=cfg.token) if cfg.uses_static_token else None

    @property
    def token(self) -> AccessToken | None:
        return self._token

    @token.setter
    def token(self, value: AccessToken | None) -> None:
        self._token = value

    @property
    def is_static(self) -> bool:
        return self._cfg.uses_static_token

    def _is_stale(self, token: AccessToken | None) -> bool:
        return token is None or token.has_expired(self._clock())

    def ensure_valid_token(self) -> AccessToken:
        token = self._token
        if self.is_static or not self._is_stale(token):
            return token
        with self._lock:
            # another caller may have refreshed while we waited
            token = self._token
            if not self._is_stale(token):
                return token
            return self._fetch(self._cfg.scope)

    def fetch_token(self, scope: str | None = None) -> AccessToken:
        if self.is_static:
            raise ConfigError("client uses a static token; there are no credentials to exchange")
        with self._lock:
            return self._fetch(scope or self._cfg.scope)

    def invalidate(self) -> None:
        if not self.is_static:
            self._token = None

    def authorization_header(self) -> str:
        return f"Bearer {self.ensure_valid_token().value}"

    def _fetch(self, scope: str) -> AccessToken:
        cr = RequestDescriptor(
            method="POST",
            path=TOKEN_PATH,
            content_type=FORM_CONTENT_TYPE,
            payload=urlencode({"grant_type": "client_credentials", "scope": scope}).encode("ascii"),
            skip_compression=True,
            authorization=basic_authorization(self._cfg.client_id or "", self._cfg.client_secret or ""),
        )
        data = self._send(cr)
        token = AccessToken.from_response(data, self._clock())
        self._token = token
        logger.info("fetched access token (scope=%s, expires_in=%dms)", token.scope or scope, token.expires_in)
        return token
