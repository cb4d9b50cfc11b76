from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, Mapping

import httpx

from .errors import ConfigError

DEFAULT_TIMEOUT_S = 10.0
DEFAULT_SCOPE = "ALL"
DEFAULT_BACKOFF_MAX_INTERVAL_S = 5 * 60.0

ENV_PREFIX = "SMARTOBJECTS_"


@dataclass(frozen=True)
class CompressionConfig:
    request: bool = False
    response: bool = False


@dataclass(frozen=True)
class BackoffConfig:
    # 0 means retry until success or a permanent error
    max_elapsed_s: float = 0.0
    notify: Callable[[Exception, float], None] | None = None
    initial_interval_s: float = 0.5
    multiplier: float = 1.5
    randomization_factor: float = 0.5
    max_interval_s: float = DEFAULT_BACKOFF_MAX_INTERVAL_S


@dataclass(frozen=True)
class ClientConfig:
    host: str
    client_id: str | None = None
    client_secret: str | None = None
    token: str | None = None
    timeout_s: float = DEFAULT_TIMEOUT_S
    compression: CompressionConfig = field(default_factory=CompressionConfig)
    backoff: BackoffConfig = field(default_factory=BackoffConfig)
    transport: httpx.BaseTransport | None = None
    scope: str = DEFAULT_SCOPE

    def __post_init__(self) -> None:
        host = normalize_host(self.host)
        if not host:
            raise ConfigError("host is required")
        object.__setattr__(self, "host", host)

        has_credentials = bool(self.client_id or self.client_secret)
        if self.token and has_credentials:
            raise ConfigError("use either a static token or client credentials, not both")
        if not self.token:
            if not (self.client_id and self.client_secret):
                raise ConfigError("client_id and client_secret are required when no static token is given")
        if self.timeout_s <= 0:
            raise ConfigError("timeout_s must be positive")

    @property
    def uses_static_token(self) -> bool:
        return bool(self.token)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, *, prefix: str = ENV_PREFIX, **overrides) -> ClientConfig:
        env = os.environ if environ is None else environ

        def _get(name: str) -> str | None:
            value = str(env.get(f"{prefix}{name}") or "").strip()
            return value or None

        values: dict = {
            "host": _get("HOST") or "",
            "client_id": _get("CLIENT_ID"),
            "client_secret": _get("CLIENT_SECRET"),
            "token": _get("TOKEN"),
        }
        timeout = _get("TIMEOUT_S")
        if timeout is not None:
            try:
                values["timeout_s"] = float(timeout)
            except ValueError as e:
                raise ConfigError(f"{prefix}TIMEOUT_S must be a number, got {timeout!r}") from e
        values.update(overrides)
        return cls(**values)


def normalize_host(raw: str | None) -> str:
    value = (raw or "").strip()
    if not value:
        return ""
    value = value.rstrip("/")
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value

    host = value.split("/", 1)[0]
    host = host.split(":", 1)[0].lower()
    if host in {"localhost", "127.0.0.1", "0.0.0.0"}:
        scheme = "http://"
    else:
        scheme = "https://"
    return f"{scheme}{value}"
