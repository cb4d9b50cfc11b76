from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from . import compression
from .config_types import ClientConfig
from .errors import ApiError, AuthError, NetworkError, PlatformUnavailableError, SerializationError

logger = logging.getLogger(__name__)

SDK_HEADER = "X-SMARTOBJECTS-SDK"
SDK_NAME = "python"

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain"


@dataclass
class RequestDescriptor:
    method: str
    path: str
    content_type: str = JSON_CONTENT_TYPE
    query: Mapping[str, Any] | None = None
    payload: bytes | None = None
    skip_compression: bool = False
    authorization: str | None = None

    @classmethod
    def json(cls, method: str, path: str, body: Any, **kwargs: Any) -> RequestDescriptor:
        try:
            payload = json.dumps(body).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(f"unable to encode request body for {method} {path}: {e}") from e
        return cls(method=method, path=path, payload=payload, **kwargs)


def encode_query(query: Mapping[str, Any] | None) -> dict[str, str]:
    params: dict[str, str] = {}
    for key, value in (query or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        params[key] = str(value)
    return params


def decode_body(content_type: str, body: bytes) -> Any:
    ct = content_type.lower()
    if JSON_CONTENT_TYPE in ct:
        if not body.strip():
            return None
        try:
            return json.loads(body)
        except ValueError as e:
            raise SerializationError(f"unable to decode JSON response: {e}") from e
    if TEXT_CONTENT_TYPE in ct:
        return body.decode("utf-8", errors="replace")
    return body or None


class Transport:
    def __init__(self, cfg: ClientConfig):
        self._cfg = cfg
        headers = {
            SDK_HEADER: SDK_NAME,
            "Accept-Encoding": "gzip" if cfg.compression.response else "identity",
        }
        self._client = httpx.Client(
            base_url=cfg.host,
            timeout=cfg.timeout_s,
            headers=headers,
            transport=cfg.transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def execute(self, cr: RequestDescriptor) -> Any:
        payload = cr.payload
        headers = {"Content-Type": cr.content_type}
        if payload and self._cfg.compression.request and not cr.skip_compression:
            payload = compression.compress(payload)
            headers["Content-Encoding"] = "gzip"
        if cr.authorization:
            headers["Authorization"] = cr.authorization

        request = self._client.build_request(
            cr.method,
            cr.path,
            params=encode_query(cr.query) or None,
            content=payload,
            headers=headers,
        )
        # raw bytes; compression.decompress rejects truncated gzip bodies
        try:
            r = self._client.send(request, stream=True)
            try:
                raw = b"".join(r.iter_raw())
            finally:
                r.close()
        except httpx.RequestError as e:
            raise NetworkError(f"{cr.method} {cr.path} failed: {e}") from e

        logger.debug("%s %s -> %d (%d bytes)", cr.method, cr.path, r.status_code, len(raw))
        if r.headers.get("Content-Encoding", "").strip().lower() == "gzip":
            raw = compression.decompress(raw)

        if r.is_success:
            return decode_body(r.headers.get("Content-Type", ""), raw)

        text = raw.decode("utf-8", errors="replace")
        if r.status_code == 503:
            raise PlatformUnavailableError(text)
        if r.status_code in (401, 403):
            raise AuthError(r.status_code, text)
        raise ApiError(r.status_code, text)
