from __future__ import annotations

import json

import httpx
import pytest

from smartobjects_client import ClientConfig, SmartObjectsClient

HOST = "https://rest.example.test"


class FakePlatform:
    """MockTransport handler: answers /oauth/token itself, replays queued responses for the rest."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response | Exception] = []
        self.token_fetches = 0
        self.token_expires_in = 3_600_000
        self.token_failure: httpx.Response | Exception | None = None

    def queue(self, *responses: httpx.Response | Exception) -> None:
        self.responses.extend(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/oauth/token":
            if self.token_failure is not None:
                return self._replay(self.token_failure)
            self.token_fetches += 1
            return self._replay(httpx.Response(
                200,
                json={
                    "access_token": f"token-{self.token_fetches}",
                    "token_type": "bearer",
                    "expires_in": self.token_expires_in,
                    "scope": "ALL",
                    "jti": f"jti-{self.token_fetches}",
                },
            ))
        if not self.responses:
            return self._replay(httpx.Response(200, json={}))
        return self._replay(self.responses.pop(0))

    @staticmethod
    def _replay(resp: httpx.Response | Exception) -> httpx.Response:
        if isinstance(resp, Exception):
            raise resp
        # content= responses are read on construction; hand the client a fresh raw stream
        return httpx.Response(resp.status_code, headers=resp.headers, stream=httpx.ByteStream(b"".join(resp.stream)))

    @property
    def api_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path != "/oauth/token"]

    @property
    def last(self) -> httpx.Request:
        return self.api_requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def platform() -> FakePlatform:
    return FakePlatform()


@pytest.fixture
def make_client(platform):
    created: list[SmartObjectsClient] = []

    def _make(**kwargs) -> SmartObjectsClient:
        kwargs.setdefault("host", HOST)
        if "token" not in kwargs:
            kwargs.setdefault("client_id", "id")
            kwargs.setdefault("client_secret", "secret")
        kwargs.setdefault("transport", httpx.MockTransport(platform))
        client = SmartObjectsClient(ClientConfig(**kwargs))
        created.append(client)
        return client

    yield _make
    for client in created:
        client.close()


@pytest.fixture
def client(make_client) -> SmartObjectsClient:
    return make_client()


@pytest.fixture
def no_sleep(monkeypatch) -> list[float]:
    slept: list[float] = []
    monkeypatch.setattr("smartobjects_client.retry.time.sleep", slept.append)
    return slept
