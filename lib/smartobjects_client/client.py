from __future__ import annotations

from dataclasses import replace
from typing import Any

from .auth import AccessToken, TokenManager
from .config_types import ClientConfig
from .ingestion import Events, Objects, Owners
from .modeler import Model
from .retry import ExponentialBackoff, retry_notify
from .search import Search
from .transport import RequestDescriptor, Transport


class SmartObjectsClient:
    def __init__(self, cfg: ClientConfig):
        self.config = cfg
        self._t = Transport(cfg)
        self._tokens = TokenManager(cfg, self.request)

        self.events = Events(self)
        self.objects = Objects(self)
        self.owners = Owners(self)
        self.model = Model(self)
        self.search = Search(self)

    @classmethod
    def with_credentials(cls, client_id: str, client_secret: str, host: str, **kwargs: Any) -> SmartObjectsClient:
        return cls(ClientConfig(host=host, client_id=client_id, client_secret=client_secret, **kwargs))

    @classmethod
    def with_token(cls, token: str, host: str, **kwargs: Any) -> SmartObjectsClient:
        return cls(ClientConfig(host=host, token=token, **kwargs))

    def close(self) -> None:
        self._t.close()

    def __enter__(self) -> SmartObjectsClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def is_using_static_token(self) -> bool:
        return self._tokens.is_static

    @property
    def access_token(self) -> AccessToken | None:
        return self._tokens.token

    @access_token.setter
    def access_token(self, token: AccessToken | None) -> None:
        self._tokens.token = token

    @property
    def tokens(self) -> TokenManager:
        return self._tokens

    def get_access_token(self, scope: str | None = None) -> AccessToken:
        """Exchange the client credentials for a new token, even if the current one is still valid."""
        return self._tokens.fetch_token(scope)

    def request(self, cr: RequestDescriptor) -> Any:
        """Send one request, retrying while the platform reports it is unavailable."""
        backoff = ExponentialBackoff.from_config(self.config.backoff)
        return retry_notify(lambda: self._t.execute(cr), backoff, self.config.backoff.notify)

    def call_authenticated(self, cr: RequestDescriptor) -> Any:
        cr = replace(cr, authorization=self._tokens.authorization_header())
        return self.request(cr)
