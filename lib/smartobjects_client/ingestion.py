from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable
from urllib.parse import quote

from .transport import RequestDescriptor
from .types import ClaimResult, ObjectOwnerPair, SendEventsReport

if TYPE_CHECKING:
    from .client import SmartObjectsClient

EVENTS_PATH = "/api/v3/events"
OBJECTS_PATH = "/api/v3/objects"
OWNERS_PATH = "/api/v3/owners"


def path_segment(value: str) -> str:
    return quote(str(value), safe="")


def flatten_exists(data: Any) -> dict[str, bool]:
    """The exists endpoints answer ``[{"id": bool}, ...]``; merge it into one mapping."""
    results: dict[str, bool] = {}
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        return results
    for item in data:
        if isinstance(item, dict):
            for key, value in item.items():
                results[str(key)] = bool(value)
    return results


class Resource:
    def __init__(self, client: SmartObjectsClient):
        self._client = client

    def _call(self, method: str, path: str, body: Any = None, **kwargs: Any) -> Any:
        if body is None:
            cr = RequestDescriptor(method=method, path=path, **kwargs)
        else:
            cr = RequestDescriptor.json(method, path, body, **kwargs)
        return self._client.call_authenticated(cr)


class Events(Resource):
    def send(self, events: Any, *, report_results: bool = False, objects_must_exist: bool = False) -> Any:
        return self._send(EVENTS_PATH, events, report_results, objects_must_exist)

    def send_from_device(
            self,
            device_id: str,
            events: Any,
            *,
            report_results: bool = False,
            objects_must_exist: bool = False,
    ) -> Any:
        path = f"{OBJECTS_PATH}/{path_segment(device_id)}/events"
        return self._send(path, events, report_results, objects_must_exist)

    def exists(self, event_ids: Iterable[str]) -> dict[str, bool]:
        return flatten_exists(self._call("POST", f"{EVENTS_PATH}/exists", list(event_ids)))

    def _send(self, path: str, events: Any, report_results: bool, objects_must_exist: bool) -> Any:
        query: dict[str, Any] = {}
        if objects_must_exist:
            query["objects_must_exist"] = True
        if report_results:
            query["report_results"] = True
        data = self._call("POST", path, events, query=query or None)
        if report_results and isinstance(data, list):
            return [SendEventsReport.from_dict(r) for r in data if isinstance(r, dict)]
        return data


class Objects(Resource):
    def create(self, objects: Any) -> Any:
        return self._call("POST", OBJECTS_PATH, objects)

    def update(self, objects: Any) -> Any:
        """Create or update a batch of objects."""
        return self._call("PUT", OBJECTS_PATH, objects)

    def delete(self, device_id: str) -> None:
        self._call("DELETE", f"{OBJECTS_PATH}/{path_segment(device_id)}")

    def exists(self, device_ids: Iterable[str]) -> dict[str, bool]:
        return flatten_exists(self._call("POST", f"{OBJECTS_PATH}/exists", list(device_ids)))


class Owners(Resource):
    def create(self, owners: Any) -> Any:
        return self._call("POST", OWNERS_PATH, owners)

    def update(self, owners: Any) -> Any:
        """Create or update a batch of owners."""
        return self._call("PUT", OWNERS_PATH, owners)

    def update_password(self, username: str, password: str) -> None:
        self._call("PUT", f"{OWNERS_PATH}/{path_segment(username)}/password", {"x_password": password})

    def delete(self, username: str) -> None:
        self._call("DELETE", f"{OWNERS_PATH}/{path_segment(username)}")

    def exists(self, usernames: Iterable[str]) -> dict[str, bool]:
        return flatten_exists(self._call("POST", f"{OWNERS_PATH}/exists", list(usernames)))

    def claim(self, pairs: Iterable[ObjectOwnerPair | dict[str, str]]) -> list[ClaimResult]:
        return self._claim("claim", pairs)

    def unclaim(self, pairs: Iterable[ObjectOwnerPair | dict[str, str]]) -> list[ClaimResult]:
        return self._claim("unclaim", pairs)

    def _claim(self, action: str, pairs: Iterable[ObjectOwnerPair | dict[str, str]]) -> list[ClaimResult]:
        body = [p.to_dict() if isinstance(p, ObjectOwnerPair) else dict(p) for p in pairs]
        data = self._call("POST", f"{OWNERS_PATH}/{action}", body)
        return [ClaimResult.from_dict(r) for r in data if isinstance(r, dict)] if isinstance(data, list) else []
