from __future__ import annotations

from typing import Any

from .ingestion import Resource
from .transport import RequestDescriptor
from .types import Dataset, QueryValidation, SearchResults

SEARCH_PATH = "/api/v3/search"


def _mql_descriptor(path: str, mql: Any) -> RequestDescriptor:
    # strings and bytes are sent as-is so hand written MQL keeps its formatting
    if isinstance(mql, str):
        return RequestDescriptor(method="POST", path=path, payload=mql.encode("utf-8"))
    if isinstance(mql, (bytes, bytearray)):
        return RequestDescriptor(method="POST", path=path, payload=bytes(mql))
    return RequestDescriptor.json("POST", path, mql)


class Search(Resource):
    def create_basic_query(self, mql: Any) -> SearchResults:
        """Run an MQL query; `mql` may be a mapping, a JSON string or bytes."""
        data = self._client.call_authenticated(_mql_descriptor(f"{SEARCH_PATH}/basic", mql))
        return SearchResults.from_dict(data if isinstance(data, dict) else {})

    def validate_query(self, mql: Any) -> QueryValidation:
        data = self._client.call_authenticated(_mql_descriptor(f"{SEARCH_PATH}/validateQuery", mql))
        return QueryValidation.from_dict(data if isinstance(data, dict) else {})

    def get_datasets(self) -> list[Dataset]:
        data = self._call("GET", f"{SEARCH_PATH}/datasets")
        return [Dataset.from_dict(d) for d in data if isinstance(d, dict)] if isinstance(data, list) else []
