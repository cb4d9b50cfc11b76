import httpx

from smartobjects_client.types import Dataset, QueryValidation, SearchResults, SearchResultsColumn

_COUNT = {"columns": [{"label": "COUNT(*)", "type": "long"}], "rows": [[12]]}


def test_basic_query_from_mapping(client, platform) -> None:
    platform.queue(httpx.Response(200, json=_COUNT))

    results = client.search.create_basic_query({"from": "event", "select": [{"count": "*"}]})

    assert platform.last.url.path == "/api/v3/search/basic"
    assert platform.last_json() == {"from": "event", "select": [{"count": "*"}]}
    assert results == SearchResults(columns=[SearchResultsColumn(label="COUNT(*)", type="long")], rows=[[12]])


def test_basic_query_from_string_is_sent_verbatim(client, platform) -> None:
    mql = '{ "from": "event", "select": [ { "count": "*" } ] }'
    platform.queue(httpx.Response(200, json=_COUNT))

    results = client.search.create_basic_query(mql)

    assert platform.last.content == mql.encode()
    assert len(results.rows) == 1 and len(results.rows[0]) == 1


def test_basic_query_from_bytes(client, platform) -> None:
    platform.queue(httpx.Response(200, json=_COUNT))
    client.search.create_basic_query(b'{"from": "owner"}')
    assert platform.last.content == b'{"from": "owner"}'


def test_validate_query(client, platform) -> None:
    platform.queue(httpx.Response(200, json={"isValid": False, "validationErrors": ["unknown dataset"]}))

    validation = client.search.validate_query({"from": "nope"})

    assert platform.last.url.path == "/api/v3/search/validateQuery"
    assert validation == QueryValidation(is_valid=False, validation_errors=["unknown dataset"])


def test_get_datasets(client, platform) -> None:
    platform.queue(
        httpx.Response(
            200,
            json=[
                {
                    "key": "event",
                    "displayName": "Events",
                    "description": None,
                    "fields": [{"key": "x_event_type", "highLevelType": "TEXT", "primaryKey": False}],
                }
            ],
        )
    )

    datasets = client.search.get_datasets()

    assert platform.last.method == "GET"
    assert platform.last.url.path == "/api/v3/search/datasets"
    assert isinstance(datasets[0], Dataset)
    assert datasets[0].key == "event"
    assert datasets[0].fields[0].high_level_type == "TEXT"
