import asyncio

import pytest

from gqlbridge.data_loader import DataLoader, GroupBy, HttpDataLoader
from gqlbridge.data_loader_request import DataLoaderRequest
from gqlbridge.http_method import Method
from gqlbridge.request_template import Request
from gqlbridge.response import Response


class MockHttpClient:
    def __init__(self, response=None):
        self.request_count = 0
        self.requests = []
        self.response = response if response is not None else Response()

    async def execute(self, request):
        self.request_count += 1
        self.requests.append(request)
        return self.response


class FailingClient:
    async def execute(self, request):
        raise ConnectionError("upstream down")


HEADERS = {"Header1", "Header2"}


def key_for(url):
    return DataLoaderRequest(Request(Method.GET, url), HEADERS)


@pytest.mark.asyncio
async def test_load_function():
    client = MockHttpClient()
    loader = HttpDataLoader(client).to_data_loader(delay_ms=1)
    key = key_for("http://example.com/")
    results = await asyncio.gather(*(loader.load_one(key) for _ in range(100)))
    assert client.request_count == 1
    assert all(result == Response() for result in results)


@pytest.mark.asyncio
async def test_load_function_many():
    client = MockHttpClient()
    loader = HttpDataLoader(client).to_data_loader(delay_ms=1)
    key1 = key_for("http://example.com/1")
    key2 = key_for("http://example.com/2")
    calls = [loader.load_one(key1) for _ in range(100)]
    calls += [loader.load_one(key2) for _ in range(100)]
    await asyncio.gather(*calls)
    assert client.request_count == 2


@pytest.mark.asyncio
async def test_max_batch_size_splits_batches():
    batches = []

    async def load(keys):
        batches.append(sorted(keys))
        return {key: key * 10 for key in keys}

    loader = DataLoader(load, delay_ms=1, max_batch_size=2)
    results = await asyncio.gather(*(loader.load_one(i) for i in range(5)))
    assert results == [0, 10, 20, 30, 40]
    assert all(len(batch) <= 2 for batch in batches)
    assert sorted(k for batch in batches for k in batch) == [0, 1, 2, 3, 4]


@pytest.mark.asyncio
async def test_missing_value_loads_as_none():
    async def load(keys):
        return {}

    loader = DataLoader(load, delay_ms=1)
    assert await loader.load_one("absent") is None


@pytest.mark.asyncio
async def test_errors_reach_every_waiter():
    loader = HttpDataLoader(FailingClient()).to_data_loader(delay_ms=1)
    key = key_for("http://example.com/")
    results = await asyncio.gather(
        loader.load_one(key), loader.load_one(key), return_exceptions=True
    )
    assert [type(r) for r in results] == [ConnectionError, ConnectionError]


def test_invalid_batch_size():
    async def load(keys):
        return {}

    with pytest.raises(ValueError):
        DataLoader(load, max_batch_size=0)


@pytest.mark.asyncio
async def test_batched_load_merges_query_and_splits_body():
    body = [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]
    client = MockHttpClient(Response(status=200, body=body))
    loader = HttpDataLoader(client, GroupBy(("id",)))
    key2 = key_for("http://example.com/users?id=2")
    key1 = key_for("http://example.com/users?id=1")
    result = await loader.load([key2, key1])
    assert client.request_count == 1
    assert client.requests[0].url == "http://example.com/users?id=1&id=2"
    assert result[key1].body == {"id": 1, "name": "a"}
    assert result[key2].body == {"id": 2, "name": "b"}
    assert result[key1].status == 200


@pytest.mark.asyncio
async def test_batched_load_without_match_gives_null_body():
    client = MockHttpClient(Response(body=[{"id": 1}]))
    loader = HttpDataLoader(client, GroupBy(("id",)))
    key = key_for("http://example.com/users?id=9")
    result = await loader.load([key])
    assert result[key].body is None


@pytest.mark.asyncio
async def test_batched_load_requires_key_in_query():
    client = MockHttpClient(Response(body=[]))
    loader = HttpDataLoader(client, GroupBy(("userId",)))
    with pytest.raises(ValueError, match="Unable to find key userId"):
        await loader.load([key_for("http://example.com/users?id=1")])


@pytest.mark.asyncio
async def test_unbatched_load_maps_each_key():
    client = MockHttpClient(Response(body={"ok": True}))
    loader = HttpDataLoader(client)
    keys = [key_for("http://example.com/1"), key_for("http://example.com/2")]
    result = await loader.load(keys)
    assert set(result) == set(keys)
    assert sorted(r.url for r in client.requests) == ["http://example.com/1", "http://example.com/2"]


def test_group_by_key_is_last_path_segment():
    assert GroupBy(("data", "user", "userId")).key == "userId"
    assert GroupBy(()).key == "id"