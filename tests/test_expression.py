import asyncio

import pytest

from gqlbridge.data_loader import HttpDataLoader
from gqlbridge.endpoint import Endpoint
from gqlbridge.evaluation_context import EvaluationContext, ResolverContext
from gqlbridge.expression import (
    ContextPath,
    ContextValue,
    EndpointCall,
    EqualTo,
    EvaluationError,
    Input,
    JsCall,
    LiteralValue,
    evaluate,
)
from gqlbridge.http_method import Method
from gqlbridge.json_schema import JsonSchema
from gqlbridge.request_context import RequestContext
from gqlbridge.request_template import RequestTemplate
from gqlbridge.response import Response

URL = "http://localhost:3000/users"


class FakeClient:
    def __init__(self, body=None, status=200, headers=None, error=None):
        self.body = body
        self.status = status
        self.headers = headers or {}
        self.error = error
        self.requests = []

    async def execute(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return Response(self.status, dict(self.headers), self.body)


def make_ctx(client=None, parent=None, **options):
    req_ctx = RequestContext(http_client=client, **options)
    return EvaluationContext(req_ctx, ResolverContext(parent_value=parent))


@pytest.mark.asyncio
async def test_literal_returns_value():
    value = {"a": [1, 2]}
    assert await evaluate(LiteralValue(value), make_ctx()) == value


@pytest.mark.asyncio
async def test_context_value_and_path():
    parent = {"user": {"id": 7}}
    ctx = make_ctx(parent=parent)
    assert await evaluate(ContextValue(), ctx) == parent
    assert await evaluate(ContextPath(["user", "id"]), ctx) == 7
    assert await evaluate(ContextPath(["user", "missing"]), ctx) is None


@pytest.mark.asyncio
async def test_input_path():
    expr = Input(LiteralValue({"items": [10, 20]}), ["items", "1"])
    assert await evaluate(expr, make_ctx()) == 20


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "left, right, expected",
    [(1.0, 1.0, True), (1.0, 2.0, False), (1, 1.0, False), (True, 1, False), ({"a": 1}, {"a": 1}, True)],
)
async def test_equal_to(left, right, expected):
    expr = EqualTo(LiteralValue(left), LiteralValue(right))
    assert await evaluate(expr, make_ctx()) is expected


@pytest.mark.asyncio
async def test_js_is_disabled():
    with pytest.raises(EvaluationError) as info:
        await evaluate(JsCall(LiteralValue(1), "ctx + 1"), make_ctx())
    assert info.value.kind == EvaluationError.JS
    assert "JS execution is disabled" in str(info.value)


@pytest.mark.asyncio
async def test_endpoint_direct_call():
    body = {"name": "Hans"}
    client = FakeClient(body)
    result = await evaluate(EndpointCall(RequestTemplate.from_url(URL)), make_ctx(client))
    assert result == body
    assert [r.url for r in client.requests] == [URL]


@pytest.mark.asyncio
async def test_endpoint_io_error():
    client = FakeClient(error=ConnectionError("boom"))
    with pytest.raises(EvaluationError) as info:
        await evaluate(EndpointCall(RequestTemplate.from_url(URL)), make_ctx(client))
    assert info.value.kind == EvaluationError.IO
    assert "boom" in str(info.value)


@pytest.mark.asyncio
async def test_endpoint_validation_error():
    endpoint = Endpoint(URL, output=JsonSchema.obj({"name": JsonSchema.string()}))
    client = FakeClient({"name": 1})
    ctx = make_ctx(client, enable_http_validation=True)
    with pytest.raises(EvaluationError) as info:
        await evaluate(EndpointCall(RequestTemplate.from_endpoint(endpoint)), ctx)
    assert info.value.kind == EvaluationError.API_VALIDATION
    assert info.value.detail == ["expected string"]


@pytest.mark.asyncio
async def test_endpoint_validation_passes():
    endpoint = Endpoint(URL, output=JsonSchema.obj({"name": JsonSchema.string()}))
    body = {"name": "Hans"}
    ctx = make_ctx(FakeClient(body), enable_http_validation=True)
    assert await evaluate(EndpointCall(RequestTemplate.from_endpoint(endpoint)), ctx) == body


@pytest.mark.asyncio
async def test_cache_control_records_max_age():
    client = FakeClient({}, headers={"Cache-Control": "max-age=60"})
    ctx = make_ctx(client, enable_cache_control=True)
    await evaluate(EndpointCall(RequestTemplate.from_url(URL)), ctx)
    assert ctx.req_ctx.min_max_age == 60


@pytest.mark.asyncio
async def test_cache_control_ignores_failed_status():
    client = FakeClient({}, status=500, headers={"Cache-Control": "max-age=60"})
    ctx = make_ctx(client, enable_cache_control=True)
    await evaluate(EndpointCall(RequestTemplate.from_url(URL)), ctx)
    assert ctx.req_ctx.min_max_age is None


@pytest.mark.asyncio
async def test_batched_get_uses_data_loader_once():
    body = {"id": 1}
    client = FakeClient(body)
    loader = HttpDataLoader(client).to_data_loader(delay_ms=1)
    ctx = make_ctx(batch_headers=frozenset())
    call = EndpointCall(RequestTemplate.from_url(URL), data_loader=loader)
    results = await asyncio.gather(*(evaluate(call, ctx) for _ in range(5)))
    assert results == [body] * 5
    assert len(client.requests) == 1


@pytest.mark.asyncio
async def test_batched_get_without_loader_fails():
    ctx = make_ctx(batch_headers=frozenset())
    with pytest.raises(RuntimeError):
        await evaluate(EndpointCall(RequestTemplate.from_url(URL)), ctx)


@pytest.mark.asyncio
async def test_post_bypasses_data_loader():
    client = FakeClient({"ok": True})
    template = RequestTemplate.from_url(URL)
    template.method = Method.POST
    ctx = make_ctx(client, batch_headers=frozenset())
    assert await evaluate(EndpointCall(template), ctx) == {"ok": True}
    assert client.requests[0].method is Method.POST


@pytest.mark.asyncio
async def test_unknown_expression_rejected():
    with pytest.raises(TypeError):
        await evaluate(object(), make_ctx())