"""Resolver expressions and their asynchronous evaluation."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from gqlbridge.data_loader import DataLoader, GroupBy
from gqlbridge.data_loader_request import DataLoaderRequest
from gqlbridge.evaluation_context import EvaluationContext
from gqlbridge.http_method import Method
from gqlbridge.json_like import get_path
from gqlbridge.request_template import RequestTemplate
from gqlbridge.response import Response, max_age
from gqlbridge.valid import ValidationError


class EvaluationError(Exception):
    """A failure while evaluating an expression, tagged with its kind."""

    IO = "IOException"
    JS = "JSException"
    API_VALIDATION = "APIValidationError"

    def __init__(self, kind: str, detail: Any) -> None:
        super().__init__(kind, detail)
        self.kind = kind
        self.detail = detail

    def __str__(self) -> str:
        if isinstance(self.detail, list):
            items = ", ".join(json.dumps(str(m), ensure_ascii=False) for m in self.detail)
            return f"{self.kind}: [{items}]"
        return f"{self.kind}: {self.detail}"


@dataclass(frozen=True)
class ContextValue:
    """The resolver's whole parent value."""


@dataclass(frozen=True)
class ContextPath:
    """A value found along ``path`` in the resolver's parent value."""

    path: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))


@dataclass(frozen=True)
class LiteralValue:
    """A constant JSON value."""

    value: Any


@dataclass(frozen=True)
class EqualTo:
    """Whether two expressions evaluate to the same value."""

    left: Any
    right: Any


@dataclass(frozen=True)
class Input:
    """A value found along ``path`` in the result of ``source``."""

    source: Any
    path: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))


@dataclass(frozen=True)
class EndpointCall:
    """A call to an upstream endpoint described by a request template."""

    template: RequestTemplate
    group_by: Optional[GroupBy] = None
    data_loader: Optional[DataLoader] = field(default=None, compare=False)


@dataclass(frozen=True)
class JsCall:
    """A script run on the result of ``source``; script execution is disabled."""

    source: Any
    script: str


Expr = Union[ContextValue, ContextPath, LiteralValue, EqualTo, Input, EndpointCall, JsCall]


def _json_equal(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return type(left) is type(right) and left == right
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(map(_json_equal, left, right))
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            _json_equal(value, right[key]) for key, value in left.items()
        )
    return type(left) is type(right) and left == right


def _record_max_age(ctx: EvaluationContext, response: Response) -> None:
    req_ctx = ctx.req_ctx
    if req_ctx.enable_cache_control and 200 <= response.status < 300:
        age = max_age(response)
        if age is not None:
            req_ctx.set_min_max_age(age)


async def _call_endpoint(call: EndpointCall, ctx: EvaluationContext) -> Any:
    template = call.template
    request = template.to_request(ctx)
    req_ctx = ctx.req_ctx

    if request.method is Method.GET and req_ctx.batch_headers is not None:
        if call.data_loader is None:
            raise RuntimeError("endpoint has no data loader for batched requests")
        key = DataLoaderRequest(request, req_ctx.batch_headers)
        try:
            response = await call.data_loader.load_one(key)
        except Exception as error:
            raise EvaluationError(EvaluationError.IO, str(error)) from error
        if response is None:
            response = Response()
        _record_max_age(ctx, response)
        return response.body

    try:
        response = await req_ctx.execute(request)
    except Exception as error:
        raise EvaluationError(EvaluationError.IO, str(error)) from error

    if req_ctx.enable_http_validation:
        try:
            template.endpoint.output.validate(response.body).to_result()
        except ValidationError as error:
            messages = [str(cause.message) for cause in error.causes]
            raise EvaluationError(EvaluationError.API_VALIDATION, messages) from None

    _record_max_age(ctx, response)
    return response.body


async def evaluate(expression: Expr, ctx: EvaluationContext) -> Any:
    """Evaluate ``expression`` in ``ctx`` and return its JSON value."""
    if isinstance(expression, ContextValue):
        return ctx.value()
    if isinstance(expression, ContextPath):
        return ctx.path_value(expression.path)
    if isinstance(expression, Input):
        value = await evaluate(expression.source, ctx)
        return get_path(value, expression.path)
    if isinstance(expression, LiteralValue):
        return copy.deepcopy(expression.value)
    if isinstance(expression, EqualTo):
        left = await evaluate(expression.left, ctx)
        right = await evaluate(expression.right, ctx)
        return _json_equal(left, right)
    if isinstance(expression, EndpointCall):
        return await _call_endpoint(expression, ctx)
    if isinstance(expression, JsCall):
        raise EvaluationError(EvaluationError.JS, "JS execution is disabled")
    raise TypeError(f"not an expression: {expression!r}")