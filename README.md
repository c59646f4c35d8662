# gqlbridge

Building blocks for a gateway that answers GraphQL fields by calling
HTTP/JSON upstream services. The package uses only the standard library.

## What is in it

- **Validation** (`gqlbridge.valid`): `Valid`, `ValidationError` and `Cause`.
  `Valid.from_iter`, `Valid.zip` and `Valid.and_` collect every error instead
  of stopping at the first one, and `trace` records where each error came
  from. `Valid.to_result()` returns the value or raises the `ValidationError`.
- **Folds that can fail** (`gqlbridge.try_fold`): `TryFold` wraps a function
  `(input, state) -> Valid`. `and_` and `TryFold.from_iter` chain folds; when
  one fails, the next still runs on the previous state, so its errors are
  collected too. `transform` and `transform_valid` change the state type.
- **JSON helpers** (`gqlbridge.json_like`): `get_path`, `get_key`,
  `gather_path_matches`, `group_by_key` and `group_by` work on plain `dict`,
  `list` and scalar values.
- **JSON schema** (`gqlbridge.json_schema`): `JsonSchema` with `obj`, `arr`,
  `string`, `number`, `boolean` and `optional`; `validate` returns a `Valid`.
- **Mustache templates** (`gqlbridge.mustache`): `Mustache.parse` reads
  `{{ a.b }}` expressions; text that is not a template becomes one literal.
  `render(ctx)` fills expressions from `ctx.path_string(parts)`; missing
  values render as empty text.
- **Path lookup protocols** (`gqlbridge.path_string`): the `PathString` and
  `HasHeaders` protocols, `json_path_string` and `value_to_string`.
- **Endpoints and requests** (`gqlbridge.http_method`, `gqlbridge.endpoint`,
  `gqlbridge.request_template`): `Method`, `Endpoint`, `Request` and
  `RequestTemplate`. `RequestTemplate.to_request(ctx)` renders URL, query,
  headers and body. Query parameters that render empty are dropped, the
  content type is set to `application/json`, and the context's own headers
  are forwarded over the template's.
- **Responses** (`gqlbridge.response`): `Response`, `max_age` (the
  Cache-Control `max-age` in seconds) and `min_ttl` (the smallest of those,
  or -1).
- **Data loading** (`gqlbridge.data_loader`, `gqlbridge.data_loader_request`):
  `DataLoaderRequest` keys are equal when their URL and selected headers
  match. `DataLoader.load_one` gathers keys requested within `delay_ms` (or
  until `max_batch_size` keys) and loads each distinct key once.
  `HttpDataLoader` sends one request per key, or, with a `GroupBy`, merges
  the keys' query parameters into one request and splits the response body
  by the grouping path.
- **Evaluation** (`gqlbridge.request_context`, `gqlbridge.evaluation_context`,
  `gqlbridge.expression`, `gqlbridge.lambdas`): `RequestContext` holds the
  HTTP client, forwarded headers, vars and the smallest cache lifetime seen.
  `EvaluationContext.path_string` resolves `value.*`, `args.*`, `headers.*`
  and `vars.*`. `evaluate` runs expressions such as `ContextPath`,
  `LiteralValue`, `EqualTo`, `Input` and `EndpointCall`; `Lambda` builds them.
- **SDL printing** (`gqlbridge.document`): `print_document` prints type
  definitions grouped in this order: schema, scalars, inputs, interfaces,
  unions, enums, object types.

## Installation

```
pip install gqlbridge
```

## Examples

Collecting validation errors:

```python
from gqlbridge.valid import Valid

result = Valid.from_iter([1, 2, 3], lambda n: Valid.fail(n * 2))
result.to_result()  # raises ValidationError with causes 2, 4 and 6
```

Rendering a request from a template:

```python
from gqlbridge.endpoint import Endpoint
from gqlbridge.evaluation_context import EvaluationContext, ResolverContext
from gqlbridge.request_template import RequestTemplate

template = RequestTemplate.from_endpoint(
    Endpoint("http://localhost:3000/users/{{value.id}}")
)
ctx = EvaluationContext(graphql_ctx=ResolverContext(parent_value={"id": 7}))
request = template.to_request(ctx)
print(request.url)  # http://localhost:3000/users/7
```

Evaluating an expression:

```python
import asyncio
from gqlbridge.lambdas import Lambda

print(asyncio.run(Lambda.literal(1.0).eq(Lambda.literal(1.0)).eval()))  # True
```

Printing SDL:

```python
from gqlbridge.document import ScalarType, print_document

print(print_document([ScalarType("Date")]))  # scalar Date
```

## What it does not do

- It sends no HTTP itself. `HttpClient` is a protocol; give
  `RequestContext` or `HttpDataLoader` an object with an async
  `execute(request)` that returns a `Response`. `RequestContext.execute`
  raises `RuntimeError` when no client is set.
- It has no server, no GraphQL schema execution and no command-line tool.
- Script expressions (`JsCall`, `Lambda.to_unsafe_js`) are not run:
  evaluating one raises `EvaluationError` with "JS execution is disabled".

## Running the tests

```
pip install -e ".[test]"
pytest
```