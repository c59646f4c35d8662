"""Batching loader for upstream HTTP requests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Hashable, Optional, Protocol, Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from gqlbridge.data_loader_request import DataLoaderRequest
from gqlbridge.json_like import group_by
from gqlbridge.request_template import Request
from gqlbridge.response import Response


class HttpClient(Protocol):
    """Something that sends a request and returns the decoded response."""

    async def execute(self, request: Request) -> Response:
        """Send ``request`` and return its response."""


@dataclass(frozen=True)
class GroupBy:
    """Where, in a batched response, the values that identify each item are found."""

    path: tuple[str, ...] = ("id",)

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))

    @property
    def key(self) -> str:
        """The query parameter that carries each request's identifier."""
        return self.path[-1] if self.path else "id"


class DataLoader:
    """Collects keys requested close together and loads them in one batch.

    Keys are deduplicated within a batch and nothing is cached between batches.
    """

    def __init__(
        self,
        load: Callable[[Sequence[Hashable]], Awaitable[dict]],
        delay_ms: float = 0,
        max_batch_size: int = 100,
    ) -> None:
        if max_batch_size < 1:
            raise ValueError("max_batch_size must be at least 1")
        self._load = load
        self._delay = delay_ms / 1000
        self._max_batch_size = max_batch_size
        self._pending: dict[Hashable, list[asyncio.Future]] = {}
        self._timer: Optional[asyncio.Task] = None
        self._running: set[asyncio.Task] = set()

    async def load_one(self, key: Hashable) -> Any:
        """Load ``key`` with the next batch; ``None`` when the batch has no value for it."""
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._pending.setdefault(key, []).append(future)
        if len(self._pending) >= self._max_batch_size:
            self._dispatch()
        elif self._timer is None:
            self._timer = loop.create_task(self._dispatch_later())
        return await future

    async def _dispatch_later(self) -> None:
        await asyncio.sleep(self._delay)
        self._timer = None
        if self._pending:
            self._dispatch()

    def _dispatch(self) -> None:
        batch, self._pending = self._pending, {}
        task = asyncio.get_running_loop().create_task(self._run(batch))
        self._running.add(task)
        task.add_done_callback(self._running.discard)

    async def _run(self, batch: dict[Hashable, list[asyncio.Future]]) -> None:
        try:
            results = await self._load(list(batch))
        except Exception as error:  # delivered to every waiter of the batch
            for futures in batch.values():
                for future in futures:
                    if not future.done():
                        future.set_exception(error)
            return
        for key, futures in batch.items():
            value = results.get(key)
            for future in futures:
                if not future.done():
                    future.set_result(value)


def _extend_query(url: str, pairs: Sequence[tuple[str, str]]) -> str:
    if not pairs:
        return url
    parts = urlsplit(url)
    extra = urlencode(list(pairs))
    query = f"{parts.query}&{extra}" if parts.query else extra
    return urlunsplit(parts._replace(query=query))


def _query_pairs(url: str) -> list[tuple[str, str]]:
    return parse_qsl(urlsplit(url).query, keep_blank_values=True)


@dataclass
class HttpDataLoader:
    """Loads upstream responses for request keys, optionally as one batched call."""

    client: HttpClient
    batched: Optional[GroupBy] = None

    async def load(self, keys: Sequence[DataLoaderRequest]) -> dict[DataLoaderRequest, Response]:
        """Fetch every key, merging them into one request when ``batched`` is set."""
        if not keys:
            return {}
        if self.batched is None:
            return await self._load_each(keys)
        return await self._load_batched(keys, self.batched)

    async def _load_each(self, keys: Sequence[DataLoaderRequest]) -> dict[DataLoaderRequest, Response]:
        responses = await asyncio.gather(
            *(self.client.execute(key.to_request()) for key in keys)
        )
        return dict(zip(keys, responses))

    async def _load_batched(
        self, keys: Sequence[DataLoaderRequest], grouping: GroupBy
    ) -> dict[DataLoaderRequest, Response]:
        ordered = sorted(keys, key=lambda k: k.to_request().url)
        first = ordered[0].to_request()
        extra = [pair for key in ordered[1:] for pair in _query_pairs(key.to_request().url)]
        request = replace(first, url=_extend_query(first.url, extra))

        response = await self.client.execute(request)
        groups = group_by(response.body, grouping.path)

        results: dict[DataLoaderRequest, Response] = {}
        for key in ordered:
            params = dict(_query_pairs(key.to_request().url))
            if grouping.key not in params:
                raise ValueError(f"Unable to find key {grouping.key} in query params")
            matches = groups.get(params[grouping.key])
            body = matches[0] if matches else None
            results[key] = replace(response, body=body)
        return results

    def to_data_loader(self, delay_ms: float = 0, max_batch_size: int = 100) -> DataLoader:
        """Wrap this loader in a batching DataLoader."""
        return DataLoader(self.load, delay_ms, max_batch_size)