"""Keys for the request data loader, identified by URL and selected headers."""

from __future__ import annotations

from typing import Iterable

from gqlbridge.http_method import Method
from gqlbridge.request_template import Request


class DataLoaderRequest:
    """A request used as a loader key.

    Two keys are equal when they have the same URL and the same values for the
    headers named in the key's header set. The method and body do not count.
    """

    def __init__(self, request: Request, headers: Iterable[str]) -> None:
        self._request = request
        self._headers = frozenset(headers)

    def _identity(self) -> tuple:
        present = {name.lower(): value for name, value in self._request.headers.items()}
        selected = tuple(
            (name, present[name.lower()])
            for name in sorted(self._headers)
            if name.lower() in present
        )
        return self._request.url, selected

    def __hash__(self) -> int:
        return hash(self._identity())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataLoaderRequest):
            return NotImplemented
        return self._identity() == other._identity()

    def __repr__(self) -> str:
        return f"DataLoaderRequest({self._request.url!r}, {sorted(self._headers)!r})"

    def __copy__(self) -> DataLoaderRequest:
        return DataLoaderRequest(self.to_request(), self._headers)

    def to_request(self) -> Request:
        """A GET request with this key's URL and headers, without a body."""
        return Request(Method.GET, self._request.url, dict(self._request.headers))

    def headers(self) -> frozenset[str]:
        """The names of the headers that take part in the key's identity."""
        return self._headers