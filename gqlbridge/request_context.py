"""State shared by all resolvers while one incoming request is served."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Optional

from gqlbridge.data_loader import HttpClient
from gqlbridge.request_template import Request
from gqlbridge.response import Response


@dataclass
class RequestContext:
    """Per-request settings, forwarded headers and the smallest cache lifetime seen."""

    http_client: Optional[HttpClient] = None
    req_headers: dict[str, str] = field(default_factory=dict)
    vars: dict[str, str] = field(default_factory=dict)
    enable_cache_control: bool = False
    enable_http_validation: bool = False
    batch_headers: Optional[frozenset[str]] = None
    _min_max_age: Optional[int] = field(default=None, init=False, repr=False, compare=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    async def execute(self, request: Request) -> Response:
        """Send ``request`` with the context's HTTP client."""
        if self.http_client is None:
            raise RuntimeError("no HTTP client configured for this request context")
        return await self.http_client.execute(request)

    @property
    def min_max_age(self) -> Optional[int]:
        """The smallest max-age recorded so far, in seconds."""
        with self._lock:
            return self._min_max_age

    def set_min_max_age(self, max_age: int) -> None:
        """Record ``max_age`` if it is smaller than every value seen before."""
        with self._lock:
            if self._min_max_age is None or max_age < self._min_max_age:
                self._min_max_age = max_age