"""HTTP request methods."""

from __future__ import annotations

import enum


class Method(enum.Enum):
    """An HTTP method; GET is the default wherever one is not given."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    CONNECT = "CONNECT"
    TRACE = "TRACE"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> Method:
        """Return the method named ``name``, raising ValueError if there is none."""
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"unknown HTTP method: {name!r}") from None