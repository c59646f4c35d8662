"""Upstream responses and their cache lifetimes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional


@dataclass
class Response:
    """A decoded upstream response with a JSON body."""

    status: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def max_age(response: Response) -> Optional[int]:
    """The ``max-age`` of the Cache-Control header in seconds, if it is set and valid."""
    value = _header(response.headers, "cache-control")
    if value is None:
        return None
    seconds: Optional[int] = None
    for directive in value.split(","):
        directive = directive.strip()
        if not directive:
            continue
        name, _, argument = directive.partition("=")
        if name.strip().lower() != "max-age":
            continue
        argument = argument.strip().strip('"')
        if not argument.isdigit():
            return None
        seconds = int(argument)
    return seconds


def min_ttl(responses: Iterable[Response]) -> int:
    """The smallest ``max-age`` among the responses, or -1 when none has one."""
    ages = [age for age in map(max_age, responses) if age is not None]
    return min(ages, default=-1)