"""Description of an upstream HTTP endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from gqlbridge.http_method import Method
from gqlbridge.json_schema import JsonSchema


@dataclass
class Endpoint:
    """An upstream endpoint; path, query, headers and body may hold templates."""

    path: str
    query: list[tuple[str, str]] = field(default_factory=list)
    method: Method = Method.GET
    input: JsonSchema = field(default_factory=JsonSchema)
    output: JsonSchema = field(default_factory=JsonSchema)
    headers: dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    description: Optional[str] = None