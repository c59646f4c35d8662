"""The context an expression is evaluated in: parent value, arguments, headers, vars."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Mapping, Optional, Sequence

from gqlbridge.json_like import get_path
from gqlbridge.path_string import value_to_string
from gqlbridge.request_context import RequestContext


@dataclass
class ResolverContext:
    """The resolver's parent value and field arguments."""

    parent_value: Any = None
    arguments: Optional[Mapping[str, Any]] = None

    def value(self) -> Any:
        return self.parent_value

    def args(self) -> Optional[Mapping[str, Any]]:
        return self.arguments


class EmptyResolverContext:
    """A resolver context with neither a parent value nor arguments."""

    def value(self) -> Any:
        return None

    def args(self) -> Optional[Mapping[str, Any]]:
        return None


def get_path_value(value: Any, path: Sequence[str]) -> Any:
    """Follow ``path`` through objects and lists; ``None`` if it leads nowhere."""
    return get_path(value, path)


def _visible_ascii(text: str) -> bool:
    return all(ch == "\t" or 0x20 <= ord(ch) < 0x7F for ch in text)


@dataclass
class EvaluationContext:
    """Combines the request context with one resolver's context."""

    req_ctx: RequestContext = field(default_factory=RequestContext)
    graphql_ctx: Any = field(default_factory=EmptyResolverContext)
    timeout: timedelta = timedelta(milliseconds=5)

    def value(self) -> Any:
        return self.graphql_ctx.value()

    def arg(self, path: Sequence[str]) -> Any:
        """The argument named by ``path[0]``, followed along the rest of ``path``."""
        args = self.graphql_ctx.args()
        if args is None or not path:
            return None
        arg = args.get(path[0])
        if arg is None:
            return None
        return get_path_value(arg, path[1:])

    def path_value(self, path: Sequence[str]) -> Any:
        value = self.graphql_ctx.value()
        if value is None:
            return None
        return get_path_value(value, path)

    def headers(self) -> Mapping[str, str]:
        return self.req_ctx.req_headers

    def header(self, key: str) -> Optional[str]:
        """The request header ``key`` (case-insensitive), if it is visible ASCII."""
        wanted = key.lower()
        for name, value in self.headers().items():
            if name.lower() == wanted:
                return value if _visible_ascii(value) else None
        return None

    def var(self, key: str) -> Optional[str]:
        return self.req_ctx.vars.get(key)

    def path_string(self, path: Sequence[str]) -> Optional[str]:
        """Resolve ``value.*``, ``args.*``, ``headers.*`` or ``vars.*`` to text."""
        if len(path) < 2:
            return None
        head, tail = path[0], path[1:]
        if head == "value":
            return value_to_string(self.path_value(tail))
        if head == "args":
            return value_to_string(self.arg(tail))
        if head == "headers":
            return self.header(tail[0])
        if head == "vars":
            return self.var(tail[0])
        return None