"""Request templates whose URL, query, headers and body are mustache templates."""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import parse_qsl, urlsplit

from gqlbridge.endpoint import Endpoint
from gqlbridge.http_method import Method
from gqlbridge.mustache import Mustache

_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}
_QUERY_UNSAFE = frozenset(" \"#<>'")
_PATH_UNSAFE = frozenset(" \"#<>?`{}")
_FRAGMENT_UNSAFE = frozenset(" \"<>`")
_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")


def _percent_encode(text: str, unsafe: frozenset) -> str:
    out = []
    for ch in text:
        code = ord(ch)
        if ch in unsafe or code < 0x20 or code >= 0x7F:
            out.append("".join(f"%{b:02X}" for b in ch.encode("utf-8")))
        else:
            out.append(ch)
    return "".join(out)


@dataclass(frozen=True)
class _Url:
    base: str
    query: Optional[str]
    fragment: Optional[str]

    @classmethod
    def parse(cls, text: str) -> _Url:
        text = text.strip("".join(chr(c) for c in range(0x21)))
        text = text.replace("\t", "").replace("\n", "").replace("\r", "")
        parts = urlsplit(text)
        if not parts.scheme:
            raise ValueError(f"relative URL without a base: {text!r}")
        scheme = parts.scheme.lower()
        before_fragment, hash_sign, _ = text.partition("#")
        query = parts.query if "?" in before_fragment else None
        fragment = parts.fragment if hash_sign else None

        if scheme in _DEFAULT_PORTS:
            host = parts.hostname
            if not host:
                raise ValueError(f"empty host: {text!r}")
            if ":" in host:
                host = f"[{host}]"
            port = parts.port
            userinfo, at, _ = parts.netloc.rpartition("@")
            netloc = (userinfo + "@" if at else "") + host
            if port is not None and port != _DEFAULT_PORTS[scheme]:
                netloc += f":{port}"
            path = _percent_encode(parts.path, _PATH_UNSAFE) or "/"
            base = f"{scheme}://{netloc}{path}"
        else:
            has_authority = bool(parts.netloc) or text[len(scheme) + 1:].startswith("//")
            authority = f"//{parts.netloc}" if has_authority else ""
            base = f"{scheme}:{authority}{_percent_encode(parts.path, _PATH_UNSAFE)}"

        if query is not None:
            query = _percent_encode(query, _QUERY_UNSAFE)
        if fragment is not None:
            fragment = _percent_encode(fragment, _FRAGMENT_UNSAFE)
        return cls(base, query, fragment)

    def query_pairs(self) -> list[tuple[str, str]]:
        if not self.query:
            return []
        return parse_qsl(self.query, keep_blank_values=True)

    def with_query(self, query: Optional[str]) -> _Url:
        encoded = None if query is None else _percent_encode(query, _QUERY_UNSAFE)
        return _Url(self.base, encoded, self.fragment)

    def __str__(self) -> str:
        text = self.base
        if self.query is not None:
            text += "?" + self.query
        if self.fragment is not None:
            text += "#" + self.fragment
        return text


def _valid_header_name(name: str) -> bool:
    return bool(name) and all(ch in _TOKEN_CHARS for ch in name)


def _valid_header_value(value: str) -> bool:
    return all(ch == "\t" or (ord(ch) >= 0x20 and ord(ch) != 0x7F) for ch in value)


def _visible_ascii(value: str) -> bool:
    return all(ch == "\t" or 0x20 <= ord(ch) < 0x7F for ch in value)


@dataclass
class Request:
    """A concrete HTTP request ready to be sent."""

    method: Method
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None


@dataclass
class RequestTemplate:
    """A request whose parts are templates, filled in by ``to_request``."""

    root_url: Mustache
    endpoint: Endpoint
    query: list[tuple[str, Mustache]] = field(default_factory=list)
    method: Method = Method.GET
    headers: list[tuple[str, Mustache]] = field(default_factory=list)
    body: Optional[Mustache] = None

    @classmethod
    def from_url(cls, root_url: str) -> RequestTemplate:
        """A GET template for ``root_url`` with no query, headers or body."""
        return cls(root_url=Mustache.parse(root_url), endpoint=Endpoint(root_url))

    @classmethod
    def from_endpoint(cls, endpoint: Endpoint) -> RequestTemplate:
        """Build a template from every templated part of ``endpoint``."""
        headers = []
        for name, value in endpoint.headers.items():
            if not _visible_ascii(value):
                raise ValueError(f"header {name!r} holds characters that are not visible ASCII")
            headers.append((name.lower(), Mustache.parse(value)))
        return cls(
            root_url=Mustache.parse(endpoint.path),
            endpoint=endpoint,
            query=[(key, Mustache.parse(value)) for key, value in endpoint.query],
            method=endpoint.method,
            headers=headers,
            body=None if endpoint.body is None else Mustache.parse(endpoint.body),
        )

    def is_const(self) -> bool:
        """True when no part of the template holds an expression."""
        return (
            self.root_url.is_const()
            and (self.body is None or self.body.is_const())
            and all(value.is_const() for _, value in self.query)
            and all(value.is_const() for _, value in self.headers)
        )

    def _create_url(self, ctx: Any) -> _Url:
        url = _Url.parse(self.root_url.render(ctx))
        if not self.query and self.root_url.is_const():
            return url
        extra = [(key, rendered) for key, value in self.query if (rendered := value.render(ctx))]
        base = [(key, value) for key, value in url.query_pairs() if value]
        query = "&".join(f"{key}={value}" for key, value in (*base, *extra))
        return url.with_query(query or None)

    def _create_headers(self, ctx: Any) -> dict[str, str]:
        headers: dict[str, str] = {}
        for name, template in self.headers:
            if not _valid_header_name(name):
                continue
            value = template.render(ctx)
            if _valid_header_value(value):
                headers[name.lower()] = value
        return headers

    def to_request(self, ctx: Any) -> Request:
        """Render every template with ``ctx`` and build the request.

        ``ctx`` provides ``path_string(path)`` and ``headers()``; the latter are
        forwarded and take precedence over the template's own headers.
        """
        url = self._create_url(ctx)
        headers = self._create_headers(ctx)
        headers["content-type"] = "application/json"
        for name, value in ctx.headers().items():
            headers[name.lower()] = value
        body = None if self.body is None else self.body.render(ctx).encode("utf-8")
        return Request(self.method, str(url), headers, body)