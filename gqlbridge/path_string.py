"""Protocols for template contexts and string lookup over JSON values."""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Protocol, Sequence, runtime_checkable

from gqlbridge.json_like import get_path


@runtime_checkable
class PathString(Protocol):
    """Anything that can turn a dotted path into a string for a template."""

    def path_string(self, path: Sequence[str]) -> Optional[str]:
        """Return the string found at ``path``, or ``None`` if there is none."""


@runtime_checkable
class HasHeaders(Protocol):
    """Anything that carries headers to forward on outgoing requests."""

    def headers(self) -> Mapping[str, str]:
        """Return the headers as a name-to-value mapping."""


def _scalar_to_string(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    return None


def json_path_string(value: Any, path: Sequence[str]) -> Optional[str]:
    """Return the string, number or boolean at ``path`` in ``value`` as text."""
    return _scalar_to_string(get_path(value, path))


def value_to_string(value: Any) -> Optional[str]:
    """Render a scalar as text and an object or list as compact JSON; ``None`` for null."""
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return _scalar_to_string(value)