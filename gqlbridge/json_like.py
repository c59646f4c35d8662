"""Path lookups and grouping over plain JSON values (dict, list, scalars)."""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any, Iterator, Optional, Sequence

_INDEX = re.compile(r"\+?[0-9]+")


def _parse_index(token: str) -> Optional[int]:
    if _INDEX.fullmatch(token) is None:
        return None
    return int(token)


def get_path(value: Any, path: Sequence[str]) -> Any:
    """Follow ``path`` through objects and arrays; ``None`` if it leads nowhere."""
    current = value
    for token in path:
        if isinstance(current, list):
            index = _parse_index(token)
            if index is None or index >= len(current):
                return None
            current = current[index]
        elif isinstance(current, dict):
            if token not in current:
                return None
            current = current[token]
        else:
            return None
    return current


def get_key(value: Any, key: str) -> Any:
    """Return ``value[key]`` when ``value`` is an object, else ``None``."""
    if isinstance(value, dict):
        return value.get(key)
    return None


def _matches(root: Any, path: Sequence[str]) -> Iterator[tuple[Any, Any]]:
    if isinstance(root, list):
        for item in root:
            yield from _matches(item, path)
    elif path and isinstance(root, dict) and path[0] in root:
        head, tail = path[0], path[1:]
        value = root[head]
        if tail:
            yield from _matches(value, tail)
        else:
            yield value, root


def gather_path_matches(root: Any, path: Sequence[str]) -> list[tuple[Any, Any]]:
    """Collect ``(value_at_path, parent_object)`` pairs, flattening arrays on the way."""
    return list(_matches(root, path))


def _format_number(number: float) -> Optional[str]:
    as_float = float(number)
    if math.isnan(as_float):
        return "NaN"
    if math.isinf(as_float):
        return "inf" if as_float > 0 else "-inf"
    if as_float.is_integer():
        return str(int(as_float))
    return format(Decimal(repr(as_float)), "f")


def _key_string(key: Any) -> Optional[str]:
    if isinstance(key, str):
        return key
    if isinstance(key, (int, float)) and not isinstance(key, bool):
        return _format_number(key)
    return None


def group_by_key(pairs: Sequence[tuple[Any, Any]]) -> dict[str, list[Any]]:
    """Group parents by their key; keys must be strings or numbers, others are dropped."""
    groups: dict[str, list[Any]] = {}
    for key, value in pairs:
        key_str = _key_string(key)
        if key_str is not None:
            groups.setdefault(key_str, []).append(value)
    return groups


def group_by(value: Any, path: Sequence[str]) -> dict[str, list[Any]]:
    """Group the objects found along ``path`` by the value at its end."""
    return group_by_key(gather_path_matches(value, path))