"""Mustache-style templates with ``{{a.b}}`` path expressions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Union

_WS = "[ \t\r\n]*"
_NAME = f"{_WS}[A-Za-z][A-Za-z0-9]*{_WS}"
_EXPRESSION = re.compile(r"\{\{(" + _NAME + r"(?:\." + _NAME + r")*)\}\}")
_LITERAL = re.compile(r"[^{]+")


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Expression:
    parts: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "parts", tuple(self.parts))


Segment = Union[Literal, Expression]


@dataclass(frozen=True)
class Mustache:
    """A template made of literal text and path expressions."""

    segments: tuple[Segment, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "segments", tuple(self.segments))

    @classmethod
    def parse(cls, text: str) -> Mustache:
        """Parse ``text``; text that is not a template becomes one literal segment."""
        segments = list(_parse_segments(text))
        if not segments:
            return cls((Literal(text),))
        return cls(segments)

    def is_const(self) -> bool:
        return not any(isinstance(segment, Expression) for segment in self.segments)

    def render(self, ctx: Any) -> str:
        """Fill expressions using ``ctx.path_string(parts)``; missing values render empty."""
        return "".join(_render_segment(segment, ctx) for segment in self.segments)

    def expression_segments(self) -> list[tuple[str, ...]]:
        return [s.parts for s in self.segments if isinstance(s, Expression)]


def _parse_segments(text: str) -> Iterable[Segment]:
    # Parsing stops at the first position where neither form matches;
    # whatever follows is not part of the template.
    pos = 0
    while pos < len(text):
        match = _EXPRESSION.match(text, pos)
        if match is not None:
            names = match.group(1).split(".")
            yield Expression(tuple(name.strip(" \t\r\n") for name in names))
            pos = match.end()
            continue
        match = _LITERAL.match(text, pos)
        if match is None:
            return
        yield Literal(match.group(0))
        pos = match.end()


def _render_segment(segment: Segment, ctx: Any) -> str:
    if isinstance(segment, Literal):
        return segment.text
    value = ctx.path_string(segment.parts)
    return "" if value is None else str(value)