"""A small builder for resolver expressions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from gqlbridge.evaluation_context import EvaluationContext
from gqlbridge.expression import (
    ContextPath,
    ContextValue,
    EndpointCall,
    EqualTo,
    Expr,
    Input,
    JsCall,
    LiteralValue,
    evaluate,
)
from gqlbridge.request_template import RequestTemplate


@dataclass(frozen=True)
class Lambda:
    """Wraps an expression and combines it into larger ones."""

    expression: Expr

    @classmethod
    def literal(cls, value: Any) -> Lambda:
        return cls(LiteralValue(value))

    @classmethod
    def context(cls) -> Lambda:
        return cls(ContextValue())

    @classmethod
    def context_field(cls, name: str) -> Lambda:
        return cls(ContextPath((name,)))

    @classmethod
    def context_path(cls, path: Sequence[str]) -> Lambda:
        return cls(ContextPath(tuple(path)))

    @classmethod
    def from_request_template(cls, template: RequestTemplate) -> Lambda:
        return cls(EndpointCall(template))

    def eq(self, other: Lambda) -> Lambda:
        """An expression that is true when both sides evaluate to the same value."""
        return Lambda(EqualTo(self.expression, other.expression))

    def to_unsafe_js(self, script: str) -> Lambda:
        return Lambda(JsCall(self.expression, script))

    def to_input_path(self, path: Sequence[str]) -> Lambda:
        return Lambda(Input(self.expression, tuple(path)))

    async def eval(self, ctx: Optional[EvaluationContext] = None) -> Any:
        """Evaluate in ``ctx``, or in an empty context when none is given."""
        if ctx is None:
            ctx = EvaluationContext()
        return await evaluate(self.expression, ctx)