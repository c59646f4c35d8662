"""Composable folding operations that may fail and accumulate errors."""

from __future__ import annotations

from functools import reduce
from typing import Any, Callable, Iterable

from gqlbridge.valid import Valid

FoldFn = Callable[[Any, Any], Valid]


class TryFold:
    """Wraps a function ``(input, state) -> Valid`` that can be chained."""

    def __init__(self, fold: FoldFn) -> None:
        self._fold = fold

    def try_fold(self, input: Any, state: Any) -> Valid:
        """Fold ``state`` with ``input``."""
        return self._fold(input, state)

    def and_(self, other: TryFold) -> TryFold:
        """Run this fold, then ``other`` on its result, accumulating failures."""

        def run(input: Any, state: Any) -> Valid:
            return self.try_fold(input, state).fold(
                lambda value: other.try_fold(input, value),
                other.try_fold(input, state),
            )

        return TryFold(run)

    @classmethod
    def from_iter(cls, items: Iterable[TryFold]) -> TryFold:
        """Chain all folds so that each runs on the previous one's result."""
        return reduce(lambda acc, item: item.and_(acc), reversed(list(items)), cls.empty())

    def transform(self, up: Callable[[Any], Any], down: Callable[[Any], Any]) -> TryFold:
        """Adapt the state type with a pair of conversion functions."""
        return self.transform_valid(
            lambda o: Valid.succeed(up(o)),
            lambda o1: Valid.succeed(down(o1)),
        )

    def transform_valid(
        self, up: Callable[[Any], Valid], down: Callable[[Any], Valid]
    ) -> TryFold:
        """Adapt the state type with conversions that may themselves fail."""

        def run(input: Any, state: Any) -> Valid:
            return (
                down(state)
                .and_then(lambda o: self.try_fold(input, o))
                .and_then(up)
            )

        return TryFold(run)

    @classmethod
    def succeed(cls, state: Any) -> TryFold:
        """A fold that always succeeds with ``state``."""
        return cls(lambda _input, _state: Valid.succeed(state))

    @classmethod
    def empty(cls) -> TryFold:
        """A fold that leaves the state unchanged."""
        return cls(lambda _input, state: Valid.succeed(state))