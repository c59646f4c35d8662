"""Accumulating validation results: causes, errors and the Valid container."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

A = TypeVar("A")
B = TypeVar("B")

_BULLET = "\u2022"


@dataclass(frozen=True)
class Cause:
    """A single validation failure with an optional description and a trace."""

    message: Any
    description: Any = None
    trace: tuple[str, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        text = f"[{', '.join(self.trace)}] {self.message}"
        if self.description is not None:
            text += f": {self.description}"
        return text

    def transform(self, f: Callable[[Any], Any]) -> Cause:
        """Apply ``f`` to the message and, if present, the description."""
        description = None if self.description is None else f(self.description)
        return Cause(f(self.message), description, self.trace)


class ValidationError(Exception):
    """An ordered collection of causes, raised when a validation fails."""

    def __init__(self, causes: Iterable[Cause] = ()) -> None:
        self.causes: tuple[Cause, ...] = tuple(causes)
        super().__init__(*self.causes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationError):
            return NotImplemented
        return self.causes == other.causes

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ValidationError({list(self.causes)!r})"

    def __str__(self) -> str:
        lines = []
        for _ in self.causes:
            lines.append("Validation Error\n")
            for cause in self.causes:
                lines.append(f"{_BULLET} {cause.message} [{', '.join(cause.trace)}]\n")
        return "".join(lines)

    def __iter__(self):
        return iter(self.causes)

    def __len__(self) -> int:
        return len(self.causes)

    def combine(self, other: ValidationError) -> ValidationError:
        """Return an error holding this error's causes followed by ``other``'s."""
        return ValidationError(self.causes + other.causes)

    def is_empty(self) -> bool:
        return not self.causes

    def trace(self, message: str) -> ValidationError:
        """Prepend ``message`` to the trace of every cause."""
        return ValidationError(
            replace(cause, trace=(message, *cause.trace)) for cause in self.causes
        )

    def append(self, error: Any) -> ValidationError:
        """Return an error with a new cause for ``error`` added at the end."""
        return ValidationError((*self.causes, Cause(error)))

    def transform(self, f: Callable[[Any], Any]) -> ValidationError:
        return ValidationError(cause.transform(f) for cause in self.causes)


@dataclass(frozen=True)
class Valid(Generic[A]):
    """Either a successful value or a ValidationError that accumulates causes."""

    value: Optional[A] = None
    error: Optional[ValidationError] = None

    @property
    def is_succeed(self) -> bool:
        return self.error is None

    @classmethod
    def succeed(cls, value: A) -> Valid[A]:
        return cls(value, None)

    @classmethod
    def fail(cls, error: Any) -> Valid[Any]:
        return cls(None, ValidationError([Cause(error)]))

    @classmethod
    def from_validation_err(cls, error: ValidationError) -> Valid[Any]:
        return cls(None, error)

    @classmethod
    def from_causes(cls, causes: Iterable[Cause]) -> Valid[Any]:
        return cls(None, ValidationError(causes))

    @classmethod
    def from_iter(cls, items: Iterable[A], f: Callable[[A], Valid[B]]) -> Valid[list[B]]:
        """Validate every item, collecting all values or all errors."""
        values: list[B] = []
        errors = ValidationError()
        for item in items:
            result = f(item)
            if result.error is None:
                values.append(result.value)  # type: ignore[arg-type]
            else:
                errors = errors.combine(result.error)
        if errors.is_empty():
            return cls.succeed(values)
        return cls.from_validation_err(errors)

    @classmethod
    def from_option(cls, option: Optional[A], error: Any) -> Valid[A]:
        if option is None:
            return cls.fail(error)
        return cls.succeed(option)

    @classmethod
    def none(cls) -> Valid[None]:
        return cls.succeed(None)

    def map(self, f: Callable[[A], B]) -> Valid[B]:
        if self.error is not None:
            return Valid(None, self.error)
        return Valid.succeed(f(self.value))  # type: ignore[arg-type]

    def and_(self, other: Valid[B]) -> Valid[B]:
        """Keep ``other`` on success, otherwise accumulate both errors."""
        if self.error is None:
            return other
        if other.error is not None:
            return Valid(None, self.error.combine(other.error))
        return Valid(None, self.error)

    def zip(self, other: Valid[B]) -> Valid[tuple[A, B]]:
        if self.error is None:
            if other.error is None:
                return Valid.succeed((self.value, other.value))  # type: ignore[arg-type]
            return Valid(None, other.error)
        if other.error is None:
            return Valid(None, self.error)
        return Valid(None, self.error.combine(other.error))

    def trace(self, message: str) -> Valid[A]:
        if self.error is None:
            return self
        return Valid(None, self.error.trace(message))

    def fold(self, ok: Callable[[A], Valid[B]], err: Valid[B]) -> Valid[B]:
        """Continue with ``ok`` on success, otherwise combine with ``err``."""
        if self.error is None:
            return ok(self.value)  # type: ignore[arg-type]
        return Valid(None, self.error).and_(err)

    def to_result(self) -> A:
        """Return the value, or raise the accumulated ValidationError."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def and_then(self, f: Callable[[A], Valid[B]]) -> Valid[B]:
        if self.error is None:
            return f(self.value)  # type: ignore[arg-type]
        return Valid(None, self.error)

    def unit(self) -> Valid[None]:
        return self.map(lambda _: None)

    def some(self) -> Valid[Optional[A]]:
        return self.map(lambda value: value)

    def map_to(self, value: B) -> Valid[B]:
        return self.map(lambda _: value)

    def when(self, predicate: Callable[[], bool]) -> Valid[None]:
        if predicate():
            return self.unit()
        return Valid.succeed(None)