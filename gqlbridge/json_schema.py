"""A small structural schema for validating JSON values."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from gqlbridge.valid import Valid


class SchemaKind(enum.Enum):
    OBJ = "obj"
    ARR = "arr"
    OPT = "opt"
    STR = "str"
    NUM = "num"
    BOOL = "bool"


@dataclass(frozen=True)
class JsonSchema:
    """A schema node; objects carry ``fields``, arrays and optionals an ``item``."""

    kind: SchemaKind = SchemaKind.OBJ
    fields: Mapping[str, JsonSchema] = field(default_factory=dict)
    item: Optional[JsonSchema] = None

    @classmethod
    def obj(cls, fields: Mapping[str, JsonSchema]) -> JsonSchema:
        return cls(SchemaKind.OBJ, dict(fields))

    @classmethod
    def arr(cls, item: JsonSchema) -> JsonSchema:
        return cls(SchemaKind.ARR, item=item)

    @classmethod
    def string(cls) -> JsonSchema:
        return cls(SchemaKind.STR)

    @classmethod
    def number(cls) -> JsonSchema:
        return cls(SchemaKind.NUM)

    @classmethod
    def boolean(cls) -> JsonSchema:
        return cls(SchemaKind.BOOL)

    def optional(self) -> JsonSchema:
        return JsonSchema(SchemaKind.OPT, item=self)

    def is_optional(self) -> bool:
        return self.kind is SchemaKind.OPT

    def is_required(self) -> bool:
        return not self.is_optional()

    def validate(self, value: Any) -> Valid:
        """Check ``value`` against this schema, collecting every failure."""
        kind = self.kind
        if kind is SchemaKind.STR:
            return Valid.succeed(None) if isinstance(value, str) else Valid.fail("expected string")
        if kind is SchemaKind.NUM:
            is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
            return Valid.succeed(None) if is_number else Valid.fail("expected number")
        if kind is SchemaKind.BOOL:
            return Valid.succeed(None) if isinstance(value, bool) else Valid.fail("expected boolean")
        if kind is SchemaKind.ARR:
            if not isinstance(value, list):
                return Valid.fail("expected array")
            item = self.item
            return Valid.from_iter(
                enumerate(value),
                lambda pair: item.validate(pair[1]).trace(str(pair[0])),
            ).unit()
        if kind is SchemaKind.OBJ:
            if not isinstance(value, dict):
                return Valid.fail("expected object")
            return Valid.from_iter(
                self.fields.items(),
                lambda pair: _validate_field(pair[0], pair[1], value),
            ).unit()
        if value is None:
            return Valid.succeed(None)
        return self.item.validate(value)


def _validate_field(name: str, schema: JsonSchema, obj: dict) -> Valid:
    if name in obj:
        return schema.validate(obj[name]).trace(name)
    if schema.is_required():
        return Valid.fail("expected field to be non-nullable")
    return Valid.succeed(None)