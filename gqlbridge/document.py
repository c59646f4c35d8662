"""A model of GraphQL type-system definitions and a printer for SDL."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Union


@dataclass(frozen=True)
class TypeRef:
    """A type reference: a named type or, when ``base`` is a TypeRef, a list of it."""

    base: Union[str, TypeRef]
    nullable: bool = True

    def __str__(self) -> str:
        return _base_str(self) + ("" if self.nullable else "!")


def _base_str(ref: TypeRef) -> str:
    if isinstance(ref.base, TypeRef):
        return f"[{ref.base}]"
    return ref.base


@dataclass
class ConstDirective:
    """A directive applied with constant argument values."""

    name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.arguments = dict(self.arguments)


@dataclass
class InputValueDefinition:
    name: str
    type: TypeRef
    directives: list[ConstDirective] = field(default_factory=list)
    description: Optional[str] = None
    default_value: Any = None


@dataclass
class FieldDefinition:
    name: str
    type: TypeRef
    arguments: list[InputValueDefinition] = field(default_factory=list)
    directives: list[ConstDirective] = field(default_factory=list)
    description: Optional[str] = None


@dataclass
class SchemaDefinition:
    query: Optional[str] = None
    mutation: Optional[str] = None
    subscription: Optional[str] = None
    directives: list[ConstDirective] = field(default_factory=list)


@dataclass
class ScalarType:
    name: str


@dataclass
class UnionType:
    name: str
    members: list[str] = field(default_factory=list)


@dataclass
class InputObjectType:
    name: str
    fields: list[InputValueDefinition] = field(default_factory=list)


@dataclass
class InterfaceType:
    name: str
    fields: list[FieldDefinition] = field(default_factory=list)
    implements: list[str] = field(default_factory=list)


@dataclass
class ObjectType:
    name: str
    fields: list[FieldDefinition] = field(default_factory=list)
    implements: list[str] = field(default_factory=list)


@dataclass
class EnumType:
    name: str
    values: list[str] = field(default_factory=list)


_ESCAPES = {"\r": "\\r", "\n": "\\n", "\t": "\\t", '"': '\\"', "\\": "\\\\"}


def _quote(text: str) -> str:
    out = []
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or 0x7F <= ord(ch) < 0xA0:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(map(_format_value, value)) + "]"
    if isinstance(value, Mapping):
        return "{" + ",".join(f"{k}: {_format_value(v)}" for k, v in value.items()) + "}"
    raise TypeError(f"cannot print value of type {type(value).__name__}")


def _print_directive(directive: ConstDirective) -> str:
    args = []
    for name, value in directive.arguments.items():
        if value is None:
            continue
        text = _format_value(value)
        if text.startswith(("[", "{")):
            text = ", ".join(text.split(","))
        args.append(f"{name}: {text}")
    if not args:
        return f"@{directive.name}"
    return f"@{directive.name}({', '.join(args)})"


def _directives_suffix(directives: Iterable[ConstDirective]) -> str:
    printed = [_print_directive(d) for d in directives]
    return " " + " ".join(printed) if printed else ""


def _print_schema(schema: SchemaDefinition) -> str:
    directives = " ".join(_print_directive(d) for d in schema.directives)
    body = "".join(
        f"  {label}: {name}\n"
        for label, name in (
            ("query", schema.query),
            ("mutation", schema.mutation),
            ("subscription", schema.subscription),
        )
        if name is not None
    )
    head = f"schema {directives} " if directives else "schema "
    return f"{head}{{\n{body}}}\n"


def _print_input_value(value: InputValueDefinition) -> str:
    return f"  {value.name}: {value.type}{_directives_suffix(value.directives)}"


def _print_field(definition: FieldDefinition) -> str:
    args = ""
    if definition.arguments:
        args = "(" + ", ".join(f"{a.name}: {_base_str(a.type)}" for a in definition.arguments) + ")"
    doc = ""
    if definition.description is not None:
        doc = f'  """\n  {definition.description}\n  """\n'
    suffix = _directives_suffix(definition.directives)
    return f"{doc}  {definition.name}{args}: {definition.type}{suffix}"


def _implements(names: list[str]) -> str:
    return f"implements {' & '.join(names)} " if names else ""


def _print_fields(keyword: str, name: str, implements: list[str], fields: list) -> str:
    body = "\n".join(_print_field(f) for f in fields)
    return f"{keyword} {name} {_implements(implements)}{{\n{body}\n}}\n"


def _print_scalar(t: ScalarType) -> str:
    return f"scalar {t.name}\n"


def _print_union(t: UnionType) -> str:
    return f"union {t.name} = {' | '.join(t.members)}\n"


def _print_input(t: InputObjectType) -> str:
    body = "\n".join(_print_input_value(f) for f in t.fields)
    return f"input {t.name} {{\n{body}\n}}\n"


def _print_interface(t: InterfaceType) -> str:
    return _print_fields("interface", t.name, t.implements, t.fields)


def _print_object(t: ObjectType) -> str:
    return _print_fields("type", t.name, t.implements, t.fields)


def _print_enum(t: EnumType) -> str:
    body = "\n".join(f"  {v}" for v in t.values)
    return f"enum {t.name} {{\n{body}\n}}\n"


# Output order of the definition kinds, each with its printer.
_PRINTERS = (
    (SchemaDefinition, _print_schema),
    (ScalarType, _print_scalar),
    (InputObjectType, _print_input),
    (InterfaceType, _print_interface),
    (UnionType, _print_union),
    (EnumType, _print_enum),
    (ObjectType, _print_object),
)


def print_document(definitions: Iterable[Any]) -> str:
    """Print definitions as SDL, grouped by kind: schema, scalars, inputs,
    interfaces, unions, enums, then object types."""
    buckets: dict[type, list[str]] = {kind: [] for kind, _ in _PRINTERS}
    printers = dict(_PRINTERS)
    for definition in definitions:
        kind = type(definition)
        if kind not in printers:
            raise TypeError(f"unsupported definition: {definition!r}")
        buckets[kind].append(printers[kind](definition))
    parts = [text for kind, _ in _PRINTERS for text in buckets[kind]]
    return "\n".join(parts).rstrip("\n")