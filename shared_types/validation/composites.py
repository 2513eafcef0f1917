"""Composite Schemas

Object, array, union, discriminated union, tuple and record nodes.
Children are validated with an extended ParseContext, so every issue
carries its absolute path. Siblings are always evaluated; a composite
only forms its Result after every child has reported.

Object algebra:
    Base = s.object({"a": s.string(), "b": s.number(), "d": s.boolean()})
    Base.pick("a", "b").extend(c=s.string()).partial()
"""
from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable

from .base import MISSING, Schema, SchemaKind, ValueSchema
from .checks import Check, ExactLength, MaxLength, MinLength, run_checks
from .context import ParseContext
from .engine import best_failure
from .issues import Issue, IssueCode, PathSegment
from .modifiers import OptionalSchema
from .primitives import EnumSchema, LiteralSchema, quote_value
from .result import Failure, Result, Success, collect


class UnknownKeys(str, Enum):
    """Policy for input keys an object schema does not declare."""
    STRIP = "strip"
    STRICT = "strict"
    PASSTHROUGH = "passthrough"


def _names(names: tuple[Any, ...]) -> tuple[str, ...]:
    """Accept ``pick("a", "b")`` as well as ``pick(["a", "b"])``."""
    if len(names) == 1 and not isinstance(names[0], str):
        return tuple(names[0])
    return names


def _rebuild(source: Any, items: list[Any]) -> list[Any] | tuple[Any, ...]:
    return tuple(items) if isinstance(source, tuple) else items


def _segment(key: Any) -> PathSegment:
    return key if isinstance(key, (str, int)) else str(key)


# ============================================================================
# Object
# ============================================================================

@dataclass(frozen=True, slots=True)
class ObjectSchema(ValueSchema[dict]):
    """Ordered field mapping. Output dicts omit fields whose value is absent."""
    kind = SchemaKind.OBJECT
    fields: Mapping[str, Schema]
    unknown_keys: UnknownKeys = UnknownKeys.STRIP

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def shape(self) -> Mapping[str, Schema]:
        return self.fields

    def _check(self, value: Any, ctx: ParseContext) -> Result[dict]:
        if not isinstance(value, Mapping):
            return self._invalid_type(value, ctx)
        issues: list[Issue] = []
        output: dict[str, Any] = {}
        for name, schema in self.fields.items():
            match schema._validate(value.get(name, MISSING), ctx.child(name)):
                case Success(parsed):
                    if parsed is not MISSING:
                        output[name] = parsed
                case Failure(field_issues):
                    issues.extend(field_issues)
        if extra := [key for key in value if key not in self.fields]:
            match self.unknown_keys:
                case UnknownKeys.STRICT:
                    issues.extend(ctx.issue(IssueCode.UNRECOGNIZED_KEY, f"Unrecognized key in object: {quote_value(key)}",
                        key=key) for key in extra)
                case UnknownKeys.PASSTHROUGH:
                    output.update((key, value[key]) for key in extra)
        return collect(issues, output)

    def _require_known(self, names: Iterable[str]) -> None:
        if unknown := [n for n in names if n not in self.fields]:
            raise KeyError(f"Unknown field(s): {unknown}")

    def pick(self, *names: str | Iterable[str]) -> ObjectSchema:
        self._require_known(selected := _names(names))
        return replace(self, fields={n: f for n, f in self.fields.items() if n in selected})

    def omit(self, *names: str | Iterable[str]) -> ObjectSchema:
        self._require_known(excluded := _names(names))
        return replace(self, fields={n: f for n, f in self.fields.items() if n not in excluded})

    def partial(self, *names: str | Iterable[str]) -> ObjectSchema:
        """Make the named fields (default: all) optional."""
        self._require_known(targets := _names(names) or tuple(self.fields))
        return replace(self, fields={
            n: f.optional() if n in targets and f.kind is not SchemaKind.OPTIONAL else f
            for n, f in self.fields.items()})

    def required(self, *names: str | Iterable[str]) -> ObjectSchema:
        """Strip ``optional()`` from the named fields (default: all)."""
        self._require_known(targets := _names(names) or tuple(self.fields))
        fields = dict(self.fields)
        for name in targets:
            while isinstance(fields[name], OptionalSchema):
                fields[name] = fields[name].inner
        return replace(self, fields=fields)

    def extend(self, fields: Mapping[str, Schema] | None = None, **more: Schema) -> ObjectSchema:
        """Add fields; same-named fields are overridden in place."""
        return replace(self, fields={**self.fields, **dict(fields or {}), **more})

    def merge(self, other: ObjectSchema) -> ObjectSchema:
        """Combine two object schemas; ``other`` wins on fields and key policy."""
        return replace(self, fields={**self.fields, **other.fields}, unknown_keys=other.unknown_keys)

    def strict(self) -> ObjectSchema:
        return replace(self, unknown_keys=UnknownKeys.STRICT)

    def strip(self) -> ObjectSchema:
        return replace(self, unknown_keys=UnknownKeys.STRIP)

    def passthrough(self) -> ObjectSchema:
        return replace(self, unknown_keys=UnknownKeys.PASSTHROUGH)

    def keyof(self) -> EnumSchema:
        return EnumSchema(tuple(self.fields))


# ============================================================================
# Array / Tuple / Record
# ============================================================================

@dataclass(frozen=True, slots=True)
class ArraySchema(ValueSchema[list]):
    """Homogeneous sequence. Length checks and every element are evaluated."""
    kind = SchemaKind.ARRAY
    item: Schema
    checks: tuple[Check, ...] = ()

    @property
    def element(self) -> Schema:
        return self.item

    def _check(self, value: Any, ctx: ParseContext) -> Result[list]:
        if not isinstance(value, (list, tuple)):
            return self._invalid_type(value, ctx)
        issues = list(run_checks(self.checks, value, ctx).issues)
        output: list[Any] = []
        for index, item in enumerate(value):
            match self.item._validate(item, ctx.child(index)):
                case Success(parsed): output.append(parsed)
                case Failure(item_issues): issues.extend(item_issues)
        return collect(issues, _rebuild(value, output))

    def _with(self, check: Check) -> ArraySchema:
        return replace(self, checks=(*self.checks, check))

    def min(self, length: int, message: str | None = None) -> ArraySchema:
        return self._with(MinLength(length, "array", message))

    def max(self, length: int, message: str | None = None) -> ArraySchema:
        return self._with(MaxLength(length, "array", message))

    def length(self, length: int, message: str | None = None) -> ArraySchema:
        return self._with(ExactLength(length, "array", message))

    def nonempty(self, message: str | None = None) -> ArraySchema:
        return self.min(1, message)


@dataclass(frozen=True, slots=True)
class TupleSchema(ValueSchema[tuple]):
    """Fixed positions, optionally followed by ``rest`` elements."""
    kind = SchemaKind.TUPLE
    items: tuple[Schema, ...]
    rest: Schema | None = None

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    def _check(self, value: Any, ctx: ParseContext) -> Result[tuple]:
        if not isinstance(value, (list, tuple)):
            return self._invalid_type(value, ctx)
        if len(value) < (n := len(self.items)):
            return ctx.fail(IssueCode.TOO_SMALL, f"Array must contain at least {n} element(s)",
                minimum=n, inclusive=True, type="array")
        if self.rest is None and len(value) > n:
            return ctx.fail(IssueCode.TOO_LARGE, f"Array must contain at most {n} element(s)",
                maximum=n, inclusive=True, type="array")
        issues: list[Issue] = []
        output: list[Any] = []
        for index, item in enumerate(value):
            schema = self.items[index] if index < n else self.rest
            match schema._validate(item, ctx.child(index)):
                case Success(parsed): output.append(parsed)
                case Failure(item_issues): issues.extend(item_issues)
        return collect(issues, _rebuild(value, output))

    def with_rest(self, rest: Schema) -> TupleSchema:
        return replace(self, rest=rest)


@dataclass(frozen=True, slots=True)
class RecordSchema(ValueSchema[dict]):
    """Dict with arbitrary keys; every value (and key, when ``keys`` is set) is validated."""
    kind = SchemaKind.RECORD
    values: Schema
    keys: Schema | None = None

    def _check(self, value: Any, ctx: ParseContext) -> Result[dict]:
        if not isinstance(value, Mapping):
            return self._invalid_type(value, ctx, "object")
        issues: list[Issue] = []
        output: dict[Any, Any] = {}
        for key, item in value.items():
            child = ctx.child(_segment(key))
            if self.keys is not None:
                if isinstance(key_result := self.keys._validate(key, child), Failure):
                    issues.extend(key_result.issues)
                    continue
                key = key_result.value
            match self.values._validate(item, child):
                case Success(parsed):
                    if parsed is not MISSING:
                        output[key] = parsed
                case Failure(item_issues):
                    issues.extend(item_issues)
        return collect(issues, output)


# ============================================================================
# Unions
# ============================================================================

@dataclass(frozen=True, slots=True)
class UnionSchema(Schema[Any]):
    """First succeeding alternative wins; otherwise ``best_failure`` picks the report."""
    kind = SchemaKind.UNION
    options: tuple[Schema, ...]

    def __post_init__(self):
        object.__setattr__(self, "options", tuple(self.options))
        if len(self.options) < 2:
            raise ValueError("Union requires at least two options")

    def _validate(self, value: Any, ctx: ParseContext) -> Result[Any]:
        failures: list[Failure] = []
        for option in self.options:
            if isinstance(result := option._validate(value, ctx), Success):
                return result
            failures.append(result)
        return best_failure(failures)


def _tags(schema: Schema) -> tuple[Any, ...]:
    match schema:
        case LiteralSchema(value=value): return (value,)
        case EnumSchema(options=options): return options
    raise TypeError(f"Discriminator field must be a literal or enum schema, got {schema.kind.value}")


@dataclass(frozen=True, slots=True)
class DiscriminatedUnionSchema(ValueSchema[dict]):
    """Object alternatives dispatched on the literal value of one key."""
    kind = SchemaKind.DISCRIMINATED_UNION
    discriminator: str
    options: tuple[ObjectSchema, ...]
    lookup: Mapping[Any, ObjectSchema] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "options", tuple(self.options))
        lookup: dict[Any, ObjectSchema] = {}
        for option in self.options:
            if not isinstance(option, ObjectSchema):
                raise TypeError("Discriminated union options must be object schemas")
            if (tag_schema := option.fields.get(self.discriminator)) is None:
                raise ValueError(f"Option is missing discriminator field '{self.discriminator}'")
            for tag in _tags(tag_schema):
                if tag in lookup:
                    raise ValueError(f"Duplicate discriminator value {quote_value(tag)}")
                lookup[tag] = option
        object.__setattr__(self, "lookup", MappingProxyType(lookup))

    def _check(self, value: Any, ctx: ParseContext) -> Result[dict]:
        if not isinstance(value, Mapping):
            return self._invalid_type(value, ctx, "object")
        tag = value.get(self.discriminator, MISSING)
        if isinstance(tag, Hashable) and (option := self.lookup.get(tag)) is not None:
            return option._validate(value, ctx)
        expected = " | ".join(quote_value(t) for t in self.lookup)
        return ctx.child(self.discriminator).fail(IssueCode.INVALID_UNION_DISCRIMINATOR,
            f"Invalid discriminator value. Expected {expected}", options=list(self.lookup))
