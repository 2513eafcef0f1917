"""Schema constructor namespace.

    from shared_types.validation import s

    UserSchema = s.object({
        "id": s.string().uuid(),
        "email": s.string().email(),
        "name": s.string().min(1).max(100),
    })
    PageSchema = s.object(page=s.coerce.number().int().positive().default(1))
"""
from __future__ import annotations

from datetime import timezone
from typing import Any, Iterable, Mapping

from .base import Schema
from .coercion import ToBoolean, ToDate, ToNumber, ToString
from .composites import (
    ArraySchema,
    DiscriminatedUnionSchema,
    ObjectSchema,
    RecordSchema,
    TupleSchema,
    UnionSchema,
    UnknownKeys,
)
from .primitives import (
    BooleanSchema,
    DateSchema,
    EnumSchema,
    LiteralSchema,
    NumberSchema,
    StringSchema,
    UnknownSchema,
)


class CoercingBuilder:
    """Primitive constructors that convert their input before checking it."""
    __slots__ = ()

    def number(self) -> NumberSchema: return NumberSchema(coercion=ToNumber())

    def boolean(self) -> BooleanSchema: return BooleanSchema(coercion=ToBoolean())

    def string(self) -> StringSchema: return StringSchema(coercion=ToString())

    def date(self, default_timezone: timezone | None = None) -> DateSchema:
        return DateSchema(coercion=ToDate(default_timezone))


class SchemaBuilder:
    __slots__ = ()
    coerce = CoercingBuilder()

    def string(self) -> StringSchema: return StringSchema()

    def number(self) -> NumberSchema: return NumberSchema()

    def boolean(self) -> BooleanSchema: return BooleanSchema()

    def literal(self, value: Any) -> LiteralSchema: return LiteralSchema(value)

    def enum(self, *options: str | Iterable[str]) -> EnumSchema:
        """``s.enum("a", "b")`` or ``s.enum(["a", "b"])``."""
        if len(options) == 1 and not isinstance(options[0], str): options = tuple(options[0])
        return EnumSchema(options)

    def date(self) -> DateSchema: return DateSchema()

    def unknown(self) -> UnknownSchema: return UnknownSchema()

    def object(self, fields: Mapping[str, Schema] | None = None, **more: Schema) -> ObjectSchema:
        return ObjectSchema({**dict(fields or {}), **more})

    def strict_object(self, fields: Mapping[str, Schema] | None = None, **more: Schema) -> ObjectSchema:
        return ObjectSchema({**dict(fields or {}), **more}, UnknownKeys.STRICT)

    def array(self, item: Schema) -> ArraySchema: return ArraySchema(item)

    def union(self, *options: Schema) -> UnionSchema: return UnionSchema(options)

    def discriminated_union(self, discriminator: str, *options: ObjectSchema) -> DiscriminatedUnionSchema:
        return DiscriminatedUnionSchema(discriminator, options)

    def tuple(self, *items: Schema, rest: Schema | None = None) -> TupleSchema: return TupleSchema(items, rest)

    def record(self, values: Schema, keys: Schema | None = None) -> RecordSchema: return RecordSchema(values, keys)


s = SchemaBuilder()
