"""Schema Generators

Generate JSON Schema and TypeScript declarations from schema trees, so
the runtime schemas stay the single source of truth for the shapes that
other services and the web client consume.

Features:
- JSON Schema draft 2020-12 (input shape; refinements and transforms are not expressible)
- TypeScript type aliases with proper optionality
"""
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from .base import Schema
from .composites import (
    ArraySchema,
    DiscriminatedUnionSchema,
    ObjectSchema,
    RecordSchema,
    TupleSchema,
    UnionSchema,
    UnknownKeys,
)
from .modifiers import DefaultSchema, NullableSchema, OptionalSchema, RefinedSchema, TransformedSchema
from .primitives import (
    BooleanSchema,
    DateSchema,
    EnumSchema,
    LiteralSchema,
    NumberSchema,
    StringSchema,
    UnknownSchema,
)

JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"


def accepts_missing(schema: Schema) -> bool:
    """Whether an object field built from ``schema`` may be left out."""
    match schema:
        case OptionalSchema() | DefaultSchema() | UnknownSchema():
            return True
        case NullableSchema(inner=inner) | RefinedSchema(inner=inner) | TransformedSchema(inner=inner):
            return accepts_missing(inner)
        case UnionSchema(options=options):
            return any(accepts_missing(o) for o in options)
    return False


class SchemaGenerator(ABC):
    """Base class for schema generators."""

    @abstractmethod
    def generate(self, schema: Schema, name: str = "Schema") -> str:
        """Generate schema representation."""

    def generate_all(self, schemas: dict[str, Schema], separator: str = "\n\n") -> str:
        return separator.join(self.generate(schema, name) for name, schema in schemas.items())


class JSONSchemaGenerator(SchemaGenerator):
    """Generate JSON Schema (draft 2020-12)."""

    def __init__(self, indent: int | None = 2): self.indent = indent

    def generate(self, schema: Schema, name: str = "Schema") -> str:
        document = {"$schema": JSON_SCHEMA_DIALECT, "title": name, **self.to_dict(schema)}
        return json.dumps(document, indent=self.indent, default=str)

    def to_dict(self, schema: Schema) -> dict[str, Any]:
        """JSON Schema fragment for one node."""
        match schema:
            case StringSchema(checks=checks):
                return self._with_checks({"type": "string"}, checks)
            case NumberSchema(checks=checks):
                return self._with_checks({"type": "number"}, checks)
            case BooleanSchema():
                return {"type": "boolean"}
            case LiteralSchema(value=value):
                return {"const": value}
            case EnumSchema(options=options):
                return {"type": "string", "enum": list(options)}
            case DateSchema():
                return {"type": "string", "format": "date-time"}
            case UnknownSchema():
                return {}
            case ObjectSchema(fields=fields, unknown_keys=unknown_keys):
                result: dict[str, Any] = {"type": "object",
                    "properties": {n: self.to_dict(f) for n, f in fields.items()}}
                if required := [n for n, f in fields.items() if not accepts_missing(f)]: result["required"] = required
                if unknown_keys is UnknownKeys.STRICT: result["additionalProperties"] = False
                return result
            case ArraySchema(item=item, checks=checks):
                return self._with_checks({"type": "array", "items": self.to_dict(item)}, checks)
            case TupleSchema(items=items, rest=rest):
                result = {"type": "array", "prefixItems": [self.to_dict(i) for i in items], "minItems": len(items)}
                if rest is None: result["maxItems"] = len(items)
                else: result["items"] = self.to_dict(rest)
                return result
            case RecordSchema(values=values, keys=keys):
                result = {"type": "object", "additionalProperties": self.to_dict(values)}
                if keys is not None: result["propertyNames"] = self.to_dict(keys)
                return result
            case UnionSchema(options=options):
                return {"anyOf": [self.to_dict(o) for o in options]}
            case DiscriminatedUnionSchema(options=options):
                return {"oneOf": [self.to_dict(o) for o in options]}
            case NullableSchema(inner=inner):
                return {"anyOf": [self.to_dict(inner), {"type": "null"}]}
            case DefaultSchema(inner=inner, value=value, is_factory=False):
                return {**self.to_dict(inner), "default": value}
            case (OptionalSchema(inner=inner) | DefaultSchema(inner=inner) | RefinedSchema(inner=inner)
                  | TransformedSchema(inner=inner)):
                return self.to_dict(inner)
        raise TypeError(f"Unsupported schema node: {type(schema).__name__}")

    @staticmethod
    def _with_checks(base: dict[str, Any], checks: tuple) -> dict[str, Any]:
        for check in checks: base.update(check.json_fragment())
        return base


class TypeScriptGenerator(SchemaGenerator):
    """Generate TypeScript type aliases.

    Transformed nodes render as ``unknown``: the output type of an
    arbitrary Python callable cannot be recovered from the tree.
    """

    def __init__(self, export_style: str = "export", indent: str = "  "):
        self.export_style, self.indent = export_style, indent

    def generate(self, schema: Schema, name: str = "Schema") -> str:
        prefix = f"{self.export_style} " if self.export_style else ""
        return f"{prefix}type {name} = {self.to_ts(schema)};"

    def to_ts(self, schema: Schema, depth: int = 0) -> str:
        match schema:
            case StringSchema():
                return "string"
            case NumberSchema():
                return "number"
            case BooleanSchema():
                return "boolean"
            case LiteralSchema(value=value):
                return json.dumps(value)
            case EnumSchema(options=options):
                return " | ".join(json.dumps(o) for o in options)
            case DateSchema():
                return "Date"
            case UnknownSchema() | TransformedSchema():
                return "unknown"
            case ObjectSchema(fields=fields):
                if not fields: return "Record<string, never>"
                pad, close = self.indent * (depth + 1), self.indent * depth
                members = [f"{pad}{n}{'?' if accepts_missing(f) else ''}: {self.to_ts(f, depth + 1)};"
                    for n, f in fields.items()]
                return "{\n" + "\n".join(members) + f"\n{close}}}"
            case ArraySchema(item=item):
                inner = self.to_ts(item, depth)
                return f"({inner})[]" if " | " in inner else f"{inner}[]"
            case TupleSchema(items=items, rest=rest):
                parts = [self.to_ts(i, depth) for i in items]
                if rest is not None: parts.append(f"...{self.to_ts(ArraySchema(rest), depth)}")
                return f"[{', '.join(parts)}]"
            case RecordSchema(values=values):
                return f"Record<string, {self.to_ts(values, depth)}>"
            case UnionSchema(options=options) | DiscriminatedUnionSchema(options=options):
                return " | ".join(self.to_ts(o, depth) for o in options)
            case NullableSchema(inner=inner):
                return f"{self.to_ts(inner, depth)} | null"
            case OptionalSchema(inner=inner) | DefaultSchema(inner=inner) | RefinedSchema(inner=inner):
                return self.to_ts(inner, depth)
        raise TypeError(f"Unsupported schema node: {type(schema).__name__}")


def generate_all(schema: Schema, name: str = "Schema") -> dict[str, str]:
    """Generate every representation. Returns dict with keys: typescript, json_schema"""
    generators: dict[str, SchemaGenerator] = {
        "typescript": TypeScriptGenerator(),
        "json_schema": JSONSchemaGenerator(),
    }
    return {key: gen.generate(schema, name) for key, gen in generators.items()}
