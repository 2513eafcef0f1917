"""Composable Schema Validation

Schemas describe the shape of data once and are reused for every
validation call. Validation never raises for invalid data unless asked
to: ``safe_parse`` returns a Result, ``parse`` raises ParseError with the
complete issue sequence.

Key Features:
- Immutable schema nodes with wrapper modifiers (optional, nullable, default, refine, transform)
- Object algebra (pick, omit, partial, required, extend, merge, strict)
- Absolute issue paths and stable issue codes
- Explicit opt-in coercion
- Union error selection by a named comparator
- JSON Schema and TypeScript export

Usage:
    from shared_types.validation import s, Success, Failure

    TopicSchema = s.object({
        "title": s.string().min(1).max(200),
        "difficulty": s.enum("beginner", "intermediate", "advanced"),
    })

    match TopicSchema.safe_parse(payload):
        case Success(value):
            ...
        case Failure(issues):
            return [issue.to_dict() for issue in issues]
"""

from .base import MISSING, Schema, SchemaKind, ValueSchema, type_name
from .boundaries import (
    BoundaryResponse,
    BoundaryValidator,
    error_response,
    parse_request_body,
    success_response,
)
from .builders import CoercingBuilder, SchemaBuilder, s
from .checks import Check
from .coercion import CoercionRule, ToBoolean, ToDate, ToNumber, ToString
from .composites import (
    ArraySchema,
    DiscriminatedUnionSchema,
    ObjectSchema,
    RecordSchema,
    TupleSchema,
    UnionSchema,
    UnknownKeys,
)
from .context import ParseContext, ValidationMode
from .engine import best_failure, parse, safe_parse
from .generators import JSONSchemaGenerator, TypeScriptGenerator, generate_all
from .issues import Issue, IssueCode, ParseError, Path, PathSegment, flatten_issues, format_path
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
from .result import Failure, Result, Success

__all__ = [
    # Builders
    "s",
    "SchemaBuilder",
    "CoercingBuilder",
    # Nodes
    "MISSING",
    "Schema",
    "SchemaKind",
    "ValueSchema",
    "type_name",
    "StringSchema",
    "NumberSchema",
    "BooleanSchema",
    "LiteralSchema",
    "EnumSchema",
    "DateSchema",
    "UnknownSchema",
    "ObjectSchema",
    "UnknownKeys",
    "ArraySchema",
    "UnionSchema",
    "DiscriminatedUnionSchema",
    "TupleSchema",
    "RecordSchema",
    "OptionalSchema",
    "NullableSchema",
    "DefaultSchema",
    "RefinedSchema",
    "TransformedSchema",
    # Checks and coercion
    "Check",
    "CoercionRule",
    "ToNumber",
    "ToBoolean",
    "ToString",
    "ToDate",
    # Engine
    "ParseContext",
    "ValidationMode",
    "parse",
    "safe_parse",
    "best_failure",
    # Results and issues
    "Success",
    "Failure",
    "Result",
    "Issue",
    "IssueCode",
    "ParseError",
    "Path",
    "PathSegment",
    "format_path",
    "flatten_issues",
    # Generators
    "JSONSchemaGenerator",
    "TypeScriptGenerator",
    "generate_all",
    # Boundaries
    "BoundaryResponse",
    "BoundaryValidator",
    "parse_request_body",
    "success_response",
    "error_response",
]
