"""Schema Node Contract

A schema node is an immutable description of an expected shape plus the
logic that checks a raw value against it. Every node implements
``_validate(value, ctx) -> Result``; wrappers (optional, nullable,
default, refine, transform) hold a reference to an inner node and
delegate, so modifiers stack without a class hierarchy.

Nodes are frozen dataclasses: derivation methods always build new nodes.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Final, Generic, Iterable, TypeVar

from .context import ParseContext, ValidationMode
from .issues import IssueCode, PathSegment
from .result import Result

if TYPE_CHECKING:
    from .composites import UnionSchema
    from .modifiers import DefaultSchema, NullableSchema, OptionalSchema, RefinedSchema, TransformedSchema

T = TypeVar("T")
U = TypeVar("U")


class _Missing:
    """Absent-value marker, distinct from an explicit ``None``."""
    __slots__ = ()
    _instance: ClassVar[_Missing | None] = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str: return "MISSING"

    def __bool__(self) -> bool: return False

    def __reduce__(self) -> str: return "MISSING"


MISSING: Final = _Missing()


class SchemaKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    LITERAL = "literal"
    ENUM = "enum"
    DATE = "date"
    UNKNOWN = "unknown"
    OBJECT = "object"
    ARRAY = "array"
    UNION = "union"
    DISCRIMINATED_UNION = "discriminated_union"
    TUPLE = "tuple"
    RECORD = "record"
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    DEFAULT = "default"
    REFINE = "refine"
    TRANSFORM = "transform"


def type_name(value: Any) -> str:
    """Short, JSON-flavoured name of a value's type for issue messages."""
    if value is MISSING:
        return "missing"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "nan" if value != value else "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, (datetime, date)):
        return "date"
    return type(value).__name__


class Schema(ABC, Generic[T]):
    """Base of every schema node.

    Validation contract: ``validate(value, path) -> Success | Failure``.
    Pure function of (schema definition, value, path); no hidden state.
    """
    __slots__ = ()
    kind: ClassVar[SchemaKind]

    @abstractmethod
    def _validate(self, value: Any, ctx: ParseContext) -> Result[T]:
        """Validate ``value`` located at ``ctx.path``."""

    def validate(self, value: Any = MISSING, path: Iterable[PathSegment] = (), *,
                 mode: ValidationMode = ValidationMode.COLLECT_ALL) -> Result[T]:
        return self._validate(value, ParseContext(path=tuple(path), mode=mode))

    def parse(self, value: Any = MISSING, **kwargs) -> T:
        """Return the validated value or raise ParseError with every issue."""
        from .engine import parse
        return parse(self, value, **kwargs)

    def safe_parse(self, value: Any = MISSING, **kwargs) -> Result[T]:
        """Return Success or Failure; never raises for invalid data."""
        from .engine import safe_parse
        return safe_parse(self, value, **kwargs)

    def is_valid(self, value: Any = MISSING) -> bool:
        return self._validate(value, ParseContext()).is_success()

    # Modifiers --------------------------------------------------------------

    def optional(self) -> OptionalSchema[T]:
        from .modifiers import OptionalSchema
        return OptionalSchema(self)

    def nullable(self) -> NullableSchema[T]:
        from .modifiers import NullableSchema
        return NullableSchema(self)

    def nullish(self) -> OptionalSchema[T | None]:
        return self.nullable().optional()

    def default(self, value: Any) -> DefaultSchema[T]:
        """Substitute ``value`` when absent. Callables are treated as factories."""
        from .modifiers import DefaultSchema
        return DefaultSchema(self, value, is_factory=callable(value))

    def refine(self, predicate: Callable[[T], Any], message: str = "Invalid input", *,
               path: Iterable[PathSegment] = ()) -> RefinedSchema[T]:
        from .modifiers import RefinedSchema
        return RefinedSchema(self, predicate, message, tuple(path))

    def transform(self, fn: Callable[[T], U]) -> TransformedSchema[U]:
        from .modifiers import TransformedSchema
        return TransformedSchema(self, fn)

    def or_(self, other: Schema) -> UnionSchema:
        from .composites import UnionSchema
        left = self.options if isinstance(self, UnionSchema) else (self,)
        return UnionSchema((*left, other))

    def __or__(self, other: Schema) -> UnionSchema: return self.or_(other)


class ValueSchema(Schema[T]):
    """Schema that requires a present value before checking it."""
    __slots__ = ()

    def _validate(self, value: Any, ctx: ParseContext) -> Result[T]:
        if value is MISSING:
            return ctx.fail(IssueCode.REQUIRED, "Required", expected=self.kind.value, received="missing")
        return self._check(value, ctx)

    @abstractmethod
    def _check(self, value: Any, ctx: ParseContext) -> Result[T]:
        """Check a present value."""

    def _invalid_type(self, value: Any, ctx: ParseContext, expected: str | None = None) -> Result[T]:
        expected = expected or self.kind.value
        received = type_name(value)
        return ctx.fail(IssueCode.INVALID_TYPE, f"Expected {expected}, received {received}",
            expected=expected, received=received)
