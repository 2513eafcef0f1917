"""Modifier Wrappers

Each wrapper holds the inner node and implements the same ``_validate``
contract, so modifiers stack in any order:

    s.string().min(1).optional().nullable()
    s.number().default(10).transform(str)
"""
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from .base import MISSING, Schema, SchemaKind
from .context import ParseContext
from .issues import IssueCode, Path
from .result import Failure, Result, Success

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class OptionalSchema(Schema[T], Generic[T]):
    """Absent values succeed with MISSING; present values are delegated."""
    kind = SchemaKind.OPTIONAL
    inner: Schema[T]

    def _validate(self, value: Any, ctx: ParseContext) -> Result[T]:
        if value is MISSING:
            return Success(MISSING)
        return self.inner._validate(value, ctx)

    def unwrap(self) -> Schema[T]:
        return self.inner


@dataclass(frozen=True, slots=True)
class NullableSchema(Schema[T], Generic[T]):
    """Explicit ``None`` succeeds; everything else is delegated."""
    kind = SchemaKind.NULLABLE
    inner: Schema[T]

    def _validate(self, value: Any, ctx: ParseContext) -> Result[T]:
        if value is None:
            return Success(None)
        return self.inner._validate(value, ctx)

    def unwrap(self) -> Schema[T]:
        return self.inner


@dataclass(frozen=True, slots=True)
class DefaultSchema(Schema[T], Generic[T]):
    """Absent values are replaced before delegating; the default is validated too."""
    kind = SchemaKind.DEFAULT
    inner: Schema[T]
    value: Any
    is_factory: bool = False

    def resolve(self) -> Any:
        return self.value() if self.is_factory else copy.deepcopy(self.value)

    def _validate(self, value: Any, ctx: ParseContext) -> Result[T]:
        if value is MISSING:
            value = self.resolve()
        return self.inner._validate(value, ctx)

    def remove_default(self) -> Schema[T]:
        return self.inner


@dataclass(frozen=True, slots=True)
class RefinedSchema(Schema[T], Generic[T]):
    """Runs the inner node, then a predicate on its output.

    A falsy predicate result adds one ``custom`` issue at ``path``
    (relative to this node).
    """
    kind = SchemaKind.REFINE
    inner: Schema[T]
    predicate: Callable[[T], Any]
    message: str = "Invalid input"
    path: Path = ()

    def _validate(self, value: Any, ctx: ParseContext) -> Result[T]:
        if isinstance(result := self.inner._validate(value, ctx), Failure):
            return result
        if self.predicate(result.value):
            return result
        return Failure((ctx.at(*self.path).issue(IssueCode.CUSTOM, self.message),))


@dataclass(frozen=True, slots=True)
class TransformedSchema(Schema[U], Generic[U]):
    """Maps the inner node's output; the mapped value is final."""
    kind = SchemaKind.TRANSFORM
    inner: Schema[Any]
    fn: Callable[[Any], U]

    def _validate(self, value: Any, ctx: ParseContext) -> Result[U]:
        if isinstance(result := self.inner._validate(value, ctx), Failure):
            return result
        return Success(self.fn(result.value))
