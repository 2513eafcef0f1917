"""Primitive Schemas

Leaf nodes: string, number, boolean, literal, enum, date, unknown.
Constraint methods return a new node with the check appended; the
original node is untouched.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Callable, Iterable

from .base import Schema, SchemaKind, ValueSchema
from .checks import (
    Check,
    DateTimeFormat,
    EmailFormat,
    EndsWith,
    ExactLength,
    Finite,
    IntegerCheck,
    Maximum,
    MaxLength,
    Minimum,
    MinLength,
    MultipleOf,
    Pattern,
    StartsWith,
    UrlFormat,
    UuidFormat,
    run_checks,
)
from .coercion import CoercionRule
from .context import ParseContext
from .issues import IssueCode
from .result import Failure, Result, Success


def quote_value(value: Any) -> str:
    return f"'{value}'" if isinstance(value, str) else repr(value)


@dataclass(frozen=True, slots=True)
class StringSchema(ValueSchema[str]):
    kind = SchemaKind.STRING
    checks: tuple[Check, ...] = ()
    coercion: CoercionRule | None = None
    normalizers: tuple[Callable[[str], str], ...] = ()

    def _check(self, value: Any, ctx: ParseContext) -> Result[str]:
        if self.coercion is not None:
            if isinstance(coerced := self.coercion.coerce(value, ctx), Failure):
                return coerced
            value = coerced.value
        if not isinstance(value, str):
            return self._invalid_type(value, ctx)
        for normalize in self.normalizers:
            value = normalize(value)
        return run_checks(self.checks, value, ctx)

    def _with(self, check: Check) -> StringSchema:
        return replace(self, checks=(*self.checks, check))

    def min(self, length: int, message: str | None = None) -> StringSchema:
        return self._with(MinLength(length, "string", message))

    def max(self, length: int, message: str | None = None) -> StringSchema:
        return self._with(MaxLength(length, "string", message))

    def length(self, length: int, message: str | None = None) -> StringSchema:
        return self._with(ExactLength(length, "string", message))

    def nonempty(self, message: str | None = None) -> StringSchema:
        return self.min(1, message)

    def regex(self, pattern: str | re.Pattern, message: str | None = None) -> StringSchema:
        return self._with(Pattern(re.compile(pattern), message))

    def startswith(self, prefix: str, message: str | None = None) -> StringSchema:
        return self._with(StartsWith(prefix, message))

    def endswith(self, suffix: str, message: str | None = None) -> StringSchema:
        return self._with(EndsWith(suffix, message))

    def email(self, message: str | None = None) -> StringSchema:
        return self._with(EmailFormat(message))

    def uuid(self, message: str | None = None) -> StringSchema:
        return self._with(UuidFormat(message))

    def url(self, message: str | None = None, *, schemes: Iterable[str] = ("http", "https")) -> StringSchema:
        return self._with(UrlFormat(frozenset(schemes), message))

    def datetime(self, message: str | None = None, *, require_timezone: bool = False) -> StringSchema:
        return self._with(DateTimeFormat(require_timezone, message))

    def trim(self) -> StringSchema:
        return replace(self, normalizers=(*self.normalizers, str.strip))

    def lower(self) -> StringSchema:
        return replace(self, normalizers=(*self.normalizers, str.lower))


@dataclass(frozen=True, slots=True)
class NumberSchema(ValueSchema[float]):
    """int or float; ``bool`` and NaN are rejected as invalid types."""
    kind = SchemaKind.NUMBER
    checks: tuple[Check, ...] = ()
    coercion: CoercionRule | None = None

    def _check(self, value: Any, ctx: ParseContext) -> Result[float]:
        if self.coercion is not None:
            if isinstance(coerced := self.coercion.coerce(value, ctx), Failure):
                return coerced
            value = coerced.value
        if isinstance(value, bool) or not isinstance(value, (int, float)) or (isinstance(value, float) and math.isnan(value)):
            return self._invalid_type(value, ctx)
        return run_checks(self.checks, value, ctx)

    def _with(self, check: Check) -> NumberSchema:
        return replace(self, checks=(*self.checks, check))

    def int(self, message: str | None = None) -> NumberSchema:
        return self._with(IntegerCheck(message))

    def gt(self, bound: float, message: str | None = None) -> NumberSchema:
        return self._with(Minimum(bound, False, "number", message))

    def gte(self, bound: float, message: str | None = None) -> NumberSchema:
        return self._with(Minimum(bound, True, "number", message))

    def lt(self, bound: float, message: str | None = None) -> NumberSchema:
        return self._with(Maximum(bound, False, "number", message))

    def lte(self, bound: float, message: str | None = None) -> NumberSchema:
        return self._with(Maximum(bound, True, "number", message))

    min = gte
    max = lte

    def positive(self, message: str | None = None) -> NumberSchema:
        return self.gt(0, message)

    def nonnegative(self, message: str | None = None) -> NumberSchema:
        return self.gte(0, message)

    def negative(self, message: str | None = None) -> NumberSchema:
        return self.lt(0, message)

    def multiple_of(self, factor: float, message: str | None = None) -> NumberSchema:
        if factor == 0:
            raise ValueError("multiple_of factor must be non-zero")
        return self._with(MultipleOf(factor, message))

    def finite(self, message: str | None = None) -> NumberSchema:
        return self._with(Finite(message))


@dataclass(frozen=True, slots=True)
class BooleanSchema(ValueSchema[bool]):
    kind = SchemaKind.BOOLEAN
    coercion: CoercionRule | None = None

    def _check(self, value: Any, ctx: ParseContext) -> Result[bool]:
        if self.coercion is not None:
            if isinstance(coerced := self.coercion.coerce(value, ctx), Failure):
                return coerced
            value = coerced.value
        if not isinstance(value, bool):
            return self._invalid_type(value, ctx)
        return Success(value)


@dataclass(frozen=True, slots=True)
class LiteralSchema(ValueSchema[Any]):
    """Equality against one fixed value. ``True`` does not match ``1``."""
    kind = SchemaKind.LITERAL
    value: Any

    def _check(self, value: Any, ctx: ParseContext) -> Result[Any]:
        if isinstance(value, bool) is isinstance(self.value, bool) and value == self.value:
            return Success(value)
        return ctx.fail(IssueCode.INVALID_LITERAL, f"Invalid literal value, expected {quote_value(self.value)}",
            expected=self.value, received=value)


@dataclass(frozen=True, slots=True)
class EnumSchema(ValueSchema[str]):
    """Membership in a fixed, ordered set of string options."""
    kind = SchemaKind.ENUM
    options: tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "options", tuple(self.options))
        if not self.options:
            raise ValueError("Enum requires at least one option")
        if len(set(self.options)) != len(self.options):
            raise ValueError(f"Duplicate enum options: {self.options}")
        if not all(isinstance(o, str) for o in self.options):
            raise TypeError("Enum options must be strings")

    @property
    def expected(self) -> str:
        return " | ".join(quote_value(o) for o in self.options)

    def _check(self, value: Any, ctx: ParseContext) -> Result[str]:
        if not isinstance(value, str):
            return self._invalid_type(value, ctx, self.expected)
        if value in self.options:
            return Success(value)
        return ctx.fail(IssueCode.INVALID_ENUM_VALUE,
            f"Invalid enum value. Expected {self.expected}, received {quote_value(value)}",
            options=list(self.options), received=value)

    def extract(self, *options: str) -> EnumSchema:
        if missing := [o for o in options if o not in self.options]:
            raise KeyError(f"Unknown enum option(s): {missing}")
        return EnumSchema(tuple(o for o in self.options if o in options))

    def exclude(self, *options: str) -> EnumSchema:
        if missing := [o for o in options if o not in self.options]:
            raise KeyError(f"Unknown enum option(s): {missing}")
        return EnumSchema(tuple(o for o in self.options if o not in options))


@dataclass(frozen=True, slots=True)
class DateSchema(ValueSchema[datetime]):
    """``datetime``/``date`` instances.

    Bounds accept either kind. A plain ``date`` bound is compared with the
    calendar day of a datetime value; a naive value against an aware bound
    (or the reverse) is reported as ``invalid_date`` rather than ordered.
    """
    kind = SchemaKind.DATE
    checks: tuple[Check, ...] = ()
    coercion: CoercionRule | None = None

    def _check(self, value: Any, ctx: ParseContext) -> Result[datetime]:
        if self.coercion is not None:
            if isinstance(coerced := self.coercion.coerce(value, ctx), Failure):
                if coerced.issues[0].details.get("received") == "string":
                    return ctx.fail(IssueCode.INVALID_DATE, "Invalid date", received=value)
                return coerced
            value = coerced.value
        if not isinstance(value, (datetime, date)):
            return self._invalid_type(value, ctx)
        return run_checks(self.checks, value, ctx)

    def _bounded(self, check: Check) -> DateSchema:
        if not isinstance(check.bound, date):
            raise TypeError(f"Date bound must be a date or datetime, got {type(check.bound).__name__}")
        return replace(self, checks=(*self.checks, check))

    def min(self, bound: date, message: str | None = None) -> DateSchema:
        return self._bounded(Minimum(bound, True, "date", message))

    def max(self, bound: date, message: str | None = None) -> DateSchema:
        return self._bounded(Maximum(bound, True, "date", message))


@dataclass(frozen=True, slots=True)
class UnknownSchema(Schema[Any]):
    """Accepts any value, including an absent one."""
    kind = SchemaKind.UNKNOWN

    def _validate(self, value: Any, ctx: ParseContext) -> Result[Any]:
        return Success(value)
