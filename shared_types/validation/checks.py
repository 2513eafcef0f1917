"""Leaf Constraint Checks

Each check is a frozen dataclass that inspects an already type-checked
value and returns an Issue (or None). Checks never touch the type of the
value; the owning schema has verified it before running its chain.

Features:
- Ordered chains: every check runs in collect-all mode, the first failure
  ends the chain in fail-fast mode
- Optional per-check message override
- JSON Schema fragments for export
- Exact integer arithmetic: ints too large for a float are never converted
"""
from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time
from fractions import Fraction
from typing import Any, Sequence
from urllib.parse import urlparse

from .context import ParseContext
from .issues import Issue, IssueCode
from .result import Result, collect

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
UUID_PATTERN = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")
DATETIME_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}")
FLOAT_TOLERANCE = 1e-9

_UNITS = {"string": "character(s)", "array": "element(s)"}


class Check(ABC):
    """Base class for constraint checks."""
    __slots__ = ()

    @abstractmethod
    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        """Return an Issue when ``value`` violates the constraint."""

    def json_fragment(self) -> dict[str, Any]:
        """JSON Schema keywords describing this constraint."""
        return {}


def run_checks(checks: Sequence[Check], value: Any, ctx: ParseContext) -> Result:
    """Run a chain of checks against one value."""
    issues: list[Issue] = []
    for check in checks:
        if (issue := check.run(value, ctx)) is None:
            continue
        issues.append(issue)
        if ctx.fail_fast:
            break
    return collect(issues, value)


# ============================================================================
# Length Checks (strings and arrays)
# ============================================================================

@dataclass(frozen=True, slots=True)
class MinLength(Check):
    limit: int
    subject: str = "string"
    message: str | None = None

    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        if len(value) >= self.limit:
            return None
        return ctx.issue(
            IssueCode.TOO_SMALL,
            self.message or f"{self.subject.capitalize()} must contain at least {self.limit} {_UNITS[self.subject]}",
            minimum=self.limit, inclusive=True, type=self.subject,
        )

    def json_fragment(self) -> dict[str, Any]:
        return {"minLength" if self.subject == "string" else "minItems": self.limit}


@dataclass(frozen=True, slots=True)
class MaxLength(Check):
    limit: int
    subject: str = "string"
    message: str | None = None

    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        if len(value) <= self.limit:
            return None
        return ctx.issue(
            IssueCode.TOO_LARGE,
            self.message or f"{self.subject.capitalize()} must contain at most {self.limit} {_UNITS[self.subject]}",
            maximum=self.limit, inclusive=True, type=self.subject,
        )

    def json_fragment(self) -> dict[str, Any]:
        return {"maxLength" if self.subject == "string" else "maxItems": self.limit}


@dataclass(frozen=True, slots=True)
class ExactLength(Check):
    length: int
    subject: str = "string"
    message: str | None = None

    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        actual = len(value)
        if actual == self.length:
            return None
        message = self.message or f"{self.subject.capitalize()} must contain exactly {self.length} {_UNITS[self.subject]}"
        if actual < self.length:
            return ctx.issue(IssueCode.TOO_SMALL, message, minimum=self.length, exact=True, type=self.subject)
        return ctx.issue(IssueCode.TOO_LARGE, message, maximum=self.length, exact=True, type=self.subject)

    def json_fragment(self) -> dict[str, Any]:
        if self.subject == "string":
            return {"minLength": self.length, "maxLength": self.length}
        return {"minItems": self.length, "maxItems": self.length}


# ============================================================================
# String Format Checks
# ============================================================================

@dataclass(frozen=True, slots=True)
class Pattern(Check):
    """Regex search against the string (not anchored unless the pattern is)."""
    regex: re.Pattern
    message: str | None = None

    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        if self.regex.search(value):
            return None
        return ctx.issue(IssueCode.INVALID_FORMAT, self.message or "Invalid",
            format="regex", pattern=self.regex.pattern)

    def json_fragment(self) -> dict[str, Any]:
        return {"pattern": self.regex.pattern}


@dataclass(frozen=True, slots=True)
class StartsWith(Check):
    prefix: str
    message: str | None = None

    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        if value.startswith(self.prefix):
            return None
        return ctx.issue(IssueCode.INVALID_FORMAT, self.message or f'Invalid input: must start with "{self.prefix}"',
            format="starts_with", prefix=self.prefix)

    def json_fragment(self) -> dict[str, Any]:
        return {"pattern": f"^{re.escape(self.prefix)}"}


@dataclass(frozen=True, slots=True)
class EndsWith(Check):
    suffix: str
    message: str | None = None

    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        if value.endswith(self.suffix):
            return None
        return ctx.issue(IssueCode.INVALID_FORMAT, self.message or f'Invalid input: must end with "{self.suffix}"',
            format="ends_with", suffix=self.suffix)

    def json_fragment(self) -> dict[str, Any]:
        return {"pattern": f"{re.escape(self.suffix)}$"}


@dataclass(frozen=True, slots=True)
class EmailFormat(Check):
    message: str | None = None

    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        if EMAIL_PATTERN.match(value):
            return None
        return ctx.issue(IssueCode.INVALID_FORMAT, self.message or "Invalid email", format="email")

    def json_fragment(self) -> dict[str, Any]:
        return {"format": "email"}


@dataclass(frozen=True, slots=True)
class UuidFormat(Check):
    message: str | None = None

    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        if UUID_PATTERN.match(value):
            return None
        return ctx.issue(IssueCode.INVALID_FORMAT, self.message or "Invalid uuid", format="uuid")

    def json_fragment(self) -> dict[str, Any]:
        return {"format": "uuid"}


@dataclass(frozen=True, slots=True)
class UrlFormat(Check):
    """Absolute URL with an allowed scheme and a host."""
    allowed_schemes: frozenset[str] = frozenset({"http", "https"})
    message: str | None = None

    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        try:
            parsed = urlparse(value)
        except ValueError:
            parsed = None
        if parsed is not None and parsed.scheme in self.allowed_schemes and parsed.netloc:
            return None
        return ctx.issue(IssueCode.INVALID_FORMAT, self.message or "Invalid url",
            format="url", schemes=sorted(self.allowed_schemes))

    def json_fragment(self) -> dict[str, Any]:
        return {"format": "uri"}


@dataclass(frozen=True, slots=True)
class DateTimeFormat(Check):
    """ISO8601 date-time string (``Z`` suffix accepted)."""
    require_timezone: bool = False
    message: str | None = None

    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        if DATETIME_PREFIX.match(value):
            try:
                parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                parsed = None
            if parsed is not None and (parsed.tzinfo is not None or not self.require_timezone):
                return None
        return ctx.issue(IssueCode.INVALID_FORMAT, self.message or "Invalid datetime",
            format="datetime", require_timezone=self.require_timezone)

    def json_fragment(self) -> dict[str, Any]:
        return {"format": "date-time"}


# ============================================================================
# Numeric / Date Bounds
# ============================================================================

def _is_aware(moment: datetime) -> bool:
    return moment.utcoffset() is not None


def align_dates(value: date, bound: date) -> tuple[date, date] | None:
    """Bring a date/datetime value and its bound to one comparable kind.

    A plain ``date`` bound compares against the calendar day of a datetime
    value. A plain ``date`` value against a datetime bound is taken as
    midnight in the bound's timezone. Returns None when one side is
    timezone-aware and the other naive, since no ordering exists.
    """
    if not isinstance(bound, datetime):
        return (value.date() if isinstance(value, datetime) else value), bound
    if not isinstance(value, datetime):
        value = datetime.combine(value, time(), tzinfo=bound.tzinfo)
    if _is_aware(value) != _is_aware(bound):
        return None
    return value, bound


def _unordered_dates(ctx: ParseContext, bound: date) -> Issue:
    return ctx.issue(IssueCode.INVALID_DATE, "Invalid date: cannot compare naive and timezone-aware datetimes",
        bound=bound.isoformat())


@dataclass(frozen=True, slots=True)
class Minimum(Check):
    """Lower bound for numbers (or dates when ``subject`` is "date")."""
    bound: Any
    inclusive: bool = True
    subject: str = "number"
    message: str | None = None

    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        bound = self.bound
        if self.subject == "date":
            if (aligned := align_dates(value, bound)) is None:
                return _unordered_dates(ctx, bound)
            value, bound = aligned
        if value > bound or (self.inclusive and value == bound):
            return None
        op = "greater than or equal to" if self.inclusive else "greater than"
        return ctx.issue(IssueCode.TOO_SMALL, self.message or f"{self.subject.capitalize()} must be {op} {self.bound}",
            minimum=self.bound, inclusive=self.inclusive, type=self.subject)

    def json_fragment(self) -> dict[str, Any]:
        if self.subject != "number":
            return {}
        return {"minimum" if self.inclusive else "exclusiveMinimum": self.bound}


@dataclass(frozen=True, slots=True)
class Maximum(Check):
    """Upper bound for numbers (or dates when ``subject`` is "date")."""
    bound: Any
    inclusive: bool = True
    subject: str = "number"
    message: str | None = None

    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        bound = self.bound
        if self.subject == "date":
            if (aligned := align_dates(value, bound)) is None:
                return _unordered_dates(ctx, bound)
            value, bound = aligned
        if value < bound or (self.inclusive and value == bound):
            return None
        op = "less than or equal to" if self.inclusive else "less than"
        return ctx.issue(IssueCode.TOO_LARGE, self.message or f"{self.subject.capitalize()} must be {op} {self.bound}",
            maximum=self.bound, inclusive=self.inclusive, type=self.subject)

    def json_fragment(self) -> dict[str, Any]:
        if self.subject != "number":
            return {}
        return {"maximum" if self.inclusive else "exclusiveMaximum": self.bound}


@dataclass(frozen=True, slots=True)
class IntegerCheck(Check):
    message: str | None = None

    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        if isinstance(value, int) or (math.isfinite(value) and value.is_integer()):
            return None
        return ctx.issue(IssueCode.INVALID_TYPE, self.message or "Expected integer, received float",
            expected="integer", received="float")

    def json_fragment(self) -> dict[str, Any]:
        return {"type": "integer"}


@dataclass(frozen=True, slots=True)
class MultipleOf(Check):
    """Divisibility; exact for ints, tolerance-based for floats."""
    factor: int | float
    message: str | None = None

    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        if self._divides(value):
            return None
        return ctx.issue(IssueCode.NOT_MULTIPLE_OF, self.message or f"Number must be a multiple of {self.factor}",
            multiple_of=self.factor)

    def _divides(self, value: int | float) -> bool:
        if isinstance(value, int):
            if isinstance(self.factor, int):
                return value % self.factor == 0
            # repr gives the shortest decimal for the float, so 0.1 divides 3
            return Fraction(value) % Fraction(repr(self.factor)) == 0
        if not math.isfinite(value):
            return False
        if isinstance(self.factor, int):
            return value.is_integer() and int(value) % self.factor == 0
        remainder = math.fmod(value, self.factor)
        return abs(remainder) < FLOAT_TOLERANCE or abs(abs(remainder) - abs(self.factor)) < FLOAT_TOLERANCE

    def json_fragment(self) -> dict[str, Any]:
        return {"multipleOf": self.factor}


@dataclass(frozen=True, slots=True)
class Finite(Check):
    """Rejects infinite floats; ints of any size are finite."""
    message: str | None = None

    def run(self, value: Any, ctx: ParseContext) -> Issue | None:
        if isinstance(value, int) or math.isfinite(value):
            return None
        return ctx.issue(IssueCode.NOT_FINITE, self.message or "Number must be finite")
