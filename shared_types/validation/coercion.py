"""Explicit Opt-in Coercion

Coercion is never implicit: a schema only converts input when it was
built through the ``coerce`` namespace (``s.coerce.number()``). Each
coercing schema owns exactly one rule, tried before its constraint
checks. A conversion that cannot be performed is reported as an
``invalid_type`` issue; the raw value is never passed through silently.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

from .base import type_name
from .context import ParseContext
from .issues import IssueCode
from .result import Result, Success


class CoercionRule(ABC):
    """Converts a raw value to the schema's target type."""
    __slots__ = ()

    @property
    @abstractmethod
    def target(self) -> str:
        """Name of the target type used in issue messages."""

    @abstractmethod
    def convert(self, value: Any) -> Any:
        """Return the converted value or raise ValueError."""

    def coerce(self, value: Any, ctx: ParseContext) -> Result:
        try:
            return Success(self.convert(value))
        except ValueError as e:
            received = type_name(value)
            return ctx.fail(IssueCode.INVALID_TYPE, f"Expected {self.target}, received {received}",
                expected=self.target, received=received, coercion=str(e))


@dataclass(frozen=True, slots=True)
class ToNumber(CoercionRule):
    """Numeric strings become int (when integral) or float."""

    @property
    def target(self) -> str: return "number"

    def convert(self, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Cannot coerce {type_name(value)} to number")
        if not (stripped := value.strip()):
            raise ValueError("Cannot coerce empty string to number")
        try:
            return int(stripped)
        except ValueError:
            pass
        try:
            return float(stripped)
        except ValueError:
            raise ValueError(f"Cannot coerce '{value}' to number") from None


@dataclass(frozen=True, slots=True)
class ToBoolean(CoercionRule):
    """Truthy: "true", "1", "yes", "on", "y". Falsy: "false", "0", "no", "off", "n"."""
    true_values: frozenset[str] = frozenset({"true", "1", "yes", "on", "y"})
    false_values: frozenset[str] = frozenset({"false", "0", "no", "off", "n"})

    @property
    def target(self) -> str: return "boolean"

    def convert(self, value: Any) -> Any:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lower = value.strip().lower()
            if lower in self.true_values: return True
            if lower in self.false_values: return False
        raise ValueError(f"Cannot coerce {value!r} to boolean")


@dataclass(frozen=True, slots=True)
class ToString(CoercionRule):
    """Scalars become their string form (booleans as "true"/"false")."""

    @property
    def target(self) -> str: return "string"

    def convert(self, value: Any) -> Any:
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        raise ValueError(f"Cannot coerce {type_name(value)} to string")


@dataclass(frozen=True, slots=True)
class ToDate(CoercionRule):
    """ISO8601 strings become datetime; naive values take ``default_timezone`` when set."""
    default_timezone: timezone | None = None

    @property
    def target(self) -> str: return "date"

    def convert(self, value: Any) -> Any:
        if isinstance(value, (datetime, date)):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Cannot coerce {type_name(value)} to date")
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        if parsed.tzinfo is None and self.default_timezone:
            parsed = parsed.replace(tzinfo=self.default_timezone)
        return parsed
