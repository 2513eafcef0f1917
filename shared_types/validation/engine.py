"""Parse Engine

Two entry points over one schema and one raw value. Both run the same
collect-all walk; they differ only in how the Result is surfaced:

    match safe_parse(schema, payload):
        case Success(value): ...
        case Failure(issues): ...

    value = parse(schema, env)  # raises ParseError with every issue
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence, TypeVar

from .base import MISSING
from .context import ParseContext, ValidationMode
from .issues import ParseError
from .result import Failure, Result, Success

if TYPE_CHECKING:
    from .base import Schema

T = TypeVar("T")


def best_failure(failures: Sequence[Failure]) -> Failure:
    """Pick the union alternative to report: fewest issues, ties by declaration order."""
    if not failures:
        raise ValueError("best_failure requires at least one failure")
    return min(failures, key=lambda failure: len(failure.issues))


def safe_parse(schema: Schema[T], value: Any = MISSING, *, mode: ValidationMode = ValidationMode.COLLECT_ALL,
               max_issues: int | None = None) -> Result[T]:
    """Validate ``value``; never raises for invalid data.

    ``max_issues`` truncates the reported sequence (order is preserved).
    """
    result = schema._validate(value, ParseContext(mode=mode))
    if isinstance(result, Failure) and max_issues is not None and len(result.issues) > max_issues:
        return Failure(result.issues[:max(max_issues, 1)])
    return result


def parse(schema: Schema[T], value: Any = MISSING, *, mode: ValidationMode = ValidationMode.COLLECT_ALL,
          max_issues: int | None = None) -> T:
    """Return the validated value or raise ParseError carrying every issue."""
    match safe_parse(schema, value, mode=mode, max_issues=max_issues):
        case Success(parsed): return parsed
        case Failure(issues): raise ParseError(issues)
