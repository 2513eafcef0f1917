"""Validation Result

``Success(value)`` or ``Failure(issues)``, never both. Modeled as two
final frozen variants so callers can pattern match exhaustively:

    match schema.safe_parse(data):
        case Success(value):
            ...
        case Failure(issues):
            ...
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, NoReturn, TypeVar, Union, final

from .issues import Issue, ParseError, flatten_issues

T = TypeVar("T")
U = TypeVar("U")


@final
@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """Validated (and possibly transformed) value."""
    value: T

    @property
    def issues(self) -> tuple[Issue, ...]: return ()

    def is_success(self) -> bool: return True

    def is_failure(self) -> bool: return False

    def unwrap(self) -> T: return self.value

    def unwrap_or(self, default: T) -> T: return self.value

    def map(self, f: Callable[[T], U]) -> Success[U]:
        """Transform the success value."""
        return Success(f(self.value))

    def match(self, success: Callable[[T], U], failure: Callable[[tuple[Issue, ...]], U]) -> U:
        return success(self.value)

    def __iter__(self) -> Iterator[T]:
        yield self.value


@final
@dataclass(frozen=True, slots=True)
class Failure:
    """Ordered, non-empty sequence of issues."""
    issues: tuple[Issue, ...]

    def __post_init__(self):
        if not self.issues:
            raise ValueError("Failure requires at least one issue")

    def is_success(self) -> bool: return False

    def is_failure(self) -> bool: return True

    def unwrap(self) -> NoReturn:
        """Raises ParseError carrying every issue."""
        raise ParseError(self.issues)

    def unwrap_or(self, default: T) -> T: return default

    def map(self, f: Callable[[Any], U]) -> Failure: return self

    def match(self, success: Callable[[Any], U], failure: Callable[[tuple[Issue, ...]], U]) -> U:
        return failure(self.issues)

    def flatten(self) -> dict[str, Any]: return flatten_issues(self.issues)

    def __iter__(self) -> Iterator:
        return iter([])


Result = Union[Success[T], Failure]


def collect(issues: list[Issue], value: T) -> Result[T]:
    """Build a Result from accumulated issues."""
    return Failure(tuple(issues)) if issues else Success(value)
