"""Per-call validation context: current path and accumulation mode."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .issues import Issue, IssueCode, Path, PathSegment
from .result import Failure


class ValidationMode(str, Enum):
    """Constraint accumulation strategy for leaf checks."""
    FAIL_FAST = "fail_fast"
    COLLECT_ALL = "collect_all"


@dataclass(frozen=True, slots=True)
class ParseContext:
    """Immutable walk state. Each child gets its own extended copy."""
    path: Path = ()
    mode: ValidationMode = ValidationMode.COLLECT_ALL

    @property
    def fail_fast(self) -> bool:
        return self.mode is ValidationMode.FAIL_FAST

    def child(self, segment: PathSegment) -> ParseContext:
        return ParseContext(path=(*self.path, segment), mode=self.mode)

    def at(self, *segments: PathSegment) -> ParseContext:
        return ParseContext(path=(*self.path, *segments), mode=self.mode) if segments else self

    def issue(self, code: IssueCode, message: str, **details: Any) -> Issue:
        return Issue(path=self.path, code=code, message=message, details=details)

    def fail(self, code: IssueCode, message: str, **details: Any) -> Failure:
        return Failure((self.issue(code, message, **details),))
