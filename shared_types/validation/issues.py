"""Validation Issues

Every failure the engine reports is an Issue: one location (path from the
root of the validated value), one machine-readable code, one message.
Issues are plain data; ParseError is the only exception built from them.

Issue format (``Issue.to_dict``):
{
    "path": ["preferences", "notifications", "email"],
    "kind": "invalid_type",
    "message": "Expected boolean, received string",
    "details": {"expected": "boolean", "received": "string"}
}
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from shared_types.errors import AppError, ErrorCode

PathSegment = str | int
Path = tuple[PathSegment, ...]


class IssueCode(str, Enum):
    """Stable issue kinds for programmatic branching."""
    INVALID_TYPE = "invalid_type"
    REQUIRED = "required"
    TOO_SMALL = "too_small"
    TOO_LARGE = "too_large"
    INVALID_FORMAT = "invalid_format"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    INVALID_LITERAL = "invalid_literal"
    UNRECOGNIZED_KEY = "unrecognized_key"
    INVALID_UNION_DISCRIMINATOR = "invalid_union_discriminator"
    NOT_MULTIPLE_OF = "not_multiple_of"
    NOT_FINITE = "not_finite"
    INVALID_DATE = "invalid_date"
    CUSTOM = "custom"

    @property
    def error_code(self) -> ErrorCode:
        """Closest application error code for this issue kind."""
        return _ERROR_CODES.get(self, ErrorCode.E2005_CONSTRAINT_VIOLATION)


_ERROR_CODES = {
    IssueCode.INVALID_TYPE: ErrorCode.E2004_INVALID_TYPE,
    IssueCode.REQUIRED: ErrorCode.E2001_REQUIRED_FIELD_MISSING,
    IssueCode.TOO_SMALL: ErrorCode.E2003_OUT_OF_RANGE,
    IssueCode.TOO_LARGE: ErrorCode.E2003_OUT_OF_RANGE,
    IssueCode.INVALID_FORMAT: ErrorCode.E2002_INVALID_FORMAT,
    IssueCode.INVALID_DATE: ErrorCode.E2002_INVALID_FORMAT,
}


def format_path(path: Sequence[PathSegment]) -> str:
    """Format a path as a JSON-path-like string (``user.tags[0]``, root is ``$``)."""
    if not path:
        return "$"
    parts: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif parts:
            parts.append(f".{segment}")
        else:
            parts.append(str(segment))
    return "".join(parts)


@dataclass(frozen=True, slots=True)
class Issue:
    """One validation failure at one path."""
    path: Path
    code: IssueCode
    message: str
    details: dict[str, Any] = field(default_factory=dict, hash=False)

    @property
    def dotted_path(self) -> str:
        return format_path(self.path)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON transport."""
        result: dict[str, Any] = {"path": list(self.path), "kind": self.code.value, "message": self.message}
        if self.details:
            result["details"] = dict(self.details)
        return result


def flatten_issues(issues: Sequence[Issue]) -> dict[str, Any]:
    """Group messages for form-style consumers.

    Root-level issues land in ``form_errors``; everything else is keyed by
    the first path segment in ``field_errors``, preserving issue order.
    """
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}
    for issue in issues:
        if not issue.path:
            form_errors.append(issue.message)
        else:
            field_errors.setdefault(str(issue.path[0]), []).append(issue.message)
    return {"form_errors": form_errors, "field_errors": field_errors}


@dataclass(eq=False)
class ParseError(Exception):
    """Raised by strict parsing; carries the complete issue sequence."""
    issues: tuple[Issue, ...]
    message: str = "Validation failed"

    def __post_init__(self):
        self.issues = tuple(self.issues)
        super().__init__(self.message)

    def __reduce__(self):
        return (ParseError, (self.issues, self.message))

    def __str__(self) -> str:
        if not self.issues:
            return self.message
        if len(self.issues) == 1:
            issue = self.issues[0]
            return f"{issue.dotted_path}: {issue.message}"
        return f"{self.message} ({len(self.issues)} issues)"

    @property
    def first_issue(self) -> Issue | None:
        return self.issues[0] if self.issues else None

    @property
    def field_errors(self) -> dict[str, list[Issue]]:
        """Group issues by dotted path."""
        result: dict[str, list[Issue]] = {}
        for issue in self.issues:
            result.setdefault(issue.dotted_path, []).append(issue)
        return result

    def flatten(self) -> dict[str, Any]:
        return flatten_issues(self.issues)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        return {"error": {"type": "validation_error", "message": self.message,
            "issue_count": len(self.issues), "issues": [i.to_dict() for i in self.issues]}}

    def to_app_error(self) -> AppError:
        """Convert to AppError for application-level error handling."""
        if len(self.issues) == 1:
            issue = self.issues[0]
            return AppError(code=issue.code.error_code, message=f"{issue.dotted_path}: {issue.message}",
                metadata={"field": issue.dotted_path, "kind": issue.code.value, "issues": [issue.to_dict()]})
        return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message=f"{self.message}: {len(self.issues)} issues",
            metadata={"issue_count": len(self.issues), "issues": [i.to_dict() for i in self.issues]})
