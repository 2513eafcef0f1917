"""Validation at System Boundaries

Parse-don't-validate helpers for code that sits between raw input and the
schema engine:
- Ingress: request bodies become either a typed value or a 400 envelope
- External: responses from other services are checked before use

The envelopes mirror the API response schemas:
    {"success": True, "data": ..., "message": ...}
    {"success": False, "error": "Validation failed", "details": [...]}
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from shared_types.config import settings
from shared_types.errors import AppError, ErrorCode
from shared_types.logging import get_logger

from .base import Schema
from .context import ValidationMode
from .engine import safe_parse
from .issues import Issue
from .result import Failure, Result, Success

T = TypeVar("T")

logger = get_logger(__name__)


# ============================================================================
# Response Envelopes
# ============================================================================

def success_response(data: Any, message: str | None = None) -> dict[str, Any]:
    """Build an ApiSuccessResponse body."""
    body: dict[str, Any] = {"success": True, "data": data}
    if message is not None:
        body["message"] = message
    return body


def error_response(error: str, details: Any = None) -> dict[str, Any]:
    """Build an ApiErrorResponse body."""
    body: dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    return body


def issues_payload(issues: tuple[Issue, ...]) -> list[dict[str, Any]]:
    return [issue.to_dict() for issue in issues]


@dataclass(frozen=True, slots=True)
class BoundaryResponse(Generic[T]):
    """Outcome of parsing a request body: a status, a response body and (on success) the value."""
    status_code: int
    body: dict[str, Any]
    value: T | None = None

    @property
    def ok(self) -> bool:
        return self.status_code < 400


# ============================================================================
# Boundary Validators
# ============================================================================

class BoundaryValidator(Generic[T]):
    """Stateless boundary validator for one schema.

    Usage:
        validator = BoundaryValidator(CreateMedicalCaseRequestSchema)
        result = validator.parse_ingress(payload)
    """

    __slots__ = ("schema", "mode", "max_issues")

    def __init__(self, schema: Schema[T], mode: ValidationMode = ValidationMode.COLLECT_ALL,
                 max_issues: int | None = None):
        self.schema, self.mode = schema, mode
        self.max_issues = settings.VALIDATION_MAX_ISSUES if max_issues is None else max_issues

    def parse_ingress(self, data: Any) -> Result[T]:
        """Validate data entering the system (request bodies, form submissions)."""
        return safe_parse(self.schema, data, mode=self.mode, max_issues=self.max_issues)

    def parse_external(self, data: Any, service_name: str = "external") -> Result[T]:
        """Validate a response received from another service."""
        result = safe_parse(self.schema, data, mode=self.mode, max_issues=self.max_issues)
        if isinstance(result, Failure):
            logger.warning("external_response_invalid", service=service_name, issue_count=len(result.issues),
                issues=issues_payload(result.issues))
        return result

    def to_app_error(self, failure: Failure, origin: str = "ingress") -> AppError:
        return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message="Validation failed",
            metadata={"issues": issues_payload(failure.issues)}).with_origin(origin)


def parse_request_body(schema: Schema[T], raw_body: str | bytes | None, *,
                       max_issues: int | None = None) -> BoundaryResponse[T]:
    """Decode a JSON request body and validate it.

    An empty body is treated as ``{}``. Invalid JSON and validation
    failures both produce a 400 error envelope; success produces a 200
    envelope wrapping the parsed value.
    """
    text = raw_body.decode("utf-8", errors="replace") if isinstance(raw_body, bytes) else (raw_body or "")
    try:
        data = json.loads(text) if text.strip() else {}
    except json.JSONDecodeError as e:
        logger.info("request_body_rejected", reason="invalid_json", position=e.pos)
        return BoundaryResponse(ErrorCode.E2021_INVALID_JSON.http_status,
            error_response("Invalid JSON", [{"path": [], "kind": "invalid_json", "message": e.msg}]))

    match BoundaryValidator(schema, max_issues=max_issues).parse_ingress(data):
        case Success(value):
            return BoundaryResponse(200, success_response(value), value)
        case Failure(issues):
            logger.info("request_body_rejected", reason="validation", issue_count=len(issues),
                paths=[issue.dotted_path for issue in issues])
            return BoundaryResponse(ErrorCode.E2000_VALIDATION_GENERIC.http_status,
                error_response("Validation failed", issues_payload(issues)))
