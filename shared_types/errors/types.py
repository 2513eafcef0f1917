"""Application Error Types

Validation issues are plain data inside the schema engine. When an
outcome has to leave it (a fatal environment check at startup, a 400
envelope, a log line) it is expressed as an AppError: a typed code, a
message, tracing context and free-form metadata.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4


class ErrorCode(Enum):
    """Numeric error codes grouped by range.

    E2xxx: Validation (client-side defects, 4xx)
    E9xxx: Internal (configuration and unexpected failures, 5xx)
    """
    E2000_VALIDATION_GENERIC = 2000
    E2001_REQUIRED_FIELD_MISSING = 2001
    E2002_INVALID_FORMAT = 2002
    E2003_OUT_OF_RANGE = 2003
    E2004_INVALID_TYPE = 2004
    E2005_CONSTRAINT_VIOLATION = 2005
    E2020_PAYLOAD_TOO_LARGE = 2020
    E2021_INVALID_JSON = 2021

    E9000_INTERNAL_GENERIC = 9000
    E9001_UNEXPECTED_ERROR = 9001
    E9004_INVALID_CONFIGURATION = 9004

    @property
    def category(self) -> str: return _CATEGORIES.get(self.value // 1000, "internal")

    @property
    def http_status(self) -> int:
        if self in _STATUS_OVERRIDES: return _STATUS_OVERRIDES[self]
        return 400 if self.category == "validation" else 500


_CATEGORIES = {2: "validation", 9: "internal"}
_STATUS_OVERRIDES = {ErrorCode.E2020_PAYLOAD_TOO_LARGE: 413}


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Where and when an error was produced."""
    correlation_id: str = field(default_factory=lambda: uuid4().hex[:8])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    origin: str = ""

    def with_origin(self, origin: str) -> ErrorContext: return replace(self, origin=origin)


@dataclass(frozen=True, slots=True)
class AppError:
    code: ErrorCode
    message: str
    context: ErrorContext = field(default_factory=ErrorContext)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def error_id(self) -> str: return f"{self.code.name}:{self.context.correlation_id}"

    def with_origin(self, origin: str) -> AppError: return replace(self, context=self.context.with_origin(origin))

    def with_metadata(self, **extra: Any) -> AppError: return replace(self, metadata={**self.metadata, **extra})

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs and error payloads."""
        return {"error": {
            "code": self.code.name,
            "code_num": self.code.value,
            "category": self.code.category,
            "message": self.message,
            "origin": self.context.origin,
            "correlation_id": self.context.correlation_id,
            "timestamp": self.context.timestamp.isoformat(),
            "metadata": self.metadata,
        }}

    def __str__(self) -> str: return f"[{self.code.name}] {self.message} ({self.error_id})"
