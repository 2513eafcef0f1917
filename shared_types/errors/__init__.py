"""Application error types.

Usage:
    from shared_types.errors import AppError, ErrorCode, AppErrorException

    error = AppError(code=ErrorCode.E9004_INVALID_CONFIGURATION, message="Invalid environment configuration")
    raise AppErrorException(error)
"""
from .types import AppError, ErrorCode, ErrorContext
from .handlers import AppErrorException

__all__ = [
    "AppError",
    "ErrorCode",
    "ErrorContext",
    "AppErrorException",
]
