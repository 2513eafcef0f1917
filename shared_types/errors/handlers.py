"""Raising AppError values where no Result can carry them."""
from __future__ import annotations

from .types import AppError


class AppErrorException(Exception):
    """Carries an AppError through ``raise``; used for fatal startup checks."""

    def __init__(self, error: AppError):
        super().__init__(str(error))
        self.error = error

    @property
    def code(self): return self.error.code
