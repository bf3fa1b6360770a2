"""
DrawCast Exceptions.

The cascade engine itself never raises for well-typed input. These errors
exist for the edges: loading snapshots, events and rule books from files.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes for edge failures."""

    INTERNAL_ERROR = "E1000"
    INVALID_SNAPSHOT = "E6000"
    INVALID_EVENT = "E6001"
    INVALID_RULEBOOK = "E6002"


class DrawCastError(Exception):
    """Base exception for DrawCast."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code.value, "message": self.message, "details": self.details}


class SnapshotLoadError(DrawCastError):
    """A plan snapshot or event file could not be parsed."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_SNAPSHOT,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code, details=details)


class RuleBookError(DrawCastError):
    """A rule book file could not be parsed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code=ErrorCode.INVALID_RULEBOOK, details=details)
