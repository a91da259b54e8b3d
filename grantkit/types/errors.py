"""
Error types and error codes for grantkit.
Every failure of the grants model is reported as an AccessControlError
carrying one of the codes below.
"""

from enum import Enum
from typing import Dict, Any, Optional


class ErrorCode(str, Enum):
    """Error codes raised by the grants model and its builders."""
    LOCKED = "locked"
    INVALID_NAME = "invalid_name"
    INVALID_SHAPE = "invalid_shape"
    INVALID_ACTION = "invalid_action"
    NOT_FOUND = "not_found"
    SELF_EXTENSION = "self_extension"
    CROSS_INHERITANCE = "cross_inheritance"
    EMPTY_MODEL = "empty_model"
    INTERNAL_ERROR = "internal_error"

    def __str__(self) -> str:
        return self.value


# Error code constants for easy import
LOCKED = ErrorCode.LOCKED
INVALID_NAME = ErrorCode.INVALID_NAME
INVALID_SHAPE = ErrorCode.INVALID_SHAPE
INVALID_ACTION = ErrorCode.INVALID_ACTION
NOT_FOUND = ErrorCode.NOT_FOUND
SELF_EXTENSION = ErrorCode.SELF_EXTENSION
CROSS_INHERITANCE = ErrorCode.CROSS_INHERITANCE
EMPTY_MODEL = ErrorCode.EMPTY_MODEL
INTERNAL_ERROR = ErrorCode.INTERNAL_ERROR


class AccessControlError(Exception):
    """Raised for any invalid operation on the grants model."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            'error': self.error_code.value,
            'message': self.message,
            'details': self.details
        }

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"AccessControlError({self.error_code.value!r}, {self.message!r})"
