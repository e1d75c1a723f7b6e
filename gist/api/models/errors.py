"""Error response models for consistent API error handling."""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Machine-readable error codes returned by every endpoint."""

    INVALID_REQUEST = "INVALID_REQUEST"
    """Request validation failed (malformed JSON, missing fields, blank prompt)."""

    MISSING_USER = "MISSING_USER"
    """The caller identity header was not supplied."""

    CONVERSATION_NOT_FOUND = "CONVERSATION_NOT_FOUND"
    """The conversation does not exist or belongs to someone else."""

    TURN_NOT_FOUND = "TURN_NOT_FOUND"
    """The turn does not exist."""

    TURN_CONFLICT = "TURN_CONFLICT"
    """The write would alter a user turn, a final turn or another conversation's turn."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""


class ErrorDetail(BaseModel):
    """Field-level error information for validation failures."""

    field: str | None = None
    """The field that caused the error, if applicable."""

    message: str
    """Human-readable error description."""


class ErrorBody(BaseModel):
    """Error body content for API error responses."""

    code: ErrorCode
    """Machine-readable error code."""

    message: str
    """Human-readable error message."""

    details: list[ErrorDetail] | None = None
    """Additional error details for validation failures."""


class ErrorResponse(BaseModel):
    """Standard error response format for all API errors.

    Example:
        {
            "error": {
                "code": "CONVERSATION_NOT_FOUND",
                "message": "Conversation 4f1c... not found"
            }
        }
    """

    error: ErrorBody
