"""API exception hierarchy for consistent error handling.

All API exceptions inherit from GistAPIError, which provides status_code
and error_code attributes used by the global exception handler to build
an ErrorResponse.
"""

from gist.api.models.errors import ErrorCode


class GistAPIError(Exception):
    """Base exception for all API errors."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidRequestError(GistAPIError):
    """Raised when a request is well-formed JSON but unusable."""

    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST


class MissingUserError(GistAPIError):
    """Raised when the caller identity header is absent."""

    status_code = 401
    error_code = ErrorCode.MISSING_USER


class ConversationNotFoundAPIError(GistAPIError):
    """Raised when a conversation is unknown to the caller."""

    status_code = 404
    error_code = ErrorCode.CONVERSATION_NOT_FOUND


class TurnNotFoundAPIError(GistAPIError):
    """Raised when a turn id is unknown."""

    status_code = 404
    error_code = ErrorCode.TURN_NOT_FOUND


class TurnConflictAPIError(GistAPIError):
    """Raised when a turn may not be written as requested."""

    status_code = 409
    error_code = ErrorCode.TURN_CONFLICT
