"""API request/response models."""

from gist.api.models.context import RequestContext, UserContext
from gist.api.models.conversations import (
    CreateConversationRequest,
    RenameConversationRequest,
)
from gist.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from gist.api.models.health import ComponentHealth, HealthResponse

__all__ = [
    # Context
    "RequestContext",
    "UserContext",
    # Conversations
    "CreateConversationRequest",
    "RenameConversationRequest",
    # Errors
    "ErrorBody",
    "ErrorCode",
    "ErrorDetail",
    "ErrorResponse",
    # Health
    "ComponentHealth",
    "HealthResponse",
]
