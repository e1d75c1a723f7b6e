"""Request models for the conversation and turn endpoints.

Responses reuse the domain models (Conversation, ConversationPage, Turn)
directly; they already serialize to the camelCase wire shape.
"""

from pydantic import Field

from gist.conversation.models import DEFAULT_TITLE, WireModel


class CreateConversationRequest(WireModel):
    """Body of ``POST /v1/conversations``."""

    id: str | None = Field(
        default=None,
        min_length=1,
        description="Client-allocated id; generated when omitted",
    )
    title: str = Field(default=DEFAULT_TITLE, min_length=1, max_length=200)


class RenameConversationRequest(WireModel):
    """Body of ``PATCH /v1/conversations/{id}``."""

    title: str = Field(..., min_length=1, max_length=200)
