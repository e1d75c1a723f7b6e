"""Conversation domain models.

Contains the Pydantic models for transcript state:
- Turns (user prompts and streamed assistant entries)
- Tool calls and run statistics inside assistant turns
- Conversations and paged listings
"""

from gist.conversation.models.base import WireModel, new_id, now_ms
from gist.conversation.models.conversation import (
    DEFAULT_TITLE,
    Conversation,
    ConversationPage,
    derive_title,
)
from gist.conversation.models.enums import TurnRole, TurnStatus
from gist.conversation.models.turn import (
    AssistantContent,
    HistoryMessage,
    RunStats,
    ToolCall,
    Turn,
    TurnPatch,
)

__all__ = [
    # Enums
    "TurnRole",
    "TurnStatus",
    # Turn models
    "AssistantContent",
    "HistoryMessage",
    "RunStats",
    "ToolCall",
    "Turn",
    "TurnPatch",
    # Conversation models
    "DEFAULT_TITLE",
    "Conversation",
    "ConversationPage",
    "derive_title",
    # Helpers
    "WireModel",
    "new_id",
    "now_ms",
]
