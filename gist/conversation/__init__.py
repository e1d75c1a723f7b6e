"""Conversation domain: turns, stores, the client-side view and history.

Example:
    from gist.conversation import ConversationView, InMemoryConversationStore

    view = ConversationView(InMemoryConversationStore(), user_id="u-1")
    conversation_id = view.create_conversation()
"""

from gist.conversation.history import build_history
from gist.conversation.store import (
    ConversationNotFoundError,
    ConversationStore,
    ConversationStoreError,
    TurnConflictError,
    TurnNotFoundError,
)
from gist.conversation.stores import HttpConversationStore, InMemoryConversationStore
from gist.conversation.view import ConversationView

__all__ = [
    "ConversationNotFoundError",
    "ConversationStore",
    "ConversationStoreError",
    "ConversationView",
    "HttpConversationStore",
    "InMemoryConversationStore",
    "TurnConflictError",
    "TurnNotFoundError",
    "build_history",
]
