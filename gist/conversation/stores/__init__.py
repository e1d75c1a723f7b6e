"""ConversationStore implementations."""

from gist.conversation.stores.http import HttpConversationStore
from gist.conversation.stores.inmemory import InMemoryConversationStore

__all__ = ["HttpConversationStore", "InMemoryConversationStore"]
