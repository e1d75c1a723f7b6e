"""ConversationStore abstract interface."""

from abc import ABC, abstractmethod

from gist.conversation.models import Conversation, ConversationPage, Turn, TurnPatch


class ConversationStoreError(Exception):
    """Base exception for persistence failures."""


class ConversationNotFoundError(ConversationStoreError):
    """Raised when a conversation id is unknown (or not owned by the caller)."""

    def __init__(self, conversation_id: str) -> None:
        super().__init__(f"Conversation {conversation_id} not found")
        self.conversation_id = conversation_id


class TurnNotFoundError(ConversationStoreError):
    """Raised when a turn id is unknown."""

    def __init__(self, turn_id: str) -> None:
        super().__init__(f"Turn {turn_id} not found")
        self.turn_id = turn_id


class TurnConflictError(ConversationStoreError):
    """Raised when a write would alter a turn it may not touch."""

    def __init__(self, turn_id: str, reason: str) -> None:
        super().__init__(f"Turn {turn_id}: {reason}")
        self.turn_id = turn_id
        self.reason = reason


class ConversationStore(ABC):
    """Durable storage for conversations and their turns.

    Writes follow the append/patch contract of the transcript: turns are
    appended once and afterwards only patched, never removed on their own.
    """

    @abstractmethod
    async def create_conversation(
        self,
        conversation_id: str,
        title: str,
        user_id: str | None = None,
    ) -> Conversation:
        """Create an empty conversation with the given id."""
        pass

    @abstractmethod
    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        """Get a conversation with its turns ordered by creation time."""
        pass

    @abstractmethod
    async def append_turn(self, conversation_id: str, turn: Turn) -> None:
        """Append a turn, updating the title for a first user prompt.

        Re-appending a turn the conversation already holds is a no-op; a
        turn id owned by another conversation raises TurnConflictError.
        """
        pass

    @abstractmethod
    async def patch_turn(
        self,
        turn_id: str,
        patch: TurnPatch,
        user_id: str | None = None,
    ) -> Turn:
        """Merge a partial update into a stored turn and return the result.

        Raises TurnConflictError for user turns, for final turns the patch
        would change, and for patches that shorten the text.
        """
        pass

    @abstractmethod
    async def list_conversations(
        self,
        user_id: str | None,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> ConversationPage:
        """List a user's conversations, most recently updated first."""
        pass

    @abstractmethod
    async def rename_conversation(
        self,
        conversation_id: str,
        title: str,
        user_id: str | None = None,
    ) -> None:
        """Set a conversation's title."""
        pass

    @abstractmethod
    async def delete_conversation(
        self,
        conversation_id: str,
        user_id: str | None = None,
    ) -> bool:
        """Delete a conversation and all of its turns."""
        pass
