"""In-memory implementation of ConversationStore."""

from gist.conversation.models import (
    Conversation,
    ConversationPage,
    Turn,
    TurnPatch,
)
from gist.conversation.store import (
    ConversationNotFoundError,
    ConversationStore,
    TurnConflictError,
    TurnNotFoundError,
)


class InMemoryConversationStore(ConversationStore):
    """In-memory implementation of ConversationStore for testing and development.

    Uses dict storage plus a turn-id index for patches.
    Not suitable for production use.
    """

    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}
        self._turn_index: dict[str, str] = {}

    def _owned(self, conversation_id: str, user_id: str | None) -> Conversation:
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        if user_id is not None and conversation.user_id not in (None, user_id):
            raise ConversationNotFoundError(conversation_id)
        return conversation

    async def create_conversation(
        self,
        conversation_id: str,
        title: str,
        user_id: str | None = None,
    ) -> Conversation:
        """Create an empty conversation; an existing id is returned unchanged."""
        existing = self._conversations.get(conversation_id)
        if existing is not None:
            return existing.model_copy(deep=True)

        conversation = Conversation(id=conversation_id, title=title, user_id=user_id)
        self._conversations[conversation_id] = conversation
        return conversation.model_copy(deep=True)

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            return None
        return conversation.model_copy(update={"turns": conversation.ordered_turns()}, deep=True)

    async def append_turn(self, conversation_id: str, turn: Turn) -> None:
        conversation = self._owned(conversation_id, None)
        owner = self._turn_index.get(turn.id)
        if owner == conversation_id:
            # Retried append of a turn we already hold
            return
        if owner is not None:
            raise TurnConflictError(turn.id, "id belongs to another conversation")
        conversation.record_turn(turn)
        self._turn_index[turn.id] = conversation_id

    async def patch_turn(
        self,
        turn_id: str,
        patch: TurnPatch,
        user_id: str | None = None,
    ) -> Turn:
        conversation_id = self._turn_index.get(turn_id)
        if conversation_id is None:
            raise TurnNotFoundError(turn_id)
        try:
            conversation = self._owned(conversation_id, user_id)
        except ConversationNotFoundError as e:
            raise TurnNotFoundError(turn_id) from e
        turn = conversation.find_turn(turn_id)
        if turn is None:
            raise TurnNotFoundError(turn_id)
        reason = patch.conflict(turn)
        if reason is not None:
            raise TurnConflictError(turn_id, reason)
        updated = patch.apply(turn)
        conversation.replace_turn(updated)
        return updated.model_copy(deep=True)

    async def list_conversations(
        self,
        user_id: str | None,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> ConversationPage:
        results = [
            conversation
            for conversation in self._conversations.values()
            if user_id is None or conversation.user_id == user_id
        ]
        results.sort(key=lambda c: c.updated_at, reverse=True)
        window = results[offset : offset + limit]
        return ConversationPage(
            items=[
                c.model_copy(update={"turns": c.ordered_turns()}, deep=True) for c in window
            ],
            has_more=offset + limit < len(results),
        )

    async def rename_conversation(
        self,
        conversation_id: str,
        title: str,
        user_id: str | None = None,
    ) -> None:
        conversation = self._owned(conversation_id, user_id)
        conversation.title = title
        conversation.touch()

    async def delete_conversation(
        self,
        conversation_id: str,
        user_id: str | None = None,
    ) -> bool:
        try:
            conversation = self._owned(conversation_id, user_id)
        except ConversationNotFoundError:
            return False
        for turn in conversation.turns:
            self._turn_index.pop(turn.id, None)
        del self._conversations[conversation_id]
        return True
