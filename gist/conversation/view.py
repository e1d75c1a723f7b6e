"""Client-side conversation view with optimistic, best-effort persistence.

The view holds the authoritative transcript for the session. Every change
is applied in memory first and returns immediately; the matching call on
the durable ConversationStore is queued behind earlier calls for the same
conversation and runs in the background. A failed durable call is logged
and counted, never raised: the stream must not stall on storage.
"""

import asyncio
from collections.abc import Awaitable, Callable

from gist.conversation.models import (
    DEFAULT_TITLE,
    Conversation,
    Turn,
    TurnPatch,
    new_id,
    now_ms,
)
from gist.conversation.store import (
    ConversationNotFoundError,
    ConversationStore,
    TurnNotFoundError,
)
from gist.observability.logging import get_logger
from gist.observability.metrics import PERSISTENCE_FAILURES

logger = get_logger(__name__)


class ConversationView:
    """In-memory conversations for one user, mirrored to a ConversationStore.

    Must be used from a running event loop; durable calls are scheduled as
    tasks on it. Calls for one conversation reach the store in the order
    they were made.
    """

    def __init__(
        self,
        store: ConversationStore,
        *,
        user_id: str | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._store = store
        self._user_id = user_id
        self._clock = clock
        self._conversations: dict[str, Conversation] = {}
        self._mailboxes: dict[str, asyncio.Task[None]] = {}
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def conversations(self) -> list[Conversation]:
        """Conversations ordered by most recent activity."""
        return sorted(self._conversations.values(), key=lambda c: c.updated_at, reverse=True)

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    def get(self, conversation_id: str) -> Conversation | None:
        return self._conversations.get(conversation_id)

    def turns(self, conversation_id: str) -> list[Turn]:
        """Turns of a conversation ordered by creation time."""
        return self._require(conversation_id).ordered_turns()

    async def load(self, *, limit: int = 50) -> list[Conversation]:
        """Replace in-memory state with what the store holds.

        Writes still queued are flushed first so the reload sees them.
        """
        await self.flush()
        page = await self._store.list_conversations(self._user_id, limit=limit)
        self._conversations = {c.id: c for c in page.items}
        logger.info("conversations_loaded", count=len(page.items), has_more=page.has_more)
        return self.conversations

    def create_conversation(self, conversation_id: str | None = None) -> str:
        """Insert a placeholder conversation and return its id right away."""
        conversation_id = conversation_id or new_id()
        now = self._clock()
        self._conversations[conversation_id] = Conversation(
            id=conversation_id,
            user_id=self._user_id,
            title=DEFAULT_TITLE,
            created_at=now,
            updated_at=now,
        )
        self._persist(
            conversation_id,
            "create_conversation",
            lambda: self._store.create_conversation(conversation_id, DEFAULT_TITLE, self._user_id),
        )
        return conversation_id

    def add_turn(self, conversation_id: str, turn: Turn) -> None:
        """Append a turn; a first user prompt also names the conversation."""
        conversation = self._require(conversation_id)
        conversation.record_turn(turn, at=self._clock())
        self._persist(
            conversation_id,
            "append_turn",
            lambda: self._store.append_turn(conversation_id, turn),
        )

    def update_turn(self, conversation_id: str, turn_id: str, patch: TurnPatch) -> Turn:
        """Merge a patch into an open turn and return the new version.

        Turns that already left ``in_progress`` are final; patches to them
        are ignored.
        """
        conversation = self._require(conversation_id)
        existing = conversation.find_turn(turn_id)
        if existing is None:
            raise TurnNotFoundError(turn_id)
        if not existing.is_open:
            logger.warning("update_to_final_turn_ignored", turn_id=turn_id)
            return existing

        updated = patch.apply(existing)
        conversation.replace_turn(updated, at=self._clock())
        self._persist(
            conversation_id,
            "patch_turn",
            lambda: self._store.patch_turn(turn_id, patch),
        )
        return updated

    def rename_conversation(self, conversation_id: str, title: str) -> None:
        conversation = self._require(conversation_id)
        conversation.title = title
        conversation.touch(self._clock())
        self._persist(
            conversation_id,
            "rename_conversation",
            lambda: self._store.rename_conversation(conversation_id, title, self._user_id),
        )

    def delete_conversation(self, conversation_id: str) -> bool:
        if self._conversations.pop(conversation_id, None) is None:
            return False
        self._persist(
            conversation_id,
            "delete_conversation",
            lambda: self._store.delete_conversation(conversation_id, self._user_id),
        )
        return True

    async def flush(self) -> None:
        """Wait for every queued durable call to finish."""
        while self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def _require(self, conversation_id: str) -> Conversation:
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        return conversation

    def _persist(
        self,
        conversation_id: str,
        operation: str,
        call: Callable[[], Awaitable[object]],
    ) -> None:
        previous = self._mailboxes.get(conversation_id)

        async def run() -> None:
            if previous is not None:
                await asyncio.wait({previous})
            try:
                await call()
            except Exception as e:
                PERSISTENCE_FAILURES.labels(operation=operation).inc()
                logger.warning(
                    "persistence_failed",
                    operation=operation,
                    conversation_id=conversation_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )

        task = asyncio.create_task(run())
        self._mailboxes[conversation_id] = task
        self._pending.add(task)

        def forget(done: asyncio.Task[None]) -> None:
            self._pending.discard(done)
            if self._mailboxes.get(conversation_id) is done:
                del self._mailboxes[conversation_id]

        task.add_done_callback(forget)
