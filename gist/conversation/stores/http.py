"""ConversationStore backed by the Gist REST API."""

from gist.client.client import GistClient, GistClientError
from gist.conversation.models import Conversation, ConversationPage, Turn, TurnPatch
from gist.conversation.store import (
    ConversationNotFoundError,
    ConversationStore,
    ConversationStoreError,
    TurnConflictError,
    TurnNotFoundError,
)


class HttpConversationStore(ConversationStore):
    """Persists conversations through a GistClient.

    The client carries the caller identity, so ``user_id`` arguments are
    only used to build error messages. HTTP 404 answers map onto the
    store's not-found errors and 409 onto TurnConflictError; every other
    client failure becomes a ConversationStoreError.
    """

    def __init__(self, client: GistClient) -> None:
        self._client = client

    async def create_conversation(
        self,
        conversation_id: str,
        title: str,
        user_id: str | None = None,  # noqa: ARG002
    ) -> Conversation:
        try:
            return await self._client.create_conversation(conversation_id, title)
        except GistClientError as e:
            raise ConversationStoreError(e.message) from e

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        try:
            return await self._client.get_conversation(conversation_id)
        except GistClientError as e:
            if e.status_code == 404:
                return None
            raise ConversationStoreError(e.message) from e

    async def append_turn(self, conversation_id: str, turn: Turn) -> None:
        try:
            await self._client.append_turn(conversation_id, turn)
        except GistClientError as e:
            if e.status_code == 404:
                raise ConversationNotFoundError(conversation_id) from e
            if e.status_code == 409:
                raise TurnConflictError(turn.id, e.message) from e
            raise ConversationStoreError(e.message) from e

    async def patch_turn(
        self,
        turn_id: str,
        patch: TurnPatch,
        user_id: str | None = None,  # noqa: ARG002
    ) -> Turn:
        try:
            return await self._client.patch_turn(turn_id, patch)
        except GistClientError as e:
            if e.status_code == 404:
                raise TurnNotFoundError(turn_id) from e
            if e.status_code == 409:
                raise TurnConflictError(turn_id, e.message) from e
            raise ConversationStoreError(e.message) from e

    async def list_conversations(
        self,
        user_id: str | None,  # noqa: ARG002
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> ConversationPage:
        try:
            return await self._client.list_conversations(limit=limit, offset=offset)
        except GistClientError as e:
            raise ConversationStoreError(e.message) from e

    async def rename_conversation(
        self,
        conversation_id: str,
        title: str,
        user_id: str | None = None,  # noqa: ARG002
    ) -> None:
        try:
            await self._client.rename_conversation(conversation_id, title)
        except GistClientError as e:
            if e.status_code == 404:
                raise ConversationNotFoundError(conversation_id) from e
            raise ConversationStoreError(e.message) from e

    async def delete_conversation(
        self,
        conversation_id: str,
        user_id: str | None = None,  # noqa: ARG002
    ) -> bool:
        try:
            await self._client.delete_conversation(conversation_id)
        except GistClientError as e:
            if e.status_code == 404:
                return False
            raise ConversationStoreError(e.message) from e
        return True
