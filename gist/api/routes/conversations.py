"""Conversation endpoints.

All conversations are scoped to the caller: another user's conversation
answers exactly like a missing one.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status
from fastapi.responses import Response

from gist.api.dependencies import ConversationStoreDep, SettingsDep, UserContextDep
from gist.api.exceptions import ConversationNotFoundAPIError, TurnConflictAPIError
from gist.api.middleware.context import update_request_context
from gist.api.models.conversations import (
    CreateConversationRequest,
    RenameConversationRequest,
)
from gist.conversation.models import Conversation, ConversationPage, Turn, new_id
from gist.conversation.store import (
    ConversationNotFoundError,
    ConversationStore,
    TurnConflictError,
)
from gist.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/conversations")


async def _get_owned(
    store: ConversationStore,
    conversation_id: str,
    user_id: str,
) -> Conversation:
    conversation = await store.get_conversation(conversation_id)
    if conversation is None or conversation.user_id not in (None, user_id):
        raise ConversationNotFoundAPIError(f"Conversation {conversation_id} not found")
    return conversation


@router.get("", response_model=ConversationPage, response_model_by_alias=True)
async def list_conversations(
    user: UserContextDep,
    store: ConversationStoreDep,
    settings: SettingsDep,
    limit: Annotated[int | None, Query(ge=1, le=500)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> ConversationPage:
    """List the caller's conversations, most recently updated first."""
    page = await store.list_conversations(
        user.user_id,
        limit=limit or settings.api.default_page_size,
        offset=offset,
    )
    logger.debug("conversations_listed", count=len(page.items), has_more=page.has_more)
    return page


@router.post(
    "",
    response_model=Conversation,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_conversation(
    body: CreateConversationRequest,
    user: UserContextDep,
    store: ConversationStoreDep,
) -> Conversation:
    """Create an empty conversation.

    Creating an id that already exists for the caller returns it unchanged.
    """
    conversation_id = body.id or new_id()
    existing = await store.get_conversation(conversation_id)
    if existing is not None and existing.user_id not in (None, user.user_id):
        raise ConversationNotFoundAPIError(f"Conversation {conversation_id} not found")

    update_request_context(conversation_id=conversation_id)
    conversation = await store.create_conversation(conversation_id, body.title, user.user_id)
    logger.info("conversation_created", conversation_id=conversation_id)
    return conversation


@router.get("/{conversation_id}", response_model=Conversation, response_model_by_alias=True)
async def get_conversation(
    conversation_id: str,
    user: UserContextDep,
    store: ConversationStoreDep,
) -> Conversation:
    """Get one conversation with its turns ordered by creation time."""
    update_request_context(conversation_id=conversation_id)
    return await _get_owned(store, conversation_id, user.user_id)


@router.patch("/{conversation_id}", response_model=Conversation, response_model_by_alias=True)
async def rename_conversation(
    conversation_id: str,
    body: RenameConversationRequest,
    user: UserContextDep,
    store: ConversationStoreDep,
) -> Conversation:
    update_request_context(conversation_id=conversation_id)
    try:
        await store.rename_conversation(conversation_id, body.title, user.user_id)
    except ConversationNotFoundError as e:
        raise ConversationNotFoundAPIError(str(e)) from e
    logger.info("conversation_renamed", conversation_id=conversation_id)
    return await _get_owned(store, conversation_id, user.user_id)


@router.delete("/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_conversation(
    conversation_id: str,
    user: UserContextDep,
    store: ConversationStoreDep,
) -> Response:
    """Delete a conversation and all of its turns."""
    update_request_context(conversation_id=conversation_id)
    if not await store.delete_conversation(conversation_id, user.user_id):
        raise ConversationNotFoundAPIError(f"Conversation {conversation_id} not found")
    logger.info("conversation_deleted", conversation_id=conversation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{conversation_id}/turns",
    response_model=Turn,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
async def append_turn(
    conversation_id: str,
    turn: Turn,
    user: UserContextDep,
    store: ConversationStoreDep,
) -> Turn:
    """Append a turn; the first user prompt also names the conversation."""
    update_request_context(conversation_id=conversation_id)
    await _get_owned(store, conversation_id, user.user_id)
    try:
        await store.append_turn(conversation_id, turn)
    except TurnConflictError as e:
        raise TurnConflictAPIError(str(e)) from e
    logger.debug("turn_appended", turn_id=turn.id, role=turn.role.value)
    return turn
