"""Dependency injection for API routes.

Provides FastAPI dependencies for settings, the conversation store, the
agent event source and the caller identity. Instances are created once
and reused; tests swap them with ``app.dependency_overrides`` and call
``reset_dependencies`` between runs.
"""

from typing import Annotated

from fastapi import Depends, Header

from gist.agent import AgentEventSource, create_agent_source
from gist.api.exceptions import MissingUserError
from gist.api.middleware.context import update_request_context
from gist.api.models.context import UserContext
from gist.config import get_settings as _load_settings
from gist.config.settings import Settings
from gist.conversation.store import ConversationStore
from gist.conversation.stores.inmemory import InMemoryConversationStore
from gist.observability.logging import get_logger

logger = get_logger(__name__)

_conversation_store: ConversationStore | None = None
_agent_source: AgentEventSource | None = None


def get_settings() -> Settings:
    """Get application settings (cached by gist.config)."""
    return _load_settings()


def get_conversation_store() -> ConversationStore:
    """Get the ConversationStore instance."""
    global _conversation_store
    if _conversation_store is None:
        _conversation_store = InMemoryConversationStore()
        logger.info("conversation_store_initialized", store_type="inmemory")
    return _conversation_store


def get_agent_source(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AgentEventSource:
    """Get the agent event source selected by ``agent.backend``."""
    global _agent_source
    if _agent_source is None:
        _agent_source = create_agent_source(settings.agent)
        logger.info("agent_source_initialized", backend=_agent_source.backend)
    return _agent_source


def get_user_context(
    x_user_id: Annotated[str | None, Header()] = None,
) -> UserContext:
    """Caller identity from the ``X-User-ID`` header set by the gateway."""
    if not x_user_id or not x_user_id.strip():
        raise MissingUserError("X-User-ID header is required")
    user_id = x_user_id.strip()
    update_request_context(user_id=user_id)
    return UserContext(user_id=user_id)


# Type aliases for cleaner route signatures
SettingsDep = Annotated[Settings, Depends(get_settings)]
ConversationStoreDep = Annotated[ConversationStore, Depends(get_conversation_store)]
AgentSourceDep = Annotated[AgentEventSource, Depends(get_agent_source)]
UserContextDep = Annotated[UserContext, Depends(get_user_context)]


def reset_dependencies() -> None:
    """Reset all dependency singletons. Used in tests."""
    global _conversation_store, _agent_source
    _conversation_store = None
    _agent_source = None
