"""Agent event models for the streaming wire format.

Every event is one frame of the ``text/event-stream`` response produced by
``POST /v1/agent``. The ``type`` field is the discriminator; the set of
types is fixed.
"""

from typing import Annotated, Any, Literal

from pydantic import Field, TypeAdapter

from gist.conversation.models import HistoryMessage, RunStats, WireModel


class NewTurnEvent(WireModel):
    """The agent started another internal turn; separate its narration."""

    type: Literal["new_turn"] = "new_turn"


class TextEvent(WireModel):
    """A fragment of narrative text."""

    type: Literal["text"] = "text"
    content: str


class ToolUseEvent(WireModel):
    """The agent invoked a tool."""

    type: Literal["tool_use"] = "tool_use"
    tool: str
    input: Any = None


class ToolResultEvent(WireModel):
    """Output of the most recent tool invocation, truncated upstream."""

    type: Literal["tool_result"] = "tool_result"
    content: str


class ResultEvent(WireModel):
    """The run finished successfully."""

    type: Literal["result"] = "result"
    stats: RunStats


class ErrorEvent(WireModel):
    """A recoverable error reported by the agent, narrated inline."""

    type: Literal["error"] = "error"
    content: str


class DoneEvent(WireModel):
    """Terminal marker; nothing follows it on the stream."""

    type: Literal["done"] = "done"


AgentEvent = Annotated[
    NewTurnEvent
    | TextEvent
    | ToolUseEvent
    | ToolResultEvent
    | ResultEvent
    | ErrorEvent
    | DoneEvent,
    Field(discriminator="type"),
]

agent_event_adapter: TypeAdapter[AgentEvent] = TypeAdapter(AgentEvent)


class AgentRunRequest(WireModel):
    """Body of ``POST /v1/agent``."""

    prompt: str = Field(..., description="The user's question")
    history: list[HistoryMessage] = Field(
        default_factory=list, description="Prior turns as plain narrative"
    )
