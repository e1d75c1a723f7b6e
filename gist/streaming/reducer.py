"""Transcript reducer: fold agent events into an assistant turn.

``reduce(state, event)`` is pure. It returns the next draft state and, when
something visible changed, the TurnPatch the conversation view should
apply and persist. Events are applied strictly in arrival order; the
reducer keeps no queue of its own.

Draft phases:

    Drafting  --tool_use-->  Exploring
       |                        |
       +--------result----------+-->  Completed
       |                        |
       +--------cancel----------+-->  Cancelled

Completed and Cancelled are final: later events are ignored.
"""

from enum import Enum
from typing import Literal, NamedTuple, assert_never

from pydantic import BaseModel, ConfigDict, Field

from gist.conversation.models import (
    AssistantContent,
    RunStats,
    ToolCall,
    TurnPatch,
    TurnStatus,
)
from gist.observability.logging import get_logger
from gist.streaming.events import (
    AgentEvent,
    DoneEvent,
    ErrorEvent,
    NewTurnEvent,
    ResultEvent,
    TextEvent,
    ToolResultEvent,
    ToolUseEvent,
)

logger = get_logger(__name__)

TURN_SEPARATOR = "\n\n"
ERROR_PREFIX = "\n\nError: "
CONNECTION_ERROR_SUFFIX = "\n\nConnection error."


class DraftPhase(str, Enum):
    """Where an assistant turn is in its run."""

    DRAFTING = "drafting"
    EXPLORING = "exploring"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class _Draft(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = ""


class Drafting(_Draft):
    """Text only; no tool has been called yet."""

    phase: Literal[DraftPhase.DRAFTING] = DraftPhase.DRAFTING


class Exploring(_Draft):
    """At least one tool was called; the split point is fixed."""

    phase: Literal[DraftPhase.EXPLORING] = DraftPhase.EXPLORING
    tool_calls: list[ToolCall] = Field(..., min_length=1)
    split_index: int = Field(..., ge=0)


class Completed(_Draft):
    """The run reported its final statistics."""

    phase: Literal[DraftPhase.COMPLETED] = DraftPhase.COMPLETED
    tool_calls: list[ToolCall] = Field(default_factory=list)
    split_index: int | None = None
    stats: RunStats


class Cancelled(_Draft):
    """The run was stopped or its stream failed."""

    phase: Literal[DraftPhase.CANCELLED] = DraftPhase.CANCELLED
    tool_calls: list[ToolCall] = Field(default_factory=list)
    split_index: int | None = None


DraftState = Drafting | Exploring | Completed | Cancelled


class ReduceStep(NamedTuple):
    state: DraftState
    patch: TurnPatch | None


def initial_state() -> Drafting:
    return Drafting()


def _tools(state: DraftState) -> tuple[list[ToolCall], int | None]:
    if isinstance(state, Drafting):
        return [], None
    return state.tool_calls, state.split_index


def is_final(state: DraftState) -> bool:
    return isinstance(state, Completed | Cancelled)


def status_of(state: DraftState) -> TurnStatus:
    match state:
        case Completed():
            return TurnStatus.COMPLETED
        case Cancelled():
            return TurnStatus.CANCELLED
        case _:
            return TurnStatus.IN_PROGRESS


def to_content(state: DraftState) -> AssistantContent:
    """Project a draft onto the persisted assistant content shape."""
    tool_calls, split_index = _tools(state)
    return AssistantContent(
        text=state.text,
        tool_calls=list(tool_calls),
        tools_start_index=split_index,
        stats=state.stats if isinstance(state, Completed) else None,
    )


def _append(state: DraftState, text: str) -> DraftState:
    return state.model_copy(update={"text": state.text + text})


def _add_tool_call(state: DraftState, call: ToolCall) -> Exploring:
    if isinstance(state, Exploring):
        return state.model_copy(update={"tool_calls": [*state.tool_calls, call]})
    return Exploring(text=state.text, tool_calls=[call], split_index=len(state.text))


def _set_last_result(state: Exploring, result: str) -> Exploring:
    last = state.tool_calls[-1].model_copy(update={"result": result})
    return state.model_copy(update={"tool_calls": [*state.tool_calls[:-1], last]})


def _changed(state: DraftState) -> ReduceStep:
    return ReduceStep(state, TurnPatch(content=to_content(state)))


def reduce(state: DraftState, event: AgentEvent) -> ReduceStep:
    """Apply one event to the draft."""
    if is_final(state):
        logger.debug("event_after_final_state", event_type=event.type, phase=state.phase.value)
        return ReduceStep(state, None)

    match event:
        case NewTurnEvent():
            return _changed(_append(state, TURN_SEPARATOR))
        case TextEvent(content=content):
            return _changed(_append(state, content))
        case ErrorEvent(content=message):
            return _changed(_append(state, ERROR_PREFIX + message))
        case ToolUseEvent(tool=tool, input=tool_input):
            return _changed(_add_tool_call(state, ToolCall(tool=tool, input=tool_input)))
        case ToolResultEvent(content=content):
            if not isinstance(state, Exploring):
                logger.debug("tool_result_without_tool_call")
                return ReduceStep(state, None)
            return _changed(_set_last_result(state, content))
        case ResultEvent(stats=stats):
            tool_calls, split_index = _tools(state)
            completed = Completed(
                text=state.text,
                tool_calls=tool_calls,
                split_index=split_index,
                stats=stats,
            )
            return ReduceStep(
                completed,
                TurnPatch(content=to_content(completed), status=TurnStatus.COMPLETED),
            )
        case DoneEvent():
            return ReduceStep(state, None)
        case _:
            assert_never(event)


def cancel(state: DraftState, *, connection_error: bool = False) -> ReduceStep:
    """Stop the run, optionally noting that the connection failed."""
    if is_final(state):
        return ReduceStep(state, None)

    text = state.text + CONNECTION_ERROR_SUFFIX if connection_error else state.text
    tool_calls, split_index = _tools(state)
    cancelled = Cancelled(text=text, tool_calls=tool_calls, split_index=split_index)
    return ReduceStep(
        cancelled,
        TurnPatch(content=to_content(cancelled), status=TurnStatus.CANCELLED),
    )
