"""Agent event streaming: wire events, SSE framing, reduction and runs."""

from gist.streaming.codec import FrameDecoder, decode_frame, event_to_sse, serialize_event
from gist.streaming.controller import RunController, RunOutcome, RunState
from gist.streaming.events import (
    AgentEvent,
    AgentRunRequest,
    DoneEvent,
    ErrorEvent,
    NewTurnEvent,
    ResultEvent,
    TextEvent,
    ToolResultEvent,
    ToolUseEvent,
)
from gist.streaming.reducer import DraftState, ReduceStep, cancel, initial_state, reduce
from gist.streaming.transport import (
    AgentTransport,
    HttpAgentTransport,
    StreamHTTPError,
    StreamIdleTimeout,
    StreamTransportError,
)

__all__ = [
    # Events
    "AgentEvent",
    "AgentRunRequest",
    "DoneEvent",
    "ErrorEvent",
    "NewTurnEvent",
    "ResultEvent",
    "TextEvent",
    "ToolResultEvent",
    "ToolUseEvent",
    # Codec
    "FrameDecoder",
    "decode_frame",
    "event_to_sse",
    "serialize_event",
    # Reducer
    "DraftState",
    "ReduceStep",
    "cancel",
    "initial_state",
    "reduce",
    # Transport
    "AgentTransport",
    "HttpAgentTransport",
    "StreamHTTPError",
    "StreamIdleTimeout",
    "StreamTransportError",
    # Controller
    "RunController",
    "RunOutcome",
    "RunState",
]
