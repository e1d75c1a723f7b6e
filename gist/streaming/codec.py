"""Server-sent event framing for agent events.

Encoding turns one event into one ``data: <JSON>`` frame. Decoding is
incremental: bytes arrive in arbitrary chunks, so a partial trailing frame
is held back until the rest of it shows up, and whatever is still held
when the stream ends is discarded.
"""

import codecs
import json

from pydantic import ValidationError
from sse_starlette.sse import ServerSentEvent

from gist.observability.logging import get_logger
from gist.observability.metrics import MALFORMED_FRAMES
from gist.streaming.events import AgentEvent, agent_event_adapter

logger = get_logger(__name__)

FRAME_SEPARATOR = "\n\n"
DATA_FIELD = "data:"


def serialize_event(event: AgentEvent) -> str:
    """Serialize an event to its JSON wire form."""
    return event.model_dump_json(by_alias=True)


def event_to_sse(event: AgentEvent) -> ServerSentEvent:
    """Wrap an event as a newline-separated ``data:`` frame."""
    return ServerSentEvent(data=serialize_event(event), sep="\n")


def decode_frame(frame: str) -> AgentEvent | None:
    """Decode one frame into an event.

    Returns None for frames without a data field (keep-alive comments) and
    for frames whose payload is not a valid event.
    """
    data_lines = []
    for line in frame.split("\n"):
        if line.startswith(DATA_FIELD):
            value = line[len(DATA_FIELD) :]
            data_lines.append(value[1:] if value.startswith(" ") else value)

    if not data_lines:
        return None

    payload = "\n".join(data_lines)
    try:
        return agent_event_adapter.validate_python(json.loads(payload))
    except (json.JSONDecodeError, ValidationError) as e:
        MALFORMED_FRAMES.inc()
        logger.debug("malformed_frame_dropped", error=str(e), size=len(payload))
        return None


class FrameDecoder:
    """Incremental decoder from a byte stream to agent events."""

    def __init__(self) -> None:
        self._text = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received after the last complete frame."""
        return self._buffer

    def feed(self, chunk: bytes | str) -> list[AgentEvent]:
        """Consume a chunk and return the events it completed, in order."""
        if isinstance(chunk, bytes):
            chunk = self._text.decode(chunk)
        self._buffer = (self._buffer + chunk).replace("\r\n", "\n")

        *frames, self._buffer = self._buffer.split(FRAME_SEPARATOR)

        events = []
        for frame in frames:
            event = decode_frame(frame)
            if event is not None:
                events.append(event)
        return events

    def close(self) -> None:
        """End of stream: drop any incomplete trailing frame."""
        self._buffer += self._text.decode(b"", final=True)
        if self._buffer.strip():
            logger.debug("partial_frame_discarded", size=len(self._buffer))
        self._buffer = ""
