"""Streaming agent endpoint.

``POST /v1/agent`` runs the configured agent event source and relays every
event as one ``data: <JSON>`` frame the moment it is produced.
"""

from collections.abc import AsyncGenerator
from contextlib import aclosing

from fastapi import APIRouter
from sse_starlette.sse import EventSourceResponse, ServerSentEvent

from gist.api.dependencies import AgentSourceDep, SettingsDep
from gist.api.exceptions import InvalidRequestError
from gist.observability.logging import get_logger
from gist.observability.metrics import (
    AGENT_EVENTS_RELAYED,
    AGENT_RUNS_STARTED,
    AGENT_SOURCE_ERRORS,
)
from gist.streaming.codec import event_to_sse
from gist.streaming.events import AgentRunRequest, ErrorEvent

logger = get_logger(__name__)

router = APIRouter()


@router.post("/agent")
async def run_agent(
    request: AgentRunRequest,
    source: AgentSourceDep,
    settings: SettingsDep,
) -> EventSourceResponse:
    """Stream one agent run as server-sent events.

    A source that raises instead of reporting its own error still produces
    a single ``error`` event before the stream closes.
    """
    if not request.prompt.strip():
        raise InvalidRequestError("Prompt is required")

    logger.info(
        "agent_stream_request_received",
        backend=source.backend,
        history_length=len(request.history),
    )

    async def event_generator() -> AsyncGenerator[ServerSentEvent, None]:
        AGENT_RUNS_STARTED.labels(backend=source.backend).inc()
        relayed = 0
        try:
            async with aclosing(source.run(request.prompt, request.history)) as events:
                async for event in events:
                    AGENT_EVENTS_RELAYED.labels(event_type=event.type).inc()
                    relayed += 1
                    yield event_to_sse(event)
        except Exception as e:
            AGENT_SOURCE_ERRORS.labels(
                backend=source.backend, error_type=type(e).__name__
            ).inc()
            logger.exception("agent_stream_error", error=str(e), relayed=relayed)
            AGENT_EVENTS_RELAYED.labels(event_type="error").inc()
            yield event_to_sse(ErrorEvent(content=str(e) or "Unknown error"))
            return

        logger.info("agent_stream_completed", relayed=relayed)

    return EventSourceResponse(
        event_generator(),
        headers={"Cache-Control": "no-cache"},
        ping=settings.streaming.ping_interval_seconds,
        sep="\n",
    )
