"""Scripted agent event source for testing and local development."""

import asyncio
from collections.abc import AsyncGenerator, Sequence

from gist.agent.source import AgentEventSource
from gist.conversation.models import HistoryMessage, RunStats
from gist.streaming.events import (
    AgentEvent,
    DoneEvent,
    ResultEvent,
    TextEvent,
    ToolResultEvent,
    ToolUseEvent,
)


def default_script() -> list[AgentEvent]:
    """A short exploration: some narration, one tool call, an answer."""
    return [
        TextEvent(content="Let me look."),
        ToolUseEvent(tool="Glob", input={"pattern": "**/*"}),
        ToolResultEvent(content="(project overview)"),
        TextEvent(content="This project lets people chat about a codebase."),
        ResultEvent(stats=RunStats(tool_uses=1, tokens=0, duration_ms=0)),
        DoneEvent(),
    ]


class ScriptedAgentSource(AgentEventSource):
    """Replays a fixed list of events for every run.

    Useful for unit testing and for running the API without agent
    credentials. When ``fail_after`` is set, the source raises
    ``RuntimeError(failure_message)`` after yielding that many events.
    """

    def __init__(
        self,
        events: Sequence[AgentEvent] | None = None,
        *,
        delay: float = 0.0,
        fail_after: int | None = None,
        failure_message: str = "scripted failure",
    ) -> None:
        self._events = list(events) if events is not None else default_script()
        self._delay = delay
        self._fail_after = fail_after
        self._failure_message = failure_message
        self._call_history: list[dict] = []

    @property
    def backend(self) -> str:
        return "scripted"

    @property
    def call_history(self) -> list[dict]:
        """Return history of calls for testing assertions."""
        return self._call_history

    def clear_history(self) -> None:
        self._call_history.clear()

    async def run(
        self,
        prompt: str,
        history: Sequence[HistoryMessage] = (),
    ) -> AsyncGenerator[AgentEvent, None]:
        self._call_history.append({"prompt": prompt, "history": list(history)})

        for index, event in enumerate(self._events):
            if self._fail_after is not None and index >= self._fail_after:
                raise RuntimeError(self._failure_message)
            if self._delay:
                await asyncio.sleep(self._delay)
            yield event

        if self._fail_after is not None and self._fail_after >= len(self._events):
            raise RuntimeError(self._failure_message)
