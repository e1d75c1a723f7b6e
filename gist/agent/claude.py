"""Claude Agent SDK event source.

Runs the agent read-only against the checked-out repository and translates
SDK messages into the wire event vocabulary:

- each assistant message after the first is preceded by ``new_turn``
- text blocks become ``text``, tool use blocks become ``tool_use``
- tool result blocks in user messages become truncated ``tool_result``
- the final result message becomes ``result`` with token and timing stats
"""

from collections.abc import AsyncGenerator, AsyncIterator, Callable, Sequence
from typing import Any

from gist.agent.prompts import SYSTEM_PROMPT
from gist.agent.source import (
    AgentEventSource,
    build_prompt,
    find_project_dir,
    truncate_tool_result,
)
from gist.config.models import AgentConfig
from gist.conversation.models import HistoryMessage, RunStats
from gist.observability.logging import get_logger
from gist.observability.metrics import AGENT_SOURCE_ERRORS
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

QueryFn = Callable[..., AsyncIterator[Any]]


def tool_result_text(content: Any) -> str:
    """Flatten tool result content to text.

    Content is either a string or a list of content parts; only text parts
    are kept, joined by newlines.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "\n".join(
            part["text"]
            for part in content
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )
    return ""


class MessageTranslator:
    """Stateful translation of one run's SDK messages into agent events."""

    def __init__(self, tool_result_limit: int = 500) -> None:
        self._tool_result_limit = tool_result_limit
        self.turn_count = 0
        self.tool_uses = 0

    def translate(self, message: Any) -> list[AgentEvent]:
        from claude_agent_sdk import (
            AssistantMessage,
            ResultMessage,
            TextBlock,
            ToolResultBlock,
            ToolUseBlock,
            UserMessage,
        )

        events: list[AgentEvent] = []

        if isinstance(message, AssistantMessage) and message.content:
            self.turn_count += 1
            if self.turn_count > 1:
                events.append(NewTurnEvent())
            for block in message.content:
                if isinstance(block, TextBlock) and block.text:
                    events.append(TextEvent(content=block.text))
                elif isinstance(block, ToolUseBlock):
                    self.tool_uses += 1
                    events.append(ToolUseEvent(tool=block.name, input=block.input))

        elif isinstance(message, UserMessage) and isinstance(message.content, list):
            for block in message.content:
                if isinstance(block, ToolResultBlock):
                    text = tool_result_text(block.content)
                    events.append(
                        ToolResultEvent(content=truncate_tool_result(text, self._tool_result_limit))
                    )

        elif isinstance(message, ResultMessage):
            usage = message.usage or {}
            tokens = (usage.get("input_tokens") or 0) + (usage.get("output_tokens") or 0)
            events.append(
                ResultEvent(
                    stats=RunStats(
                        tool_uses=self.tool_uses,
                        tokens=tokens,
                        duration_ms=message.duration_ms or 0,
                    )
                )
            )

        return events


class ClaudeAgentSource(AgentEventSource):
    """Agent event source backed by ``claude_agent_sdk.query``.

    Args:
        config: Agent settings (tools, permission mode, repos directory)
        query_fn: Replacement for ``claude_agent_sdk.query``, for tests
    """

    def __init__(self, config: AgentConfig, *, query_fn: QueryFn | None = None) -> None:
        self._config = config
        self._query_fn = query_fn

    @property
    def backend(self) -> str:
        return "claude"

    def build_options(self) -> Any:
        from claude_agent_sdk import ClaudeAgentOptions

        return ClaudeAgentOptions(
            system_prompt=self._config.system_prompt or SYSTEM_PROMPT,
            allowed_tools=list(self._config.allowed_tools),
            permission_mode=self._config.permission_mode,
            cwd=find_project_dir(self._config.repos_dir),
            add_dirs=[self._config.repos_dir],
            model=self._config.model,
            env={"SHELL": "/bin/bash"},
        )

    def _query(self) -> QueryFn:
        if self._query_fn is not None:
            return self._query_fn
        from claude_agent_sdk import query

        return query

    async def run(
        self,
        prompt: str,
        history: Sequence[HistoryMessage] = (),
    ) -> AsyncGenerator[AgentEvent, None]:
        translator = MessageTranslator(self._config.tool_result_limit)

        try:
            messages = self._query()(prompt=build_prompt(prompt, history), options=self.build_options())
            async for message in messages:
                for event in translator.translate(message):
                    yield event
        except Exception as e:
            AGENT_SOURCE_ERRORS.labels(backend=self.backend, error_type=type(e).__name__).inc()
            logger.exception("claude_agent_run_failed", error=str(e))
            yield ErrorEvent(content=str(e) or "Unknown error")
            return

        logger.info(
            "claude_agent_run_finished",
            turns=translator.turn_count,
            tool_uses=translator.tool_uses,
        )
        yield DoneEvent()
