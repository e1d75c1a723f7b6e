"""Agent event sources.

The streaming endpoint relays whatever an AgentEventSource yields. The
Claude source drives the real agent; the scripted source replays a fixed
event list for tests and local development.
"""

from gist.agent.claude import ClaudeAgentSource, MessageTranslator
from gist.agent.scripted import ScriptedAgentSource
from gist.agent.source import (
    AgentEventSource,
    build_prompt,
    find_project_dir,
    format_history,
    truncate_tool_result,
)
from gist.config.models import AgentConfig


def create_agent_source(config: AgentConfig) -> AgentEventSource:
    """Build the event source selected by ``config.backend``."""
    if config.backend == "scripted":
        return ScriptedAgentSource()
    return ClaudeAgentSource(config)


__all__ = [
    "AgentEventSource",
    "ClaudeAgentSource",
    "MessageTranslator",
    "ScriptedAgentSource",
    "build_prompt",
    "create_agent_source",
    "find_project_dir",
    "format_history",
    "truncate_tool_result",
]
