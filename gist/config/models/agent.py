"""Agent event source configuration models."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

AgentBackend = Literal["claude", "scripted"]


class AgentConfig(BaseModel):
    """Settings for the agent that explores the checked-out repository.

    The agent only ever gets read-only tools and runs in plan mode; the
    repository it explores is the first git checkout under ``repos_dir``.
    """

    backend: AgentBackend = Field(
        default="claude",
        description="Event source used by the streaming endpoint",
    )
    repos_dir: Path = Field(
        default=Path("/repos"),
        description="Directory holding cloned repositories",
    )
    allowed_tools: list[str] = Field(
        default_factory=lambda: ["Read", "Glob", "Grep", "Bash"],
        description="Tools the agent may call",
    )
    permission_mode: str = Field(
        default="plan",
        description="Agent permission mode",
    )
    model: str | None = Field(
        default=None,
        description="Model override; the SDK default is used when unset",
    )
    system_prompt: str | None = Field(
        default=None,
        description="Replaces the built-in plain-language system prompt",
    )
    tool_result_limit: int = Field(
        default=500,
        gt=0,
        description="Characters of tool output relayed before truncation",
    )
