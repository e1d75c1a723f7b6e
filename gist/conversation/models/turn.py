"""Turn models for the conversation domain.

A turn is one entry in a conversation. User turns hold the raw prompt
text; assistant turns hold an AssistantContent that is rebuilt on every
streamed event until the run finishes.
"""

from typing import Any

from pydantic import ConfigDict, Field, model_validator

from gist.conversation.models.base import WireModel, new_id, now_ms
from gist.conversation.models.enums import TurnRole, TurnStatus


class ToolCall(WireModel):
    """A tool invocation made by the agent during a run."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id, description="Tool call identifier")
    tool: str = Field(..., description="Tool name, e.g. Read or Grep")
    input: Any = Field(default=None, description="Tool input as sent by the agent")
    result: str | None = Field(default=None, description="Truncated tool output")


class RunStats(WireModel):
    """Final statistics for a successfully completed run."""

    model_config = ConfigDict(frozen=True)

    tool_uses: int = Field(..., ge=0, description="Number of tool invocations")
    tokens: int = Field(..., ge=0, description="Input plus output tokens")
    duration_ms: int = Field(..., ge=0, description="Run duration in milliseconds")


class AssistantContent(WireModel):
    """Everything an assistant turn has accumulated so far.

    ``tools_start_index`` is the offset into ``text`` at the moment the
    first tool was invoked. Text before it is the agent narrating its plan,
    text after it is the answer.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Accumulated narrative")
    tool_calls: list[ToolCall] = Field(default_factory=list, description="Tool calls in order")
    tools_start_index: int | None = Field(
        default=None, ge=0, description="Text offset of the first tool call"
    )
    stats: RunStats | None = Field(default=None, description="Set when the run completes")

    @property
    def narration(self) -> str:
        """Text written before the first tool call."""
        if self.tools_start_index is None:
            return ""
        return self.text[: self.tools_start_index]

    @property
    def answer(self) -> str:
        """Text written after the first tool call, or all of it if no tools ran."""
        if self.tools_start_index is None:
            return self.text
        return self.text[self.tools_start_index :]


class Turn(WireModel):
    """One message-like entry in a conversation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id, description="Turn identifier")
    role: TurnRole = Field(..., description="Author of the turn")
    content: str | AssistantContent = Field(..., description="Prompt text or assistant content")
    status: TurnStatus | None = Field(default=None, description="Assistant turn status")
    created_at: int = Field(default_factory=now_ms, description="Epoch ms; sole ordering key")

    @model_validator(mode="after")
    def check_content_matches_role(self) -> "Turn":
        """User turns carry plain text, assistant turns carry AssistantContent."""
        if self.role == TurnRole.USER and not isinstance(self.content, str):
            raise ValueError("user turns must have string content")
        if self.role == TurnRole.ASSISTANT and not isinstance(self.content, AssistantContent):
            raise ValueError("assistant turns must have structured content")
        return self

    @classmethod
    def user(cls, text: str, *, created_at: int | None = None) -> "Turn":
        """Create a user turn."""
        return cls(
            role=TurnRole.USER,
            content=text,
            created_at=now_ms() if created_at is None else created_at,
        )

    @classmethod
    def assistant_placeholder(cls, *, created_at: int) -> "Turn":
        """Create an empty in-progress assistant turn."""
        return cls(
            role=TurnRole.ASSISTANT,
            content=AssistantContent(),
            status=TurnStatus.IN_PROGRESS,
            created_at=created_at,
        )

    @property
    def text(self) -> str:
        """Narrative text of the turn, whatever its role."""
        if isinstance(self.content, AssistantContent):
            return self.content.text
        return self.content

    @property
    def is_open(self) -> bool:
        return self.status == TurnStatus.IN_PROGRESS


class TurnPatch(WireModel):
    """Partial update for a turn.

    Only fields that were explicitly set and are not None are merged, so
    the same patch applied twice leaves the turn exactly as applying it
    once does.
    """

    model_config = ConfigDict(frozen=True)

    content: AssistantContent | None = None
    status: TurnStatus | None = None

    def changes(self) -> dict[str, Any]:
        """Top-level fields this patch overwrites."""
        return {
            name: value
            for name in self.model_fields_set
            if (value := getattr(self, name)) is not None
        }

    def apply(self, turn: Turn) -> Turn:
        """Return a copy of ``turn`` with this patch merged in."""
        return turn.model_copy(update=self.changes())

    def conflict(self, turn: Turn) -> str | None:
        """Reason this patch may not be merged into ``turn``, or None.

        Only open assistant turns change, and their text only grows. A
        patch that leaves a final turn as it is still merges, so replays
        stay harmless.
        """
        if turn.role != TurnRole.ASSISTANT:
            return "user turns cannot be patched"
        if not turn.is_open:
            if self.apply(turn) == turn:
                return None
            return f"turn is already {turn.status.value if turn.status else 'final'}"
        if self.content is not None and not self.content.text.startswith(turn.text):
            return "patch would truncate turn text"
        return None


class HistoryMessage(WireModel):
    """A prior turn replayed to the agent as plain narrative."""

    role: TurnRole
    content: str
