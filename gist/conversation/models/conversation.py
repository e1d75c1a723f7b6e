"""Conversation models."""

from pydantic import ConfigDict, Field

from gist.conversation.models.base import WireModel, new_id, now_ms
from gist.conversation.models.enums import TurnRole
from gist.conversation.models.turn import Turn

DEFAULT_TITLE = "New Chat"
TITLE_MAX_LENGTH = 50
TITLE_ELLIPSIS = "..."


def derive_title(text: str) -> str:
    """Build a conversation title from the first prompt.

    The first 50 characters are kept (trailing whitespace stripped) and an
    ellipsis is added only when the prompt was longer than that.
    """
    title = text[:TITLE_MAX_LENGTH].strip()
    if len(text) > TITLE_MAX_LENGTH:
        title += TITLE_ELLIPSIS
    return title


class Conversation(WireModel):
    """An ordered collection of turns owned by one user."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=new_id, description="Conversation identifier")
    user_id: str | None = Field(default=None, description="Owning user")
    title: str = Field(default=DEFAULT_TITLE, description="Display title")
    turns: list[Turn] = Field(default_factory=list, description="Turns in insertion order")
    created_at: int = Field(default_factory=now_ms, description="Creation time, epoch ms")
    updated_at: int = Field(default_factory=now_ms, description="Last change, epoch ms")

    @property
    def has_default_title(self) -> bool:
        return self.title == DEFAULT_TITLE

    def record_turn(self, turn: Turn, *, at: int | None = None) -> None:
        """Append a turn, deriving the title from the first user prompt."""
        if turn.role == TurnRole.USER and self.has_default_title:
            self.title = derive_title(turn.text)
        self.turns.append(turn)
        self.touch(at)

    def replace_turn(self, turn: Turn, *, at: int | None = None) -> None:
        """Swap in a new version of an existing turn (matched by id)."""
        for index, existing in enumerate(self.turns):
            if existing.id == turn.id:
                self.turns[index] = turn
                self.touch(at)
                return
        raise KeyError(turn.id)

    def find_turn(self, turn_id: str) -> Turn | None:
        for turn in self.turns:
            if turn.id == turn_id:
                return turn
        return None

    def ordered_turns(self) -> list[Turn]:
        """Turns sorted by creation time, independent of storage order."""
        return sorted(self.turns, key=lambda t: t.created_at)

    def touch(self, at: int | None = None) -> None:
        self.updated_at = now_ms() if at is None else at


class ConversationPage(WireModel):
    """One page of a user's conversations, newest activity first."""

    items: list[Conversation] = Field(default_factory=list)
    has_more: bool = False
