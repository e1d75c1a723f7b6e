"""Tests for conversation domain models."""

import pytest
from pydantic import ValidationError

from gist.conversation.history import build_history
from gist.conversation.models import (
    DEFAULT_TITLE,
    AssistantContent,
    Conversation,
    RunStats,
    ToolCall,
    Turn,
    TurnPatch,
    TurnRole,
    TurnStatus,
    derive_title,
)


class TestDeriveTitle:
    """Tests for naming a conversation from its first prompt."""

    def test_short_prompt_kept(self) -> None:
        """Short prompts become the title as is."""
        assert derive_title("Hi") == "Hi"

    def test_long_prompt_truncated_with_ellipsis(self) -> None:
        """Prompts over 50 characters keep the first 50 plus an ellipsis."""
        prompt = "Explain the login flow across all 40 microservices please"
        assert derive_title(prompt) == prompt[:50] + "..."

    def test_exactly_fifty_characters_unchanged(self) -> None:
        """Fifty characters is not longer than the limit."""
        prompt = "x" * 50
        assert derive_title(prompt) == prompt

    def test_trailing_space_at_cut_is_stripped(self) -> None:
        """Whitespace at the cut point is removed before the ellipsis."""
        prompt = "a" * 49 + " " + "tail"
        assert derive_title(prompt) == "a" * 49 + "..."


class TestTurn:
    """Tests for Turn construction and validation."""

    def test_user_turn(self) -> None:
        """User turns hold plain text and no status."""
        turn = Turn.user("hello", created_at=5)
        assert turn.role == TurnRole.USER
        assert turn.text == "hello"
        assert turn.status is None
        assert turn.is_open is False

    def test_assistant_placeholder(self) -> None:
        """Placeholders start empty and in progress."""
        turn = Turn.assistant_placeholder(created_at=6)
        assert turn.content == AssistantContent()
        assert turn.status == TurnStatus.IN_PROGRESS
        assert turn.is_open is True

    def test_user_turn_rejects_structured_content(self) -> None:
        """User content must be a string."""
        with pytest.raises(ValidationError):
            Turn(role=TurnRole.USER, content=AssistantContent())

    def test_assistant_turn_rejects_string_content(self) -> None:
        """Assistant content must be structured."""
        with pytest.raises(ValidationError):
            Turn(role=TurnRole.ASSISTANT, content="plain")

    def test_wire_shape_is_camel_case(self) -> None:
        """Turns serialize with camelCase keys."""
        turn = Turn(
            id="t1",
            role=TurnRole.ASSISTANT,
            content=AssistantContent(
                text="ab",
                tool_calls=[ToolCall(id="tc1", tool="Read", input={"p": 1}, result="r")],
                tools_start_index=1,
                stats=RunStats(tool_uses=1, tokens=3, duration_ms=4),
            ),
            status=TurnStatus.COMPLETED,
            created_at=7,
        )
        assert turn.to_wire() == {
            "id": "t1",
            "role": "assistant",
            "content": {
                "text": "ab",
                "toolCalls": [{"id": "tc1", "tool": "Read", "input": {"p": 1}, "result": "r"}],
                "toolsStartIndex": 1,
                "stats": {"toolUses": 1, "tokens": 3, "durationMs": 4},
            },
            "status": "completed",
            "createdAt": 7,
        }

    def test_wire_shape_parses_back(self) -> None:
        """camelCase payloads validate into turns."""
        turn = Turn.model_validate(
            {
                "id": "t2",
                "role": "assistant",
                "content": {"text": "", "toolCalls": [], "toolsStartIndex": None},
                "status": "in_progress",
                "createdAt": 9,
            }
        )
        assert turn.created_at == 9
        assert isinstance(turn.content, AssistantContent)


class TestTurnPatch:
    """Tests for partial turn updates."""

    def test_changes_only_set_fields(self) -> None:
        """Unset and None fields are not part of the patch."""
        assert TurnPatch(status=TurnStatus.CANCELLED).changes() == {
            "status": TurnStatus.CANCELLED
        }
        assert TurnPatch(content=None).changes() == {}

    def test_apply_twice_equals_apply_once(self) -> None:
        """Patches are idempotent."""
        turn = Turn.assistant_placeholder(created_at=1)
        patch = TurnPatch(content=AssistantContent(text="x"), status=TurnStatus.COMPLETED)
        assert patch.apply(patch.apply(turn)) == patch.apply(turn)

    def test_apply_keeps_identity(self) -> None:
        """Id, role and timestamp survive a patch."""
        turn = Turn.assistant_placeholder(created_at=1)
        patched = TurnPatch(content=AssistantContent(text="x")).apply(turn)
        assert (patched.id, patched.role, patched.created_at) == (turn.id, turn.role, 1)

    def test_open_turn_accepts_growing_text(self) -> None:
        turn = TurnPatch(content=AssistantContent(text="ab")).apply(
            Turn.assistant_placeholder(created_at=1)
        )
        assert TurnPatch(content=AssistantContent(text="abc")).conflict(turn) is None
        assert TurnPatch(status=TurnStatus.CANCELLED).conflict(turn) is None

    def test_conflicts(self) -> None:
        """User turns, changes to final turns and shrinking text are refused."""
        open_turn = TurnPatch(content=AssistantContent(text="ab")).apply(
            Turn.assistant_placeholder(created_at=1)
        )
        final = TurnPatch(status=TurnStatus.COMPLETED).apply(open_turn)

        assert TurnPatch(content=AssistantContent(text="a")).conflict(open_turn)
        assert TurnPatch(status=TurnStatus.IN_PROGRESS).conflict(final)
        assert TurnPatch(content=AssistantContent(text="x")).conflict(Turn.user("hi"))
        assert TurnPatch(status=TurnStatus.COMPLETED).conflict(final) is None


class TestConversation:
    """Tests for Conversation behavior."""

    def test_defaults(self) -> None:
        """New conversations use the default title."""
        conversation = Conversation()
        assert conversation.title == DEFAULT_TITLE
        assert conversation.has_default_title is True

    def test_only_first_user_turn_names_conversation(self) -> None:
        """Later prompts and assistant turns do not rename."""
        conversation = Conversation()
        conversation.record_turn(Turn.assistant_placeholder(created_at=1))
        assert conversation.title == DEFAULT_TITLE
        conversation.record_turn(Turn.user("First question"))
        conversation.record_turn(Turn.user("Second question"))
        assert conversation.title == "First question"

    def test_custom_title_is_kept(self) -> None:
        """A renamed conversation is not renamed by a prompt."""
        conversation = Conversation(title="Pinned")
        conversation.record_turn(Turn.user("question"))
        assert conversation.title == "Pinned"

    def test_replace_unknown_turn(self) -> None:
        """Replacing a turn that is not there raises KeyError."""
        with pytest.raises(KeyError):
            Conversation().replace_turn(Turn.user("x"))

    def test_record_turn_touches(self) -> None:
        """Adding a turn updates updated_at."""
        conversation = Conversation(created_at=1, updated_at=1)
        conversation.record_turn(Turn.user("x"), at=50)
        assert conversation.updated_at == 50


class TestBuildHistory:
    """Tests for history reconstruction."""

    def test_orders_by_created_at_and_flattens(self) -> None:
        """History is sorted and assistant turns contribute only text."""
        assistant = Turn(
            role=TurnRole.ASSISTANT,
            content=AssistantContent(text="It is a shop.", tool_calls=[ToolCall(tool="Read")]),
            status=TurnStatus.COMPLETED,
            created_at=2,
        )
        user = Turn.user("What is this?", created_at=1)

        history = build_history([assistant, user])

        assert [(m.role, m.content) for m in history] == [
            (TurnRole.USER, "What is this?"),
            (TurnRole.ASSISTANT, "It is a shop."),
        ]

    def test_empty(self) -> None:
        assert build_history([]) == []
