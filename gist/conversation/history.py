"""Rebuild the agent-facing history from stored turns."""

from collections.abc import Iterable

from gist.conversation.models import HistoryMessage, Turn


def build_history(turns: Iterable[Turn]) -> list[HistoryMessage]:
    """Reduce prior turns to ``{role, content}`` pairs in creation order.

    Tool calls and their results are never replayed; an assistant turn
    contributes only its narrative text.
    """
    return [
        HistoryMessage(role=turn.role, content=turn.text)
        for turn in sorted(turns, key=lambda t: t.created_at)
    ]
