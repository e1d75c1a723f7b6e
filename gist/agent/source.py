"""Agent event source interface and shared prompt helpers."""

from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator, Sequence
from pathlib import Path

from gist.conversation.models import HistoryMessage, TurnRole
from gist.observability.logging import get_logger
from gist.streaming.events import AgentEvent

logger = get_logger(__name__)

TRUNCATION_MARKER = "..."


class AgentEventSource(ABC):
    """Produces the event sequence of one agent run.

    Implementations are async generators. A run that ends normally yields
    ``result`` then ``done``; a run that fails yields a single ``error``
    event and stops.
    """

    @property
    @abstractmethod
    def backend(self) -> str:
        """Short backend name used in logs and metrics."""
        pass

    @abstractmethod
    def run(
        self,
        prompt: str,
        history: Sequence[HistoryMessage] = (),
    ) -> AsyncGenerator[AgentEvent, None]:
        """Start a run for ``prompt`` with prior turns as context."""
        pass


def format_history(history: Sequence[HistoryMessage]) -> str:
    """Render prior turns as a plain transcript preamble.

    Returns an empty string for an empty history.
    """
    if not history:
        return ""
    lines = "\n\n".join(
        f"{'Human' if message.role == TurnRole.USER else 'Assistant'}: {message.content}"
        for message in history
    )
    return f"Previous conversation:\n{lines}\n\n"


def build_prompt(prompt: str, history: Sequence[HistoryMessage] = ()) -> str:
    return format_history(history) + f"Human: {prompt}"


def truncate_tool_result(text: str, limit: int = 500) -> str:
    """Keep the first ``limit`` characters, marking anything cut off."""
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def find_project_dir(repos_dir: Path) -> Path:
    """Return the first git checkout directly under ``repos_dir``.

    Hidden directories are skipped. Falls back to ``repos_dir`` itself when
    no checkout is found or the directory cannot be read.
    """
    try:
        entries = sorted(repos_dir.iterdir())
    except OSError as e:
        logger.warning("repos_dir_unreadable", repos_dir=str(repos_dir), error=str(e))
        return repos_dir

    for entry in entries:
        if entry.is_dir() and not entry.name.startswith(".") and (entry / ".git").exists():
            logger.info("project_dir_selected", project_dir=str(entry))
            return entry

    logger.info("project_dir_fallback", repos_dir=str(repos_dir))
    return repos_dir
