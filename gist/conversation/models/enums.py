"""Enums for the conversation domain."""

from enum import Enum


class TurnRole(str, Enum):
    """Who authored a turn."""

    USER = "user"
    ASSISTANT = "assistant"


class TurnStatus(str, Enum):
    """Lifecycle status of an assistant turn.

    User turns carry no status. An assistant turn starts IN_PROGRESS and
    leaves it exactly once, after which it is never modified again.
    """

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
