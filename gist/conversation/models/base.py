"""Shared base model and clock helpers for conversation models."""

import time
from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def now_ms() -> int:
    """Return the current UTC time as integer epoch milliseconds."""
    return time.time_ns() // 1_000_000


def new_id() -> str:
    """Return a fresh random identifier."""
    return str(uuid4())


class WireModel(BaseModel):
    """Base for models that travel over the wire.

    Fields are snake_case in Python and camelCase in JSON (``toolCalls``,
    ``createdAt``). Both spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        """Dump to a JSON-compatible dict using camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
