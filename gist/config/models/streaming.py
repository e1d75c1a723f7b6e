"""Streaming transport configuration models."""

from pydantic import BaseModel, Field


class StreamingConfig(BaseModel):
    """Settings shared by the event stream producer and its consumers."""

    base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL clients use to reach the API",
    )
    agent_path: str = Field(
        default="/v1/agent",
        description="Path of the streaming agent endpoint",
    )
    idle_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Treat the stream as failed when no event arrives for this long",
    )
    connect_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for opening the stream",
    )
    ping_interval_seconds: int = Field(
        default=15,
        gt=0,
        description="Interval between keep-alive comment frames",
    )
