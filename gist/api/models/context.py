"""Request context models for middleware and observability."""

from pydantic import BaseModel, ConfigDict


class UserContext(BaseModel):
    """Caller identity supplied by the upstream gateway."""

    model_config = ConfigDict(frozen=True)

    user_id: str


class RequestContext(BaseModel):
    """Request context for observability and logging.

    Bound at the start of each request and used to correlate logs and
    traces across the request lifecycle.
    """

    trace_id: str
    """OpenTelemetry trace ID, or the request ID when tracing is off."""

    span_id: str = ""
    """OpenTelemetry span ID."""

    request_id: str
    """Unique request identifier."""

    user_id: str | None = None
    conversation_id: str | None = None
