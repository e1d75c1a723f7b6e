"""Request context middleware for observability."""

import uuid
from collections.abc import Callable
from contextvars import ContextVar

import structlog
from fastapi import Request, Response
from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware

from gist.api.models.context import RequestContext
from gist.observability.logging import get_logger

logger = get_logger(__name__)

_request_context: ContextVar[RequestContext | None] = ContextVar("request_context", default=None)


def get_request_context() -> RequestContext | None:
    """Get the RequestContext for the current request, or None outside one."""
    return _request_context.get()


def set_request_context(context: RequestContext) -> None:
    _request_context.set(context)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds a RequestContext for logging and tracing.

    The trace id comes from the active OpenTelemetry span when there is
    one; otherwise the generated request id stands in for it.
    """

    async def dispatch(  # type: ignore[override]
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        span_context = trace.get_current_span().get_span_context()
        trace_id = format(span_context.trace_id, "032x") if span_context.is_valid else ""
        span_id = format(span_context.span_id, "016x") if span_context.is_valid else ""

        request_id = str(uuid.uuid4())
        context = RequestContext(
            trace_id=trace_id or request_id,
            span_id=span_id,
            request_id=request_id,
        )
        set_request_context(context)
        request.state.context = context

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            trace_id=context.trace_id,
            request_id=context.request_id,
        )

        logger.debug("request_started", method=request.method, path=request.url.path)

        response = await call_next(request)  # type: ignore[misc]

        logger.debug(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )

        response.headers["X-Request-ID"] = context.request_id
        response.headers["X-Trace-ID"] = context.trace_id
        return response  # type: ignore[no-any-return]


def update_request_context(
    *,
    user_id: str | None = None,
    conversation_id: str | None = None,
) -> None:
    """Add identifiers to the current request context as they become known."""
    current = get_request_context()
    if current is None:
        return

    if user_id:
        current.user_id = user_id
    if conversation_id:
        current.conversation_id = conversation_id

    structlog.contextvars.bind_contextvars(
        user_id=current.user_id,
        conversation_id=current.conversation_id,
    )
