"""API middleware package."""

from gist.api.middleware.context import (
    RequestContextMiddleware,
    get_request_context,
    set_request_context,
    update_request_context,
)

__all__ = [
    "RequestContextMiddleware",
    "get_request_context",
    "set_request_context",
    "update_request_context",
]
