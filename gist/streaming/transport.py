"""HTTP transport for agent event streams.

Opens ``POST /v1/agent`` with httpx and yields decoded events as their
frames complete. Connection problems and non-2xx responses surface as
StreamTransportError subclasses so the run controller can tell them apart
from a user stopping the run.
"""

from collections.abc import AsyncGenerator
from typing import Protocol

import httpx

from gist.config.models import StreamingConfig
from gist.observability.logging import get_logger
from gist.streaming.codec import FrameDecoder
from gist.streaming.events import AgentEvent, AgentRunRequest

logger = get_logger(__name__)


class StreamTransportError(Exception):
    """The event stream could not be opened or broke while reading."""


class StreamHTTPError(StreamTransportError):
    """The streaming endpoint answered with a non-2xx status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


class StreamIdleTimeout(StreamTransportError):
    """No event arrived within the configured idle window."""

    def __init__(self, seconds: float) -> None:
        super().__init__(f"No event received for {seconds:g}s")
        self.seconds = seconds


class AgentTransport(Protocol):
    """Anything that can turn a run request into a stream of events."""

    def stream(self, request: AgentRunRequest) -> AsyncGenerator[AgentEvent, None]: ...


class HttpAgentTransport:
    """Streams agent events from the HTTP endpoint.

    The httpx client can be injected (tests pass one backed by
    ``httpx.MockTransport`` or ``httpx.ASGITransport``); otherwise one is
    created per transport and closed by ``aclose``.
    """

    def __init__(
        self,
        url: str,
        *,
        client: httpx.AsyncClient | None = None,
        headers: dict[str, str] | None = None,
        connect_timeout: float = 10.0,
    ) -> None:
        self.url = url
        self._headers = headers or {}
        self._owns_client = client is None
        # Reads are unbounded; idle detection belongs to the run controller.
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(None, connect=connect_timeout)
        )

    @classmethod
    def from_config(
        cls,
        config: StreamingConfig,
        *,
        client: httpx.AsyncClient | None = None,
        headers: dict[str, str] | None = None,
    ) -> "HttpAgentTransport":
        return cls(
            config.base_url.rstrip("/") + config.agent_path,
            client=client,
            headers=headers,
            connect_timeout=config.connect_timeout_seconds,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def stream(self, request: AgentRunRequest) -> AsyncGenerator[AgentEvent, None]:
        """Yield events in arrival order until the response body ends."""
        decoder = FrameDecoder()
        try:
            async with self._client.stream(
                "POST",
                self.url,
                json=request.to_wire(),
                headers={"Accept": "text/event-stream", **self._headers},
            ) as response:
                if not response.is_success:
                    raise StreamHTTPError(response.status_code)

                logger.debug("agent_stream_opened", url=self.url)
                async for chunk in response.aiter_bytes():
                    for event in decoder.feed(chunk):
                        yield event
        except httpx.HTTPError as e:
            raise StreamTransportError(str(e) or type(e).__name__) from e
        finally:
            decoder.close()
