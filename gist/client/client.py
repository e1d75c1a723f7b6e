"""Gist API client.

Provides a Python client for the conversation REST surface.

Usage:
    from gist.client import GistClient

    async with GistClient(user_id="u-1") as client:
        conversation = await client.create_conversation()
        page = await client.list_conversations()
"""

from typing import Any

import httpx

from gist.api.models.health import HealthResponse
from gist.conversation.models import (
    Conversation,
    ConversationPage,
    Turn,
    TurnPatch,
)

USER_HEADER = "X-User-ID"


class GistClientError(Exception):
    """Base exception for client errors."""

    def __init__(self, message: str, status_code: int | None = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class GistClient:
    """Async client for the Gist API.

    Attributes:
        base_url: Base URL of the Gist API
        user_id: Caller identity sent with every request
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        user_id: str | None = None,
        timeout: float = 30.0,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Base URL of the Gist API
            user_id: Caller identity for the X-User-ID header
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use ASGITransport)
        """
        self.base_url = base_url.rstrip("/")
        self.user_id = user_id
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GistClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.user_id:
            headers[USER_HEADER] = self.user_id
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict | None = None,
        params: dict | None = None,
    ) -> dict:
        """Make an API request."""
        try:
            response = await self._client.request(
                method=method,
                url=path,
                headers=self._headers(),
                json=json,
                params=params,
            )
        except httpx.HTTPError as e:
            raise GistClientError(str(e) or type(e).__name__) from e

        if response.status_code >= 400:
            error_data: Any = None
            try:
                error_data = response.json()
                message = error_data.get("error", {}).get("message", response.text)
            except ValueError:
                message = response.text

            raise GistClientError(
                message=message,
                status_code=response.status_code,
                details=error_data,
            )

        if response.status_code == 204:
            return {}

        return response.json()

    # Health
    async def health(self) -> HealthResponse:
        """Check API health."""
        data = await self._request("GET", "/health")
        return HealthResponse.model_validate(data)

    # Conversations
    async def list_conversations(self, *, limit: int = 50, offset: int = 0) -> ConversationPage:
        """List the caller's conversations, most recently updated first."""
        data = await self._request(
            "GET",
            "/v1/conversations",
            params={"limit": limit, "offset": offset},
        )
        return ConversationPage.model_validate(data)

    async def get_conversation(self, conversation_id: str) -> Conversation:
        data = await self._request("GET", f"/v1/conversations/{conversation_id}")
        return Conversation.model_validate(data)

    async def create_conversation(
        self,
        conversation_id: str | None = None,
        title: str | None = None,
    ) -> Conversation:
        """Create a conversation, optionally with a client-allocated id."""
        payload: dict[str, Any] = {}
        if conversation_id is not None:
            payload["id"] = conversation_id
        if title is not None:
            payload["title"] = title
        data = await self._request("POST", "/v1/conversations", json=payload)
        return Conversation.model_validate(data)

    async def rename_conversation(self, conversation_id: str, title: str) -> Conversation:
        data = await self._request(
            "PATCH",
            f"/v1/conversations/{conversation_id}",
            json={"title": title},
        )
        return Conversation.model_validate(data)

    async def delete_conversation(self, conversation_id: str) -> None:
        await self._request("DELETE", f"/v1/conversations/{conversation_id}")

    # Turns
    async def append_turn(self, conversation_id: str, turn: Turn) -> Turn:
        data = await self._request(
            "POST",
            f"/v1/conversations/{conversation_id}/turns",
            json=turn.to_wire(),
        )
        return Turn.model_validate(data)

    async def patch_turn(self, turn_id: str, patch: TurnPatch) -> Turn:
        """Send only the fields the patch sets."""
        data = await self._request(
            "PATCH",
            f"/v1/turns/{turn_id}",
            json=patch.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return Turn.model_validate(data)
