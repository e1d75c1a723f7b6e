"""Unit tests for the streaming agent endpoint."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from gist.agent import ScriptedAgentSource
from gist.api.app import create_app
from gist.api.dependencies import get_agent_source, reset_dependencies
from gist.streaming.codec import FrameDecoder
from gist.streaming.events import DoneEvent, ErrorEvent, TextEvent


def decode_body(body: bytes) -> list:
    decoder = FrameDecoder()
    events = decoder.feed(body)
    decoder.close()
    return events


@pytest.fixture
def source(scenario_events) -> ScriptedAgentSource:
    return ScriptedAgentSource([*scenario_events, DoneEvent()])


@pytest.fixture
def app(source: ScriptedAgentSource) -> FastAPI:
    """Application with the scripted source in place of the agent."""
    reset_dependencies()
    app = create_app()
    app.dependency_overrides[get_agent_source] = lambda: source
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


class TestAgentStream:
    """Tests for POST /v1/agent."""

    def test_returns_event_stream(self, client: TestClient) -> None:
        """The response is an uncached event stream."""
        response = client.post("/v1/agent", json={"prompt": "What is this?"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache"

    def test_relays_every_event_in_order(
        self, client: TestClient, scenario_events
    ) -> None:
        """Each source event becomes one data frame."""
        response = client.post("/v1/agent", json={"prompt": "What is this?"})

        assert decode_body(response.content) == [*scenario_events, DoneEvent()]

    def test_frames_are_single_data_lines(self, client: TestClient) -> None:
        """Frames use the plain data-line layout."""
        response = client.post("/v1/agent", json={"prompt": "q"})
        assert response.text.startswith('data: {"type":"text","content":"Let me check."}\n\n')

    def test_history_is_passed_to_source(
        self, client: TestClient, source: ScriptedAgentSource
    ) -> None:
        """Prompt and camelCase history reach the event source."""
        client.post(
            "/v1/agent",
            json={
                "prompt": "And now?",
                "history": [
                    {"role": "user", "content": "Before"},
                    {"role": "assistant", "content": "Answer"},
                ],
            },
        )

        call = source.call_history[0]
        assert call["prompt"] == "And now?"
        assert [m.content for m in call["history"]] == ["Before", "Answer"]

    def test_user_header_not_required(self, client: TestClient) -> None:
        response = client.post("/v1/agent", json={"prompt": "q"})
        assert response.status_code == 200


class TestAgentStreamErrors:
    """Tests for rejected requests and failing sources."""

    @pytest.mark.parametrize("body", [{}, {"prompt": ""}, {"prompt": "   "}, {"history": []}])
    def test_missing_or_blank_prompt(self, client: TestClient, body: dict) -> None:
        """Requests without a usable prompt are rejected before streaming."""
        response = client.post("/v1/agent", json=body)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_source_exception_becomes_error_event(self, app: FastAPI) -> None:
        """A raising source still ends the stream with one error event."""
        failing = ScriptedAgentSource(
            [TextEvent(content="partial")], fail_after=1, failure_message="agent crashed"
        )
        app.dependency_overrides[get_agent_source] = lambda: failing

        response = TestClient(app).post("/v1/agent", json={"prompt": "q"})

        assert response.status_code == 200
        assert decode_body(response.content) == [
            TextEvent(content="partial"),
            ErrorEvent(content="agent crashed"),
        ]
