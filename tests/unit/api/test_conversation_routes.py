"""Unit tests for conversation and turn endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from gist.api.app import create_app
from gist.api.dependencies import get_conversation_store, reset_dependencies
from gist.conversation.stores.inmemory import InMemoryConversationStore

ALICE = {"X-User-ID": "alice"}
BOB = {"X-User-ID": "bob"}


@pytest.fixture
def store() -> InMemoryConversationStore:
    return InMemoryConversationStore()


@pytest.fixture
def app(store: InMemoryConversationStore) -> FastAPI:
    reset_dependencies()
    app = create_app()
    app.dependency_overrides[get_conversation_store] = lambda: store
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def create(client: TestClient, headers=ALICE, **body) -> dict:
    response = client.post("/v1/conversations", json=body, headers=headers)
    assert response.status_code == 201
    return response.json()


def assistant_turn(turn_id: str = "a1", created_at: int = 2) -> dict:
    return {
        "id": turn_id,
        "role": "assistant",
        "content": {"text": "", "toolCalls": [], "toolsStartIndex": None},
        "status": "in_progress",
        "createdAt": created_at,
    }


class TestUserHeader:
    """Tests for caller identification."""

    def test_missing_header_is_401(self, client: TestClient) -> None:
        response = client.get("/v1/conversations")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "MISSING_USER"

    def test_blank_header_is_401(self, client: TestClient) -> None:
        response = client.get("/v1/conversations", headers={"X-User-ID": "  "})
        assert response.status_code == 401


class TestConversationEndpoints:
    """Tests for conversation CRUD."""

    def test_create_defaults(self, client: TestClient) -> None:
        """New conversations get an id and the default title."""
        body = create(client)

        assert body["id"]
        assert body["title"] == "New Chat"
        assert body["userId"] == "alice"
        assert body["turns"] == []
        assert "createdAt" in body and "updatedAt" in body

    def test_create_with_client_id_is_idempotent(self, client: TestClient) -> None:
        """Creating the same id twice returns the same conversation."""
        first = create(client, id="conv-1")
        second = create(client, id="conv-1", title="Other")

        assert second["id"] == "conv-1"
        assert second["title"] == first["title"]

    def test_list_newest_first(self, client: TestClient) -> None:
        create(client, id="older")
        create(client, id="newer")
        client.post(
            "/v1/conversations/older/turns",
            json={"id": "u1", "role": "user", "content": "bump", "createdAt": 1},
            headers=ALICE,
        )

        response = client.get("/v1/conversations", headers=ALICE)

        assert response.status_code == 200
        assert [c["id"] for c in response.json()["items"]][0] == "older"
        assert response.json()["hasMore"] is False

    def test_list_pagination(self, client: TestClient) -> None:
        for index in range(3):
            create(client, id=f"c{index}")

        page = client.get("/v1/conversations?limit=2", headers=ALICE).json()

        assert len(page["items"]) == 2
        assert page["hasMore"] is True

    def test_list_only_own_conversations(self, client: TestClient) -> None:
        create(client, id="mine")
        create(client, headers=BOB, id="theirs")

        items = client.get("/v1/conversations", headers=ALICE).json()["items"]
        assert [c["id"] for c in items] == ["mine"]

    def test_get_other_users_conversation_is_404(self, client: TestClient) -> None:
        """Another user's conversation looks like a missing one."""
        create(client, id="private")

        response = client.get("/v1/conversations/private", headers=BOB)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CONVERSATION_NOT_FOUND"

    def test_rename(self, client: TestClient) -> None:
        create(client, id="c1")

        response = client.patch(
            "/v1/conversations/c1", json={"title": "Login flow"}, headers=ALICE
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Login flow"

    def test_rename_missing_is_404(self, client: TestClient) -> None:
        response = client.patch("/v1/conversations/nope", json={"title": "x"}, headers=ALICE)
        assert response.status_code == 404

    def test_delete(self, client: TestClient) -> None:
        create(client, id="c1")

        assert client.delete("/v1/conversations/c1", headers=ALICE).status_code == 204
        assert client.get("/v1/conversations/c1", headers=ALICE).status_code == 404
        assert client.delete("/v1/conversations/c1", headers=ALICE).status_code == 404


class TestTurnEndpoints:
    """Tests for appending and patching turns."""

    def test_first_user_turn_names_conversation(self, client: TestClient) -> None:
        create(client, id="c1")

        response = client.post(
            "/v1/conversations/c1/turns",
            json={"id": "u1", "role": "user", "content": "How does login work?", "createdAt": 1},
            headers=ALICE,
        )

        assert response.status_code == 201
        assert client.get("/v1/conversations/c1", headers=ALICE).json()["title"] == (
            "How does login work?"
        )

    def test_turns_returned_in_created_order(self, client: TestClient) -> None:
        create(client, id="c1")
        client.post("/v1/conversations/c1/turns", json=assistant_turn(created_at=2), headers=ALICE)
        client.post(
            "/v1/conversations/c1/turns",
            json={"id": "u1", "role": "user", "content": "q", "createdAt": 1},
            headers=ALICE,
        )

        turns = client.get("/v1/conversations/c1", headers=ALICE).json()["turns"]
        assert [t["id"] for t in turns] == ["u1", "a1"]

    def test_append_to_missing_conversation_is_404(self, client: TestClient) -> None:
        response = client.post(
            "/v1/conversations/missing/turns", json=assistant_turn(), headers=ALICE
        )
        assert response.status_code == 404

    def test_invalid_turn_is_400(self, client: TestClient) -> None:
        """A user turn with structured content is rejected."""
        create(client, id="c1")
        response = client.post(
            "/v1/conversations/c1/turns",
            json={"role": "user", "content": {"text": "x"}},
            headers=ALICE,
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_patch_turn(self, client: TestClient) -> None:
        """A patch merges content and status and returns the turn."""
        create(client, id="c1")
        client.post("/v1/conversations/c1/turns", json=assistant_turn(), headers=ALICE)

        response = client.patch(
            "/v1/turns/a1",
            json={
                "content": {
                    "text": "Done.",
                    "toolCalls": [],
                    "toolsStartIndex": None,
                    "stats": {"toolUses": 0, "tokens": 3, "durationMs": 10},
                },
                "status": "completed",
            },
            headers=ALICE,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "completed"
        assert body["content"]["stats"]["tokens"] == 3
        assert body["createdAt"] == 2

    def test_patch_status_only_keeps_content(self, client: TestClient) -> None:
        create(client, id="c1")
        turn = assistant_turn()
        turn["content"]["text"] = "partial"
        client.post("/v1/conversations/c1/turns", json=turn, headers=ALICE)

        body = client.patch(
            "/v1/turns/a1", json={"status": "cancelled"}, headers=ALICE
        ).json()

        assert body["content"]["text"] == "partial"
        assert body["status"] == "cancelled"

    def test_patch_unknown_turn_is_404(self, client: TestClient) -> None:
        response = client.patch("/v1/turns/nope", json={"status": "cancelled"}, headers=ALICE)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "TURN_NOT_FOUND"

    def test_patch_other_users_turn_is_404(self, client: TestClient) -> None:
        create(client, id="c1")
        client.post("/v1/conversations/c1/turns", json=assistant_turn(), headers=ALICE)

        response = client.patch("/v1/turns/a1", json={"status": "cancelled"}, headers=BOB)
        assert response.status_code == 404

    def test_completed_turn_cannot_be_reopened(self, client: TestClient) -> None:
        """A final turn answers 409 and keeps its content."""
        create(client, id="c1")
        turn = assistant_turn()
        turn["content"]["text"] = "done"
        turn["status"] = "completed"
        client.post("/v1/conversations/c1/turns", json=turn, headers=ALICE)

        response = client.patch(
            "/v1/turns/a1",
            json={"content": {"text": ""}, "status": "in_progress"},
            headers=ALICE,
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "TURN_CONFLICT"
        stored = client.get("/v1/conversations/c1", headers=ALICE).json()["turns"][0]
        assert stored["status"] == "completed"
        assert stored["content"]["text"] == "done"

    def test_replayed_final_patch_is_accepted(self, client: TestClient) -> None:
        """Re-sending the patch that finished a turn changes nothing."""
        create(client, id="c1")
        client.post("/v1/conversations/c1/turns", json=assistant_turn(), headers=ALICE)
        final = {"content": {"text": "done"}, "status": "completed"}

        assert client.patch("/v1/turns/a1", json=final, headers=ALICE).status_code == 200
        assert client.patch("/v1/turns/a1", json=final, headers=ALICE).status_code == 200

    def test_user_turn_cannot_be_patched(self, client: TestClient) -> None:
        """User turns answer 409 and stay untouched."""
        create(client, id="c1")
        client.post(
            "/v1/conversations/c1/turns",
            json={"id": "u1", "role": "user", "content": "original", "createdAt": 1},
            headers=ALICE,
        )

        response = client.patch(
            "/v1/turns/u1", json={"content": {"text": "rewritten"}}, headers=ALICE
        )

        assert response.status_code == 409
        stored = client.get("/v1/conversations/c1", headers=ALICE).json()["turns"][0]
        assert stored["content"] == "original"

    def test_turn_id_from_another_conversation_is_409(self, client: TestClient) -> None:
        """A turn id already used elsewhere is not silently dropped."""
        create(client, id="c1")
        create(client, id="c2")
        client.post("/v1/conversations/c1/turns", json=assistant_turn(), headers=ALICE)

        response = client.post(
            "/v1/conversations/c2/turns", json=assistant_turn(), headers=ALICE
        )

        assert response.status_code == 409
        assert client.get("/v1/conversations/c2", headers=ALICE).json()["turns"] == []

    def test_retried_append_is_201(self, client: TestClient) -> None:
        """Appending the same turn twice to its own conversation is harmless."""
        create(client, id="c1")
        client.post("/v1/conversations/c1/turns", json=assistant_turn(), headers=ALICE)

        response = client.post(
            "/v1/conversations/c1/turns", json=assistant_turn(), headers=ALICE
        )

        assert response.status_code == 201
        assert len(client.get("/v1/conversations/c1", headers=ALICE).json()["turns"]) == 1
