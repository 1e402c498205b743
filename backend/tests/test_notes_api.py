"""
Quillnote Backend — Notes API Tests
=====================================

What:  End-to-end tests of the /api/notes endpoints and /health.
How:   HTTPX AsyncClient over ASGITransport against an in-memory SQLite
       database; the summarization provider is mocked.

What we test:
    ✅ Create / get / list / update / delete round trips through the DB
    ✅ Status codes: 201, 400, 404, 422, 500, 503
    ✅ Summaries are persisted and survive later edits
    ✅ Error bodies carry a request ID and no internal details
"""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from sqlalchemy import update

from quillnote.exceptions import ConfigurationError, LLMServiceError
from quillnote.models.note import Note


async def _create(client, title="First note", content="Some content"):
    response = await client.post("/api/notes", json={"title": title, "content": content})
    assert response.status_code == 201
    return response.json()


class TestCreateNote:

    @pytest.mark.asyncio
    async def test_create_returns_201(self, test_client):
        response = await test_client.post(
            "/api/notes", json={"title": "  Trip ideas ", "content": "Lisbon, Porto"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Trip ideas"
        assert body["content"] == "Lisbon, Porto"
        assert body["summary"] == ""
        assert body["id"]
        assert body["created_at"] == body["updated_at"]
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [{"content": "x"}, {"title": "x"}, {"title": "", "content": "x"}, {}],
    )
    async def test_create_missing_fields_returns_400(self, test_client, payload):
        response = await test_client.post("/api/notes", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "title and content are required"
        assert body["request_id"]

    @pytest.mark.asyncio
    async def test_create_without_body_returns_400(self, test_client):
        response = await test_client.post("/api/notes")

        assert response.status_code == 400
        assert response.json()["message"] == "title and content are required"

    @pytest.mark.asyncio
    async def test_create_null_body_returns_400(self, test_client):
        response = await test_client.post(
            "/api/notes", content="null", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_nothing_stored_after_rejected_create(self, test_client):
        await test_client.post("/api/notes", json={"title": "only a title"})

        response = await test_client.get("/api/notes")
        assert response.json()["total_count"] == 0


class TestReadNotes:

    @pytest.mark.asyncio
    async def test_get_note(self, test_client):
        created = await _create(test_client)

        response = await test_client.get(f"/api/notes/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created
        assert response.headers["Cache-Control"] == "private, no-cache"

    @pytest.mark.asyncio
    async def test_get_missing_note_returns_404(self, test_client):
        response = await test_client.get(f"/api/notes/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_malformed_id_returns_422(self, test_client):
        response = await test_client.get("/api/notes/not-a-uuid")
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_is_most_recently_updated_first(self, test_client):
        first = await _create(test_client, title="A")
        await asyncio.sleep(0.01)
        second = await _create(test_client, title="B")
        await asyncio.sleep(0.01)
        await test_client.put(f"/api/notes/{first['id']}", json={"content": "edited"})

        response = await test_client.get("/api/notes")

        assert response.status_code == 200
        body = response.json()
        assert [n["id"] for n in body["notes"]] == [first["id"], second["id"]]
        assert body["total_count"] == 2
        assert response.headers["X-Total-Count"] == "2"

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/api/notes")

        assert response.status_code == 200
        assert response.json() == {
            "notes": [],
            "total_count": 0,
            "next_cursor": None,
            "has_more": False,
        }

    @pytest.mark.asyncio
    async def test_list_pagination(self, test_client):
        for i in range(3):
            await _create(test_client, title=f"Note {i}")
            await asyncio.sleep(0.01)

        page1 = (await test_client.get("/api/notes", params={"limit": 2})).json()
        assert [n["title"] for n in page1["notes"]] == ["Note 2", "Note 1"]
        assert page1["has_more"] is True

        page2 = (
            await test_client.get("/api/notes", params={"limit": 2, "cursor": page1["next_cursor"]})
        ).json()
        assert [n["title"] for n in page2["notes"]] == ["Note 0"]
        assert page2["has_more"] is False
        assert page2["next_cursor"] is None

    @pytest.mark.asyncio
    async def test_list_pagination_with_equal_timestamps(self, test_client, db_engine):
        """Notes sharing an updated_at are split across pages without loss."""
        created = [await _create(test_client, title=f"Note {i}") for i in range(5)]
        async with db_engine.begin() as conn:
            await conn.execute(
                update(Note).values(updated_at=datetime(2026, 1, 1, tzinfo=timezone.utc))
            )

        seen = []
        cursor = None
        while True:
            params = {"limit": 2}
            if cursor:
                params["cursor"] = cursor
            page = (await test_client.get("/api/notes", params=params)).json()
            seen.extend(n["id"] for n in page["notes"])
            if not page["has_more"]:
                break
            cursor = page["next_cursor"]

        assert len(seen) == 5
        assert sorted(seen) == sorted(n["id"] for n in created)

    @pytest.mark.asyncio
    async def test_list_rejects_unknown_sort(self, test_client):
        response = await test_client.get("/api/notes", params={"sort": "title"})
        assert response.status_code == 400


class TestUpdateNote:

    @pytest.mark.asyncio
    async def test_update_note(self, test_client):
        created = await _create(test_client)
        await asyncio.sleep(0.01)

        response = await test_client.put(
            f"/api/notes/{created['id']}", json={"title": "Renamed", "content": "New body"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Renamed"
        assert body["content"] == "New body"
        assert body["created_at"] == created["created_at"]
        assert body["updated_at"] != created["updated_at"]

        fetched = (await test_client.get(f"/api/notes/{created['id']}")).json()
        assert fetched["title"] == "Renamed"

    @pytest.mark.asyncio
    async def test_update_blank_title_returns_400(self, test_client):
        created = await _create(test_client)

        response = await test_client.put(f"/api/notes/{created['id']}", json={"title": "  "})

        assert response.status_code == 400
        fetched = (await test_client.get(f"/api/notes/{created['id']}")).json()
        assert fetched["title"] == created["title"]

    @pytest.mark.asyncio
    async def test_update_missing_note_returns_404(self, test_client):
        response = await test_client.put(f"/api/notes/{uuid4()}", json={"title": "x"})
        assert response.status_code == 404


class TestDeleteNote:

    @pytest.mark.asyncio
    async def test_delete_note(self, test_client):
        created = await _create(test_client)

        response = await test_client.delete(f"/api/notes/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Note deleted", "id": created["id"]}
        assert (await test_client.get(f"/api/notes/{created['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_twice_returns_404(self, test_client):
        created = await _create(test_client)
        await test_client.delete(f"/api/notes/{created['id']}")

        response = await test_client.delete(f"/api/notes/{created['id']}")
        assert response.status_code == 404


class TestSummarizeNote:

    @pytest.mark.asyncio
    async def test_summarize_persists_summary(self, test_client, fake_llm):
        created = await _create(test_client, content="Long meeting about hiring")

        with patch("quillnote.services.note_service.get_llm_service", return_value=fake_llm):
            response = await test_client.post(f"/api/notes/{created['id']}/summarize")

        assert response.status_code == 200
        body = response.json()
        assert body["note_id"] == created["id"]
        assert body["summary"] == fake_llm.summarize.return_value
        assert body["cached"] is False
        assert body["provider"] == "openai"
        fake_llm.summarize.assert_awaited_once_with("Long meeting about hiring")

        fetched = (await test_client.get(f"/api/notes/{created['id']}")).json()
        assert fetched["summary"] == fake_llm.summarize.return_value

    @pytest.mark.asyncio
    async def test_summary_survives_edit(self, test_client, fake_llm):
        created = await _create(test_client)
        with patch("quillnote.services.note_service.get_llm_service", return_value=fake_llm):
            await test_client.post(f"/api/notes/{created['id']}/summarize")

        response = await test_client.put(f"/api/notes/{created['id']}", json={"content": "changed"})

        assert response.json()["summary"] == fake_llm.summarize.return_value

    @pytest.mark.asyncio
    async def test_summarize_cached(self, test_client, fake_llm):
        created = await _create(test_client)
        with patch("quillnote.services.note_service.get_llm_service", return_value=fake_llm):
            await test_client.post(f"/api/notes/{created['id']}/summarize")
            response = await test_client.post(
                f"/api/notes/{created['id']}/summarize", params={"refresh": "false"}
            )

        assert response.json()["cached"] is True
        assert fake_llm.summarize.await_count == 1

    @pytest.mark.asyncio
    async def test_summarize_missing_note_returns_404(self, test_client, fake_llm):
        with patch("quillnote.services.note_service.get_llm_service", return_value=fake_llm):
            response = await test_client.post(f"/api/notes/{uuid4()}/summarize")

        assert response.status_code == 404
        fake_llm.summarize.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_summarize_provider_failure_returns_503(self, test_client, fake_llm):
        created = await _create(test_client)
        fake_llm.summarize = AsyncMock(
            side_effect=LLMServiceError(message="Failed to summarize note. Please try again later.")
        )

        with patch("quillnote.services.note_service.get_llm_service", return_value=fake_llm):
            response = await test_client.post(f"/api/notes/{created['id']}/summarize")

        assert response.status_code == 503
        assert response.json()["error"] == "llm_service_error"
        fetched = (await test_client.get(f"/api/notes/{created['id']}")).json()
        assert fetched["summary"] == ""

    @pytest.mark.asyncio
    async def test_summarize_without_key_returns_500(self, test_client, fake_llm):
        created = await _create(test_client)
        fake_llm.summarize = AsyncMock(
            side_effect=ConfigurationError(message="OpenAI API key not configured.")
        )

        with patch("quillnote.services.note_service.get_llm_service", return_value=fake_llm):
            response = await test_client.post(f"/api/notes/{created['id']}/summarize")

        assert response.status_code == 500
        assert response.json()["error"] == "configuration_error"
        assert response.json()["message"] == "OpenAI API key not configured."


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_healthy(self, test_client):
        llm = MagicMock()
        llm.is_configured = True
        llm.circuit_breaker.state = "closed"
        llm.health_check = AsyncMock(return_value=True)

        with patch("quillnote.routes.health.get_llm_service", return_value=llm):
            response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["llm"] == "available"
        assert body["provider"] == "openai"

    @pytest.mark.asyncio
    async def test_health_degraded_without_key(self, test_client):
        llm = MagicMock()
        llm.is_configured = False

        with patch("quillnote.routes.health.get_llm_service", return_value=llm):
            response = await test_client.get("/api/health")

        body = response.json()
        assert body["status"] == "degraded"
        assert body["llm"] == "not_configured"
