"""
Quillnote Backend — Middleware Tests
======================================

What we test:
    ✅ X-Request-ID generated, or echoed when the client sends one
    ✅ Per-IP rate limit answers 429 with Retry-After
    ✅ Health checks are exempt from the rate limit
"""

from unittest.mock import MagicMock, patch

import pytest

from quillnote.config import settings


class TestRequestID:

    @pytest.mark.asyncio
    async def test_generated_request_id(self, test_client):
        response = await test_client.get("/api/notes")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_incoming_request_id_is_echoed(self, test_client):
        response = await test_client.get("/api/notes", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_limit_exceeded_returns_429(self, test_client):
        with patch.object(settings, "rate_limit_requests", 10):
            for _ in range(10):
                assert (await test_client.get("/api/notes")).status_code == 200

            response = await test_client.get("/api/notes")

        assert response.status_code == 429
        assert response.json()["error"] == "rate_limit_exceeded"
        assert int(response.headers["Retry-After"]) > 0

    @pytest.mark.asyncio
    async def test_health_not_rate_limited(self, test_client):
        llm = MagicMock()
        llm.is_configured = False

        with patch.object(settings, "rate_limit_requests", 10), \
             patch("quillnote.routes.health.get_llm_service", return_value=llm):
            for _ in range(12):
                response = await test_client.get("/health")
                assert response.status_code == 200
