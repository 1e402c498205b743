"""
Quillnote Frontend — API Client and Formatting Tests
======================================================

What:  Tests for frontend_streamlit/utils (no Streamlit runtime needed).
How:   Patches `requests` inside utils.api_client; no network calls.
"""

from unittest.mock import patch

import requests
from requests import Response

from utils import api_client
from utils.formatting import format_timestamp, preview


def _response(status: int, body: bytes) -> Response:
    resp = Response()
    resp.status_code = status
    resp._content = body
    return resp


class TestApiClient:

    def test_list_notes_passes_cursor(self):
        with patch("utils.api_client.requests.get") as mock_get:
            api_client.list_notes(limit=5, cursor="2026-10-18T10:00:00")

        args, kwargs = mock_get.call_args
        assert args[0] == f"{api_client.BASE_URL}/notes"
        assert kwargs["params"] == {"limit": 5, "cursor": "2026-10-18T10:00:00"}
        assert kwargs["timeout"] == api_client.DEFAULT_TIMEOUT

    def test_create_note_body(self):
        with patch("utils.api_client.requests.post") as mock_post:
            api_client.create_note("Title", "Body")

        assert mock_post.call_args.kwargs["json"] == {"title": "Title", "content": "Body"}

    def test_summarize_uses_refresh_param(self):
        with patch("utils.api_client.requests.post") as mock_post:
            api_client.summarize_note("abc", refresh=False)

        args, kwargs = mock_post.call_args
        assert args[0].endswith("/notes/abc/summarize")
        assert kwargs["params"] == {"refresh": "false"}

    def test_network_failure_becomes_503(self):
        with patch(
            "utils.api_client.requests.delete",
            side_effect=requests.exceptions.ConnectionError("refused"),
        ):
            resp = api_client.delete_note("abc")

        assert resp.status_code == 503
        assert "Backend unavailable" in resp.text

    def test_error_message_prefers_backend_message(self):
        resp = _response(400, b'{"error": "validation_error", "message": "title and content are required"}')
        assert api_client.error_message(resp) == "title and content are required"

    def test_error_message_plain_text(self):
        resp = _response(503, b"Backend unavailable: refused")
        assert api_client.error_message(resp) == "Backend unavailable: refused"

    def test_error_message_default(self):
        resp = _response(500, b"{}")
        assert api_client.error_message(resp, default="oops") == "oops"


class TestFormatting:

    def test_short_preview_unchanged(self):
        assert preview("hello   world\n") == "hello world"

    def test_long_preview_truncated(self):
        text = preview("word " * 100, limit=20)
        assert len(text) <= 20
        assert text.endswith("…")

    def test_format_timestamp(self):
        assert format_timestamp("2026-10-18T14:05:00Z") == "18 Oct 2026, 14:05"

    def test_format_timestamp_passthrough(self):
        assert format_timestamp("yesterday") == "yesterday"
        assert format_timestamp(None) == ""
