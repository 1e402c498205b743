import os
import requests
from requests import Response
from requests.exceptions import RequestException

BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000/api")
DEFAULT_TIMEOUT = 30


def _error_response(error: Exception) -> Response:
    resp = Response()
    resp.status_code = 503
    resp._content = f"Backend unavailable: {error}".encode("utf-8")
    return resp


def post(path: str, json: dict | None = None, params: dict | None = None):
    try:
        return requests.post(
            f"{BASE_URL}{path}",
            json=json,
            params=params,
            headers={"Content-Type": "application/json"},
            timeout=DEFAULT_TIMEOUT,
        )
    except RequestException as exc:
        return _error_response(exc)


def get(path: str, params: dict | None = None):
    try:
        return requests.get(f"{BASE_URL}{path}", params=params, timeout=DEFAULT_TIMEOUT)
    except RequestException as exc:
        return _error_response(exc)


def put(path: str, json: dict):
    try:
        return requests.put(
            f"{BASE_URL}{path}",
            json=json,
            headers={"Content-Type": "application/json"},
            timeout=DEFAULT_TIMEOUT,
        )
    except RequestException as exc:
        return _error_response(exc)


def delete(path: str):
    try:
        return requests.delete(f"{BASE_URL}{path}", timeout=DEFAULT_TIMEOUT)
    except RequestException as exc:
        return _error_response(exc)


def list_notes(limit: int = 20, cursor: str | None = None):
    params = {"limit": limit}
    if cursor:
        params["cursor"] = cursor
    return get("/notes", params=params)


def get_note(note_id: str):
    return get(f"/notes/{note_id}")


def create_note(title: str, content: str):
    return post("/notes", json={"title": title, "content": content})


def update_note(note_id: str, title: str, content: str):
    return put(f"/notes/{note_id}", json={"title": title, "content": content})


def delete_note(note_id: str):
    return delete(f"/notes/{note_id}")


def summarize_note(note_id: str, refresh: bool = True):
    # Summaries can take a while; same timeout, no body
    return post(f"/notes/{note_id}/summarize", params={"refresh": str(refresh).lower()})


def error_message(resp: Response, default: str = "Request failed") -> str:
    """Backend error bodies carry a `message`; anything else falls back to the raw text."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text or default
    if isinstance(body, dict):
        if body.get("message"):
            return body["message"]
        # FastAPI's own 422 bodies
        if body.get("detail"):
            return str(body["detail"])
    return default
