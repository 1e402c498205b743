"""
Quillnote Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract between frontend and backend.
Why:   Automatic serialization and OpenAPI doc generation.
Who:   Used by route handlers as request bodies and return types.

Design Decision:
    Request bodies accept optional fields and leave "required / non-blank"
    to NoteService. That keeps the answer for a missing title the same 400
    validation_error whether the key is absent, null, or whitespace.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

SORT_OPTIONS = {"updated_at_desc", "updated_at_asc"}


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what clients send
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """Body of POST /api/notes."""
    title: Optional[str] = Field(default=None, description="Note title (required, trimmed)")
    content: Optional[str] = Field(default=None, description="Note body (required)")


class NoteUpdate(BaseModel):
    """
    Body of PUT /api/notes/{id}.

    Omitted or null fields keep their stored value, so a client can send
    just the field it changed.
    """
    title: Optional[str] = Field(default=None, description="New title (optional)")
    content: Optional[str] = Field(default=None, description="New content (optional)")


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """Full representation of a note, returned by every single-note endpoint."""
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str = Field(description="Note title")
    content: str = Field(description="Note body")
    summary: str = Field(default="", description="Cached AI summary ('' until summarized)")
    created_at: datetime = Field(description="When the note was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="When the note was last saved (UTC ISO 8601)")

    model_config = {"from_attributes": True}

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive datetimes; stored values are always UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class NoteListResponse(BaseModel):
    """
    What:  Paginated response wrapper for GET /api/notes.

    How cursor works:
        - next_cursor: "<updated_at>|<id>" of the last item in the current page
        - Client sends it back as ?cursor= to get the next page
        - Server resumes after that (updated_at, id) position
    """
    notes: List[NoteResponse] = Field(description="Notes, most recently edited first")
    total_count: int = Field(description="Total number of notes")
    next_cursor: Optional[str] = Field(
        default=None,
        description="Cursor for next page (\"<ISO datetime>|<id>\"). Null if no more pages.",
    )
    has_more: bool = Field(description="Whether more pages are available")


class DeleteResponse(BaseModel):
    message: str = Field(default="Note deleted")
    id: uuid.UUID = Field(description="ID of the deleted note")


class SummaryResponse(BaseModel):
    """
    What:  Result of POST /api/notes/{id}/summarize.

    cached=True means the stored summary was returned without calling the
    provider (only when the client passed refresh=false).
    """
    note_id: uuid.UUID = Field(description="ID of the summarized note")
    summary: str = Field(description="Plain-text summary")
    cached: bool = Field(default=False, description="Served from the stored summary")
    provider: str = Field(description="LLM provider that produced the summary")
    model: str = Field(description="Model name used by the provider")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "title and content are required",
            "details": {"field": "title"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    llm: str = Field(
        description="Summarization provider: available, unavailable, not_configured, circuit_open"
    )
    provider: str = Field(description="Configured summarization provider")
    uptime_seconds: float = Field(description="Seconds since service started")
