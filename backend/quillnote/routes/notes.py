"""
Quillnote Backend — Notes Route Handlers
==========================================

What:  CRUD endpoints for notes plus POST /api/notes/{id}/summarize.
How:   Extracts path/query/body data, delegates to NoteService, returns JSON.
Who:   Called by the Streamlit frontend (frontend_streamlit/utils/api_client.py).

Caching:
    Notes are mutable, so single-note reads are marked no-cache (the
    browser must revalidate) instead of the long max-age an immutable
    resource would get.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from quillnote.database import get_db_session
from quillnote.schemas.note import (
    DeleteResponse,
    ErrorResponse,
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    SummaryResponse,
)
from quillnote.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["Notes"])

NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}
BAD_REQUEST = {400: {"description": "Invalid input", "model": ErrorResponse}}


@router.post(
    "",
    status_code=201,
    response_model=NoteResponse,
    responses={**BAD_REQUEST},
    summary="Create a note",
)
async def create_note(
    # Optional so an empty or null body gets the same 400 as missing fields
    payload: NoteCreate | None = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db=db, payload=payload or NoteCreate())


@router.get(
    "",
    response_model=NoteListResponse,
    responses={**BAD_REQUEST, 500: {"description": "Server error", "model": ErrorResponse}},
    summary="List notes, most recently edited first",
)
async def list_notes(
    response: Response,
    limit: int = Query(default=20, ge=1, le=100, description="Items per page (max 100)"),
    cursor: str | None = Query(
        default=None,
        description="Pagination cursor (next_cursor of the previous page). Omit for the first page.",
    ),
    sort: str = Query(
        default="updated_at_desc",
        description="'updated_at_desc' (newest edit first) or 'updated_at_asc'",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> NoteListResponse:
    """
    Example client usage ("load more"):
        Page 1: GET /api/notes?limit=20
        Page 2: GET /api/notes?limit=20&cursor=<next_cursor from page 1>
    """
    result = await note_service.list_notes(db=db, limit=limit, cursor=cursor, sort=sort)
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses={**NOT_FOUND},
    summary="Get a single note by ID",
)
async def get_note(
    note_id: UUID,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    result = await note_service.get_note(db=db, note_id=note_id)
    response.headers["Cache-Control"] = "private, no-cache"
    return result


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Update a note's title and/or content",
    description="Omitted fields keep their current value. The cached summary is not cleared.",
)
async def update_note(
    note_id: UUID,
    payload: NoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(db=db, note_id=note_id, payload=payload)


@router.delete(
    "/{note_id}",
    response_model=DeleteResponse,
    responses={**NOT_FOUND},
    summary="Delete a note",
)
async def delete_note(
    note_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    return await note_service.delete_note(db=db, note_id=note_id)


@router.post(
    "/{note_id}/summarize",
    response_model=SummaryResponse,
    responses={
        **NOT_FOUND,
        500: {"description": "Provider not configured", "model": ErrorResponse},
        503: {"description": "AI service unavailable", "model": ErrorResponse},
    },
    summary="Summarize a note with the configured LLM and cache the result",
)
async def summarize_note(
    note_id: UUID,
    refresh: bool = Query(
        default=True,
        description="Set to false to reuse the stored summary when one exists",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> SummaryResponse:
    """
    Typical latency is dominated by the provider call (1-10s). Failures
    leave the stored summary untouched.
    """
    return await note_service.summarize_note(db=db, note_id=note_id, refresh=refresh)
