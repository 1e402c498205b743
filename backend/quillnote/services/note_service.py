"""
Quillnote Backend — Note Service (Business Logic)
===================================================

What:  CRUD rules for notes plus the summarize-and-cache workflow.
Why:   Keeps business rules out of the route handlers.
How:   Receives the request's AsyncSession on every call; the session
       dependency commits or rolls back when the request ends.
Who:   Called by the /api/notes route handlers.

Summarization Flow (POST /api/notes/{id}/summarize):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────┐
    │  Load    │───▶│  Cached?    │───▶│  LLM call    │───▶│  Store   │
    │  note    │    │ (refresh=0) │    │  (provider)  │    │  summary │
    └──────────┘    └─────────────┘    └──────────────┘    └──────────┘

    On LLM failure the stored summary is left as it was and the error
    propagates (503 / 500 via the global handlers).

Error Handling Strategy:
    SQLAlchemy errors are wrapped in DatabaseError (generic message to the
    client). Application errors (NotFoundError, ValidationError, LLM errors)
    propagate with their own type.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, asc, desc, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quillnote.config import settings
from quillnote.exceptions import DatabaseError, NotFoundError, ValidationError
from quillnote.models.note import Note, utcnow
from quillnote.schemas.note import (
    SORT_OPTIONS,
    DeleteResponse,
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    SummaryResponse,
)
from quillnote.services.llm_factory import get_llm_service

logger = logging.getLogger(__name__)

# updated_at alone is not unique; the id breaks ties between pages
CURSOR_SEPARATOR = "|"


def _make_cursor(note: Note) -> str:
    return f"{note.updated_at.isoformat()}{CURSOR_SEPARATOR}{note.id}"


def _parse_cursor(cursor: Optional[str]) -> Optional[Tuple[datetime, Optional[UUID]]]:
    """
    "<updated_at iso>|<id>" -> (updated_at, id). A bare timestamp yields
    (updated_at, None). Anything unparseable yields None (first page).
    """
    if not cursor:
        return None
    stamp, _, raw_id = cursor.partition(CURSOR_SEPARATOR)
    try:
        return datetime.fromisoformat(stamp), (UUID(raw_id) if raw_id else None)
    except ValueError:
        logger.debug("Ignoring invalid cursor %r", cursor)
        return None


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - create_note / update_note: input rules (required, non-blank, title length)
        - get_note / delete_note: lookup with not-found handling
        - list_notes: cursor pagination ordered by last edit
        - summarize_note: provider call + summary caching
    """

    # ── Validation ────────────────────────────────────────────────────────

    def _clean_title(self, title: str) -> str:
        cleaned = title.strip()
        if not cleaned:
            raise ValidationError(message="title cannot be empty", field="title")
        if len(cleaned) > settings.note_title_max_length:
            raise ValidationError(
                message=f"title must be at most {settings.note_title_max_length} characters",
                field="title",
                context={"max_length": settings.note_title_max_length, "length": len(cleaned)},
            )
        return cleaned

    def _check_content(self, content: str) -> str:
        if not content.strip():
            raise ValidationError(message="content cannot be empty", field="content")
        return content

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load_note(self, db: AsyncSession, note_id: UUID) -> Note:
        """Fetch a note by primary key or raise NotFoundError."""
        try:
            result = await db.execute(select(Note).where(Note.id == note_id))
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": str(note_id)},
            ) from e

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note

    async def _flush(self, db: AsyncSession, action: str, note_id: Optional[UUID] = None) -> None:
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error while trying to %s note %s: %s", action, note_id, str(e))
            raise DatabaseError(
                message=f"Could not {action} the note. Please try again.",
                context={"note_id": str(note_id) if note_id else None, "error_type": type(e).__name__},
            ) from e

    # ── CRUD ──────────────────────────────────────────────────────────────

    async def create_note(self, db: AsyncSession, payload: NoteCreate) -> NoteResponse:
        """
        Create a note.

        Raises:
            ValidationError: title or content missing/blank, title too long (→ 400)
            DatabaseError: insert failed (→ 500)
        """
        has_title = bool(payload.title and payload.title.strip())
        has_content = bool(payload.content and payload.content.strip())
        if not (has_title and has_content):
            raise ValidationError(
                message="title and content are required",
                field="content" if has_title else "title",
            )

        title = self._clean_title(payload.title)

        # Explicit id/timestamps so the response can be built right after flush
        now = utcnow()
        note = Note(
            id=uuid.uuid4(),
            title=title,
            content=payload.content,
            summary="",
            created_at=now,
            updated_at=now,
        )
        db.add(note)
        await self._flush(db, "create")
        logger.info("Note created: %s", note.id)

        return NoteResponse.model_validate(note)

    async def get_note(self, db: AsyncSession, note_id: UUID) -> NoteResponse:
        """
        Retrieve a single note by ID.

        Raises:
            NotFoundError: Note with given ID does not exist (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        note = await self._load_note(db, note_id)
        return NoteResponse.model_validate(note)

    async def update_note(self, db: AsyncSession, note_id: UUID, payload: NoteUpdate) -> NoteResponse:
        """
        Partially update a note. Fields left as None keep their stored value.

        The cached summary is kept as-is even when content changes; the
        client decides when to summarize again.
        """
        title = self._clean_title(payload.title) if payload.title is not None else None
        content = self._check_content(payload.content) if payload.content is not None else None

        note = await self._load_note(db, note_id)
        if title is not None:
            note.title = title
        if content is not None:
            note.content = content
        note.updated_at = utcnow()

        await self._flush(db, "update", note_id)
        logger.info("Note updated: %s", note_id)
        return NoteResponse.model_validate(note)

    async def delete_note(self, db: AsyncSession, note_id: UUID) -> DeleteResponse:
        note = await self._load_note(db, note_id)
        try:
            await db.delete(note)
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": str(note_id)},
            ) from e
        await self._flush(db, "delete", note_id)
        logger.info("Note deleted: %s", note_id)
        return DeleteResponse(message="Note deleted", id=note_id)

    async def list_notes(
        self,
        db: AsyncSession,
        limit: int = 20,
        cursor: Optional[str] = None,
        sort: str = "updated_at_desc",
    ) -> NoteListResponse:
        """
        List notes with cursor-based pagination.

        How:
            - Default sort: updated_at DESC (most recently edited first)
            - Cursor: "<updated_at iso>|<id>" of the last item; rows sharing
              that updated_at are split by id so none are skipped
            - Fetch limit + 1 rows; the extra row only tells us has_more

        Query plan (default sort):
            SELECT * FROM notes
            WHERE updated_at < :ts OR (updated_at = :ts AND id < :id)
            ORDER BY updated_at DESC, id DESC LIMIT :limit + 1
            → Uses idx_notes_updated_at
        """
        if sort not in SORT_OPTIONS:
            raise ValidationError(
                message=f"Invalid sort '{sort}'. Must be one of: {sorted(SORT_OPTIONS)}",
                field="sort",
            )

        query = select(Note)

        position = _parse_cursor(cursor)
        if position is not None:
            cursor_dt, cursor_id = position
            if sort == "updated_at_desc":
                after = Note.updated_at < cursor_dt
                if cursor_id is not None:
                    after = or_(after, and_(Note.updated_at == cursor_dt, Note.id < cursor_id))
            else:
                after = Note.updated_at > cursor_dt
                if cursor_id is not None:
                    after = or_(after, and_(Note.updated_at == cursor_dt, Note.id > cursor_id))
            query = query.where(after)

        if sort == "updated_at_asc":
            query = query.order_by(asc(Note.updated_at), asc(Note.id))
        else:
            query = query.order_by(desc(Note.updated_at), desc(Note.id))

        query = query.limit(limit + 1)

        try:
            result = await db.execute(query)
            notes = list(result.scalars().all())

            count_result = await db.execute(select(func.count(Note.id)))
            total_count = count_result.scalar() or 0
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        has_more = len(notes) > limit
        if has_more:
            notes = notes[:limit]

        next_cursor = None
        if has_more and notes:
            next_cursor = _make_cursor(notes[-1])

        return NoteListResponse(
            notes=[NoteResponse.model_validate(note) for note in notes],
            total_count=total_count,
            next_cursor=next_cursor,
            has_more=has_more,
        )

    # ── Summarization ─────────────────────────────────────────────────────

    async def summarize_note(
        self,
        db: AsyncSession,
        note_id: UUID,
        refresh: bool = True,
    ) -> SummaryResponse:
        """
        Summarize a note's content and cache the result on the note.

        Args:
            refresh: When False and a summary is already stored, return it
                     without calling the provider.

        Raises:
            NotFoundError: note does not exist (→ 404)
            ConfigurationError: provider API key missing (→ 500)
            LLMServiceError / CircuitBreakerOpenError: provider failure (→ 503)
            DatabaseError: saving the summary failed (→ 500)
        """
        llm = get_llm_service()
        note = await self._load_note(db, note_id)

        if not refresh and note.summary:
            logger.info("Returning cached summary for note %s", note_id)
            return SummaryResponse(
                note_id=note.id,
                summary=note.summary,
                cached=True,
                provider=llm.provider,
                model=llm.model_name,
            )

        summary = await llm.summarize(note.content)

        note.summary = summary
        note.updated_at = utcnow()
        await self._flush(db, "save the summary for", note_id)
        logger.info("Summary cached for note %s (%d chars)", note_id, len(summary))

        return SummaryResponse(
            note_id=note.id,
            summary=summary,
            cached=False,
            provider=llm.provider,
            model=llm.model_name,
        )


# ── Singleton Instance ────────────────────────────────────────────────────
# NoteService is stateless; one instance serves every request
note_service = NoteService()
